"""Result 타입 - 예외 대신 값으로 비즈니스 규칙 위반을 표현합니다.

도메인 메서드는 예상 가능한 실패에 대해 예외를 던지지 않고
``Result.fail(DomainError(...))`` 를 반환합니다.
호출자는 ``error.code`` 로 분기할 수 있습니다.
"""

from typing import Callable, Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


class DomainError(Exception):
    """도메인 에러.

    Attributes:
        message: 사용자에게 노출되는 메시지
        code: 기계 판독용 에러 코드 (예: ``INVALID_STATUS_TRANSITION``)
    """

    def __init__(self, message: str, code: str = "DOMAIN_ERROR") -> None:
        super().__init__(message)
        self.message = message
        self.code = code

    def __repr__(self) -> str:
        """문자열 표현을 반환합니다."""
        return f"<DomainError code={self.code} message='{self.message}'>"


class Result(Generic[T]):
    """성공(ok) 또는 실패(fail) 두 가지 상태를 가지는 컨테이너."""

    __slots__ = ("_is_success", "_value", "_error")

    def __init__(
        self,
        is_success: bool,
        value: T | None = None,
        error: DomainError | None = None,
    ) -> None:
        self._is_success = is_success
        self._value = value
        self._error = error

    @classmethod
    def ok(cls, value: T | None = None) -> "Result[T]":
        """성공 Result를 생성합니다."""
        return cls(True, value, None)

    @classmethod
    def fail(cls, error: DomainError) -> "Result[T]":
        """실패 Result를 생성합니다."""
        return cls(False, None, error)

    @property
    def is_success(self) -> bool:
        return self._is_success

    @property
    def is_failure(self) -> bool:
        return not self._is_success

    @property
    def value(self) -> T:
        """성공 값을 반환합니다.

        Raises:
            ValueError: 실패한 Result에서 값을 꺼내려는 경우
        """
        if not self._is_success:
            raise ValueError("Cannot get value from failed Result")
        return self._value  # type: ignore[return-value]

    @property
    def error(self) -> DomainError:
        """실패 에러를 반환합니다.

        Raises:
            ValueError: 성공한 Result에서 에러를 꺼내려는 경우
        """
        if self._is_success or self._error is None:
            raise ValueError("Cannot get error from successful Result")
        return self._error

    def map(self, fn: Callable[[T], U]) -> "Result[U]":
        """성공한 경우에만 값을 변환합니다."""
        if self.is_failure:
            return Result.fail(self.error)
        return Result.ok(fn(self._value))  # type: ignore[arg-type]

    def flat_map(self, fn: Callable[[T], "Result[U]"]) -> "Result[U]":
        """Result를 반환하는 함수를 이어서 적용합니다."""
        if self.is_failure:
            return Result.fail(self.error)
        return fn(self._value)  # type: ignore[arg-type]

    def __repr__(self) -> str:
        """문자열 표현을 반환합니다."""
        if self._is_success:
            return f"<Result ok value={self._value!r}>"
        return f"<Result fail error={self._error!r}>"
