"""서비스 실패 결과를 HTTP 응답으로 변환합니다."""

from typing import NoReturn, TypeVar

from fastapi import HTTPException, status

from yeirin_backend.domain.common.result import DomainError, Result

T = TypeVar("T")

_CONFLICT_CODES = frozenset(
    {
        "CONFLICT",
        "DUPLICATE_SESSION_NUMBER",
        "CONCURRENT_MODIFICATION",
        "ALREADY_SELECTED",
    }
)


def status_code_for(code: str) -> int:
    """에러 코드에 대응하는 HTTP 상태 코드를 반환합니다."""
    if code.endswith("_NOT_FOUND"):
        return status.HTTP_404_NOT_FOUND
    if code == "UNAUTHORIZED":
        return status.HTTP_403_FORBIDDEN
    if code in _CONFLICT_CODES:
        return status.HTTP_409_CONFLICT
    if code == "RECOMMENDATION_SERVICE_UNAVAILABLE":
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_400_BAD_REQUEST


def raise_for_failure(error: DomainError) -> NoReturn:
    """도메인 에러를 HTTPException으로 던집니다.

    Raises:
        HTTPException: 항상
    """
    raise HTTPException(
        status_code=status_code_for(error.code),
        detail={"code": error.code, "message": error.message},
    )


def unwrap(result: Result[T]) -> T:
    """성공 값을 꺼내거나 실패를 HTTP 에러로 변환합니다."""
    if result.is_failure:
        raise_for_failure(result.error)
    return result.value
