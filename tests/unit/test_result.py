"""Result 타입 테스트."""

import pytest

from yeirin_backend.domain.common.result import DomainError, Result


class TestResult:
    """Result 성공/실패 동작 테스트."""

    def test_성공_결과는_값을_반환한다(self) -> None:
        result = Result.ok(42)

        assert result.is_success
        assert not result.is_failure
        assert result.value == 42

    def test_값_없는_성공_결과를_만들_수_있다(self) -> None:
        result = Result.ok()

        assert result.is_success
        assert result.value is None

    def test_실패_결과는_에러를_반환한다(self) -> None:
        error = DomainError("잘못된 요청", "INVALID")
        result = Result.fail(error)

        assert result.is_failure
        assert result.error is error
        assert result.error.code == "INVALID"
        assert result.error.message == "잘못된 요청"

    def test_실패_결과에서_값을_꺼내면_예외가_발생한다(self) -> None:
        result = Result.fail(DomainError("실패"))

        with pytest.raises(ValueError):
            _ = result.value

    def test_성공_결과에서_에러를_꺼내면_예외가_발생한다(self) -> None:
        with pytest.raises(ValueError):
            _ = Result.ok(1).error

    def test_에러_코드_기본값(self) -> None:
        assert DomainError("실패").code == "DOMAIN_ERROR"


class TestResultComposition:
    """map / flat_map 테스트."""

    def test_map은_성공_값만_변환한다(self) -> None:
        assert Result.ok(2).map(lambda v: v * 10).value == 20

    def test_map은_실패를_그대로_전달한다(self) -> None:
        error = DomainError("실패", "FAIL")

        mapped = Result.fail(error).map(lambda v: v * 10)

        assert mapped.is_failure
        assert mapped.error is error

    def test_flat_map은_다음_Result를_연결한다(self) -> None:
        def half(value: int) -> Result[int]:
            if value % 2:
                return Result.fail(DomainError("홀수", "ODD"))
            return Result.ok(value // 2)

        assert Result.ok(8).flat_map(half).value == 4
        assert Result.ok(3).flat_map(half).error.code == "ODD"
