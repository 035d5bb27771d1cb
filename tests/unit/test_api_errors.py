"""API 에러 변환 테스트."""

import pytest
from fastapi import HTTPException

from yeirin_backend.api.errors import raise_for_failure, status_code_for, unwrap
from yeirin_backend.api.routes.webhook import validate_internal_api_key
from yeirin_backend.core.config.settings import settings
from yeirin_backend.domain.common.result import DomainError, Result


class TestStatusCodeMapping:
    """에러 코드 → HTTP 상태 코드 매핑 테스트."""

    @pytest.mark.parametrize(
        ("code", "expected"),
        [
            ("COUNSEL_REQUEST_NOT_FOUND", 404),
            ("REPORT_NOT_FOUND", 404),
            ("UNAUTHORIZED", 403),
            ("DUPLICATE_SESSION_NUMBER", 409),
            ("CONCURRENT_MODIFICATION", 409),
            ("ALREADY_SELECTED", 409),
            ("RECOMMENDATION_SERVICE_UNAVAILABLE", 502),
            ("INVALID_STATUS_TRANSITION", 400),
            ("INVALID_FORM_DATA", 400),
        ],
    )
    def test_에러_코드별_상태_코드(self, code, expected) -> None:
        assert status_code_for(code) == expected

    def test_실패는_코드와_메시지를_담은_HTTPException이_된다(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            raise_for_failure(DomainError("이미 선택된 추천입니다", "ALREADY_SELECTED"))

        assert exc_info.value.status_code == 409
        assert exc_info.value.detail == {
            "code": "ALREADY_SELECTED",
            "message": "이미 선택된 추천입니다",
        }

    def test_성공_결과는_값을_꺼낸다(self) -> None:
        assert unwrap(Result.ok("value")) == "value"


class TestInternalApiKey:
    """내부 API 키 검증 테스트."""

    def test_올바른_키는_통과한다(self) -> None:
        validate_internal_api_key(settings.internal_api_secret)

    def test_잘못된_키는_401(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            validate_internal_api_key("wrong-key")

        assert exc_info.value.status_code == 401
