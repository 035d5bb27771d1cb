"""서비스 계층 공통 실패 결과."""

from yeirin_backend.domain.common.result import DomainError, Result
from yeirin_backend.infrastructure.database.errors import ConcurrentModificationError

COUNSEL_REQUEST_NOT_FOUND = "COUNSEL_REQUEST_NOT_FOUND"
REPORT_NOT_FOUND = "REPORT_NOT_FOUND"
CONCURRENT_MODIFICATION = "CONCURRENT_MODIFICATION"


def counsel_request_not_found(counsel_request_id: str) -> Result:
    return Result.fail(
        DomainError(
            f"상담의뢰지를 찾을 수 없습니다 (ID: {counsel_request_id})",
            COUNSEL_REQUEST_NOT_FOUND,
        )
    )


def report_not_found(report_id: str) -> Result:
    return Result.fail(
        DomainError(f"면담결과지를 찾을 수 없습니다. (ID: {report_id})", REPORT_NOT_FOUND)
    )


def concurrent_modification(error: ConcurrentModificationError) -> Result:
    """저장 시 버전 충돌을 실패 결과로 변환합니다."""
    return Result.fail(
        DomainError(
            "다른 요청에 의해 이미 변경되었습니다. 다시 조회한 뒤 시도해주세요.",
            CONCURRENT_MODIFICATION,
        )
    )
