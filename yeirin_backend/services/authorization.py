"""보호자 권한 확인.

면담결과지 확인/승인은 해당 아동의 보호자만 수행할 수 있습니다.
권한 판단 규칙은 ``GuardianAuthorizationPort`` 구현체에 위임합니다.
"""

import logging
from typing import Protocol

from yeirin_backend.domain.counsel_report.models import CounselReport
from yeirin_backend.domain.counsel_request.repository import CounselRequestRepository

logger = logging.getLogger(__name__)


class GuardianAuthorizationPort(Protocol):
    """보호자-면담결과지 관계 확인 계약."""

    async def is_guardian_of(self, guardian_id: str, report: CounselReport) -> bool: ...


class CounselRequestGuardianAuthorization:
    """상담의뢰지의 보호자 ID로 권한을 확인하는 기본 구현.

    면담결과지가 가리키는 상담의뢰지의 ``guardian_id`` 가 호출자와 같을 때만 허용합니다.
    상담의뢰지가 없거나 보호자가 지정되지 않은 경우(기관 의뢰) 거부합니다.
    """

    def __init__(self, counsel_request_repo: CounselRequestRepository) -> None:
        self.counsel_request_repo = counsel_request_repo

    async def is_guardian_of(self, guardian_id: str, report: CounselReport) -> bool:
        counsel_request = await self.counsel_request_repo.find_by_id(report.counsel_request_id)
        if counsel_request is None or counsel_request.guardian_id is None:
            logger.warning(
                "[AUTHORIZATION] 보호자 확인 불가",
                extra={
                    "report_id": report.id,
                    "counsel_request_id": report.counsel_request_id,
                    "guardian_id": guardian_id,
                },
            )
            return False
        return counsel_request.guardian_id == guardian_id
