"""관리자 상담의뢰지 서비스."""

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from yeirin_backend.domain.common.pagination import PaginatedResult
from yeirin_backend.domain.common.result import Result
from yeirin_backend.domain.counsel_request.enums import CounselRequestStatus
from yeirin_backend.domain.counsel_request.models import CounselRequest
from yeirin_backend.infrastructure.database.counsel_request_repository import (
    SqlAlchemyCounselRequestRepository,
)
from yeirin_backend.infrastructure.database.errors import ConcurrentModificationError
from yeirin_backend.services.errors import concurrent_modification, counsel_request_not_found

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusChange:
    """관리자 상태 변경 결과."""

    counsel_request: CounselRequest
    previous_status: CounselRequestStatus
    new_status: CounselRequestStatus


class AdminCounselRequestService:
    """관리자용 상담의뢰지 조회 및 상태 강제 변경."""

    def __init__(self, db_session: AsyncSession) -> None:
        self.counsel_request_repo = SqlAlchemyCounselRequestRepository(db_session)

    async def get_counsel_requests(
        self,
        page: int = 1,
        limit: int = 20,
        status: CounselRequestStatus | None = None,
    ) -> PaginatedResult[CounselRequest]:
        return await self.counsel_request_repo.find_all(page, limit, status)

    async def get_counsel_request(self, counsel_request_id: str) -> Result[CounselRequest]:
        counsel_request = await self.counsel_request_repo.find_by_id(counsel_request_id)
        if counsel_request is None:
            return counsel_request_not_found(counsel_request_id)
        return Result.ok(counsel_request)

    async def force_status(
        self,
        counsel_request_id: str,
        new_status: CounselRequestStatus,
        reason: str,
        admin_id: str,
    ) -> Result[StatusChange]:
        """상담의뢰지 상태를 강제로 변경합니다.

        정상 흐름을 우회하지만 COMPLETED 진입/이탈은 허용하지 않습니다.
        변경 내역은 관리자 ID와 사유를 포함하여 로그로 남깁니다.

        Args:
            counsel_request_id: 상담의뢰지 ID
            new_status: 변경할 상태
            reason: 변경 사유 (최소 10자)
            admin_id: 요청한 관리자 ID

        Returns:
            변경 전후 상태가 포함된 결과
        """
        counsel_request = await self.counsel_request_repo.find_by_id(counsel_request_id)
        if counsel_request is None:
            return counsel_request_not_found(counsel_request_id)

        previous_status = counsel_request.status
        result = counsel_request.admin_force_status(new_status, reason)
        if result.is_failure:
            logger.info(
                "[ADMIN] 상태 변경 거부",
                extra={
                    "counsel_request_id": counsel_request_id,
                    "admin_id": admin_id,
                    "code": result.error.code,
                },
            )
            return Result.fail(result.error)

        try:
            saved = await self.counsel_request_repo.save(counsel_request)
        except ConcurrentModificationError as e:
            return concurrent_modification(e)

        logger.info(
            "[ADMIN] 상담의뢰지 상태 강제 변경",
            extra={
                "counsel_request_id": counsel_request_id,
                "admin_id": admin_id,
                "previous_status": previous_status.value,
                "new_status": new_status.value,
                "reason": reason,
            },
        )
        return Result.ok(
            StatusChange(
                counsel_request=saved,
                previous_status=previous_status,
                new_status=saved.status,
            )
        )
