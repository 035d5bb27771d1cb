"""관리자 상담의뢰지 API 라우터."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from yeirin_backend.api.dependencies import get_current_user_id
from yeirin_backend.api.errors import unwrap
from yeirin_backend.core.models.api import (
    AdminStatusChangeResponseDTO,
    AdminUpdateStatusDTO,
    CounselRequestResponseDTO,
    PaginatedResponseDTO,
)
from yeirin_backend.domain.counsel_request.enums import CounselRequestStatus
from yeirin_backend.infrastructure.database.connection import get_db
from yeirin_backend.services.admin_service import AdminCounselRequestService

router = APIRouter(prefix="/admin/counsel-requests", tags=["admin"])


@router.get(
    "",
    response_model=PaginatedResponseDTO[CounselRequestResponseDTO],
    summary="관리자 상담의뢰지 목록",
)
async def list_counsel_requests(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    status_filter: CounselRequestStatus | None = Query(default=None, alias="status"),
    db: AsyncSession = Depends(get_db),
) -> PaginatedResponseDTO[CounselRequestResponseDTO]:
    service = AdminCounselRequestService(db)
    result = await service.get_counsel_requests(page, limit, status_filter)
    return PaginatedResponseDTO.build(
        result, [CounselRequestResponseDTO.from_domain(r) for r in result.data]
    )


@router.get(
    "/{counsel_request_id}",
    response_model=CounselRequestResponseDTO,
    summary="관리자 상담의뢰지 상세",
)
async def get_counsel_request(
    counsel_request_id: str, db: AsyncSession = Depends(get_db)
) -> CounselRequestResponseDTO:
    service = AdminCounselRequestService(db)
    result = await service.get_counsel_request(counsel_request_id)
    return CounselRequestResponseDTO.from_domain(unwrap(result))


@router.patch(
    "/{counsel_request_id}/status",
    response_model=AdminStatusChangeResponseDTO,
    summary="상담의뢰지 상태 강제 변경",
    description="정상 흐름을 우회하여 상태를 변경합니다. 완료 상태 진입/이탈은 불가합니다.",
)
async def force_status(
    counsel_request_id: str,
    request: AdminUpdateStatusDTO,
    admin_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> AdminStatusChangeResponseDTO:
    service = AdminCounselRequestService(db)
    change = unwrap(
        await service.force_status(counsel_request_id, request.status, request.reason, admin_id)
    )
    return AdminStatusChangeResponseDTO(
        counsel_request=CounselRequestResponseDTO.from_domain(change.counsel_request),
        previous_status=change.previous_status,
        new_status=change.new_status,
    )
