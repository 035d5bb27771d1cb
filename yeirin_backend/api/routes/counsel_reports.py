"""면담결과지 API 라우터."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from yeirin_backend.api.dependencies import get_current_institution_id, get_current_user_id
from yeirin_backend.api.errors import unwrap
from yeirin_backend.core.models.api import (
    ApproveCounselReportDTO,
    CounselReportResponseDTO,
    CreateCounselReportDTO,
    UpdateCounselReportDTO,
)
from yeirin_backend.infrastructure.database.connection import get_db
from yeirin_backend.services.counsel_report_service import CounselReportService

router = APIRouter(prefix="/counsel-reports", tags=["counsel-reports"])


@router.post(
    "",
    response_model=CounselReportResponseDTO,
    status_code=status.HTTP_201_CREATED,
    summary="면담결과지 작성",
)
async def create_counsel_report(
    request: CreateCounselReportDTO,
    counselor_id: str = Depends(get_current_user_id),
    institution_id: str | None = Depends(get_current_institution_id),
    db: AsyncSession = Depends(get_db),
) -> CounselReportResponseDTO:
    """면담결과지를 작성 중 상태로 생성합니다. 작성자는 요청한 상담사입니다."""
    service = CounselReportService(db)
    result = await service.create_report(
        counselor_id=counselor_id,
        institution_id=institution_id,
        **request.model_dump(),
    )
    return CounselReportResponseDTO.from_domain(unwrap(result))


@router.get(
    "/counsel-requests/{counsel_request_id}",
    response_model=list[CounselReportResponseDTO],
    summary="상담의뢰지별 면담결과지 목록",
)
async def list_by_counsel_request(
    counsel_request_id: str,
    guardian_view: bool = Query(default=False, description="보호자 화면용 (작성 중 제외)"),
    db: AsyncSession = Depends(get_db),
) -> list[CounselReportResponseDTO]:
    service = CounselReportService(db)
    result = await service.get_reports_by_counsel_request(counsel_request_id, guardian_view)
    return [CounselReportResponseDTO.from_domain(r) for r in unwrap(result)]


@router.get(
    "/{report_id}",
    response_model=CounselReportResponseDTO,
    summary="면담결과지 상세 조회",
)
async def get_counsel_report(
    report_id: str, db: AsyncSession = Depends(get_db)
) -> CounselReportResponseDTO:
    service = CounselReportService(db)
    return CounselReportResponseDTO.from_domain(unwrap(await service.get_report(report_id)))


@router.patch(
    "/{report_id}",
    response_model=CounselReportResponseDTO,
    summary="면담결과지 수정 (작성자, 작성 중에만 가능)",
)
async def update_counsel_report(
    report_id: str,
    request: UpdateCounselReportDTO,
    counselor_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> CounselReportResponseDTO:
    service = CounselReportService(db)
    result = await service.update_report(
        report_id, counselor_id, **request.model_dump(exclude_unset=True)
    )
    return CounselReportResponseDTO.from_domain(unwrap(result))


@router.post(
    "/{report_id}/submit",
    response_model=CounselReportResponseDTO,
    summary="면담결과지 제출",
)
async def submit_counsel_report(
    report_id: str,
    counselor_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> CounselReportResponseDTO:
    service = CounselReportService(db)
    result = await service.submit_report(report_id, counselor_id)
    return CounselReportResponseDTO.from_domain(unwrap(result))


@router.post(
    "/{report_id}/review",
    response_model=CounselReportResponseDTO,
    summary="보호자 확인",
)
async def review_counsel_report(
    report_id: str,
    guardian_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> CounselReportResponseDTO:
    service = CounselReportService(db)
    result = await service.review_report(report_id, guardian_id)
    return CounselReportResponseDTO.from_domain(unwrap(result))


@router.post(
    "/{report_id}/approve",
    response_model=CounselReportResponseDTO,
    summary="보호자 승인",
)
async def approve_counsel_report(
    report_id: str,
    request: ApproveCounselReportDTO,
    guardian_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> CounselReportResponseDTO:
    service = CounselReportService(db)
    result = await service.approve_report(report_id, guardian_id, request.feedback)
    return CounselReportResponseDTO.from_domain(unwrap(result))
