"""상담의뢰지 API 라우터.

상담의뢰지 접수/조회/수정, AI 추천과 기관 선택, 상담 진행 상태 전환을 제공합니다.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from yeirin_backend.api.errors import unwrap
from yeirin_backend.core.models.api import (
    CounselRequestResponseDTO,
    CreateCounselRequestDTO,
    MatchCounselRequestDTO,
    PaginatedResponseDTO,
    RecommendationResponseDTO,
    RejectCounselRequestDTO,
    SelectInstitutionDTO,
    UpdateFormDataDTO,
)
from yeirin_backend.domain.counsel_request.enums import CounselRequestStatus
from yeirin_backend.infrastructure.database.connection import get_db
from yeirin_backend.services.counsel_request_service import CounselRequestService
from yeirin_backend.services.recommendation_service import RecommendationService

router = APIRouter(prefix="/counsel-requests", tags=["counsel-requests"])


# =============================================================================
# 접수 / 조회
# =============================================================================


@router.post(
    "",
    response_model=CounselRequestResponseDTO,
    status_code=status.HTTP_201_CREATED,
    summary="상담의뢰지 접수",
)
async def create_counsel_request(
    request: CreateCounselRequestDTO,
    db: AsyncSession = Depends(get_db),
) -> CounselRequestResponseDTO:
    """상담의뢰지를 접수합니다.

    접수 후 통합 보고서 생성을 요청하지만, 그 결과와 관계없이 접수는 완료됩니다.
    """
    service = CounselRequestService(db)
    result = await service.create_counsel_request(
        child_id=request.child_id,
        guardian_id=request.guardian_id,
        form_data=request.form_data,
    )
    return CounselRequestResponseDTO.from_domain(unwrap(result))


@router.get(
    "",
    response_model=PaginatedResponseDTO[CounselRequestResponseDTO],
    summary="상담의뢰지 목록 조회",
)
async def list_counsel_requests(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    status_filter: CounselRequestStatus | None = Query(default=None, alias="status"),
    db: AsyncSession = Depends(get_db),
) -> PaginatedResponseDTO[CounselRequestResponseDTO]:
    service = CounselRequestService(db)
    result = await service.get_counsel_requests(page, limit, status_filter)
    return PaginatedResponseDTO.build(
        result, [CounselRequestResponseDTO.from_domain(r) for r in result.data]
    )


@router.get(
    "/children/{child_id}",
    response_model=list[CounselRequestResponseDTO],
    summary="아동별 상담의뢰지 조회",
)
async def list_by_child(
    child_id: str, db: AsyncSession = Depends(get_db)
) -> list[CounselRequestResponseDTO]:
    service = CounselRequestService(db)
    return [
        CounselRequestResponseDTO.from_domain(r) for r in await service.get_by_child_id(child_id)
    ]


@router.get(
    "/guardians/{guardian_id}",
    response_model=list[CounselRequestResponseDTO],
    summary="보호자별 상담의뢰지 조회",
)
async def list_by_guardian(
    guardian_id: str, db: AsyncSession = Depends(get_db)
) -> list[CounselRequestResponseDTO]:
    service = CounselRequestService(db)
    return [
        CounselRequestResponseDTO.from_domain(r)
        for r in await service.get_by_guardian_id(guardian_id)
    ]


@router.get(
    "/{counsel_request_id}",
    response_model=CounselRequestResponseDTO,
    summary="상담의뢰지 상세 조회",
)
async def get_counsel_request(
    counsel_request_id: str, db: AsyncSession = Depends(get_db)
) -> CounselRequestResponseDTO:
    service = CounselRequestService(db)
    result = await service.get_counsel_request(counsel_request_id)
    return CounselRequestResponseDTO.from_domain(unwrap(result))


# =============================================================================
# 수정 / 삭제
# =============================================================================


@router.put(
    "/{counsel_request_id}/form-data",
    response_model=CounselRequestResponseDTO,
    summary="상담의뢰지 양식 수정 (접수 대기 중에만 가능)",
)
async def update_form_data(
    counsel_request_id: str,
    request: UpdateFormDataDTO,
    db: AsyncSession = Depends(get_db),
) -> CounselRequestResponseDTO:
    service = CounselRequestService(db)
    result = await service.update_form_data(counsel_request_id, request.form_data)
    return CounselRequestResponseDTO.from_domain(unwrap(result))


@router.delete(
    "/{counsel_request_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="상담의뢰지 삭제",
)
async def delete_counsel_request(
    counsel_request_id: str, db: AsyncSession = Depends(get_db)
) -> None:
    service = CounselRequestService(db)
    unwrap(await service.delete_counsel_request(counsel_request_id))


# =============================================================================
# AI 추천 / 기관 선택
# =============================================================================


@router.post(
    "/{counsel_request_id}/recommendations",
    response_model=list[RecommendationResponseDTO],
    summary="AI 기관 추천 요청",
    description="접수 대기 중인 상담의뢰지에 대해 yeirin-ai에 기관 추천을 요청합니다.",
)
async def request_recommendations(
    counsel_request_id: str, db: AsyncSession = Depends(get_db)
) -> list[RecommendationResponseDTO]:
    service = RecommendationService(db)
    result = await service.request_recommendations(counsel_request_id)
    return [RecommendationResponseDTO.from_domain(r) for r in unwrap(result)]


@router.get(
    "/{counsel_request_id}/recommendations",
    response_model=list[RecommendationResponseDTO],
    summary="추천 기관 목록 조회",
)
async def get_recommendations(
    counsel_request_id: str, db: AsyncSession = Depends(get_db)
) -> list[RecommendationResponseDTO]:
    service = RecommendationService(db)
    result = await service.get_recommendations(counsel_request_id)
    return [RecommendationResponseDTO.from_domain(r) for r in unwrap(result)]


@router.post(
    "/{counsel_request_id}/select-institution",
    response_model=CounselRequestResponseDTO,
    summary="추천 기관 선택",
)
async def select_institution(
    counsel_request_id: str,
    request: SelectInstitutionDTO,
    db: AsyncSession = Depends(get_db),
) -> CounselRequestResponseDTO:
    service = RecommendationService(db)
    result = await service.select_institution(counsel_request_id, request.institution_id)
    return CounselRequestResponseDTO.from_domain(unwrap(result))


# =============================================================================
# 상담 진행 상태
# =============================================================================


@router.post(
    "/{counsel_request_id}/match",
    response_model=CounselRequestResponseDTO,
    summary="기관/상담사 직접 매칭",
    deprecated=True,
)
async def match_counsel_request(
    counsel_request_id: str,
    request: MatchCounselRequestDTO,
    db: AsyncSession = Depends(get_db),
) -> CounselRequestResponseDTO:
    service = CounselRequestService(db)
    result = await service.match_counsel_request(
        counsel_request_id, request.institution_id, request.counselor_id
    )
    return CounselRequestResponseDTO.from_domain(unwrap(result))


@router.post(
    "/{counsel_request_id}/start",
    response_model=CounselRequestResponseDTO,
    summary="상담 시작",
)
async def start_counseling(
    counsel_request_id: str, db: AsyncSession = Depends(get_db)
) -> CounselRequestResponseDTO:
    service = CounselRequestService(db)
    result = await service.start_counseling(counsel_request_id)
    return CounselRequestResponseDTO.from_domain(unwrap(result))


@router.post(
    "/{counsel_request_id}/complete",
    response_model=CounselRequestResponseDTO,
    summary="상담 완료",
)
async def complete_counseling(
    counsel_request_id: str, db: AsyncSession = Depends(get_db)
) -> CounselRequestResponseDTO:
    service = CounselRequestService(db)
    result = await service.complete_counseling(counsel_request_id)
    return CounselRequestResponseDTO.from_domain(unwrap(result))


@router.post(
    "/{counsel_request_id}/reject",
    response_model=CounselRequestResponseDTO,
    summary="매칭 거부",
)
async def reject_counsel_request(
    counsel_request_id: str,
    request: RejectCounselRequestDTO,
    db: AsyncSession = Depends(get_db),
) -> CounselRequestResponseDTO:
    service = CounselRequestService(db)
    result = await service.reject(counsel_request_id, request.reason)
    return CounselRequestResponseDTO.from_domain(unwrap(result))
