"""내부 서비스 웹훅 API 라우터.

yeirin-ai가 통합 보고서 생성 결과를 전달합니다.
"""

import logging

from fastapi import APIRouter, Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from yeirin_backend.api.errors import unwrap
from yeirin_backend.core.config.settings import settings
from yeirin_backend.core.models.api import (
    CounselRequestResponseDTO,
    IntegratedReportWebhookDTO,
)
from yeirin_backend.infrastructure.database.connection import get_db
from yeirin_backend.services.counsel_request_service import CounselRequestService

router = APIRouter(prefix="/webhook", tags=["webhook"])

logger = logging.getLogger(__name__)


def validate_internal_api_key(
    x_internal_api_key: str = Header(..., description="내부 서비스 API 키"),
) -> None:
    """내부 API 키를 검증합니다.

    Raises:
        HTTPException: 인증 실패 시
    """
    if x_internal_api_key != settings.internal_api_secret:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="유효하지 않은 내부 API 키입니다",
        )


@router.post(
    "/integrated-report-complete",
    response_model=CounselRequestResponseDTO,
    summary="통합 보고서 결과 수신",
    dependencies=[Depends(validate_internal_api_key)],
)
async def receive_integrated_report(
    request: IntegratedReportWebhookDTO,
    db: AsyncSession = Depends(get_db),
) -> CounselRequestResponseDTO:
    logger.info(
        "[WEBHOOK] 통합 보고서 결과 수신",
        extra={
            "counsel_request_id": request.counsel_request_id,
            "status": request.status,
            "error_message": request.error_message,
        },
    )

    service = CounselRequestService(db)
    result = await service.update_integrated_report_status(
        request.counsel_request_id, request.status, request.integrated_report_s3_key
    )
    return CounselRequestResponseDTO.from_domain(unwrap(result))
