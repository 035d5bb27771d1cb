"""yeirin-ai API 클라이언트.

yeirin-ai 서비스에 기관 추천과 통합 보고서 생성을 요청합니다.
"""

import logging

import httpx
from pydantic import BaseModel, Field

from yeirin_backend.core.config.settings import settings
from yeirin_backend.domain.counsel_request.form_data import (
    AttachedAssessment,
    BasicInfo,
    CoverInfo,
    GuardianInfo,
    InstitutionInfo,
    KprcAssessmentSummary,
    PsychologicalInfo,
    RequestMotivation,
)

logger = logging.getLogger(__name__)


class YeirinAIClientError(Exception):
    """yeirin-ai 클라이언트 에러."""

    pass


class InstitutionRecommendation(BaseModel):
    """개별 기관 추천 결과."""

    institution_id: str = Field(description="기관 UUID")
    center_name: str = Field(description="센터명")
    score: float = Field(ge=0.0, le=1.0, description="추천 점수 (0.0-1.0)")
    reasoning: str = Field(description="추천 이유 (AI 분석 결과)")
    address: str | None = Field(default=None, description="기관 주소")
    average_rating: float | None = Field(default=None, description="평균 별점 (5점 만점)")


class RecommendationResponse(BaseModel):
    """기관 추천 응답 (점수 순으로 정렬)."""

    recommendations: list[InstitutionRecommendation]
    total_institutions: int = 0
    request_text: str | None = None


class IntegratedReportRequest(BaseModel):
    """통합 보고서 생성 요청.

    ``attached_assessments`` 가 신규 방식이며, ``kprc_summary`` 와
    ``assessment_report_s3_key`` 는 이전 버전 yeirin-ai 호환용입니다.
    """

    counsel_request_id: str
    child_id: str
    child_name: str
    cover_info: CoverInfo
    basic_info: BasicInfo
    psychological_info: PsychologicalInfo
    request_motivation: RequestMotivation
    attached_assessments: list[AttachedAssessment] = Field(default_factory=list)
    kprc_summary: KprcAssessmentSummary | None = None
    assessment_report_s3_key: str | None = None
    guardian_info: GuardianInfo | None = None
    institution_info: InstitutionInfo | None = None


class YeirinAIClient:
    """yeirin-ai API 클라이언트."""

    def __init__(
        self,
        base_url: str | None = None,
        internal_secret: str | None = None,
    ) -> None:
        """클라이언트 초기화.

        Args:
            base_url: yeirin-ai URL. None이면 설정에서 가져옴.
            internal_secret: 내부 API 키. None이면 설정에서 가져옴.
        """
        self.base_url = (base_url or settings.yeirin_ai_url).rstrip("/")
        self.internal_secret = internal_secret or settings.internal_api_secret

    async def request_recommendation(
        self, counsel_request_text: str
    ) -> list[InstitutionRecommendation]:
        """상담의뢰 텍스트로 기관 추천을 요청합니다.

        Args:
            counsel_request_text: 상담의뢰지를 변환한 텍스트

        Returns:
            점수 순으로 정렬된 추천 기관 목록

        Raises:
            YeirinAIClientError: API 호출 실패 시
        """
        url = f"{self.base_url}/api/v1/recommendations"

        logger.info(
            "[YEIRIN_AI] 기관 추천 요청",
            extra={"url": url, "text_length": len(counsel_request_text)},
        )

        try:
            async with httpx.AsyncClient(
                timeout=settings.yeirin_ai_recommendation_timeout
            ) as client:
                response = await client.post(
                    url, json={"counsel_request_text": counsel_request_text}
                )
                response.raise_for_status()
                result = RecommendationResponse.model_validate(response.json())

        except httpx.HTTPStatusError as e:
            logger.error(
                "[YEIRIN_AI] 추천 API HTTP 에러",
                extra={
                    "status_code": e.response.status_code,
                    "response": e.response.text[:500],
                },
            )
            raise YeirinAIClientError(
                f"yeirin-ai 추천 API 호출 실패: {e.response.status_code}"
            ) from e

        except httpx.RequestError as e:
            logger.error("[YEIRIN_AI] 추천 API 연결 에러", extra={"error": str(e)})
            raise YeirinAIClientError(f"yeirin-ai 연결 실패: {e}") from e

        except ValueError as e:
            logger.error("[YEIRIN_AI] 추천 응답 파싱 에러", extra={"error": str(e)})
            raise YeirinAIClientError(f"yeirin-ai 응답 형식 오류: {e}") from e

        logger.info(
            "[YEIRIN_AI] 기관 추천 수신",
            extra={
                "count": len(result.recommendations),
                "total_institutions": result.total_institutions,
            },
        )
        return result.recommendations

    async def request_integrated_report(self, request: IntegratedReportRequest) -> None:
        """통합 보고서 생성을 요청합니다.

        202 Accepted만 확인하고 반환하며, 결과는 웹훅으로 수신합니다.

        Raises:
            YeirinAIClientError: API 호출 실패 시
        """
        url = f"{self.base_url}/api/v1/integrated-reports"
        headers = {
            "X-Internal-Api-Key": self.internal_secret,
            "Content-Type": "application/json",
        }

        logger.info(
            "[YEIRIN_AI] 통합 보고서 생성 요청",
            extra={
                "counsel_request_id": request.counsel_request_id,
                "assessment_count": len(request.attached_assessments),
            },
        )

        try:
            async with httpx.AsyncClient(timeout=settings.yeirin_ai_report_timeout) as client:
                response = await client.post(
                    url,
                    json=request.model_dump(mode="json", exclude_none=True),
                    headers=headers,
                )
                response.raise_for_status()

        except httpx.HTTPStatusError as e:
            logger.error(
                "[YEIRIN_AI] 통합 보고서 API HTTP 에러",
                extra={
                    "counsel_request_id": request.counsel_request_id,
                    "status_code": e.response.status_code,
                    "response": e.response.text[:500],
                },
            )
            raise YeirinAIClientError(
                f"yeirin-ai 통합 보고서 API 호출 실패: {e.response.status_code}"
            ) from e

        except httpx.RequestError as e:
            logger.error(
                "[YEIRIN_AI] 통합 보고서 API 연결 에러",
                extra={"counsel_request_id": request.counsel_request_id, "error": str(e)},
            )
            raise YeirinAIClientError(f"yeirin-ai 연결 실패: {e}") from e

        if response.status_code != 202:
            logger.warning(
                "[YEIRIN_AI] 예상치 못한 응답 상태",
                extra={
                    "counsel_request_id": request.counsel_request_id,
                    "status_code": response.status_code,
                },
            )
