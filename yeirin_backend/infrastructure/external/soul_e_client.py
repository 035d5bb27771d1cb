"""Soul-E API 클라이언트 - 검사 결과 조회.

Soul-E의 API를 호출하여 아동의 심리검사 결과를 조회합니다.
상담의뢰지에 검사 결과가 첨부되지 않은 경우 최신 결과를 보충하는 데 사용됩니다.
"""

import logging

import httpx
from pydantic import BaseModel, Field

from yeirin_backend.core.config.settings import settings

logger = logging.getLogger(__name__)


class SoulEClientError(Exception):
    """Soul-E 클라이언트 에러."""

    pass


class KprcSummary(BaseModel):
    """KPRC 전문가 소견 요약 (yeirin-ai 생성)."""

    overall_assessment: str = ""
    key_findings: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    risk_areas: list[str] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    confidence_score: float = 0.0


class AssessmentResultSummary(BaseModel):
    """검사 결과 요약."""

    result_id: str
    session_id: str
    child_id: str
    child_name: str | None = None
    assessment_type: str
    assessment_name: str
    total_score: float | None = None
    max_score: float | None = None
    overall_level: str | None = None
    report_url: str | None = None  # Inpsyt 리포트 URL (만료됨)
    s3_report_url: str | None = None  # S3 영구 리포트 key
    summary: KprcSummary | None = None
    scored_at: str | None = None
    created_at: str | None = None


class SoulEClient:
    """Soul-E API 클라이언트."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """클라이언트 초기화.

        Args:
            base_url: Soul-E API URL. None이면 설정에서 가져옴.
            timeout: HTTP 요청 타임아웃 (초). None이면 설정에서 가져옴.
        """
        self.base_url = (base_url or settings.soul_e_api_url).rstrip("/")
        self.timeout = timeout or settings.soul_e_api_timeout

    async def get_assessment_results(self, child_id: str) -> list[AssessmentResultSummary]:
        """아동의 검사 결과 목록을 조회합니다 (최신순).

        Args:
            child_id: 아동 ID

        Returns:
            검사 결과 요약 목록 (결과가 없으면 빈 목록)

        Raises:
            SoulEClientError: API 호출 실패 시
        """
        url = f"{self.base_url}/api/v1/assessment/children/{child_id}/results"

        logger.info("[SOUL_E] 검사 결과 조회 요청", extra={"child_id": child_id, "url": url})

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url)

                if response.status_code == 404:
                    logger.info("[SOUL_E] 검사 결과 없음", extra={"child_id": child_id})
                    return []

                response.raise_for_status()
                results = [AssessmentResultSummary.model_validate(r) for r in response.json()]

        except httpx.HTTPStatusError as e:
            logger.error(
                "[SOUL_E] API HTTP 에러",
                extra={
                    "child_id": child_id,
                    "status_code": e.response.status_code,
                    "response": e.response.text[:500],
                },
            )
            raise SoulEClientError(f"Soul-E API 호출 실패: {e.response.status_code}") from e

        except httpx.RequestError as e:
            logger.error("[SOUL_E] API 연결 에러", extra={"child_id": child_id, "error": str(e)})
            raise SoulEClientError(f"Soul-E API 연결 실패: {e}") from e

        except ValueError as e:
            logger.error("[SOUL_E] 응답 파싱 에러", extra={"child_id": child_id, "error": str(e)})
            raise SoulEClientError(f"Soul-E 응답 형식 오류: {e}") from e

        logger.info(
            "[SOUL_E] 검사 결과 조회 성공",
            extra={"child_id": child_id, "count": len(results)},
        )
        return results

    async def get_latest_assessment_result(self, child_id: str) -> AssessmentResultSummary | None:
        """아동의 가장 최근 검사 결과를 조회합니다.

        Returns:
            최신 검사 결과, 없으면 None

        Raises:
            SoulEClientError: API 호출 실패 시
        """
        results = await self.get_assessment_results(child_id)
        if not results:
            return None

        latest = results[0]
        if latest.summary is None:
            logger.warning(
                "[SOUL_E] 최신 검사 결과에 요약 없음 (생성 중일 수 있음)",
                extra={"child_id": child_id, "result_id": latest.result_id},
            )
        return latest

