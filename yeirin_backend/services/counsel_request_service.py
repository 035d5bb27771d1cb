"""상담의뢰지 서비스 - 애플리케이션 계층."""

import copy
import logging
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from yeirin_backend.domain.common.pagination import PaginatedResult
from yeirin_backend.domain.common.result import Result
from yeirin_backend.domain.counsel_request.enums import AssessmentType, CounselRequestStatus
from yeirin_backend.domain.counsel_request.form_data import (
    AttachedAssessment,
    CounselRequestFormData,
    KprcAssessmentSummary,
)
from yeirin_backend.domain.counsel_request.models import CounselRequest
from yeirin_backend.infrastructure.database.counsel_request_repository import (
    SqlAlchemyCounselRequestRepository,
)
from yeirin_backend.infrastructure.database.errors import ConcurrentModificationError
from yeirin_backend.infrastructure.external.soul_e_client import (
    AssessmentResultSummary,
    SoulEClient,
)
from yeirin_backend.infrastructure.external.yeirin_ai_client import (
    IntegratedReportRequest,
    YeirinAIClient,
)
from yeirin_backend.services.errors import concurrent_modification, counsel_request_not_found

logger = logging.getLogger(__name__)

KPRC_ASSESSMENT_NAME = "KPRC 인성평정척도"


class CounselRequestService:
    """상담의뢰지 서비스.

    상담의뢰지 접수/조회/수정과 상담 진행 상태 전환을 처리합니다.
    접수 시 검사 결과 보충과 통합 보고서 생성 요청은 실패해도 접수에 영향을 주지 않습니다.
    """

    def __init__(self, db_session: AsyncSession) -> None:
        """서비스를 초기화합니다.

        Args:
            db_session: 비동기 데이터베이스 세션
        """
        self.counsel_request_repo = SqlAlchemyCounselRequestRepository(db_session)
        self.soul_e_client = SoulEClient()
        self.yeirin_ai_client = YeirinAIClient()

    # ==================== 접수 ====================

    async def create_counsel_request(
        self,
        child_id: str,
        guardian_id: str | None,
        form_data: CounselRequestFormData,
    ) -> Result[CounselRequest]:
        """상담의뢰지를 접수합니다.

        Args:
            child_id: 아동 ID
            guardian_id: 보호자 ID (기관 의뢰 시 None)
            form_data: 상담의뢰지 양식 데이터

        Returns:
            저장된 상담의뢰지 또는 양식 검증 실패 사유
        """
        result = CounselRequest.create(
            id=str(uuid4()),
            child_id=child_id,
            guardian_id=guardian_id,
            form_data=form_data,
        )
        if result.is_failure:
            logger.info(
                "[COUNSEL_REQUEST] 양식 검증 실패",
                extra={"child_id": child_id, "reason": result.error.message},
            )
            return result

        saved = await self.counsel_request_repo.save(result.value)
        logger.info(
            "[COUNSEL_REQUEST] 상담의뢰지 생성 완료",
            extra={"counsel_request_id": saved.id, "child_id": child_id},
        )

        enriched = await self._request_integrated_report(saved)
        return Result.ok(enriched)

    async def _request_integrated_report(self, counsel_request: CounselRequest) -> CounselRequest:
        """통합 보고서 생성을 요청합니다 (fire-and-forget).

        어떤 실패도 호출자에게 전파하지 않으며, 요청이 수락되면
        ``integrated_report_status`` 를 pending으로 기록한 상담의뢰지를 반환합니다.
        """
        form_data = counsel_request.form_data
        test_results = form_data.testResults
        attached = list(test_results.attachedAssessments)

        if not test_results.has_any_assessment():
            backfilled = await self._find_latest_kprc(counsel_request.child_id)
            if backfilled is not None:
                attached.append(backfilled)

        if not attached and not test_results.has_legacy_kprc():
            logger.info(
                "[COUNSEL_REQUEST] 첨부된 검사 결과 없음 - 통합 보고서 생성 건너뜀",
                extra={"counsel_request_id": counsel_request.id},
            )
            return counsel_request

        kprc = next((a for a in attached if a.assessmentType == AssessmentType.KPRC), None)
        if kprc is not None and kprc.summary is not None:
            kprc_summary = KprcAssessmentSummary(
                summaryLines=kprc.summary.summaryLines,
                expertOpinion=kprc.summary.expertOpinion,
                keyFindings=kprc.summary.keyFindings,
                recommendations=kprc.summary.recommendations,
                confidenceScore=kprc.summary.confidenceScore,
            )
        else:
            kprc_summary = test_results.kprcSummary
        report_s3_key = (kprc.reportS3Key if kprc else None) or test_results.assessmentReportS3Key

        request = IntegratedReportRequest(
            counsel_request_id=counsel_request.id,
            child_id=counsel_request.child_id,
            child_name=form_data.basicInfo.childInfo.name,
            cover_info=form_data.coverInfo,
            basic_info=form_data.basicInfo,
            psychological_info=form_data.psychologicalInfo,
            request_motivation=form_data.requestMotivation,
            attached_assessments=attached,
            kprc_summary=kprc_summary,
            assessment_report_s3_key=report_s3_key,
            guardian_info=form_data.guardianInfo,
            institution_info=form_data.institutionInfo,
        )

        try:
            await self.yeirin_ai_client.request_integrated_report(request)
        except Exception:
            logger.error(
                "[COUNSEL_REQUEST] 통합 보고서 생성 요청 실패 - 상담의뢰지 생성은 유지",
                extra={"counsel_request_id": counsel_request.id},
                exc_info=True,
            )
            return counsel_request

        # 저장에 실패하면 pending이 기록되지 않은 원본을 반환한다
        pending = copy.copy(counsel_request)
        pending.mark_integrated_report_pending()
        try:
            counsel_request = await self.counsel_request_repo.save(pending)
        except Exception:
            logger.error(
                "[COUNSEL_REQUEST] 통합 보고서 요청 상태 저장 실패 - 상담의뢰지 생성은 유지",
                extra={"counsel_request_id": counsel_request.id},
                exc_info=True,
            )
            return counsel_request

        logger.info(
            "[COUNSEL_REQUEST] 통합 보고서 생성 요청 완료",
            extra={
                "counsel_request_id": counsel_request.id,
                "assessment_types": [a.assessmentType.value for a in attached],
            },
        )
        return counsel_request

    async def _find_latest_kprc(self, child_id: str) -> AttachedAssessment | None:
        """Soul-E에서 최신 KPRC 결과를 찾아 첨부 형식으로 변환합니다. 실패 시 None."""
        logger.info("[COUNSEL_REQUEST] Soul-E 검사 결과 조회 시도", extra={"child_id": child_id})
        try:
            latest = await self.soul_e_client.get_latest_assessment_result(child_id)
        except Exception:
            logger.warning(
                "[COUNSEL_REQUEST] Soul-E 검사 결과 조회 실패",
                extra={"child_id": child_id},
                exc_info=True,
            )
            return None

        if latest is None or latest.summary is None or not latest.s3_report_url:
            return None
        return _to_attached_kprc(latest)

    # ==================== 조회 ====================

    async def get_counsel_request(self, counsel_request_id: str) -> Result[CounselRequest]:
        counsel_request = await self.counsel_request_repo.find_by_id(counsel_request_id)
        if counsel_request is None:
            return counsel_request_not_found(counsel_request_id)
        return Result.ok(counsel_request)

    async def get_by_child_id(self, child_id: str) -> list[CounselRequest]:
        return await self.counsel_request_repo.find_by_child_id(child_id)

    async def get_by_guardian_id(self, guardian_id: str) -> list[CounselRequest]:
        return await self.counsel_request_repo.find_by_guardian_id(guardian_id)

    async def get_by_status(self, status: CounselRequestStatus) -> list[CounselRequest]:
        return await self.counsel_request_repo.find_by_status(status)

    async def get_counsel_requests(
        self,
        page: int = 1,
        limit: int = 10,
        status: CounselRequestStatus | None = None,
    ) -> PaginatedResult[CounselRequest]:
        return await self.counsel_request_repo.find_all(page, limit, status)

    # ==================== 수정 / 삭제 ====================

    async def update_form_data(
        self, counsel_request_id: str, form_data: CounselRequestFormData
    ) -> Result[CounselRequest]:
        """접수 대기 중인 상담의뢰지의 양식을 수정합니다."""
        return await self._mutate(
            counsel_request_id,
            lambda counsel_request: counsel_request.update_form_data(form_data),
            "양식 수정",
        )

    async def delete_counsel_request(self, counsel_request_id: str) -> Result[None]:
        counsel_request = await self.counsel_request_repo.find_by_id(counsel_request_id)
        if counsel_request is None:
            return counsel_request_not_found(counsel_request_id)

        await self.counsel_request_repo.delete(counsel_request_id)
        logger.info(
            "[COUNSEL_REQUEST] 상담의뢰지 삭제",
            extra={"counsel_request_id": counsel_request_id},
        )
        return Result.ok()

    # ==================== 상태 전환 ====================

    async def match_counsel_request(
        self, counsel_request_id: str, institution_id: str, counselor_id: str
    ) -> Result[CounselRequest]:
        """기관과 상담사를 직접 매칭합니다.

        Deprecated: AI 추천 후 ``RecommendationService.select_institution`` 을 사용합니다.
        """
        return await self._mutate(
            counsel_request_id,
            lambda counsel_request: counsel_request.match_with(institution_id, counselor_id),
            "직접 매칭",
        )

    async def start_counseling(self, counsel_request_id: str) -> Result[CounselRequest]:
        return await self._mutate(
            counsel_request_id,
            lambda counsel_request: counsel_request.start_counseling(),
            "상담 시작",
        )

    async def complete_counseling(self, counsel_request_id: str) -> Result[CounselRequest]:
        return await self._mutate(
            counsel_request_id,
            lambda counsel_request: counsel_request.complete_counseling(),
            "상담 완료",
        )

    async def reject(
        self, counsel_request_id: str, reason: str | None = None
    ) -> Result[CounselRequest]:
        if reason:
            logger.info(
                "[COUNSEL_REQUEST] 거부 사유",
                extra={"counsel_request_id": counsel_request_id, "reason": reason},
            )
        return await self._mutate(
            counsel_request_id,
            lambda counsel_request: counsel_request.reject(reason),
            "매칭 거부",
        )

    async def update_integrated_report_status(
        self, counsel_request_id: str, status: str, s3_key: str | None = None
    ) -> Result[CounselRequest]:
        """yeirin-ai 웹훅으로 전달된 통합 보고서 결과를 반영합니다."""
        return await self._mutate(
            counsel_request_id,
            lambda counsel_request: counsel_request.update_integrated_report_status(
                status, s3_key
            ),
            "통합 보고서 상태 갱신",
        )

    async def _mutate(self, counsel_request_id: str, action, label: str) -> Result[CounselRequest]:
        """조회 → 도메인 메서드 실행 → 저장 흐름을 수행합니다."""
        counsel_request = await self.counsel_request_repo.find_by_id(counsel_request_id)
        if counsel_request is None:
            return counsel_request_not_found(counsel_request_id)

        previous_status = counsel_request.status
        result = action(counsel_request)
        if result.is_failure:
            logger.info(
                f"[COUNSEL_REQUEST] {label} 실패",
                extra={
                    "counsel_request_id": counsel_request_id,
                    "code": result.error.code,
                    "reason": result.error.message,
                },
            )
            return Result.fail(result.error)

        try:
            saved = await self.counsel_request_repo.save(counsel_request)
        except ConcurrentModificationError as e:
            return concurrent_modification(e)

        logger.info(
            f"[COUNSEL_REQUEST] {label} 완료",
            extra={
                "counsel_request_id": counsel_request_id,
                "previous_status": previous_status.value,
                "status": saved.status.value,
            },
        )
        return Result.ok(saved)


def _to_attached_kprc(result: AssessmentResultSummary) -> AttachedAssessment:
    summary = result.summary
    return AttachedAssessment(
        assessmentType=AssessmentType.KPRC,
        assessmentName=KPRC_ASSESSMENT_NAME,
        reportS3Key=result.s3_report_url,
        resultId=result.result_id,
        totalScore=result.total_score,
        maxScore=result.max_score,
        scoredAt=result.scored_at,
        summary=KprcAssessmentSummary(
            summaryLines=summary.key_findings,
            expertOpinion=summary.overall_assessment,
            keyFindings=summary.key_findings,
            recommendations=summary.recommendations,
            confidenceScore=summary.confidence_score,
        ),
    )
