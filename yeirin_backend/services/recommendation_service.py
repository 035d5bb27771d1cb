"""추천 서비스 - 애플리케이션 계층.

AI 기관 추천 요청과 추천 기관 선택을 처리합니다.
"""

import logging
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from yeirin_backend.core.config.settings import settings
from yeirin_backend.domain.common.result import DomainError, Result
from yeirin_backend.domain.counsel_request.enums import CounselRequestStatus
from yeirin_backend.domain.counsel_request.models import CounselRequest
from yeirin_backend.domain.counsel_request.text import form_data_to_text
from yeirin_backend.domain.recommendation.models import (
    MAX_RANK,
    CounselRequestRecommendation,
)
from yeirin_backend.infrastructure.database.counsel_request_repository import (
    SqlAlchemyCounselRequestRepository,
)
from yeirin_backend.infrastructure.database.errors import ConcurrentModificationError
from yeirin_backend.infrastructure.database.recommendation_repository import (
    SqlAlchemyRecommendationRepository,
)
from yeirin_backend.infrastructure.external.yeirin_ai_client import (
    YeirinAIClient,
    YeirinAIClientError,
)
from yeirin_backend.services.errors import concurrent_modification, counsel_request_not_found

logger = logging.getLogger(__name__)

MIN_REQUEST_TEXT_LENGTH = 10
# yeirin-ai RecommendationRequestDTO max_length
MAX_REQUEST_TEXT_LENGTH = 5000


class RecommendationService:
    """상담의뢰지 추천 서비스."""

    def __init__(self, db_session: AsyncSession) -> None:
        """추천 서비스를 초기화합니다.

        Args:
            db_session: 비동기 데이터베이스 세션
        """
        self.counsel_request_repo = SqlAlchemyCounselRequestRepository(db_session)
        self.recommendation_repo = SqlAlchemyRecommendationRepository(db_session)
        self.yeirin_ai_client = YeirinAIClient()

    async def request_recommendations(
        self, counsel_request_id: str
    ) -> Result[list[CounselRequestRecommendation]]:
        """AI 기관 추천을 요청하고 결과를 저장합니다.

        1. 상담의뢰지 조회 및 PENDING 상태 확인
        2. 양식 데이터를 텍스트로 변환
        3. yeirin-ai에 추천 요청
        4. 기존 추천을 지우고 최대 ``max_recommendations`` 개를 순위와 함께 저장
        5. 상담의뢰지 상태 → RECOMMENDED

        Returns:
            저장된 추천 목록 (순위순)
        """
        counsel_request = await self.counsel_request_repo.find_by_id(counsel_request_id)
        if counsel_request is None:
            return counsel_request_not_found(counsel_request_id)

        if counsel_request.status != CounselRequestStatus.PENDING:
            return Result.fail(
                DomainError(
                    f"추천 요청은 PENDING 상태에서만 가능합니다 "
                    f"(현재: {counsel_request.status.value})",
                    "INVALID_STATUS_TRANSITION",
                )
            )

        request_text = form_data_to_text(counsel_request.form_data)
        if len(request_text.strip()) < MIN_REQUEST_TEXT_LENGTH:
            return Result.fail(
                DomainError(
                    "상담의뢰지 정보가 불충분하여 추천을 요청할 수 없습니다",
                    "INSUFFICIENT_FORM_DATA",
                )
            )
        request_text = request_text[:MAX_REQUEST_TEXT_LENGTH]

        try:
            suggestions = await self.yeirin_ai_client.request_recommendation(request_text)
        except YeirinAIClientError as e:
            logger.error(
                "[RECOMMENDATION] AI 추천 요청 실패",
                extra={"counsel_request_id": counsel_request_id, "error": str(e)},
            )
            return Result.fail(
                DomainError(
                    "추천 서비스를 일시적으로 사용할 수 없습니다",
                    "RECOMMENDATION_SERVICE_UNAVAILABLE",
                )
            )

        limit = min(settings.max_recommendations, MAX_RANK)
        recommendations: list[CounselRequestRecommendation] = []
        for rank, suggestion in enumerate(suggestions[:limit], start=1):
            created = CounselRequestRecommendation.create(
                id=str(uuid4()),
                counsel_request_id=counsel_request.id,
                institution_id=suggestion.institution_id,
                score=suggestion.score,
                reason=suggestion.reasoning,
                rank=rank,
            )
            if created.is_failure:
                logger.warning(
                    "[RECOMMENDATION] 추천 결과 검증 실패",
                    extra={
                        "counsel_request_id": counsel_request_id,
                        "institution_id": suggestion.institution_id,
                        "reason": created.error.message,
                    },
                )
                return Result.fail(created.error)
            recommendations.append(created.value)

        if not recommendations:
            return Result.fail(
                DomainError("추천 가능한 기관이 없습니다", "NO_RECOMMENDATIONS")
            )

        marked = counsel_request.mark_as_recommended()
        if marked.is_failure:
            return Result.fail(marked.error)

        await self.recommendation_repo.delete_by_counsel_request_id(counsel_request.id)
        saved = await self.recommendation_repo.save_all(recommendations)
        try:
            await self.counsel_request_repo.save(counsel_request)
        except ConcurrentModificationError as e:
            await self.recommendation_repo.delete_by_counsel_request_id(counsel_request.id)
            return concurrent_modification(e)

        logger.info(
            "[RECOMMENDATION] AI 추천 저장 완료",
            extra={"counsel_request_id": counsel_request_id, "count": len(saved)},
        )
        return Result.ok(saved)

    async def get_recommendations(
        self, counsel_request_id: str
    ) -> Result[list[CounselRequestRecommendation]]:
        """상담의뢰지의 추천 목록을 순위순으로 조회합니다."""
        counsel_request = await self.counsel_request_repo.find_by_id(counsel_request_id)
        if counsel_request is None:
            return counsel_request_not_found(counsel_request_id)

        recommendations = await self.recommendation_repo.find_by_counsel_request_id(
            counsel_request_id
        )
        return Result.ok(sorted(recommendations, key=lambda r: r.rank))

    async def select_institution(
        self, counsel_request_id: str, institution_id: str
    ) -> Result[CounselRequest]:
        """추천 목록에서 기관을 선택합니다.

        1. 상담의뢰지 조회 (없으면 not-found, RECOMMENDED가 아니면 전환 오류)
        2. 추천 목록 조회 (비어 있으면 오류)
        3. 선택한 기관이 추천 목록에 있는지 확인
        4. 추천 선택 후 저장 (남아 있던 이전 선택은 같은 트랜잭션에서 해제)
        5. 상담의뢰지 기관 선택 (→ MATCHED) 후 저장

        추천 선택이 상담의뢰지 상태 변경보다 먼저 저장되며, 상담의뢰지 저장이
        버전 충돌로 실패하면 추천 선택을 되돌립니다. 이미 선택된 기관을 다시
        고르면 추천은 그대로 두고 상담의뢰지만 MATCHED로 전환합니다.
        """
        counsel_request = await self.counsel_request_repo.find_by_id(counsel_request_id)
        if counsel_request is None:
            return counsel_request_not_found(counsel_request_id)

        if counsel_request.status != CounselRequestStatus.RECOMMENDED:
            return Result.fail(
                DomainError(
                    "기관 선택은 AI 추천 완료 상태에서만 가능합니다",
                    "INVALID_STATUS_TRANSITION",
                )
            )

        recommendations = await self.recommendation_repo.find_by_counsel_request_id(
            counsel_request_id
        )
        if not recommendations:
            return Result.fail(
                DomainError("추천 결과가 없습니다. 먼저 AI 추천을 요청하세요.", "NO_RECOMMENDATIONS")
            )

        target = next((r for r in recommendations if r.institution_id == institution_id), None)
        if target is None:
            return Result.fail(
                DomainError(
                    f"선택한 기관이 추천 목록에 없습니다 (기관 ID: {institution_id})",
                    "INSTITUTION_NOT_RECOMMENDED",
                )
            )

        matched = counsel_request.select_institution(institution_id)
        if matched.is_failure:
            return Result.fail(matched.error)

        # 관리자가 MATCHED → RECOMMENDED로 되돌린 경우 이전 선택이 남아 있다
        previous = [r for r in recommendations if r.selected and r is not target]
        for recommendation in previous:
            recommendation.deselect()
        changed = list(previous)
        if not target.selected:
            target.select()
            changed.append(target)

        if changed:
            try:
                await self.recommendation_repo.save_all(changed)
            except ConcurrentModificationError as e:
                return concurrent_modification(e)

        try:
            saved = await self.counsel_request_repo.save(counsel_request)
        except ConcurrentModificationError as e:
            await self._revert_selection(counsel_request_id, target, previous, changed)
            return concurrent_modification(e)

        logger.info(
            "[RECOMMENDATION] 추천 기관 선택 완료",
            extra={
                "counsel_request_id": counsel_request_id,
                "institution_id": institution_id,
                "rank": target.rank,
            },
        )
        return Result.ok(saved)

    async def _revert_selection(
        self,
        counsel_request_id: str,
        target: CounselRequestRecommendation,
        previous: list[CounselRequestRecommendation],
        changed: list[CounselRequestRecommendation],
    ) -> None:
        """상담의뢰지 저장 실패 시 추천 선택을 원래대로 되돌립니다."""
        if not changed:
            return

        reverted: list[CounselRequestRecommendation] = []
        if target in changed:
            target.deselect()
            reverted.append(target)
        for recommendation in previous:
            recommendation.select()
            reverted.append(recommendation)

        try:
            await self.recommendation_repo.save_all(reverted)
        except ConcurrentModificationError:
            logger.error(
                "[RECOMMENDATION] 추천 선택 되돌리기 실패",
                extra={
                    "counsel_request_id": counsel_request_id,
                    "institution_id": target.institution_id,
                },
                exc_info=True,
            )
