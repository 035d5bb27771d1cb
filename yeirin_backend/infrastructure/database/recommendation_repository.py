"""상담의뢰지 추천 레포지토리 - 데이터베이스 접근 계층."""

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from yeirin_backend.domain.recommendation.models import CounselRequestRecommendation
from yeirin_backend.infrastructure.database.errors import ConcurrentModificationError
from yeirin_backend.infrastructure.database.models import CounselRequestRecommendationORM

logger = structlog.get_logger(__name__)


class SqlAlchemyRecommendationRepository:
    """상담의뢰지 추천 레포지토리.

    ``selected`` 외의 필드는 변경되지 않으므로 merge로 저장합니다.
    선택된 추천의 유일성은 부분 유니크 인덱스가 보장합니다.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def save(
        self, recommendation: CounselRequestRecommendation
    ) -> CounselRequestRecommendation:
        saved = await self.save_all([recommendation])
        return saved[0]

    async def save_all(
        self, recommendations: list[CounselRequestRecommendation]
    ) -> list[CounselRequestRecommendation]:
        """추천 목록을 한 트랜잭션으로 저장합니다.

        목록 순서대로 flush하므로 선택 해제를 선택보다 앞에 두어야 합니다.

        Raises:
            ConcurrentModificationError: 같은 상담의뢰지에 선택된 추천이 이미 있는 경우
        """
        if not recommendations:
            return []

        try:
            for recommendation in recommendations:
                await self.session.merge(self._to_orm(recommendation))
                await self.session.flush()
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            counsel_request_id = recommendations[0].counsel_request_id
            logger.warning(
                "[RECOMMENDATION_REPO] 선택 충돌",
                extra={"counsel_request_id": counsel_request_id, "error": str(e.orig)},
            )
            raise ConcurrentModificationError(
                "CounselRequestRecommendation", counsel_request_id
            ) from e

        logger.info(
            "[RECOMMENDATION_REPO] 저장 완료",
            extra={
                "counsel_request_id": recommendations[0].counsel_request_id,
                "count": len(recommendations),
            },
        )
        return list(recommendations)

    async def find_by_counsel_request_id(
        self, counsel_request_id: str
    ) -> list[CounselRequestRecommendation]:
        """상담의뢰지의 추천 목록을 순위순으로 조회합니다."""
        result = await self.session.execute(
            select(CounselRequestRecommendationORM)
            .where(CounselRequestRecommendationORM.counsel_request_id == counsel_request_id)
            .order_by(CounselRequestRecommendationORM.rank.asc())
            .execution_options(populate_existing=True)
        )
        return [self._to_domain(row) for row in result.scalars().all()]

    async def find_by_id(self, id: str) -> CounselRequestRecommendation | None:
        result = await self.session.execute(
            select(CounselRequestRecommendationORM)
            .where(CounselRequestRecommendationORM.id == id)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return self._to_domain(row) if row else None

    async def find_selected_by_counsel_request_id(
        self, counsel_request_id: str
    ) -> CounselRequestRecommendation | None:
        result = await self.session.execute(
            select(CounselRequestRecommendationORM)
            .where(CounselRequestRecommendationORM.counsel_request_id == counsel_request_id)
            .where(CounselRequestRecommendationORM.selected.is_(True))
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return self._to_domain(row) if row else None

    async def delete_by_counsel_request_id(self, counsel_request_id: str) -> None:
        await self.session.execute(
            delete(CounselRequestRecommendationORM).where(
                CounselRequestRecommendationORM.counsel_request_id == counsel_request_id
            )
        )
        await self.session.commit()

    def _to_orm(self, recommendation: CounselRequestRecommendation) -> CounselRequestRecommendationORM:
        return CounselRequestRecommendationORM(
            id=recommendation.id,
            counsel_request_id=recommendation.counsel_request_id,
            institution_id=recommendation.institution_id,
            score=recommendation.score,
            reason=recommendation.reason,
            rank=recommendation.rank,
            selected=recommendation.selected,
            created_at=recommendation.created_at,
        )

    def _to_domain(self, row: CounselRequestRecommendationORM) -> CounselRequestRecommendation:
        return CounselRequestRecommendation.restore(
            id=str(row.id),
            counsel_request_id=str(row.counsel_request_id),
            institution_id=str(row.institution_id),
            score=float(row.score),
            reason=row.reason,
            rank=row.rank,
            selected=row.selected,
            created_at=row.created_at,
        )
