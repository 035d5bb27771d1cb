"""상담의뢰지 레포지토리 - 데이터베이스 접근 계층."""

from datetime import datetime, timedelta, timezone

import structlog
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from yeirin_backend.domain.common.pagination import PaginatedResult
from yeirin_backend.domain.counsel_request.enums import CounselRequestStatus
from yeirin_backend.domain.counsel_request.form_data import CounselRequestFormData
from yeirin_backend.domain.counsel_request.models import CounselRequest
from yeirin_backend.infrastructure.database.errors import ConcurrentModificationError
from yeirin_backend.infrastructure.database.models import CounselRequestORM

logger = structlog.get_logger(__name__)


class SqlAlchemyCounselRequestRepository:
    """상담의뢰지 레포지토리.

    counsel_requests 테이블에 애그리거트를 저장하고 조회합니다.
    """

    def __init__(self, session: AsyncSession) -> None:
        """레포지토리를 초기화합니다.

        Args:
            session: 비동기 데이터베이스 세션
        """
        self.session = session

    async def save(self, counsel_request: CounselRequest) -> CounselRequest:
        """상담의뢰지를 저장합니다.

        ``version`` 이 0이면 INSERT, 그 외에는 버전이 일치할 때만 UPDATE 합니다.

        Returns:
            버전이 갱신된 상담의뢰지

        Raises:
            ConcurrentModificationError: 버전 충돌 또는 ID 중복 시
        """
        expected_version = counsel_request.version
        values = self._to_row(counsel_request)

        try:
            if expected_version == 0:
                self.session.add(CounselRequestORM(**values, version=1))
            else:
                result = await self.session.execute(
                    update(CounselRequestORM)
                    .where(CounselRequestORM.id == counsel_request.id)
                    .where(CounselRequestORM.version == expected_version)
                    .values(**values, version=expected_version + 1)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    await self.session.rollback()
                    logger.warning(
                        "[COUNSEL_REQUEST_REPO] 버전 충돌",
                        extra={
                            "counsel_request_id": counsel_request.id,
                            "expected_version": expected_version,
                        },
                    )
                    raise ConcurrentModificationError(
                        "CounselRequest", counsel_request.id, expected_version
                    )
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.warning(
                "[COUNSEL_REQUEST_REPO] 무결성 제약 위반",
                extra={"counsel_request_id": counsel_request.id, "error": str(e.orig)},
            )
            raise ConcurrentModificationError(
                "CounselRequest", counsel_request.id, expected_version
            ) from e

        saved = await self.find_by_id(counsel_request.id)
        if saved is None:
            raise ConcurrentModificationError(
                "CounselRequest", counsel_request.id, expected_version
            )
        return saved

    async def find_by_id(self, id: str) -> CounselRequest | None:
        result = await self.session.execute(
            select(CounselRequestORM)
            .where(CounselRequestORM.id == id)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return self._to_domain(row) if row else None

    async def find_by_child_id(self, child_id: str) -> list[CounselRequest]:
        return await self._find_many(CounselRequestORM.child_id == child_id)

    async def find_by_guardian_id(self, guardian_id: str) -> list[CounselRequest]:
        return await self._find_many(CounselRequestORM.guardian_id == guardian_id)

    async def find_by_status(self, status: CounselRequestStatus) -> list[CounselRequest]:
        return await self._find_many(CounselRequestORM.status == status)

    async def find_by_institution_id(self, institution_id: str) -> list[CounselRequest]:
        return await self._find_many(CounselRequestORM.matched_institution_id == institution_id)

    async def find_by_counselor_id(self, counselor_id: str) -> list[CounselRequest]:
        return await self._find_many(CounselRequestORM.matched_counselor_id == counselor_id)

    async def find_all(
        self,
        page: int,
        limit: int,
        status: CounselRequestStatus | None = None,
    ) -> PaginatedResult[CounselRequest]:
        """상담의뢰지 목록을 페이지 단위로 조회합니다 (최신순)."""
        count_stmt = select(func.count()).select_from(CounselRequestORM)
        stmt = select(CounselRequestORM)
        if status is not None:
            count_stmt = count_stmt.where(CounselRequestORM.status == status)
            stmt = stmt.where(CounselRequestORM.status == status)

        total = (await self.session.execute(count_stmt)).scalar_one()
        result = await self.session.execute(
            stmt.order_by(CounselRequestORM.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .execution_options(populate_existing=True)
        )

        return PaginatedResult(
            data=[self._to_domain(row) for row in result.scalars().all()],
            total=total,
            page=page,
            limit=limit,
        )

    async def delete(self, id: str) -> None:
        await self.session.execute(delete(CounselRequestORM).where(CounselRequestORM.id == id))
        await self.session.commit()
        logger.info("[COUNSEL_REQUEST_REPO] 삭제 완료", extra={"counsel_request_id": id})

    async def count_by_guardian_id_and_status(
        self, guardian_id: str, status: CounselRequestStatus
    ) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(CounselRequestORM)
            .where(CounselRequestORM.guardian_id == guardian_id)
            .where(CounselRequestORM.status == status)
        )
        return result.scalar_one()

    async def find_recent_by_guardian_id(
        self, guardian_id: str, days: int
    ) -> list[CounselRequest]:
        since = datetime.now(timezone.utc) - timedelta(days=days)
        return await self._find_many(
            CounselRequestORM.guardian_id == guardian_id,
            CounselRequestORM.created_at >= since,
        )

    async def _find_many(self, *criteria) -> list[CounselRequest]:
        result = await self.session.execute(
            select(CounselRequestORM)
            .where(*criteria)
            .order_by(CounselRequestORM.created_at.desc())
            .execution_options(populate_existing=True)
        )
        return [self._to_domain(row) for row in result.scalars().all()]

    def _to_row(self, counsel_request: CounselRequest) -> dict:
        return {
            "id": counsel_request.id,
            "child_id": counsel_request.child_id,
            "guardian_id": counsel_request.guardian_id,
            "status": counsel_request.status,
            "form_data": counsel_request.form_data.model_dump(mode="json", exclude_none=True),
            "center_name": counsel_request.center_name,
            "care_type": counsel_request.care_type,
            "request_date": counsel_request.request_date,
            "matched_institution_id": counsel_request.matched_institution_id,
            "matched_counselor_id": counsel_request.matched_counselor_id,
            "integrated_report_s3_key": counsel_request.integrated_report_s3_key,
            "integrated_report_status": counsel_request.integrated_report_status,
            "created_at": counsel_request.created_at,
            "updated_at": counsel_request.updated_at,
        }

    def _to_domain(self, row: CounselRequestORM) -> CounselRequest:
        """ORM 모델을 도메인 모델로 변환합니다."""
        return CounselRequest.restore(
            id=str(row.id),
            child_id=str(row.child_id),
            guardian_id=str(row.guardian_id) if row.guardian_id else None,
            status=row.status,
            form_data=CounselRequestFormData.model_validate(row.form_data),
            center_name=row.center_name,
            care_type=row.care_type,
            request_date=row.request_date,
            matched_institution_id=row.matched_institution_id,
            matched_counselor_id=row.matched_counselor_id,
            integrated_report_s3_key=row.integrated_report_s3_key,
            integrated_report_status=row.integrated_report_status,
            created_at=row.created_at,
            updated_at=row.updated_at,
            version=row.version,
        )
