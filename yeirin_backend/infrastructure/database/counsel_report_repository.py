"""면담결과지 레포지토리 - 데이터베이스 접근 계층."""

import structlog
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from yeirin_backend.domain.common.pagination import PaginatedResult
from yeirin_backend.domain.counsel_report.models import CounselReport
from yeirin_backend.domain.counsel_report.status import ReportStatus
from yeirin_backend.infrastructure.database.errors import ConcurrentModificationError
from yeirin_backend.infrastructure.database.models import CounselReportORM

logger = structlog.get_logger(__name__)


class SqlAlchemyCounselReportRepository:
    """면담결과지 레포지토리.

    counsel_reports 테이블은 ``(counsel_request_id, session_number)`` 유니크 제약을 가지며,
    위반 시 ``ConcurrentModificationError`` 로 변환합니다.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def save(self, report: CounselReport) -> CounselReport:
        """면담결과지를 저장합니다.

        Raises:
            ConcurrentModificationError: 버전 충돌 또는 회차 중복 시
        """
        expected_version = report.version
        values = self._to_row(report)

        try:
            if expected_version == 0:
                self.session.add(CounselReportORM(**values, version=1))
            else:
                result = await self.session.execute(
                    update(CounselReportORM)
                    .where(CounselReportORM.id == report.id)
                    .where(CounselReportORM.version == expected_version)
                    .values(**values, version=expected_version + 1)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    await self.session.rollback()
                    logger.warning(
                        "[COUNSEL_REPORT_REPO] 버전 충돌",
                        extra={"report_id": report.id, "expected_version": expected_version},
                    )
                    raise ConcurrentModificationError("CounselReport", report.id, expected_version)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.warning(
                "[COUNSEL_REPORT_REPO] 무결성 제약 위반",
                extra={
                    "report_id": report.id,
                    "counsel_request_id": report.counsel_request_id,
                    "session_number": report.session_number,
                    "error": str(e.orig),
                },
            )
            raise ConcurrentModificationError("CounselReport", report.id, expected_version) from e

        saved = await self.find_by_id(report.id)
        if saved is None:
            raise ConcurrentModificationError("CounselReport", report.id, expected_version)
        return saved

    async def find_by_id(self, id: str) -> CounselReport | None:
        result = await self.session.execute(
            select(CounselReportORM)
            .where(CounselReportORM.id == id)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return self._to_domain(row) if row else None

    async def find_by_counsel_request_id_and_session(
        self, counsel_request_id: str, session_number: int
    ) -> CounselReport | None:
        result = await self.session.execute(
            select(CounselReportORM)
            .where(CounselReportORM.counsel_request_id == counsel_request_id)
            .where(CounselReportORM.session_number == session_number)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return self._to_domain(row) if row else None

    async def find_by_counsel_request_id(self, counsel_request_id: str) -> list[CounselReport]:
        """상담의뢰지의 면담결과지를 회차순으로 조회합니다."""
        result = await self.session.execute(
            select(CounselReportORM)
            .where(CounselReportORM.counsel_request_id == counsel_request_id)
            .order_by(CounselReportORM.session_number.asc())
            .execution_options(populate_existing=True)
        )
        return [self._to_domain(row) for row in result.scalars().all()]

    async def find_by_child_id(self, child_id: str) -> list[CounselReport]:
        result = await self.session.execute(
            select(CounselReportORM)
            .where(CounselReportORM.child_id == child_id)
            .order_by(CounselReportORM.report_date.desc())
            .execution_options(populate_existing=True)
        )
        return [self._to_domain(row) for row in result.scalars().all()]

    async def find_by_counselor_id(
        self, counselor_id: str, page: int = 1, limit: int = 10
    ) -> PaginatedResult[CounselReport]:
        return await self._paginate(CounselReportORM.counselor_id == counselor_id, page, limit)

    async def find_by_institution_id(
        self, institution_id: str, page: int = 1, limit: int = 10
    ) -> PaginatedResult[CounselReport]:
        return await self._paginate(CounselReportORM.institution_id == institution_id, page, limit)

    async def find_by_status(
        self, status: ReportStatus, page: int = 1, limit: int = 10
    ) -> PaginatedResult[CounselReport]:
        return await self._paginate(CounselReportORM.status == status, page, limit)

    async def delete(self, id: str) -> None:
        await self.session.execute(delete(CounselReportORM).where(CounselReportORM.id == id))
        await self.session.commit()

    async def get_next_session_number(self, counsel_request_id: str) -> int:
        """다음 회차 번호 (기존 최대 회차 + 1, 없으면 1)."""
        result = await self.session.execute(
            select(func.coalesce(func.max(CounselReportORM.session_number), 0)).where(
                CounselReportORM.counsel_request_id == counsel_request_id
            )
        )
        return result.scalar_one() + 1

    async def count_by_counsel_request_id(self, counsel_request_id: str) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(CounselReportORM)
            .where(CounselReportORM.counsel_request_id == counsel_request_id)
        )
        return result.scalar_one()

    async def _paginate(self, criterion, page: int, limit: int) -> PaginatedResult[CounselReport]:
        total = (
            await self.session.execute(
                select(func.count()).select_from(CounselReportORM).where(criterion)
            )
        ).scalar_one()
        result = await self.session.execute(
            select(CounselReportORM)
            .where(criterion)
            .order_by(CounselReportORM.created_at.desc())
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

    def _to_row(self, report: CounselReport) -> dict:
        return {
            "id": report.id,
            "counsel_request_id": report.counsel_request_id,
            "child_id": report.child_id,
            "counselor_id": report.counselor_id,
            "institution_id": report.institution_id,
            "session_number": report.session_number,
            "report_date": report.report_date,
            "center_name": report.center_name,
            "counselor_signature": report.counselor_signature,
            "counsel_reason": report.counsel_reason,
            "counsel_content": report.counsel_content,
            "center_feedback": report.center_feedback,
            "home_feedback": report.home_feedback,
            "attachment_urls": report.attachment_urls,
            "status": report.status,
            "submitted_at": report.submitted_at,
            "reviewed_at": report.reviewed_at,
            "guardian_feedback": report.guardian_feedback,
            "created_at": report.created_at,
            "updated_at": report.updated_at,
        }

    def _to_domain(self, row: CounselReportORM) -> CounselReport:
        """ORM 모델을 도메인 모델로 변환합니다."""
        return CounselReport.restore(
            id=str(row.id),
            counsel_request_id=str(row.counsel_request_id),
            child_id=str(row.child_id),
            counselor_id=row.counselor_id,
            institution_id=row.institution_id,
            session_number=row.session_number,
            report_date=row.report_date,
            center_name=row.center_name,
            counselor_signature=row.counselor_signature,
            counsel_reason=row.counsel_reason,
            counsel_content=row.counsel_content,
            center_feedback=row.center_feedback,
            home_feedback=row.home_feedback,
            attachment_urls=list(row.attachment_urls or []),
            status=row.status,
            submitted_at=row.submitted_at,
            reviewed_at=row.reviewed_at,
            guardian_feedback=row.guardian_feedback,
            created_at=row.created_at,
            updated_at=row.updated_at,
            version=row.version,
        )
