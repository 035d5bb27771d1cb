"""면담결과지 서비스 - 애플리케이션 계층.

상담사의 작성/수정/제출과 보호자의 확인/승인을 처리합니다.
"""

import logging
from datetime import date
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from yeirin_backend.domain.common.result import DomainError, Result
from yeirin_backend.domain.counsel_report.models import CounselReport
from yeirin_backend.infrastructure.database.counsel_report_repository import (
    SqlAlchemyCounselReportRepository,
)
from yeirin_backend.infrastructure.database.counsel_request_repository import (
    SqlAlchemyCounselRequestRepository,
)
from yeirin_backend.infrastructure.database.errors import ConcurrentModificationError
from yeirin_backend.services.authorization import (
    CounselRequestGuardianAuthorization,
    GuardianAuthorizationPort,
)
from yeirin_backend.services.errors import (
    concurrent_modification,
    counsel_request_not_found,
    report_not_found,
)

logger = logging.getLogger(__name__)

DUPLICATE_SESSION_NUMBER = "DUPLICATE_SESSION_NUMBER"
UNAUTHORIZED = "UNAUTHORIZED"


def _duplicate_session() -> Result:
    return Result.fail(
        DomainError(
            "해당 상담의뢰지의 해당 회차 면담결과지가 이미 존재합니다.",
            DUPLICATE_SESSION_NUMBER,
        )
    )


def _unauthorized(message: str) -> Result:
    return Result.fail(DomainError(message, UNAUTHORIZED))


class CounselReportService:
    """면담결과지 서비스."""

    def __init__(
        self,
        db_session: AsyncSession,
        guardian_authorization: GuardianAuthorizationPort | None = None,
    ) -> None:
        """서비스를 초기화합니다.

        Args:
            db_session: 비동기 데이터베이스 세션
            guardian_authorization: 보호자 권한 확인 구현체.
                None이면 상담의뢰지의 보호자 ID로 확인합니다.
        """
        self.report_repo = SqlAlchemyCounselReportRepository(db_session)
        self.counsel_request_repo = SqlAlchemyCounselRequestRepository(db_session)
        self.guardian_authorization = guardian_authorization or (
            CounselRequestGuardianAuthorization(self.counsel_request_repo)
        )

    # ==================== 상담사 ====================

    async def create_report(
        self,
        counselor_id: str,
        institution_id: str | None,
        counsel_request_id: str,
        child_id: str,
        report_date: date,
        center_name: str,
        counsel_reason: str,
        counsel_content: str,
        session_number: int | None = None,
        counselor_signature: str | None = None,
        center_feedback: str | None = None,
        home_feedback: str | None = None,
        attachment_urls: list[str] | None = None,
    ) -> Result[CounselReport]:
        """면담결과지를 작성 중(DRAFT) 상태로 생성합니다.

        ``session_number`` 를 생략하면 다음 회차 번호를 사용합니다.
        같은 상담의뢰지의 같은 회차가 이미 있으면 아무것도 저장하지 않고 실패합니다.
        """
        if session_number is None:
            session_number = await self.report_repo.get_next_session_number(counsel_request_id)

        existing = await self.report_repo.find_by_counsel_request_id_and_session(
            counsel_request_id, session_number
        )
        if existing is not None:
            logger.info(
                "[COUNSEL_REPORT] 회차 중복",
                extra={
                    "counsel_request_id": counsel_request_id,
                    "session_number": session_number,
                },
            )
            return _duplicate_session()

        created = CounselReport.create(
            id=str(uuid4()),
            counsel_request_id=counsel_request_id,
            child_id=child_id,
            counselor_id=counselor_id,
            institution_id=institution_id,
            session_number=session_number,
            report_date=report_date,
            center_name=center_name,
            counselor_signature=counselor_signature,
            counsel_reason=counsel_reason,
            counsel_content=counsel_content,
            center_feedback=center_feedback,
            home_feedback=home_feedback,
            attachment_urls=attachment_urls,
        )
        if created.is_failure:
            return created

        try:
            saved = await self.report_repo.save(created.value)
        except ConcurrentModificationError:
            # 조회와 저장 사이에 같은 회차가 먼저 저장된 경우
            return _duplicate_session()

        logger.info(
            "[COUNSEL_REPORT] 면담결과지 생성",
            extra={
                "report_id": saved.id,
                "counsel_request_id": counsel_request_id,
                "session_number": session_number,
                "counselor_id": counselor_id,
            },
        )
        return Result.ok(saved)

    async def update_report(
        self,
        report_id: str,
        counselor_id: str,
        counsel_reason: str | None = None,
        counsel_content: str | None = None,
        center_feedback: str | None = None,
        home_feedback: str | None = None,
        counselor_signature: str | None = None,
        attachment_urls: list[str] | None = None,
    ) -> Result[CounselReport]:
        """작성 중인 면담결과지를 수정합니다 (작성자 본인만)."""
        report = await self.report_repo.find_by_id(report_id)
        if report is None:
            return report_not_found(report_id)

        if report.counselor_id != counselor_id:
            return _unauthorized("본인이 작성한 면담결과지만 수정할 수 있습니다.")

        result = report.update(
            counsel_reason=counsel_reason,
            counsel_content=counsel_content,
            center_feedback=center_feedback,
            home_feedback=home_feedback,
            counselor_signature=counselor_signature,
            attachment_urls=attachment_urls,
        )
        if result.is_failure:
            return Result.fail(result.error)

        return await self._save(report, "수정")

    async def submit_report(self, report_id: str, counselor_id: str) -> Result[CounselReport]:
        """면담결과지를 제출합니다.

        작성자 확인이 도메인 상태 검사보다 먼저 수행됩니다.
        """
        report = await self.report_repo.find_by_id(report_id)
        if report is None:
            return report_not_found(report_id)

        if report.counselor_id != counselor_id:
            logger.warning(
                "[COUNSEL_REPORT] 작성자가 아닌 상담사의 제출 시도",
                extra={"report_id": report_id, "counselor_id": counselor_id},
            )
            return _unauthorized("본인이 작성한 면담결과지만 제출할 수 있습니다.")

        result = report.submit()
        if result.is_failure:
            return Result.fail(result.error)

        return await self._save(report, "제출")

    # ==================== 보호자 ====================

    async def review_report(self, report_id: str, guardian_id: str) -> Result[CounselReport]:
        """보호자가 면담결과지를 확인합니다."""
        report = await self.report_repo.find_by_id(report_id)
        if report is None:
            return report_not_found(report_id)

        if not await self.guardian_authorization.is_guardian_of(guardian_id, report):
            return _unauthorized("해당 아동의 보호자만 면담결과지를 확인할 수 있습니다.")

        result = report.mark_as_reviewed()
        if result.is_failure:
            return Result.fail(result.error)

        return await self._save(report, "보호자 확인")

    async def approve_report(
        self, report_id: str, guardian_id: str, feedback: str
    ) -> Result[CounselReport]:
        """보호자가 피드백과 함께 면담결과지를 승인합니다."""
        report = await self.report_repo.find_by_id(report_id)
        if report is None:
            return report_not_found(report_id)

        if not await self.guardian_authorization.is_guardian_of(guardian_id, report):
            return _unauthorized("해당 아동의 보호자만 면담결과지를 승인할 수 있습니다.")

        result = report.approve_with_feedback(feedback)
        if result.is_failure:
            return Result.fail(result.error)

        return await self._save(report, "보호자 승인")

    # ==================== 조회 ====================

    async def get_report(self, report_id: str) -> Result[CounselReport]:
        report = await self.report_repo.find_by_id(report_id)
        if report is None:
            return report_not_found(report_id)
        return Result.ok(report)

    async def get_reports_by_counsel_request(
        self, counsel_request_id: str, guardian_view: bool = False
    ) -> Result[list[CounselReport]]:
        """상담의뢰지의 면담결과지 목록을 회차순으로 조회합니다.

        Args:
            counsel_request_id: 상담의뢰지 ID
            guardian_view: True면 보호자에게 노출 가능한(DRAFT가 아닌) 결과지만 반환
        """
        counsel_request = await self.counsel_request_repo.find_by_id(counsel_request_id)
        if counsel_request is None:
            return counsel_request_not_found(counsel_request_id)

        reports = await self.report_repo.find_by_counsel_request_id(counsel_request_id)
        if guardian_view:
            reports = [r for r in reports if r.is_visible_to_guardian()]
        return Result.ok(sorted(reports, key=lambda r: r.session_number))

    async def _save(self, report: CounselReport, label: str) -> Result[CounselReport]:
        try:
            saved = await self.report_repo.save(report)
        except ConcurrentModificationError as e:
            return concurrent_modification(e)

        logger.info(
            f"[COUNSEL_REPORT] {label} 완료",
            extra={"report_id": saved.id, "status": saved.status.value},
        )
        return Result.ok(saved)
