"""면담결과지 애그리거트 루트.

상담 회차별 결과지의 작성/제출/보호자 확인/승인 흐름을 관리합니다.
DRAFT → SUBMITTED → REVIEWED → APPROVED 순서로만 진행합니다.
"""

from datetime import date, datetime, timezone

from yeirin_backend.domain.common.result import DomainError, Result
from yeirin_backend.domain.counsel_report.status import (
    ReportStatus,
    can_transition_to,
    is_counselor_editable,
    is_guardian_viewable,
)

INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _is_blank(value: str | None) -> bool:
    return not value or not value.strip()


class CounselReport:
    """면담결과지 도메인 모델.

    ``counselor_id`` 와 ``institution_id`` 는 이전 버전과의 호환을 위해
    비어 있을 수 있습니다.
    """

    def __init__(
        self,
        id: str,
        counsel_request_id: str,
        child_id: str,
        session_number: int,
        report_date: date,
        center_name: str,
        counsel_reason: str,
        counsel_content: str,
        status: ReportStatus = ReportStatus.DRAFT,
        counselor_id: str | None = None,
        institution_id: str | None = None,
        counselor_signature: str | None = None,
        center_feedback: str | None = None,
        home_feedback: str | None = None,
        attachment_urls: list[str] | None = None,
        submitted_at: datetime | None = None,
        reviewed_at: datetime | None = None,
        guardian_feedback: str | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
        version: int = 0,
    ) -> None:
        now = _now()
        self._id = id
        self._counsel_request_id = counsel_request_id
        self._child_id = child_id
        self._counselor_id = counselor_id
        self._institution_id = institution_id
        self._session_number = session_number
        self._report_date = report_date
        self._center_name = center_name
        self._counselor_signature = counselor_signature
        self._counsel_reason = counsel_reason
        self._counsel_content = counsel_content
        self._center_feedback = center_feedback
        self._home_feedback = home_feedback
        self._attachment_urls = list(attachment_urls or [])
        self._status = status
        self._submitted_at = submitted_at
        self._reviewed_at = reviewed_at
        self._guardian_feedback = guardian_feedback
        self._created_at = created_at or now
        self._updated_at = updated_at or now
        self._version = version

    # ==================== Properties ====================

    @property
    def id(self) -> str:
        return self._id

    @property
    def counsel_request_id(self) -> str:
        return self._counsel_request_id

    @property
    def child_id(self) -> str:
        return self._child_id

    @property
    def counselor_id(self) -> str | None:
        return self._counselor_id

    @property
    def institution_id(self) -> str | None:
        return self._institution_id

    @property
    def session_number(self) -> int:
        return self._session_number

    @property
    def report_date(self) -> date:
        return self._report_date

    @property
    def center_name(self) -> str:
        return self._center_name

    @property
    def counselor_signature(self) -> str | None:
        return self._counselor_signature

    @property
    def counsel_reason(self) -> str:
        return self._counsel_reason

    @property
    def counsel_content(self) -> str:
        return self._counsel_content

    @property
    def center_feedback(self) -> str | None:
        return self._center_feedback

    @property
    def home_feedback(self) -> str | None:
        return self._home_feedback

    @property
    def attachment_urls(self) -> list[str]:
        return list(self._attachment_urls)

    @property
    def status(self) -> ReportStatus:
        return self._status

    @property
    def submitted_at(self) -> datetime | None:
        return self._submitted_at

    @property
    def reviewed_at(self) -> datetime | None:
        return self._reviewed_at

    @property
    def guardian_feedback(self) -> str | None:
        return self._guardian_feedback

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    @property
    def version(self) -> int:
        return self._version

    # ==================== Factory Methods ====================

    @classmethod
    def create(
        cls,
        id: str,
        counsel_request_id: str,
        child_id: str,
        session_number: int,
        report_date: date,
        center_name: str,
        counsel_reason: str,
        counsel_content: str,
        counselor_id: str | None = None,
        institution_id: str | None = None,
        counselor_signature: str | None = None,
        center_feedback: str | None = None,
        home_feedback: str | None = None,
        attachment_urls: list[str] | None = None,
    ) -> Result["CounselReport"]:
        """작성 중(DRAFT) 상태의 면담결과지를 생성합니다.

        검사 순서: 회차 → 필수 참조 → 상담 사유/내용 → 센터명.
        """
        if session_number < 1:
            return Result.fail(
                DomainError("회차는 1 이상이어야 합니다.", "INVALID_SESSION_NUMBER")
            )

        if _is_blank(counsel_request_id) or _is_blank(child_id):
            return Result.fail(
                DomainError("필수 필드가 누락되었습니다.", "MISSING_REQUIRED_FIELDS")
            )

        if _is_blank(counsel_reason) or _is_blank(counsel_content):
            return Result.fail(
                DomainError("상담 사유와 내용은 필수입니다.", "MISSING_COUNSEL_CONTENT")
            )

        if _is_blank(center_name):
            return Result.fail(DomainError("센터명은 필수입니다.", "MISSING_CENTER_NAME"))

        return Result.ok(
            cls(
                id=id,
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
        )

    @classmethod
    def restore(cls, **props) -> "CounselReport":
        """저장소에서 복원합니다. 재검증하지 않습니다.

        Args:
            **props: 생성자와 동일한 키워드 인자
        """
        return cls(**props)

    # ==================== Business Logic ====================

    def update(
        self,
        counsel_reason: str | None = None,
        counsel_content: str | None = None,
        center_feedback: str | None = None,
        home_feedback: str | None = None,
        counselor_signature: str | None = None,
        attachment_urls: list[str] | None = None,
    ) -> Result[None]:
        """작성 중인 면담결과지 내용을 수정합니다.

        None으로 전달된 항목은 변경하지 않습니다.
        """
        if not is_counselor_editable(self._status):
            return Result.fail(
                DomainError(
                    "작성 중 상태에서만 수정할 수 있습니다.",
                    "CANNOT_UPDATE_SUBMITTED_REPORT",
                )
            )

        if counsel_reason is not None and not counsel_reason.strip():
            return Result.fail(
                DomainError("상담 사유는 비어있을 수 없습니다.", "INVALID_COUNSEL_REASON")
            )

        if counsel_content is not None and not counsel_content.strip():
            return Result.fail(
                DomainError("상담 내용은 비어있을 수 없습니다.", "INVALID_COUNSEL_CONTENT")
            )

        if counsel_reason is not None:
            self._counsel_reason = counsel_reason
        if counsel_content is not None:
            self._counsel_content = counsel_content
        if center_feedback is not None:
            self._center_feedback = center_feedback
        if home_feedback is not None:
            self._home_feedback = home_feedback
        if counselor_signature is not None:
            self._counselor_signature = counselor_signature
        if attachment_urls is not None:
            self._attachment_urls = list(attachment_urls)
        self._updated_at = _now()

        return Result.ok()

    def submit(self) -> Result[None]:
        """면담결과지를 제출합니다 (DRAFT → SUBMITTED)."""
        if not can_transition_to(self._status, ReportStatus.SUBMITTED):
            return Result.fail(
                DomainError("현재 상태에서 제출할 수 없습니다.", INVALID_STATUS_TRANSITION)
            )

        if _is_blank(self._counsel_reason) or _is_blank(self._counsel_content):
            return Result.fail(
                DomainError(
                    "상담 사유와 내용을 모두 작성해야 제출할 수 있습니다.",
                    "INCOMPLETE_REPORT",
                )
            )

        now = _now()
        self._status = ReportStatus.SUBMITTED
        self._submitted_at = now
        self._updated_at = now
        return Result.ok()

    def mark_as_reviewed(self) -> Result[None]:
        """보호자가 확인했음을 기록합니다 (SUBMITTED → REVIEWED)."""
        if not can_transition_to(self._status, ReportStatus.REVIEWED):
            return Result.fail(
                DomainError(
                    "제출된 상태에서만 확인 처리할 수 있습니다.",
                    INVALID_STATUS_TRANSITION,
                )
            )

        now = _now()
        self._status = ReportStatus.REVIEWED
        self._reviewed_at = now
        self._updated_at = now
        return Result.ok()

    def approve_with_feedback(self, feedback: str) -> Result[None]:
        """보호자 피드백과 함께 승인합니다 (REVIEWED → APPROVED).

        상태 검사가 피드백 검사보다 먼저 수행됩니다.
        """
        if not can_transition_to(self._status, ReportStatus.APPROVED):
            return Result.fail(
                DomainError("확인된 상태에서만 승인할 수 있습니다.", INVALID_STATUS_TRANSITION)
            )

        if _is_blank(feedback):
            return Result.fail(DomainError("피드백은 비어있을 수 없습니다.", "INVALID_FEEDBACK"))

        self._status = ReportStatus.APPROVED
        self._guardian_feedback = feedback
        self._updated_at = _now()
        return Result.ok()

    def can_edit(self) -> bool:
        return is_counselor_editable(self._status)

    def is_visible_to_guardian(self) -> bool:
        return is_guardian_viewable(self._status)

    def __repr__(self) -> str:
        """문자열 표현을 반환합니다."""
        return (
            f"<CounselReport id={self._id} session={self._session_number} "
            f"status={self._status.value}>"
        )
