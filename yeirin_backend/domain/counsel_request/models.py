"""상담의뢰지 애그리거트 루트.

상태 흐름:
    PENDING → RECOMMENDED → MATCHED → IN_PROGRESS → COMPLETED
    (COMPLETED 이외의 모든 상태에서 REJECTED로 전환 가능)

모든 상태 전환 메서드는 ``Result`` 를 반환하며,
실패 시 상태와 타임스탬프를 변경하지 않습니다.
"""

from datetime import date, datetime, timezone

from yeirin_backend.domain.common.result import DomainError, Result
from yeirin_backend.domain.counsel_request.enums import (
    CareType,
    CounselRequestStatus,
    IntegratedReportStatus,
)
from yeirin_backend.domain.counsel_request.form_data import CounselRequestFormData

INVALID_FORM_DATA = "INVALID_FORM_DATA"
INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"

ADMIN_REASON_MIN_LENGTH = 10


def _now() -> datetime:
    return datetime.now(timezone.utc)


class CounselRequest:
    """상담의뢰지 도메인 모델.

    ``centerName``, ``careType``, ``requestDate`` 는 검색용 비정규화 필드로,
    생성/수정 시 항상 ``form_data`` 에서 다시 계산됩니다.
    """

    def __init__(
        self,
        id: str,
        child_id: str,
        guardian_id: str | None,
        status: CounselRequestStatus,
        form_data: CounselRequestFormData,
        center_name: str,
        care_type: CareType,
        request_date: date,
        matched_institution_id: str | None = None,
        matched_counselor_id: str | None = None,
        integrated_report_s3_key: str | None = None,
        integrated_report_status: IntegratedReportStatus | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
        version: int = 0,
    ) -> None:
        """직접 호출하지 말고 ``create`` 또는 ``restore`` 를 사용합니다."""
        now = _now()
        self._id = id
        self._child_id = child_id
        self._guardian_id = guardian_id
        self._status = status
        self._form_data = form_data
        self._center_name = center_name
        self._care_type = care_type
        self._request_date = request_date
        self._matched_institution_id = matched_institution_id
        self._matched_counselor_id = matched_counselor_id
        self._integrated_report_s3_key = integrated_report_s3_key
        self._integrated_report_status = integrated_report_status
        self._created_at = created_at or now
        self._updated_at = updated_at or now
        self._version = version

    # ==================== Properties ====================

    @property
    def id(self) -> str:
        return self._id

    @property
    def child_id(self) -> str:
        return self._child_id

    @property
    def guardian_id(self) -> str | None:
        return self._guardian_id

    @property
    def status(self) -> CounselRequestStatus:
        return self._status

    @property
    def form_data(self) -> CounselRequestFormData:
        return self._form_data

    @property
    def center_name(self) -> str:
        return self._center_name

    @property
    def care_type(self) -> CareType:
        return self._care_type

    @property
    def request_date(self) -> date:
        return self._request_date

    @property
    def matched_institution_id(self) -> str | None:
        return self._matched_institution_id

    @property
    def matched_counselor_id(self) -> str | None:
        return self._matched_counselor_id

    @property
    def integrated_report_s3_key(self) -> str | None:
        return self._integrated_report_s3_key

    @property
    def integrated_report_status(self) -> IntegratedReportStatus | None:
        return self._integrated_report_status

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    @property
    def version(self) -> int:
        """저장소에 마지막으로 저장된 버전 (신규 생성 시 0)."""
        return self._version

    @property
    def is_terminal(self) -> bool:
        """더 이상 정상 흐름으로 진행할 수 없는 상태인지 확인합니다."""
        return self._status in (CounselRequestStatus.COMPLETED, CounselRequestStatus.REJECTED)

    # ==================== Factory Methods ====================

    @classmethod
    def create(
        cls,
        id: str,
        child_id: str,
        guardian_id: str | None,
        form_data: CounselRequestFormData,
    ) -> Result["CounselRequest"]:
        """새 상담의뢰지를 접수합니다 (PENDING).

        Args:
            id: 외부에서 생성한 식별자 (UUID)
            child_id: 아동 ID
            guardian_id: 보호자 ID (기관 의뢰 시 None)
            form_data: 상담의뢰지 양식 데이터

        Returns:
            생성된 상담의뢰지 또는 첫 번째 검증 실패 사유
        """
        validation = cls.validate(form_data)
        if validation.is_failure:
            return Result.fail(validation.error)

        return Result.ok(
            cls(
                id=id,
                child_id=child_id,
                guardian_id=guardian_id,
                status=CounselRequestStatus.PENDING,
                form_data=form_data,
                center_name=form_data.coverInfo.centerName,
                care_type=form_data.basicInfo.careType,
                request_date=form_data.coverInfo.requestDate.to_date(),
            )
        )

    @classmethod
    def restore(
        cls,
        id: str,
        child_id: str,
        guardian_id: str | None,
        status: CounselRequestStatus,
        form_data: CounselRequestFormData,
        center_name: str,
        care_type: CareType,
        request_date: date,
        created_at: datetime,
        updated_at: datetime,
        matched_institution_id: str | None = None,
        matched_counselor_id: str | None = None,
        integrated_report_s3_key: str | None = None,
        integrated_report_status: IntegratedReportStatus | None = None,
        version: int = 0,
    ) -> "CounselRequest":
        """저장소에서 복원합니다. 재검증하지 않습니다."""
        return cls(
            id=id,
            child_id=child_id,
            guardian_id=guardian_id,
            status=status,
            form_data=form_data,
            center_name=center_name,
            care_type=care_type,
            request_date=request_date,
            matched_institution_id=matched_institution_id,
            matched_counselor_id=matched_counselor_id,
            integrated_report_s3_key=integrated_report_s3_key,
            integrated_report_status=integrated_report_status,
            created_at=created_at,
            updated_at=updated_at,
            version=version,
        )

    # ==================== Validation ====================

    @staticmethod
    def validate(form_data: CounselRequestFormData) -> Result[None]:
        """양식 데이터를 검증합니다.

        검사 순서: 센터명 → 담당자 이름 → 아동 이름 → 월 → 일 → 우선돌봄 사유.
        첫 번째 실패에서 즉시 반환합니다.
        """
        cover = form_data.coverInfo
        basic = form_data.basicInfo

        if not cover.centerName or not cover.centerName.strip():
            return Result.fail(DomainError("센터명은 필수입니다", INVALID_FORM_DATA))

        if not cover.counselorName or not cover.counselorName.strip():
            return Result.fail(DomainError("담당자 이름은 필수입니다", INVALID_FORM_DATA))

        if not basic.childInfo.name or not basic.childInfo.name.strip():
            return Result.fail(DomainError("아동 이름은 필수입니다", INVALID_FORM_DATA))

        request_date = cover.requestDate
        if request_date.month < 1 or request_date.month > 12:
            return Result.fail(DomainError("월은 1-12 사이여야 합니다", INVALID_FORM_DATA))
        if request_date.day < 1 or request_date.day > 31:
            return Result.fail(DomainError("일은 1-31 사이여야 합니다", INVALID_FORM_DATA))

        if basic.careType == CareType.PRIORITY and not basic.priorityReason:
            return Result.fail(
                DomainError("우선돌봄 아동은 세부 사유를 선택해야 합니다", INVALID_FORM_DATA)
            )

        return Result.ok()

    # ==================== State Transitions ====================

    def mark_as_recommended(self) -> Result[None]:
        """AI 추천 완료 (PENDING → RECOMMENDED)."""
        if self._status != CounselRequestStatus.PENDING:
            return self._transition_error("AI 추천은 접수 대기 상태에서만 가능합니다")

        self._status = CounselRequestStatus.RECOMMENDED
        self._touch()
        return Result.ok()

    def select_institution(self, institution_id: str) -> Result[None]:
        """추천된 기관 중 하나를 선택합니다 (RECOMMENDED → MATCHED)."""
        if self._status != CounselRequestStatus.RECOMMENDED:
            return self._transition_error("기관 선택은 AI 추천 완료 상태에서만 가능합니다")

        if not institution_id or not institution_id.strip():
            return Result.fail(DomainError("기관 ID는 필수입니다", "MISSING_INSTITUTION_ID"))

        self._status = CounselRequestStatus.MATCHED
        self._matched_institution_id = institution_id
        self._touch()
        return Result.ok()

    def match_with(self, institution_id: str, counselor_id: str) -> Result[None]:
        """기관과 상담사를 직접 매칭합니다 (PENDING → MATCHED).

        Deprecated: AI 추천 흐름에서는 ``select_institution`` 을 사용합니다.
        기존 클라이언트가 이전될 때까지 동작을 유지합니다.
        """
        if self._status != CounselRequestStatus.PENDING:
            return self._transition_error("접수 대기 상태에서만 매칭할 수 있습니다")

        self._status = CounselRequestStatus.MATCHED
        self._matched_institution_id = institution_id
        self._matched_counselor_id = counselor_id
        self._touch()
        return Result.ok()

    def start_counseling(self) -> Result[None]:
        """상담 시작 (MATCHED → IN_PROGRESS)."""
        if self._status != CounselRequestStatus.MATCHED:
            return self._transition_error("매칭 완료 상태에서만 상담을 시작할 수 있습니다")

        self._status = CounselRequestStatus.IN_PROGRESS
        self._touch()
        return Result.ok()

    def complete_counseling(self) -> Result[None]:
        """상담 완료 (IN_PROGRESS → COMPLETED)."""
        if self._status != CounselRequestStatus.IN_PROGRESS:
            return self._transition_error("상담 진행 중 상태에서만 완료할 수 있습니다")

        self._status = CounselRequestStatus.COMPLETED
        self._touch()
        return Result.ok()

    def reject(self, reason: str | None = None) -> Result[None]:
        """매칭 거부 (COMPLETED 이외 → REJECTED).

        Args:
            reason: 거부 사유 (감사 로그 용도, 애그리거트에 저장하지 않음)
        """
        if self._status == CounselRequestStatus.COMPLETED:
            return self._transition_error("완료된 상담의뢰는 거부할 수 없습니다")

        self._status = CounselRequestStatus.REJECTED
        self._touch()
        return Result.ok()

    def update_form_data(self, form_data: CounselRequestFormData) -> Result[None]:
        """양식 데이터를 교체합니다 (PENDING 상태에서만)."""
        if self._status != CounselRequestStatus.PENDING:
            return self._transition_error("접수 대기 상태에서만 수정할 수 있습니다")

        validation = self.validate(form_data)
        if validation.is_failure:
            return validation

        self._form_data = form_data
        self._center_name = form_data.coverInfo.centerName
        self._care_type = form_data.basicInfo.careType
        self._request_date = form_data.coverInfo.requestDate.to_date()
        self._touch()
        return Result.ok()

    def admin_force_status(self, new_status: CounselRequestStatus, reason: str) -> Result[None]:
        """관리자가 상태를 강제로 변경합니다.

        정상 흐름을 우회하지만 COMPLETED는 보호된 종료 상태로 취급하여
        이 경로로 진입하거나 벗어날 수 없습니다.
        """
        if self._status == CounselRequestStatus.COMPLETED:
            return Result.fail(
                DomainError(
                    "완료된 상담의뢰는 상태를 변경할 수 없습니다",
                    "COMPLETED_REQUEST_LOCKED",
                )
            )

        if new_status == CounselRequestStatus.COMPLETED:
            return Result.fail(
                DomainError(
                    "관리자가 직접 완료 상태로 변경할 수 없습니다. "
                    "정상적인 상담 완료 플로우를 사용해주세요.",
                    "COMPLETED_STATUS_FORBIDDEN",
                )
            )

        if not reason or len(reason.strip()) < ADMIN_REASON_MIN_LENGTH:
            return Result.fail(
                DomainError(
                    f"변경 사유는 최소 {ADMIN_REASON_MIN_LENGTH}자 이상이어야 합니다",
                    "INVALID_REASON",
                )
            )

        if self._status == new_status:
            return Result.fail(
                DomainError(
                    "현재 상태와 동일한 상태로는 변경할 수 없습니다",
                    "SAME_STATUS",
                )
            )

        self._status = new_status
        self._touch()
        return Result.ok()

    # ==================== Integrated Report ====================

    def mark_integrated_report_pending(self) -> None:
        """통합 보고서 생성 요청 직후 상태를 pending으로 표시합니다."""
        self._integrated_report_status = IntegratedReportStatus.PENDING
        self._touch()

    def update_integrated_report_status(
        self, status: str, s3_key: str | None = None
    ) -> Result[None]:
        """yeirin-ai 웹훅 결과를 반영합니다.

        Args:
            status: pending / processing / completed / failed
            s3_key: 통합 보고서 S3 key (completed일 때 필수)
        """
        try:
            report_status = IntegratedReportStatus(status)
        except ValueError:
            return Result.fail(
                DomainError(
                    f"유효하지 않은 통합 보고서 상태입니다: {status}",
                    "INVALID_INTEGRATED_REPORT_STATUS",
                )
            )

        if report_status == IntegratedReportStatus.COMPLETED and not (s3_key and s3_key.strip()):
            return Result.fail(
                DomainError(
                    "완료된 통합 보고서는 S3 key가 필요합니다",
                    "MISSING_INTEGRATED_REPORT_KEY",
                )
            )

        self._integrated_report_status = report_status
        if s3_key:
            self._integrated_report_s3_key = s3_key
        self._touch()
        return Result.ok()

    # ==================== Internal ====================

    def _touch(self) -> None:
        self._updated_at = _now()

    def _transition_error(self, message: str) -> Result[None]:
        return Result.fail(DomainError(message, INVALID_STATUS_TRANSITION))

    def __repr__(self) -> str:
        """문자열 표현을 반환합니다."""
        return f"<CounselRequest id={self._id} status={self._status.value}>"
