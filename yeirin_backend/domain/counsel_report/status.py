"""면담결과지 상태와 전환 규칙."""

from enum import Enum


class ReportStatus(str, Enum):
    """면담결과지 상태."""

    DRAFT = "DRAFT"  # 작성 중
    SUBMITTED = "SUBMITTED"  # 제출 완료
    REVIEWED = "REVIEWED"  # 보호자 확인
    APPROVED = "APPROVED"  # 보호자 승인 (피드백 작성)


# 정방향 전환만 허용
ALLOWED_TRANSITIONS: dict[ReportStatus, frozenset[ReportStatus]] = {
    ReportStatus.DRAFT: frozenset({ReportStatus.SUBMITTED}),
    ReportStatus.SUBMITTED: frozenset({ReportStatus.REVIEWED}),
    ReportStatus.REVIEWED: frozenset({ReportStatus.APPROVED}),
    ReportStatus.APPROVED: frozenset(),
}


def can_transition_to(current: ReportStatus, target: ReportStatus) -> bool:
    """현재 상태에서 대상 상태로 전환 가능한지 확인합니다."""
    return target in ALLOWED_TRANSITIONS[current]


def is_counselor_editable(status: ReportStatus) -> bool:
    """상담사가 내용을 수정할 수 있는 상태인지 확인합니다."""
    return status == ReportStatus.DRAFT


def is_guardian_viewable(status: ReportStatus) -> bool:
    """보호자에게 노출되는 상태인지 확인합니다."""
    return status != ReportStatus.DRAFT
