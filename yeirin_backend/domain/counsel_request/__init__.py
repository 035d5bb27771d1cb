"""상담의뢰지 도메인."""

from yeirin_backend.domain.counsel_request.enums import (
    AssessmentType,
    CareType,
    ConsentStatus,
    CounselRequestStatus,
    Gender,
    IntegratedReportStatus,
    PriorityReason,
)
from yeirin_backend.domain.counsel_request.form_data import (
    AttachedAssessment,
    CounselRequestFormData,
)
from yeirin_backend.domain.counsel_request.models import CounselRequest
from yeirin_backend.domain.counsel_request.repository import CounselRequestRepository
from yeirin_backend.domain.counsel_request.text import form_data_to_text

__all__ = [
    "AssessmentType",
    "AttachedAssessment",
    "CareType",
    "ConsentStatus",
    "CounselRequest",
    "CounselRequestFormData",
    "CounselRequestRepository",
    "CounselRequestStatus",
    "Gender",
    "IntegratedReportStatus",
    "PriorityReason",
    "form_data_to_text",
]
