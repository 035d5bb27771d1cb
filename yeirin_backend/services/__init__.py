"""Service layer.

Provides service modules for business logic processing.
"""

from yeirin_backend.services.admin_service import AdminCounselRequestService, StatusChange
from yeirin_backend.services.authorization import (
    CounselRequestGuardianAuthorization,
    GuardianAuthorizationPort,
)
from yeirin_backend.services.counsel_report_service import CounselReportService
from yeirin_backend.services.counsel_request_service import CounselRequestService
from yeirin_backend.services.recommendation_service import RecommendationService

__all__ = [
    "AdminCounselRequestService",
    "CounselReportService",
    "CounselRequestGuardianAuthorization",
    "CounselRequestService",
    "GuardianAuthorizationPort",
    "RecommendationService",
    "StatusChange",
]
