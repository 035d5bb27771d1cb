"""면담결과지 도메인."""

from yeirin_backend.domain.counsel_report.models import CounselReport
from yeirin_backend.domain.counsel_report.repository import CounselReportRepository
from yeirin_backend.domain.counsel_report.status import ReportStatus

__all__ = [
    "CounselReport",
    "CounselReportRepository",
    "ReportStatus",
]
