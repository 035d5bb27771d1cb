"""Database 모듈."""

from yeirin_backend.infrastructure.database.counsel_report_repository import (
    SqlAlchemyCounselReportRepository,
)
from yeirin_backend.infrastructure.database.counsel_request_repository import (
    SqlAlchemyCounselRequestRepository,
)
from yeirin_backend.infrastructure.database.errors import ConcurrentModificationError
from yeirin_backend.infrastructure.database.recommendation_repository import (
    SqlAlchemyRecommendationRepository,
)

__all__ = [
    "ConcurrentModificationError",
    "SqlAlchemyCounselReportRepository",
    "SqlAlchemyCounselRequestRepository",
    "SqlAlchemyRecommendationRepository",
]
