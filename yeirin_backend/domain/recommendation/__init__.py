"""상담의뢰지 추천 도메인."""

from yeirin_backend.domain.recommendation.models import CounselRequestRecommendation
from yeirin_backend.domain.recommendation.repository import (
    CounselRequestRecommendationRepository,
)

__all__ = [
    "CounselRequestRecommendation",
    "CounselRequestRecommendationRepository",
]
