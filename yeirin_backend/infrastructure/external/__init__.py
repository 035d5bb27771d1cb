"""External API 클라이언트 모듈."""

from yeirin_backend.infrastructure.external.soul_e_client import (
    AssessmentResultSummary,
    SoulEClient,
    SoulEClientError,
)
from yeirin_backend.infrastructure.external.yeirin_ai_client import (
    InstitutionRecommendation,
    IntegratedReportRequest,
    YeirinAIClient,
    YeirinAIClientError,
)

__all__ = [
    "AssessmentResultSummary",
    "InstitutionRecommendation",
    "IntegratedReportRequest",
    "SoulEClient",
    "SoulEClientError",
    "YeirinAIClient",
    "YeirinAIClientError",
]
