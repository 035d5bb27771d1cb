"""공통 도메인 프리미티브."""

from yeirin_backend.domain.common.pagination import PaginatedResult
from yeirin_backend.domain.common.result import DomainError, Result

__all__ = [
    "DomainError",
    "PaginatedResult",
    "Result",
]
