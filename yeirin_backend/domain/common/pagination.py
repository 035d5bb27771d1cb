"""페이지네이션 결과 모델."""

import math
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class PaginatedResult(Generic[T]):
    """페이지 단위 조회 결과.

    Attributes:
        data: 현재 페이지 항목
        total: 전체 항목 수
        page: 현재 페이지 (1부터 시작)
        limit: 페이지 크기
    """

    data: list[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10

    @property
    def total_pages(self) -> int:
        if self.limit <= 0:
            return 0
        return math.ceil(self.total / self.limit)
