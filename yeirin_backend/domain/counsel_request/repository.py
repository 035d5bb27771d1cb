"""상담의뢰지 레포지토리 계약."""

from typing import Protocol

from yeirin_backend.domain.common.pagination import PaginatedResult
from yeirin_backend.domain.counsel_request.enums import CounselRequestStatus
from yeirin_backend.domain.counsel_request.models import CounselRequest


class CounselRequestRepository(Protocol):
    """상담의뢰지 영속성 계약.

    ``save`` 는 애그리거트의 ``version`` 을 기준으로 compare-and-swap 저장을 수행하고,
    다른 요청이 먼저 저장한 경우 ``ConcurrentModificationError`` 를 발생시킵니다.
    반환값은 버전이 갱신된 애그리거트입니다.
    """

    async def save(self, counsel_request: CounselRequest) -> CounselRequest: ...

    async def find_by_id(self, id: str) -> CounselRequest | None: ...

    async def find_by_child_id(self, child_id: str) -> list[CounselRequest]: ...

    async def find_by_guardian_id(self, guardian_id: str) -> list[CounselRequest]: ...

    async def find_by_status(self, status: CounselRequestStatus) -> list[CounselRequest]: ...

    async def find_by_institution_id(self, institution_id: str) -> list[CounselRequest]: ...

    async def find_by_counselor_id(self, counselor_id: str) -> list[CounselRequest]: ...

    async def find_all(
        self,
        page: int,
        limit: int,
        status: CounselRequestStatus | None = None,
    ) -> PaginatedResult[CounselRequest]: ...

    async def delete(self, id: str) -> None: ...

    async def count_by_guardian_id_and_status(
        self, guardian_id: str, status: CounselRequestStatus
    ) -> int: ...

    async def find_recent_by_guardian_id(
        self, guardian_id: str, days: int
    ) -> list[CounselRequest]: ...
