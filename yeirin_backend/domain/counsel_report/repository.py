"""면담결과지 레포지토리 계약."""

from typing import Protocol

from yeirin_backend.domain.common.pagination import PaginatedResult
from yeirin_backend.domain.counsel_report.models import CounselReport
from yeirin_backend.domain.counsel_report.status import ReportStatus


class CounselReportRepository(Protocol):
    """면담결과지 영속성 계약.

    ``save`` 는 버전 기반 compare-and-swap 저장을 수행하며, 충돌 또는
    ``(counsel_request_id, session_number)`` 중복 시 ``ConcurrentModificationError``
    를 발생시킵니다.
    """

    async def save(self, report: CounselReport) -> CounselReport: ...

    async def find_by_id(self, id: str) -> CounselReport | None: ...

    async def find_by_counsel_request_id_and_session(
        self, counsel_request_id: str, session_number: int
    ) -> CounselReport | None: ...

    async def find_by_counsel_request_id(self, counsel_request_id: str) -> list[CounselReport]: ...

    async def find_by_child_id(self, child_id: str) -> list[CounselReport]: ...

    async def find_by_counselor_id(
        self, counselor_id: str, page: int = 1, limit: int = 10
    ) -> PaginatedResult[CounselReport]: ...

    async def find_by_institution_id(
        self, institution_id: str, page: int = 1, limit: int = 10
    ) -> PaginatedResult[CounselReport]: ...

    async def find_by_status(
        self, status: ReportStatus, page: int = 1, limit: int = 10
    ) -> PaginatedResult[CounselReport]: ...

    async def delete(self, id: str) -> None: ...

    async def get_next_session_number(self, counsel_request_id: str) -> int: ...

    async def count_by_counsel_request_id(self, counsel_request_id: str) -> int: ...
