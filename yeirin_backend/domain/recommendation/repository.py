"""상담의뢰지 추천 레포지토리 계약."""

from typing import Protocol

from yeirin_backend.domain.recommendation.models import CounselRequestRecommendation


class CounselRequestRecommendationRepository(Protocol):
    """추천 영속성 계약.

    같은 상담의뢰지에 대해 ``selected`` 가 참인 추천이 둘 이상 저장되려 하면
    ``ConcurrentModificationError`` 를 발생시킵니다.
    """

    async def save(
        self, recommendation: CounselRequestRecommendation
    ) -> CounselRequestRecommendation: ...

    async def save_all(
        self, recommendations: list[CounselRequestRecommendation]
    ) -> list[CounselRequestRecommendation]: ...

    async def find_by_counsel_request_id(
        self, counsel_request_id: str
    ) -> list[CounselRequestRecommendation]: ...

    async def find_by_id(self, id: str) -> CounselRequestRecommendation | None: ...

    async def find_selected_by_counsel_request_id(
        self, counsel_request_id: str
    ) -> CounselRequestRecommendation | None: ...

    async def delete_by_counsel_request_id(self, counsel_request_id: str) -> None: ...
