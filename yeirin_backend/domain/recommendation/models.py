"""상담의뢰지 추천 도메인 모델.

AI 추천 서비스가 제안한 기관 하나를 순위와 함께 담습니다.
한 상담의뢰지에 대해 한 번에 최대 5개가 생성되며,
보호자/기관이 그 중 하나를 선택합니다.
"""

from datetime import datetime, timezone

from yeirin_backend.domain.common.result import DomainError, Result

MIN_SCORE = 0.0
MAX_SCORE = 1.0
MIN_RANK = 1
MAX_RANK = 5
MAX_REASON_LENGTH = 1000
HIGH_SCORE_THRESHOLD = 0.7


class CounselRequestRecommendation:
    """상담의뢰지에 연결된 개별 기관 추천.

    ``selected`` 이외의 필드는 생성 후 변경되지 않습니다.
    """

    def __init__(
        self,
        id: str,
        counsel_request_id: str,
        institution_id: str,
        score: float,
        reason: str,
        rank: int,
        selected: bool = False,
        created_at: datetime | None = None,
    ) -> None:
        self._id = id
        self._counsel_request_id = counsel_request_id
        self._institution_id = institution_id
        self._score = score
        self._reason = reason
        self._rank = rank
        self._selected = selected
        self._created_at = created_at or datetime.now(timezone.utc)

    @property
    def id(self) -> str:
        return self._id

    @property
    def counsel_request_id(self) -> str:
        return self._counsel_request_id

    @property
    def institution_id(self) -> str:
        return self._institution_id

    @property
    def score(self) -> float:
        return self._score

    @property
    def reason(self) -> str:
        return self._reason

    @property
    def rank(self) -> int:
        return self._rank

    @property
    def selected(self) -> bool:
        return self._selected

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @classmethod
    def create(
        cls,
        id: str,
        counsel_request_id: str,
        institution_id: str,
        score: float,
        reason: str,
        rank: int,
    ) -> Result["CounselRequestRecommendation"]:
        """추천을 생성합니다.

        Args:
            id: 추천 ID
            counsel_request_id: 상담의뢰지 ID
            institution_id: 추천 기관 ID
            score: 추천 점수 (0.0-1.0)
            reason: 추천 이유 (최대 1000자, 앞뒤 공백 제거)
            rank: 순위 (1-5, 1이 가장 적합)

        Returns:
            생성된 추천 또는 검증 실패 사유
        """
        if not id or not id.strip():
            return cls._invalid("추천 ID는 필수입니다")
        if not counsel_request_id or not counsel_request_id.strip():
            return cls._invalid("상담의뢰지 ID는 필수입니다")
        if not institution_id or not institution_id.strip():
            return cls._invalid("기관 ID는 필수입니다")
        if score < MIN_SCORE or score > MAX_SCORE:
            return cls._invalid(f"추천 점수는 {MIN_SCORE}~{MAX_SCORE} 사이여야 합니다")
        if not reason or not reason.strip():
            return cls._invalid("추천 이유는 필수입니다")
        if len(reason.strip()) > MAX_REASON_LENGTH:
            return cls._invalid(f"추천 이유는 최대 {MAX_REASON_LENGTH}자까지 가능합니다")
        if rank < MIN_RANK or rank > MAX_RANK:
            return cls._invalid(f"순위는 {MIN_RANK}~{MAX_RANK} 사이여야 합니다")

        return Result.ok(
            cls(
                id=id,
                counsel_request_id=counsel_request_id,
                institution_id=institution_id,
                score=score,
                reason=reason.strip(),
                rank=rank,
            )
        )

    @classmethod
    def restore(
        cls,
        id: str,
        counsel_request_id: str,
        institution_id: str,
        score: float,
        reason: str,
        rank: int,
        selected: bool,
        created_at: datetime,
    ) -> "CounselRequestRecommendation":
        """저장소에서 복원합니다."""
        return cls(
            id=id,
            counsel_request_id=counsel_request_id,
            institution_id=institution_id,
            score=score,
            reason=reason,
            rank=rank,
            selected=selected,
            created_at=created_at,
        )

    def select(self) -> Result[None]:
        """이 추천을 선택된 것으로 표시합니다."""
        if self._selected:
            return Result.fail(DomainError("이미 선택된 추천입니다", "ALREADY_SELECTED"))

        self._selected = True
        return Result.ok()

    def deselect(self) -> None:
        """선택을 해제합니다."""
        self._selected = False

    def is_high_score(self) -> bool:
        """추천 점수가 0.7 이상인지 확인합니다."""
        return self._score >= HIGH_SCORE_THRESHOLD

    @staticmethod
    def _invalid(message: str) -> Result["CounselRequestRecommendation"]:
        return Result.fail(DomainError(message, "INVALID_RECOMMENDATION"))

    def __repr__(self) -> str:
        """문자열 표현을 반환합니다."""
        return (
            f"<CounselRequestRecommendation institution={self._institution_id} "
            f"rank={self._rank} selected={self._selected}>"
        )
