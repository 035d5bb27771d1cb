"""라우터 공통 의존성.

사용자 식별자는 게이트웨이가 검증 후 헤더로 전달합니다.
"""

from fastapi import Header


def get_current_user_id(
    x_user_id: str = Header(..., min_length=1, description="요청 사용자 ID"),
) -> str:
    return x_user_id


def get_current_institution_id(
    x_institution_id: str | None = Header(default=None, description="소속 기관 ID"),
) -> str | None:
    return x_institution_id
