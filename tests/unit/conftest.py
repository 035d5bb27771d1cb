"""공통 테스트 픽스처."""

from datetime import date, datetime, timezone
from typing import Any, Callable

import pytest

from yeirin_backend.domain.counsel_report.models import CounselReport
from yeirin_backend.domain.counsel_report.status import ReportStatus
from yeirin_backend.domain.counsel_request.enums import CareType, CounselRequestStatus
from yeirin_backend.domain.counsel_request.form_data import CounselRequestFormData
from yeirin_backend.domain.counsel_request.models import CounselRequest
from yeirin_backend.domain.recommendation.models import CounselRequestRecommendation

FIXED_NOW = datetime(2025, 1, 15, 9, 0, tzinfo=timezone.utc)


def _form_data_dict(
    center_name: str = "예이린 지역아동센터",
    counselor_name: str = "박담당",
    child_name: str = "김아동",
    year: int = 2025,
    month: int = 1,
    day: int = 15,
    care_type: str = "GENERAL",
    priority_reason: str | None = None,
    test_results: dict[str, Any] | None = None,
) -> dict[str, Any]:
    basic_info: dict[str, Any] = {
        "childInfo": {"name": child_name, "gender": "MALE", "age": 9, "grade": "초3"},
        "careType": care_type,
    }
    if priority_reason is not None:
        basic_info["priorityReason"] = priority_reason

    return {
        "coverInfo": {
            "requestDate": {"year": year, "month": month, "day": day},
            "centerName": center_name,
            "counselorName": counselor_name,
        },
        "basicInfo": basic_info,
        "psychologicalInfo": {
            "medicalHistory": "ADHD 진단 (2023년)",
            "specialNotes": "또래 관계에서 잦은 갈등",
        },
        "requestMotivation": {
            "motivation": "학교에서 집중하지 못하고 친구들과 자주 다툽니다",
            "goals": "정서 안정과 사회성 향상",
        },
        "testResults": test_results or {},
        "consent": "AGREED",
    }


@pytest.fixture
def make_form_data() -> Callable[..., CounselRequestFormData]:
    """양식 데이터 생성 함수."""

    def _make(**overrides: Any) -> CounselRequestFormData:
        return CounselRequestFormData.model_validate(_form_data_dict(**overrides))

    return _make


@pytest.fixture
def form_data(make_form_data) -> CounselRequestFormData:
    """기본 양식 데이터 (일반 아동, 검사 결과 없음)."""
    return make_form_data()


@pytest.fixture
def make_counsel_request(
    form_data: CounselRequestFormData,
) -> Callable[..., CounselRequest]:
    """상태를 지정하여 상담의뢰지를 복원하는 함수."""

    def _make(
        status: CounselRequestStatus = CounselRequestStatus.PENDING,
        id: str = "req-1",
        guardian_id: str | None = "guardian-1",
        version: int = 1,
        **kwargs: Any,
    ) -> CounselRequest:
        data = kwargs.pop("form_data", form_data)
        return CounselRequest.restore(
            id=id,
            child_id="child-1",
            guardian_id=guardian_id,
            status=status,
            form_data=data,
            center_name=data.coverInfo.centerName,
            care_type=CareType.GENERAL,
            request_date=date(2025, 1, 15),
            created_at=FIXED_NOW,
            updated_at=FIXED_NOW,
            version=version,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_report() -> Callable[..., CounselReport]:
    """상태를 지정하여 면담결과지를 복원하는 함수."""

    def _make(
        status: ReportStatus = ReportStatus.DRAFT,
        id: str = "report-1",
        counselor_id: str | None = "counselor-1",
        session_number: int = 1,
        **kwargs: Any,
    ) -> CounselReport:
        props: dict[str, Any] = {
            "id": id,
            "counsel_request_id": "req-1",
            "child_id": "child-1",
            "counselor_id": counselor_id,
            "institution_id": "inst-1",
            "session_number": session_number,
            "report_date": date(2025, 2, 1),
            "center_name": "서울아동심리상담센터",
            "counsel_reason": "또래 관계 갈등으로 인한 상담",
            "counsel_content": "아동이 최근 학교에서 있었던 일을 이야기하며 감정을 표현함",
            "status": status,
            "created_at": FIXED_NOW,
            "updated_at": FIXED_NOW,
            "version": 1,
        }
        props.update(kwargs)
        return CounselReport.restore(**props)

    return _make


@pytest.fixture
def make_recommendation() -> Callable[..., CounselRequestRecommendation]:
    """추천 복원 함수."""

    def _make(
        institution_id: str,
        rank: int,
        score: float = 0.8,
        selected: bool = False,
        counsel_request_id: str = "req-1",
    ) -> CounselRequestRecommendation:
        return CounselRequestRecommendation.restore(
            id=f"rec-{rank}",
            counsel_request_id=counsel_request_id,
            institution_id=institution_id,
            score=score,
            reason=f"{institution_id} 추천 이유",
            rank=rank,
            selected=selected,
            created_at=FIXED_NOW,
        )

    return _make
