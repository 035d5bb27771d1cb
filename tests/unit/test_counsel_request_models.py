"""CounselRequest 도메인 모델 테스트."""

from datetime import date

import pytest

from yeirin_backend.domain.counsel_request.enums import (
    CareType,
    CounselRequestStatus,
    IntegratedReportStatus,
)
from yeirin_backend.domain.counsel_request.models import CounselRequest

ALL_STATUSES = list(CounselRequestStatus)


class TestCounselRequestCreate:
    """상담의뢰지 생성 및 양식 검증 테스트."""

    def test_정상_양식이면_PENDING으로_생성된다(self, form_data) -> None:
        # When
        result = CounselRequest.create(
            id="req-1", child_id="child-1", guardian_id="guardian-1", form_data=form_data
        )

        # Then
        assert result.is_success
        counsel_request = result.value
        assert counsel_request.status == CounselRequestStatus.PENDING
        assert counsel_request.center_name == "예이린 지역아동센터"
        assert counsel_request.care_type == CareType.GENERAL
        assert counsel_request.request_date == date(2025, 1, 15)
        assert counsel_request.matched_institution_id is None
        assert counsel_request.integrated_report_status is None
        assert counsel_request.version == 0

    def test_기관_의뢰는_보호자_없이_생성할_수_있다(self, form_data) -> None:
        result = CounselRequest.create(
            id="req-1", child_id="child-1", guardian_id=None, form_data=form_data
        )

        assert result.is_success
        assert result.value.guardian_id is None

    def test_우선돌봄_아동은_세부_사유가_없으면_실패한다(self, make_form_data) -> None:
        # Given
        form_data = make_form_data(care_type="PRIORITY")

        # When
        result = CounselRequest.create(
            id="req-1", child_id="child-1", guardian_id=None, form_data=form_data
        )

        # Then
        assert result.is_failure
        assert result.error.code == "INVALID_FORM_DATA"
        assert "세부 사유" in result.error.message

    def test_우선돌봄_아동은_세부_사유가_있으면_성공한다(self, make_form_data) -> None:
        form_data = make_form_data(care_type="PRIORITY", priority_reason="LOW_INCOME")

        result = CounselRequest.create(
            id="req-1", child_id="child-1", guardian_id=None, form_data=form_data
        )

        assert result.is_success
        assert result.value.care_type == CareType.PRIORITY

    @pytest.mark.parametrize(
        ("overrides", "expected_message"),
        [
            ({"center_name": "   "}, "센터명은 필수입니다"),
            ({"counselor_name": ""}, "담당자 이름은 필수입니다"),
            ({"child_name": " "}, "아동 이름은 필수입니다"),
            ({"month": 13}, "월은 1-12 사이여야 합니다"),
            ({"month": 0}, "월은 1-12 사이여야 합니다"),
            ({"day": 32}, "일은 1-31 사이여야 합니다"),
            ({"day": 0}, "일은 1-31 사이여야 합니다"),
        ],
    )
    def test_잘못된_양식은_사유와_함께_실패한다(
        self, make_form_data, overrides, expected_message
    ) -> None:
        form_data = make_form_data(**overrides)

        result = CounselRequest.create(
            id="req-1", child_id="child-1", guardian_id=None, form_data=form_data
        )

        assert result.is_failure
        assert result.error.code == "INVALID_FORM_DATA"
        assert result.error.message == expected_message

    @pytest.mark.parametrize(
        ("month", "day", "expected"),
        [(4, 31, date(2025, 5, 1)), (2, 30, date(2025, 3, 2))],
    )
    def test_달의_마지막_날을_넘는_일자는_다음_달로_이어진다(
        self, make_form_data, month, day, expected
    ) -> None:
        form_data = make_form_data(year=2025, month=month, day=day)

        result = CounselRequest.create(
            id="req-1", child_id="child-1", guardian_id=None, form_data=form_data
        )

        assert result.is_success
        assert result.value.request_date == expected

    @pytest.mark.parametrize(("month", "day"), [(1, 1), (12, 31)])
    def test_월과_일의_경계값은_허용된다(self, make_form_data, month, day) -> None:
        form_data = make_form_data(month=month, day=day)

        result = CounselRequest.create(
            id="req-1", child_id="child-1", guardian_id=None, form_data=form_data
        )

        assert result.is_success

    def test_센터명_검사가_날짜_검사보다_먼저_수행된다(self, make_form_data) -> None:
        form_data = make_form_data(center_name="", month=13)

        result = CounselRequest.validate(form_data)

        assert result.error.message == "센터명은 필수입니다"


class TestCounselRequestTransitions:
    """상태 전환 테스트."""

    def test_정상_흐름으로_완료까지_진행한다(self, make_counsel_request) -> None:
        # Given
        counsel_request = make_counsel_request()

        # When / Then
        assert counsel_request.mark_as_recommended().is_success
        assert counsel_request.status == CounselRequestStatus.RECOMMENDED

        assert counsel_request.select_institution("inst-2").is_success
        assert counsel_request.status == CounselRequestStatus.MATCHED
        assert counsel_request.matched_institution_id == "inst-2"

        assert counsel_request.start_counseling().is_success
        assert counsel_request.status == CounselRequestStatus.IN_PROGRESS

        assert counsel_request.complete_counseling().is_success
        assert counsel_request.status == CounselRequestStatus.COMPLETED
        assert counsel_request.is_terminal

    def test_전환_시_updated_at이_갱신된다(self, make_counsel_request) -> None:
        counsel_request = make_counsel_request()
        before = counsel_request.updated_at

        counsel_request.mark_as_recommended()

        assert counsel_request.updated_at > before

    @pytest.mark.parametrize(
        "status", [s for s in ALL_STATUSES if s != CounselRequestStatus.PENDING]
    )
    def test_PENDING이_아니면_추천_완료로_전환할_수_없다(
        self, make_counsel_request, status
    ) -> None:
        counsel_request = make_counsel_request(status=status)

        result = counsel_request.mark_as_recommended()

        assert result.is_failure
        assert result.error.code == "INVALID_STATUS_TRANSITION"
        assert counsel_request.status == status

    def test_PENDING에서는_기관을_선택할_수_없다(self, make_counsel_request) -> None:
        counsel_request = make_counsel_request()

        result = counsel_request.select_institution("inst-1")

        assert result.error.code == "INVALID_STATUS_TRANSITION"
        assert counsel_request.matched_institution_id is None

    def test_빈_기관_ID로는_선택할_수_없다(self, make_counsel_request) -> None:
        counsel_request = make_counsel_request(status=CounselRequestStatus.RECOMMENDED)

        result = counsel_request.select_institution("  ")

        assert result.error.code == "MISSING_INSTITUTION_ID"
        assert counsel_request.status == CounselRequestStatus.RECOMMENDED

    def test_직접_매칭은_PENDING에서만_가능하다(self, make_counsel_request) -> None:
        pending = make_counsel_request()
        recommended = make_counsel_request(status=CounselRequestStatus.RECOMMENDED)

        assert pending.match_with("inst-1", "counselor-1").is_success
        assert pending.status == CounselRequestStatus.MATCHED
        assert pending.matched_counselor_id == "counselor-1"
        assert recommended.match_with("inst-1", "counselor-1").is_failure

    def test_MATCHED가_아니면_상담을_시작할_수_없다(self, make_counsel_request) -> None:
        counsel_request = make_counsel_request(status=CounselRequestStatus.RECOMMENDED)

        assert counsel_request.start_counseling().error.code == "INVALID_STATUS_TRANSITION"

    def test_진행_중이_아니면_완료할_수_없다(self, make_counsel_request) -> None:
        counsel_request = make_counsel_request(status=CounselRequestStatus.MATCHED)
        updated_at = counsel_request.updated_at

        assert counsel_request.complete_counseling().is_failure
        assert counsel_request.status == CounselRequestStatus.MATCHED
        assert counsel_request.updated_at == updated_at

    @pytest.mark.parametrize(
        "status", [s for s in ALL_STATUSES if s != CounselRequestStatus.COMPLETED]
    )
    def test_완료_전이라면_어느_상태에서든_거부할_수_있다(
        self, make_counsel_request, status
    ) -> None:
        counsel_request = make_counsel_request(status=status)

        result = counsel_request.reject("기관 사정으로 상담 불가")

        assert result.is_success
        assert counsel_request.status == CounselRequestStatus.REJECTED
        assert counsel_request.is_terminal

    def test_완료된_상담의뢰는_거부할_수_없다(self, make_counsel_request) -> None:
        counsel_request = make_counsel_request(status=CounselRequestStatus.COMPLETED)
        updated_at = counsel_request.updated_at

        result = counsel_request.reject()

        assert result.error.code == "INVALID_STATUS_TRANSITION"
        assert counsel_request.status == CounselRequestStatus.COMPLETED
        assert counsel_request.updated_at == updated_at


class TestUpdateFormData:
    """양식 수정 테스트."""

    def test_PENDING이면_양식과_파생_필드가_갱신된다(
        self, make_counsel_request, make_form_data
    ) -> None:
        # Given
        counsel_request = make_counsel_request()
        new_form = make_form_data(
            center_name="새싹 지역아동센터",
            care_type="PRIORITY",
            priority_reason="SINGLE_PARENT",
            month=3,
            day=2,
        )

        # When
        result = counsel_request.update_form_data(new_form)

        # Then
        assert result.is_success
        assert counsel_request.form_data == new_form
        assert counsel_request.center_name == "새싹 지역아동센터"
        assert counsel_request.care_type == CareType.PRIORITY
        assert counsel_request.request_date == date(2025, 3, 2)

    def test_PENDING이_아니면_수정할_수_없다(self, make_counsel_request, make_form_data) -> None:
        counsel_request = make_counsel_request(status=CounselRequestStatus.MATCHED)
        original = counsel_request.form_data

        result = counsel_request.update_form_data(make_form_data(center_name="다른 센터"))

        assert result.error.code == "INVALID_STATUS_TRANSITION"
        assert counsel_request.form_data is original

    def test_잘못된_양식으로는_수정할_수_없다(self, make_counsel_request, make_form_data) -> None:
        counsel_request = make_counsel_request()

        result = counsel_request.update_form_data(make_form_data(day=32))

        assert result.error.code == "INVALID_FORM_DATA"
        assert counsel_request.center_name == "예이린 지역아동센터"


class TestAdminForceStatus:
    """관리자 상태 강제 변경 테스트."""

    REASON = "보호자 요청으로 재접수 처리합니다"

    def test_정상_흐름을_우회하여_상태를_변경한다(self, make_counsel_request) -> None:
        counsel_request = make_counsel_request(status=CounselRequestStatus.IN_PROGRESS)

        result = counsel_request.admin_force_status(CounselRequestStatus.PENDING, self.REASON)

        assert result.is_success
        assert counsel_request.status == CounselRequestStatus.PENDING

    def test_완료된_상담의뢰는_변경할_수_없다(self, make_counsel_request) -> None:
        counsel_request = make_counsel_request(status=CounselRequestStatus.COMPLETED)

        result = counsel_request.admin_force_status(CounselRequestStatus.PENDING, self.REASON)

        assert result.error.code == "COMPLETED_REQUEST_LOCKED"
        assert counsel_request.status == CounselRequestStatus.COMPLETED

    def test_완료_상태로는_변경할_수_없다(self, make_counsel_request) -> None:
        counsel_request = make_counsel_request(status=CounselRequestStatus.IN_PROGRESS)

        result = counsel_request.admin_force_status(CounselRequestStatus.COMPLETED, self.REASON)

        assert result.error.code == "COMPLETED_STATUS_FORBIDDEN"

    @pytest.mark.parametrize("reason", ["", "짧은 사유", "         가나다         "])
    def test_사유가_10자_미만이면_실패한다(self, make_counsel_request, reason) -> None:
        counsel_request = make_counsel_request()

        result = counsel_request.admin_force_status(CounselRequestStatus.REJECTED, reason)

        assert result.error.code == "INVALID_REASON"
        assert counsel_request.status == CounselRequestStatus.PENDING

    def test_같은_상태로는_변경할_수_없다(self, make_counsel_request) -> None:
        counsel_request = make_counsel_request(status=CounselRequestStatus.MATCHED)

        result = counsel_request.admin_force_status(CounselRequestStatus.MATCHED, self.REASON)

        assert result.error.code == "SAME_STATUS"

    def test_완료_잠금이_다른_검사보다_먼저_적용된다(self, make_counsel_request) -> None:
        counsel_request = make_counsel_request(status=CounselRequestStatus.COMPLETED)

        result = counsel_request.admin_force_status(CounselRequestStatus.COMPLETED, "")

        assert result.error.code == "COMPLETED_REQUEST_LOCKED"

    def test_변경해도_다른_필드는_유지된다(self, make_counsel_request) -> None:
        counsel_request = make_counsel_request(
            status=CounselRequestStatus.MATCHED, matched_institution_id="inst-1"
        )
        form_data = counsel_request.form_data

        counsel_request.admin_force_status(CounselRequestStatus.REJECTED, self.REASON)

        assert counsel_request.matched_institution_id == "inst-1"
        assert counsel_request.form_data is form_data
        assert counsel_request.child_id == "child-1"


class TestIntegratedReportStatus:
    """통합 보고서 상태 테스트."""

    def test_생성_요청_시_pending으로_표시한다(self, make_counsel_request) -> None:
        counsel_request = make_counsel_request()

        counsel_request.mark_integrated_report_pending()

        assert counsel_request.integrated_report_status == IntegratedReportStatus.PENDING

    def test_완료_결과와_S3_키를_반영한다(self, make_counsel_request) -> None:
        counsel_request = make_counsel_request()

        result = counsel_request.update_integrated_report_status(
            "completed", "integrated-reports/req-1.pdf"
        )

        assert result.is_success
        assert counsel_request.integrated_report_status == IntegratedReportStatus.COMPLETED
        assert counsel_request.integrated_report_s3_key == "integrated-reports/req-1.pdf"

    def test_완료인데_S3_키가_없으면_실패한다(self, make_counsel_request) -> None:
        counsel_request = make_counsel_request()

        result = counsel_request.update_integrated_report_status("completed", None)

        assert result.error.code == "MISSING_INTEGRATED_REPORT_KEY"
        assert counsel_request.integrated_report_status is None

    def test_알_수_없는_상태는_실패한다(self, make_counsel_request) -> None:
        counsel_request = make_counsel_request()

        result = counsel_request.update_integrated_report_status("done")

        assert result.error.code == "INVALID_INTEGRATED_REPORT_STATUS"

    def test_실패_상태는_키_없이_반영된다(self, make_counsel_request) -> None:
        counsel_request = make_counsel_request()

        result = counsel_request.update_integrated_report_status("failed")

        assert result.is_success
        assert counsel_request.integrated_report_status == IntegratedReportStatus.FAILED
        assert counsel_request.integrated_report_s3_key is None
