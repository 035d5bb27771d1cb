"""Service layer tests for counsel reports."""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from yeirin_backend.domain.counsel_report.status import ReportStatus
from yeirin_backend.infrastructure.database.errors import ConcurrentModificationError
from yeirin_backend.services.authorization import CounselRequestGuardianAuthorization
from yeirin_backend.services.counsel_report_service import CounselReportService


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """Mock database session."""
    return AsyncMock()


@pytest.fixture
def guardian_authorization() -> AsyncMock:
    """보호자 권한 확인 (기본 허용)."""
    authorization = AsyncMock()
    authorization.is_guardian_of = AsyncMock(return_value=True)
    return authorization


@pytest.fixture
def service(mock_db_session: AsyncMock, guardian_authorization: AsyncMock) -> CounselReportService:
    """저장소를 교체한 면담결과지 서비스."""
    service = CounselReportService(mock_db_session, guardian_authorization=guardian_authorization)
    service.report_repo = AsyncMock()
    service.counsel_request_repo = AsyncMock()
    service.report_repo.save.side_effect = lambda report: report
    return service


def _create_kwargs(**overrides) -> dict:
    kwargs = {
        "counselor_id": "counselor-1",
        "institution_id": "inst-1",
        "counsel_request_id": "req-1",
        "child_id": "child-1",
        "report_date": date(2025, 2, 1),
        "center_name": "서울아동심리상담센터",
        "counsel_reason": "또래 관계 갈등으로 인한 상담",
        "counsel_content": "아동이 최근 학교에서 있었던 일을 이야기하며 감정을 표현함",
    }
    kwargs.update(overrides)
    return kwargs


class TestCreateReport:
    """면담결과지 작성 테스트."""

    @pytest.mark.asyncio
    async def test_회차를_생략하면_다음_회차로_생성한다(self, service) -> None:
        # Given
        service.report_repo.get_next_session_number = AsyncMock(return_value=3)
        service.report_repo.find_by_counsel_request_id_and_session = AsyncMock(return_value=None)

        # When
        result = await service.create_report(**_create_kwargs())

        # Then
        assert result.is_success
        report = result.value
        assert report.session_number == 3
        assert report.status == ReportStatus.DRAFT
        assert report.counselor_id == "counselor-1"
        assert report.institution_id == "inst-1"
        service.report_repo.save.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_같은_회차가_있으면_저장하지_않는다(self, service, make_report) -> None:
        # Given
        service.report_repo.find_by_counsel_request_id_and_session = AsyncMock(
            return_value=make_report(session_number=2)
        )

        # When
        result = await service.create_report(**_create_kwargs(session_number=2))

        # Then
        assert result.error.code == "DUPLICATE_SESSION_NUMBER"
        assert result.error.message == "해당 상담의뢰지의 해당 회차 면담결과지가 이미 존재합니다."
        service.report_repo.save.assert_not_awaited()
        service.report_repo.get_next_session_number.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_저장_시점의_회차_중복도_DUPLICATE_SESSION_NUMBER(self, service) -> None:
        service.report_repo.find_by_counsel_request_id_and_session = AsyncMock(return_value=None)
        service.report_repo.save.side_effect = ConcurrentModificationError("CounselReport", "r")

        result = await service.create_report(**_create_kwargs(session_number=1))

        assert result.error.code == "DUPLICATE_SESSION_NUMBER"

    @pytest.mark.asyncio
    async def test_도메인_검증_실패는_그대로_반환한다(self, service) -> None:
        service.report_repo.find_by_counsel_request_id_and_session = AsyncMock(return_value=None)

        result = await service.create_report(**_create_kwargs(session_number=1, center_name=" "))

        assert result.error.code == "MISSING_CENTER_NAME"
        service.report_repo.save.assert_not_awaited()


class TestCounselorActions:
    """상담사 수정/제출 테스트."""

    @pytest.mark.asyncio
    async def test_작성자가_제출한다(self, service, make_report) -> None:
        report = make_report()
        service.report_repo.find_by_id = AsyncMock(return_value=report)

        result = await service.submit_report("report-1", "counselor-1")

        assert result.value.status == ReportStatus.SUBMITTED
        service.report_repo.save.assert_awaited_once_with(report)

    @pytest.mark.asyncio
    async def test_다른_상담사는_제출할_수_없다(self, service, make_report) -> None:
        # Given
        report = make_report()
        service.report_repo.find_by_id = AsyncMock(return_value=report)

        # When
        result = await service.submit_report("report-1", "counselor-2")

        # Then
        assert result.error.code == "UNAUTHORIZED"
        assert result.error.message == "본인이 작성한 면담결과지만 제출할 수 있습니다."
        assert report.status == ReportStatus.DRAFT
        service.report_repo.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_권한_확인이_상태_검사보다_먼저_수행된다(self, service, make_report) -> None:
        service.report_repo.find_by_id = AsyncMock(
            return_value=make_report(status=ReportStatus.SUBMITTED)
        )

        result = await service.submit_report("report-1", "counselor-2")

        assert result.error.code == "UNAUTHORIZED"

    @pytest.mark.asyncio
    async def test_없는_결과지는_REPORT_NOT_FOUND(self, service) -> None:
        service.report_repo.find_by_id = AsyncMock(return_value=None)

        result = await service.submit_report("missing", "counselor-1")

        assert result.error.code == "REPORT_NOT_FOUND"
        assert result.error.message == "면담결과지를 찾을 수 없습니다. (ID: missing)"

    @pytest.mark.asyncio
    async def test_다른_상담사는_수정할_수_없다(self, service, make_report) -> None:
        service.report_repo.find_by_id = AsyncMock(return_value=make_report())

        result = await service.update_report(
            "report-1", "counselor-2", counsel_reason="다른 상담사의 수정 시도입니다"
        )

        assert result.error.code == "UNAUTHORIZED"
        assert result.error.message == "본인이 작성한 면담결과지만 수정할 수 있습니다."

    @pytest.mark.asyncio
    async def test_작성자는_작성_중인_결과지를_수정한다(self, service, make_report) -> None:
        service.report_repo.find_by_id = AsyncMock(return_value=make_report())

        result = await service.update_report(
            "report-1", "counselor-1", home_feedback="가정에서 대화 시간을 늘려주세요"
        )

        assert result.value.home_feedback == "가정에서 대화 시간을 늘려주세요"

    @pytest.mark.asyncio
    async def test_버전_충돌은_CONCURRENT_MODIFICATION(self, service, make_report) -> None:
        service.report_repo.find_by_id = AsyncMock(return_value=make_report())
        service.report_repo.save.side_effect = ConcurrentModificationError(
            "CounselReport", "report-1", 1
        )

        result = await service.submit_report("report-1", "counselor-1")

        assert result.error.code == "CONCURRENT_MODIFICATION"


class TestGuardianActions:
    """보호자 확인/승인 테스트."""

    @pytest.mark.asyncio
    async def test_보호자가_확인한다(self, service, make_report, guardian_authorization) -> None:
        report = make_report(status=ReportStatus.SUBMITTED)
        service.report_repo.find_by_id = AsyncMock(return_value=report)

        result = await service.review_report("report-1", "guardian-1")

        assert result.value.status == ReportStatus.REVIEWED
        guardian_authorization.is_guardian_of.assert_awaited_once_with("guardian-1", report)

    @pytest.mark.asyncio
    async def test_보호자가_아니면_승인할_수_없다(
        self, service, make_report, guardian_authorization
    ) -> None:
        # Given
        report = make_report(status=ReportStatus.REVIEWED)
        service.report_repo.find_by_id = AsyncMock(return_value=report)
        guardian_authorization.is_guardian_of = AsyncMock(return_value=False)

        # When
        result = await service.approve_report("report-1", "stranger", "좋습니다")

        # Then
        assert result.error.code == "UNAUTHORIZED"
        assert report.status == ReportStatus.REVIEWED
        service.report_repo.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_피드백과_함께_승인한다(self, service, make_report) -> None:
        service.report_repo.find_by_id = AsyncMock(
            return_value=make_report(status=ReportStatus.REVIEWED)
        )

        result = await service.approve_report("report-1", "guardian-1", "좋습니다")

        assert result.value.status == ReportStatus.APPROVED
        assert result.value.guardian_feedback == "좋습니다"

    @pytest.mark.asyncio
    async def test_빈_피드백은_INVALID_FEEDBACK(self, service, make_report) -> None:
        service.report_repo.find_by_id = AsyncMock(
            return_value=make_report(status=ReportStatus.REVIEWED)
        )

        result = await service.approve_report("report-1", "guardian-1", "   ")

        assert result.error.code == "INVALID_FEEDBACK"


class TestGetReports:
    """면담결과지 조회 테스트."""

    @pytest.mark.asyncio
    async def test_보호자_화면에서는_작성_중인_결과지를_제외한다(
        self, service, make_report, make_counsel_request
    ) -> None:
        service.counsel_request_repo.find_by_id = AsyncMock(return_value=make_counsel_request())
        service.report_repo.find_by_counsel_request_id = AsyncMock(
            return_value=[
                make_report(id="r3", session_number=3),
                make_report(id="r1", session_number=1, status=ReportStatus.APPROVED),
                make_report(id="r2", session_number=2, status=ReportStatus.SUBMITTED),
            ]
        )

        counselor_view = await service.get_reports_by_counsel_request("req-1")
        guardian_view = await service.get_reports_by_counsel_request("req-1", guardian_view=True)

        assert [r.id for r in counselor_view.value] == ["r1", "r2", "r3"]
        assert [r.id for r in guardian_view.value] == ["r1", "r2"]

    @pytest.mark.asyncio
    async def test_없는_상담의뢰지는_NOT_FOUND(self, service) -> None:
        service.counsel_request_repo.find_by_id = AsyncMock(return_value=None)

        result = await service.get_reports_by_counsel_request("missing")

        assert result.error.code == "COUNSEL_REQUEST_NOT_FOUND"


class TestCounselRequestGuardianAuthorization:
    """상담의뢰지 기반 보호자 권한 확인 테스트."""

    @pytest.mark.asyncio
    async def test_상담의뢰지의_보호자만_허용한다(self, make_counsel_request, make_report) -> None:
        repo = AsyncMock()
        repo.find_by_id = AsyncMock(return_value=make_counsel_request(guardian_id="guardian-1"))
        authorization = CounselRequestGuardianAuthorization(repo)

        assert await authorization.is_guardian_of("guardian-1", make_report())
        assert not await authorization.is_guardian_of("guardian-2", make_report())

    @pytest.mark.asyncio
    async def test_기관_의뢰_건은_거부한다(self, make_counsel_request, make_report) -> None:
        repo = AsyncMock()
        repo.find_by_id = AsyncMock(return_value=make_counsel_request(guardian_id=None))
        authorization = CounselRequestGuardianAuthorization(repo)

        assert not await authorization.is_guardian_of("guardian-1", make_report())

    @pytest.mark.asyncio
    async def test_기본_권한_확인은_상담의뢰지_저장소를_사용한다(self, mock_db_session) -> None:
        service = CounselReportService(mock_db_session)

        assert isinstance(service.guardian_authorization, CounselRequestGuardianAuthorization)
        assert service.guardian_authorization.counsel_request_repo is service.counsel_request_repo
