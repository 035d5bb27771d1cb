"""API 요청/응답 모델 (DTO)."""

from datetime import date, datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from yeirin_backend.domain.common.pagination import PaginatedResult
from yeirin_backend.domain.counsel_report.models import CounselReport
from yeirin_backend.domain.counsel_report.status import ReportStatus
from yeirin_backend.domain.counsel_request.enums import (
    CounselRequestStatus,
    IntegratedReportStatus,
)
from yeirin_backend.domain.counsel_request.form_data import CounselRequestFormData
from yeirin_backend.domain.counsel_request.models import CounselRequest
from yeirin_backend.domain.recommendation.models import CounselRequestRecommendation

T = TypeVar("T")


# =============================================================================
# 상담의뢰지
# =============================================================================


class CreateCounselRequestDTO(BaseModel):
    """상담의뢰지 접수 요청 DTO."""

    child_id: str = Field(min_length=1, description="아동 ID")
    guardian_id: str | None = Field(default=None, description="보호자 ID (기관 의뢰 시 생략)")
    form_data: CounselRequestFormData = Field(description="상담의뢰지 양식 데이터")


class UpdateFormDataDTO(BaseModel):
    """상담의뢰지 양식 수정 요청 DTO."""

    form_data: CounselRequestFormData


class MatchCounselRequestDTO(BaseModel):
    """기관/상담사 직접 매칭 요청 DTO."""

    institution_id: str = Field(min_length=1)
    counselor_id: str = Field(min_length=1)


class RejectCounselRequestDTO(BaseModel):
    """매칭 거부 요청 DTO."""

    reason: str | None = Field(default=None, max_length=500, description="거부 사유")


class CounselRequestResponseDTO(BaseModel):
    """상담의뢰지 응답 DTO."""

    id: str
    child_id: str
    guardian_id: str | None
    status: CounselRequestStatus
    center_name: str
    care_type: str
    request_date: date
    form_data: CounselRequestFormData
    matched_institution_id: str | None
    matched_counselor_id: str | None
    integrated_report_s3_key: str | None
    integrated_report_status: IntegratedReportStatus | None
    version: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, counsel_request: CounselRequest) -> "CounselRequestResponseDTO":
        return cls(
            id=counsel_request.id,
            child_id=counsel_request.child_id,
            guardian_id=counsel_request.guardian_id,
            status=counsel_request.status,
            center_name=counsel_request.center_name,
            care_type=counsel_request.care_type.value,
            request_date=counsel_request.request_date,
            form_data=counsel_request.form_data,
            matched_institution_id=counsel_request.matched_institution_id,
            matched_counselor_id=counsel_request.matched_counselor_id,
            integrated_report_s3_key=counsel_request.integrated_report_s3_key,
            integrated_report_status=counsel_request.integrated_report_status,
            version=counsel_request.version,
            created_at=counsel_request.created_at,
            updated_at=counsel_request.updated_at,
        )


class PaginatedResponseDTO(BaseModel, Generic[T]):
    """페이지네이션 응답 DTO."""

    data: list[T]
    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def build(cls, result: PaginatedResult, items: list[T]) -> "PaginatedResponseDTO[T]":
        return cls(
            data=items,
            total=result.total,
            page=result.page,
            limit=result.limit,
            total_pages=result.total_pages,
        )


# =============================================================================
# 추천
# =============================================================================


class RecommendationResponseDTO(BaseModel):
    """추천 기관 응답 DTO (순위순)."""

    id: str
    counsel_request_id: str
    institution_id: str
    score: float = Field(ge=0.0, le=1.0)
    reason: str
    rank: int
    selected: bool
    created_at: datetime

    @classmethod
    def from_domain(
        cls, recommendation: CounselRequestRecommendation
    ) -> "RecommendationResponseDTO":
        return cls(
            id=recommendation.id,
            counsel_request_id=recommendation.counsel_request_id,
            institution_id=recommendation.institution_id,
            score=recommendation.score,
            reason=recommendation.reason,
            rank=recommendation.rank,
            selected=recommendation.selected,
            created_at=recommendation.created_at,
        )


class SelectInstitutionDTO(BaseModel):
    """추천 기관 선택 요청 DTO."""

    institution_id: str = Field(min_length=1, description="선택할 기관 ID (추천 목록 중 하나)")


# =============================================================================
# 관리자
# =============================================================================


class AdminUpdateStatusDTO(BaseModel):
    """관리자 상태 강제 변경 요청 DTO."""

    status: CounselRequestStatus = Field(description="변경할 상태")
    reason: str = Field(min_length=10, max_length=500, description="변경 사유 (10자 이상)")


class AdminStatusChangeResponseDTO(BaseModel):
    """관리자 상태 변경 결과 DTO."""

    counsel_request: CounselRequestResponseDTO
    previous_status: CounselRequestStatus
    new_status: CounselRequestStatus


# =============================================================================
# 면담결과지
# =============================================================================


class CreateCounselReportDTO(BaseModel):
    """면담결과지 작성 요청 DTO."""

    counsel_request_id: str = Field(min_length=1)
    child_id: str = Field(min_length=1)
    session_number: int | None = Field(default=None, ge=1, description="생략 시 다음 회차")
    report_date: date
    center_name: str = Field(min_length=1, max_length=200)
    counselor_signature: str | None = None
    counsel_reason: str = Field(min_length=10, description="상담 사유 (10자 이상)")
    counsel_content: str = Field(min_length=20, description="상담 내용 (20자 이상)")
    center_feedback: str | None = None
    home_feedback: str | None = None
    attachment_urls: list[str] | None = None


class UpdateCounselReportDTO(BaseModel):
    """면담결과지 수정 요청 DTO. 생략한 필드는 변경하지 않습니다."""

    counsel_reason: str | None = Field(default=None, min_length=10)
    counsel_content: str | None = Field(default=None, min_length=20)
    center_feedback: str | None = None
    home_feedback: str | None = None
    counselor_signature: str | None = None
    attachment_urls: list[str] | None = None


class ApproveCounselReportDTO(BaseModel):
    """보호자 승인 요청 DTO."""

    feedback: str = Field(min_length=1, max_length=2000, description="보호자 피드백")


class CounselReportResponseDTO(BaseModel):
    """면담결과지 응답 DTO."""

    id: str
    counsel_request_id: str
    child_id: str
    counselor_id: str | None
    institution_id: str | None
    session_number: int
    report_date: date
    center_name: str
    counselor_signature: str | None
    counsel_reason: str
    counsel_content: str
    center_feedback: str | None
    home_feedback: str | None
    attachment_urls: list[str]
    status: ReportStatus
    submitted_at: datetime | None
    reviewed_at: datetime | None
    guardian_feedback: str | None
    version: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, report: CounselReport) -> "CounselReportResponseDTO":
        return cls(
            id=report.id,
            counsel_request_id=report.counsel_request_id,
            child_id=report.child_id,
            counselor_id=report.counselor_id,
            institution_id=report.institution_id,
            session_number=report.session_number,
            report_date=report.report_date,
            center_name=report.center_name,
            counselor_signature=report.counselor_signature,
            counsel_reason=report.counsel_reason,
            counsel_content=report.counsel_content,
            center_feedback=report.center_feedback,
            home_feedback=report.home_feedback,
            attachment_urls=report.attachment_urls,
            status=report.status,
            submitted_at=report.submitted_at,
            reviewed_at=report.reviewed_at,
            guardian_feedback=report.guardian_feedback,
            version=report.version,
            created_at=report.created_at,
            updated_at=report.updated_at,
        )


# =============================================================================
# 웹훅 / 헬스 체크
# =============================================================================


class IntegratedReportWebhookDTO(BaseModel):
    """yeirin-ai 통합 보고서 완료 웹훅 DTO."""

    counsel_request_id: str = Field(min_length=1)
    status: str = Field(description="pending | processing | completed | failed")
    integrated_report_s3_key: str | None = Field(default=None, description="완료 시 S3 키")
    error_message: str | None = None


class HealthCheckResponse(BaseModel):
    """헬스 체크 응답 모델.

    서비스 상태 확인 API의 응답 형식을 정의합니다.
    """

    status: str = Field(default="healthy", description="서비스 상태")
    version: str = Field(description="애플리케이션 버전")
    service: str = Field(description="서비스 이름")
