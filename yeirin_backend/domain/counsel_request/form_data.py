"""상담의뢰지 양식 데이터 (JSONB 문서).

상담의뢰지 본문은 중첩된 문서 구조이며, 값 객체로 취급합니다.
애그리거트는 ``coverInfo.centerName``, ``basicInfo.careType`` 등
알려진 경로만 읽습니다.

필드명은 yeirin 프론트엔드 및 yeirin-ai와 동일한 camelCase를 사용합니다.
범위 검증(월/일 등)은 애그리거트의 ``validate`` 에서 수행하므로
여기서는 타입만 강제합니다.
"""

from datetime import date, timedelta
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from yeirin_backend.domain.counsel_request.enums import (
    AssessmentType,
    CareType,
    ConsentStatus,
    Gender,
    PriorityReason,
    ProtectedChildReason,
    ProtectedChildType,
)


class _FormModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class RequestDate(_FormModel):
    """의뢰 일자."""

    year: int = Field(..., description="년도")
    month: int = Field(..., description="월 (1-12)")
    day: int = Field(..., description="일 (1-31)")

    def to_date(self) -> date:
        """date 객체로 변환.

        일이 그 달의 마지막 날을 넘으면 다음 달로 이어집니다 (4월 31일 → 5월 1일).
        """
        return date(self.year, self.month, 1) + timedelta(days=self.day - 1)

    def to_korean_string(self) -> str:
        """한국어 날짜 문자열로 변환."""
        return f"{self.year}년 {self.month}월 {self.day}일"


class CoverInfo(_FormModel):
    """표지 정보."""

    requestDate: RequestDate = Field(..., description="의뢰 일자")
    centerName: str = Field(..., description="센터명")
    counselorName: str = Field(..., description="담당자 이름")


class ChildInfo(_FormModel):
    """아동 정보."""

    name: str = Field(..., description="아동 이름")
    gender: Gender = Field(..., description="성별")
    age: int = Field(..., ge=0, description="연령")
    grade: str = Field(..., description="학년 (예: 초1, 중2, 미취학)")
    birthDate: str | None = Field(None, description="생년월일 (사회서비스 이용 추천서용)")


class ProtectedChildInfo(_FormModel):
    """보호대상 아동 정보."""

    type: ProtectedChildType | None = Field(None, description="아동양육시설 / 공동생활가정")
    reason: ProtectedChildReason | None = Field(None, description="보호 사유")


class BasicInfo(_FormModel):
    """기본 정보."""

    childInfo: ChildInfo = Field(..., description="아동 정보")
    careType: CareType = Field(..., description="센터 이용 기준")
    priorityReason: PriorityReason | None = Field(
        None, description="우선돌봄 세부 사유 (careType이 PRIORITY일 때만)"
    )
    protectedChildInfo: ProtectedChildInfo | None = Field(None, description="보호대상 아동 정보")


class PsychologicalInfo(_FormModel):
    """정서·심리 관련 정보."""

    medicalHistory: str = Field(..., description="기존 아동 병력")
    specialNotes: str = Field(..., description="병력 외 특이사항")


class RequestMotivation(_FormModel):
    """의뢰 동기 및 상담 목표."""

    motivation: str = Field(..., description="의뢰 동기")
    goals: str = Field(..., description="보호자 및 의뢰자의 목표")


# =============================================================================
# 검사소견 (yeirin-ai 생성)
# =============================================================================


class BaseAssessmentSummary(_FormModel):
    """공통 검사소견 필드."""

    summaryLines: list[str] | None = Field(None, description="요약 문장 (최대 5줄)")
    expertOpinion: str | None = Field(None, description="전문가 소견")
    keyFindings: list[str] | None = Field(None, description="핵심 발견 사항")
    recommendations: list[str] | None = Field(None, description="권장 사항")
    confidenceScore: float | None = Field(None, ge=0.0, le=1.0, description="신뢰도 점수")


class KprcAssessmentSummary(BaseAssessmentSummary):
    """KPRC 검사소견."""

    assessmentType: Literal["KPRC_CO_SG_E"] | None = None


class CrtesRAssessmentSummary(BaseAssessmentSummary):
    """CRTES-R 검사소견 (아동 외상 반응 척도)."""

    assessmentType: Literal["CRTES_R"]
    totalScore: int | None = Field(None, description="총점 (0-115)")
    riskLevel: Literal["normal", "caution", "high_risk"] | None = None
    riskLevelDescription: str | None = None


class SdqAAssessmentSummary(BaseAssessmentSummary):
    """SDQ-A 검사소견 (강점·난점 설문지)."""

    assessmentType: Literal["SDQ_A"]
    strengthsScore: int | None = Field(None, description="강점 총점 (0-10)")
    strengthsLevel: int | None = Field(None, description="강점 수준 (1-3)")
    strengthsLevelDescription: str | None = None
    difficultiesScore: int | None = Field(None, description="난점 총점 (0-40)")
    difficultiesLevel: int | None = Field(None, description="난점 수준 (1-3)")
    difficultiesLevelDescription: str | None = None


AssessmentSummary = Union[CrtesRAssessmentSummary, SdqAAssessmentSummary, KprcAssessmentSummary]


class AttachedAssessment(_FormModel):
    """첨부된 개별 검사 결과 정보."""

    assessmentType: AssessmentType = Field(..., description="검사 유형")
    assessmentName: str = Field(..., description="검사명")
    reportS3Key: str | None = Field(None, description="S3 PDF 키 (KPRC만 존재)")
    resultId: str = Field(..., description="검사 결과 ID")
    totalScore: float | None = None
    maxScore: float | None = None
    overallLevel: Literal["normal", "caution", "clinical"] | None = None
    scoredAt: str | None = None
    summary: AssessmentSummary | None = None


class TestResults(_FormModel):
    """검사 결과.

    ``assessmentReportS3Key`` 와 ``kprcSummary`` 는 ``attachedAssessments``
    도입 이전의 레거시 필드이며, 기존 클라이언트 호환을 위해 유지합니다.
    """

    __test__ = False  # pytest 수집 대상 아님

    attachedAssessments: list[AttachedAssessment] = Field(
        default_factory=list, description="첨부된 검사 결과 (최대 3개)"
    )
    assessmentReportS3Key: str | None = Field(
        None, description="[deprecated] KPRC 결과 PDF S3 Key"
    )
    kprcSummary: KprcAssessmentSummary | None = Field(
        None, description="[deprecated] KPRC 검사소견"
    )

    def has_legacy_kprc(self) -> bool:
        """레거시 KPRC 필드가 모두 채워져 있는지 확인합니다."""
        return self.kprcSummary is not None and bool(self.assessmentReportS3Key)

    def has_any_assessment(self) -> bool:
        """신규 또는 레거시 방식으로 검사 결과가 하나라도 있는지 확인합니다."""
        return bool(self.attachedAssessments) or self.has_legacy_kprc()

    def find_kprc(self) -> AttachedAssessment | None:
        """첨부 목록에서 KPRC 검사를 찾습니다."""
        for assessment in self.attachedAssessments:
            if assessment.assessmentType == AssessmentType.KPRC:
                return assessment
        return None


class GuardianInfo(_FormModel):
    """보호자 정보 (사회서비스 이용 추천서용)."""

    name: str
    phoneNumber: str | None = None
    address: str | None = None
    relationToChild: str | None = None


class InstitutionInfo(_FormModel):
    """의뢰 기관 정보 (사회서비스 이용 추천서용)."""

    institutionName: str
    phoneNumber: str | None = None
    address: str | None = None
    writerName: str | None = None
    writerPosition: str | None = None


class CounselRequestFormData(_FormModel):
    """상담의뢰지 전체 양식 데이터."""

    coverInfo: CoverInfo
    basicInfo: BasicInfo
    psychologicalInfo: PsychologicalInfo
    requestMotivation: RequestMotivation
    testResults: TestResults = Field(default_factory=TestResults)
    consent: ConsentStatus
    guardianInfo: GuardianInfo | None = None
    institutionInfo: InstitutionInfo | None = None
