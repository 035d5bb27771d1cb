"""상담의뢰지 관련 열거형."""

from enum import Enum


class CounselRequestStatus(str, Enum):
    """상담의뢰 상태."""

    PENDING = "PENDING"  # 접수 대기
    RECOMMENDED = "RECOMMENDED"  # AI 추천 완료
    MATCHED = "MATCHED"  # 기관 선택 완료
    IN_PROGRESS = "IN_PROGRESS"  # 상담 진행 중
    COMPLETED = "COMPLETED"  # 상담 완료
    REJECTED = "REJECTED"  # 매칭 거부


class CareType(str, Enum):
    """센터 이용 기준."""

    PRIORITY = "PRIORITY"  # 우선돌봄 아동
    GENERAL = "GENERAL"  # 일반 아동
    SPECIAL = "SPECIAL"  # 돌봄 특례 아동


class PriorityReason(str, Enum):
    """우선돌봄 세부 사유."""

    BASIC_LIVELIHOOD = "BASIC_LIVELIHOOD"  # 기초생활보장 수급권자
    LOW_INCOME = "LOW_INCOME"  # 차상위계층 가구의 아동
    MEDICAL_AID = "MEDICAL_AID"  # 의료급여 수급권자
    DISABILITY = "DISABILITY"  # 장애가구의 아동 또는 장애 아동
    MULTICULTURAL = "MULTICULTURAL"  # 다문화가족의 아동
    SINGLE_PARENT = "SINGLE_PARENT"  # 한부모가족의 아동
    GRANDPARENT = "GRANDPARENT"  # 조손가구의 아동
    EDUCATION_SUPPORT = "EDUCATION_SUPPORT"  # 초중고 교육비 지원 대상 아동
    MULTI_CHILD = "MULTI_CHILD"  # 자녀가 2명 이상인 가구의 아동


class Gender(str, Enum):
    """성별."""

    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"


class ConsentStatus(str, Enum):
    """보호자 동의 상태."""

    AGREED = "AGREED"
    DISAGREED = "DISAGREED"


class ProtectedChildType(str, Enum):
    """보호대상 아동 유형."""

    CHILD_FACILITY = "CHILD_FACILITY"  # 아동 양육시설
    GROUP_HOME = "GROUP_HOME"  # 공동생활가정(그룹홈)


class ProtectedChildReason(str, Enum):
    """보호대상 아동 사유."""

    GUARDIAN_ABSENCE = "GUARDIAN_ABSENCE"  # 보호자가 없거나 보호자로부터 이탈
    ABUSE = "ABUSE"  # 아동을 학대하는 경우
    ILLNESS_RUNAWAY = "ILLNESS_RUNAWAY"  # 보호자의 질병, 가출 등
    LOCAL_GOVERNMENT = "LOCAL_GOVERNMENT"  # 지방자치단체장이 보호가 필요하다고 인정한 자


class AssessmentType(str, Enum):
    """첨부 가능한 심리검사 유형."""

    KPRC = "KPRC_CO_SG_E"  # KPRC 인성평정척도
    CRTES_R = "CRTES_R"  # 아동 외상 반응 척도
    SDQ_A = "SDQ_A"  # 강점·난점 설문지


class IntegratedReportStatus(str, Enum):
    """통합 보고서 생성 상태."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
