"""상담의뢰지 양식을 AI 추천 요청용 텍스트로 변환합니다."""

from yeirin_backend.domain.counsel_request.enums import CareType, PriorityReason
from yeirin_backend.domain.counsel_request.form_data import CounselRequestFormData

CARE_TYPE_LABELS: dict[CareType, str] = {
    CareType.PRIORITY: "우선돌봄 아동",
    CareType.GENERAL: "일반 아동",
    CareType.SPECIAL: "돌봄 특례 아동",
}

PRIORITY_REASON_LABELS: dict[PriorityReason, str] = {
    PriorityReason.BASIC_LIVELIHOOD: "기초생활보장 수급권자",
    PriorityReason.LOW_INCOME: "차상위계층 가구의 아동",
    PriorityReason.MEDICAL_AID: "의료급여 수급권자",
    PriorityReason.DISABILITY: "장애가구의 아동 또는 장애 아동",
    PriorityReason.MULTICULTURAL: "다문화가족의 아동",
    PriorityReason.SINGLE_PARENT: "한부모가족의 아동",
    PriorityReason.GRANDPARENT: "조손가구의 아동",
    PriorityReason.EDUCATION_SUPPORT: "초중고 교육비 지원 대상 아동",
    PriorityReason.MULTI_CHILD: "자녀가 2명 이상인 가구의 아동",
}


def form_data_to_text(form_data: CounselRequestFormData) -> str:
    """양식 데이터를 추천 서비스에 전달할 자유 텍스트로 변환합니다.

    비어 있는 항목은 건너뛰며, 검사소견은 요약 문장과 전문가 소견만 포함합니다.

    Args:
        form_data: 상담의뢰지 양식 데이터

    Returns:
        줄바꿈으로 구분된 상담의뢰 텍스트
    """
    basic = form_data.basicInfo
    child = basic.childInfo
    lines: list[str] = [f"아동: {child.age}세 {child.grade}"]

    care_label = CARE_TYPE_LABELS.get(basic.careType, basic.careType.value)
    if basic.priorityReason:
        care_label += f" ({PRIORITY_REASON_LABELS[basic.priorityReason]})"
    lines.append(f"센터 이용 기준: {care_label}")

    sections = [
        ("기존 병력", form_data.psychologicalInfo.medicalHistory),
        ("특이사항", form_data.psychologicalInfo.specialNotes),
        ("의뢰 동기", form_data.requestMotivation.motivation),
        ("상담 목표", form_data.requestMotivation.goals),
    ]
    for label, value in sections:
        if value and value.strip():
            lines.append(f"{label}: {value.strip()}")

    test_results = form_data.testResults
    summaries = [
        (a.assessmentName, a.summary) for a in test_results.attachedAssessments if a.summary
    ]
    if not summaries and test_results.kprcSummary:
        summaries.append(("KPRC 인성평정척도", test_results.kprcSummary))

    for name, summary in summaries:
        if summary.summaryLines:
            lines.append(f"{name} 요약: {' '.join(summary.summaryLines)}")
        if summary.expertOpinion:
            lines.append(f"{name} 전문가 소견: {summary.expertOpinion}")

    return "\n".join(lines)
