"""상담의뢰지 텍스트 변환 테스트."""

from yeirin_backend.domain.counsel_request.text import form_data_to_text


class TestFormDataToText:
    """AI 추천 요청 텍스트 변환 테스트."""

    def test_아동_정보와_의뢰_내용을_포함한다(self, form_data) -> None:
        text = form_data_to_text(form_data)

        assert "아동: 9세 초3" in text
        assert "센터 이용 기준: 일반 아동" in text
        assert "기존 병력: ADHD 진단 (2023년)" in text
        assert "의뢰 동기: 학교에서 집중하지 못하고 친구들과 자주 다툽니다" in text
        assert "상담 목표: 정서 안정과 사회성 향상" in text

    def test_우선돌봄_사유를_함께_표시한다(self, make_form_data) -> None:
        form_data = make_form_data(care_type="PRIORITY", priority_reason="GRANDPARENT")

        text = form_data_to_text(form_data)

        assert "센터 이용 기준: 우선돌봄 아동 (조손가구의 아동)" in text

    def test_첨부된_검사소견을_포함한다(self, make_form_data) -> None:
        form_data = make_form_data(
            test_results={
                "attachedAssessments": [
                    {
                        "assessmentType": "CRTES_R",
                        "assessmentName": "아동 외상 반응 척도",
                        "resultId": "result-1",
                        "summary": {
                            "assessmentType": "CRTES_R",
                            "summaryLines": ["외상 반응이 경미합니다."],
                            "expertOpinion": "지속적인 관찰이 필요합니다.",
                        },
                    }
                ]
            }
        )

        text = form_data_to_text(form_data)

        assert "아동 외상 반응 척도 요약: 외상 반응이 경미합니다." in text
        assert "아동 외상 반응 척도 전문가 소견: 지속적인 관찰이 필요합니다." in text

    def test_첨부가_없으면_레거시_KPRC_소견을_사용한다(self, make_form_data) -> None:
        form_data = make_form_data(
            test_results={
                "assessmentReportS3Key": "assessment-reports/kprc.pdf",
                "kprcSummary": {"expertOpinion": "정서적 어려움이 관찰됩니다."},
            }
        )

        text = form_data_to_text(form_data)

        assert "KPRC 인성평정척도 전문가 소견: 정서적 어려움이 관찰됩니다." in text
