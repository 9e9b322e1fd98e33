from datetime import date

import pytest
from dischargeflow.models.clinical import ClinicalData
from dischargeflow.models.patient import Patient
from dischargeflow.services.prompt_builder import (
    CONSULTANT_DOCTORS,
    SYSTEM_INSTRUCTION,
    build_messages,
    build_prompt,
    format_date,
)


def _patient(**overrides) -> Patient:
    fields = dict(
        id=1,
        name="John Doe",
        age=60,
        gender="Male",
        regd_no=None,
        ip_no=None,
        department="General Medicine",
        ward="ICU",
        doa=date(2024, 1, 1),
        dodeath=None,
        primary_consultant="Dr. X",
    )
    fields.update(overrides)
    return Patient(**fields)


def _clinical(**overrides) -> ClinicalData:
    fields = dict(
        patient_id=1,
        final_diagnosis="Sepsis",
        chief_complaints="Fever",
        past_medical_history=None,
        oemd=None,
        hospital_course="Stable then declined",
        investigations="CBC normal",
    )
    fields.update(overrides)
    return ClinicalData(**fields)


class TestBuildPrompt:
    def test_deterministic_output(self):
        """Same inputs must yield byte-identical prompts."""
        first = build_prompt(_patient(), _clinical())
        second = build_prompt(_patient(), _clinical())
        assert first == second

    def test_upper_cases_identity_fields(self):
        prompt = build_prompt(_patient(), _clinical())
        assert "NAME: JOHN DOE" in prompt
        assert "SEX: MALE" in prompt
        assert "DEPARTMENT: GENERAL MEDICINE" in prompt
        assert "WARD: ICU" in prompt
        assert "PRIMARY CONSULTANT: DR. X" in prompt
        assert "FINAL DIAGNOSIS: SEPSIS" in prompt

    def test_free_text_fields_keep_their_case(self):
        prompt = build_prompt(_patient(), _clinical())
        assert "CHIEF COMPLAINTS: Fever" in prompt
        assert "HOSPITAL COURSE:\nStable then declined" in prompt
        assert "INVESTIGATIONS:\nCBC normal" in prompt

    def test_dates_rendered_for_display(self):
        prompt = build_prompt(_patient(dodeath=date(2024, 1, 9)), _clinical())
        assert "D.O.A: 01/01/2024" in prompt
        assert "D.O.DEATH: 09/01/2024" in prompt

    def test_absent_optional_patient_fields_render_na(self):
        prompt = build_prompt(_patient(), _clinical())
        assert "REGD. NO: N/A" in prompt
        assert "IP NO : N/A" in prompt
        assert "D.O.DEATH: N/A" in prompt

    def test_field_specific_sentinels(self):
        """Past history falls back to NIL, examination notes to N/A."""
        prompt = build_prompt(_patient(), _clinical(past_medical_history="", oemd=None))
        assert "PAST MEDICAL HISTORY: NIL" in prompt
        assert "O/E AT EMD:\nN/A" in prompt

    def test_missing_clinical_data_uses_sentinels(self):
        prompt = build_prompt(_patient(), None)
        assert "FINAL DIAGNOSIS: N/A" in prompt
        assert "CHIEF COMPLAINTS: N/A" in prompt
        assert "PAST MEDICAL HISTORY: NIL" in prompt
        assert "HOSPITAL COURSE:\nN/A" in prompt
        assert "INVESTIGATIONS:\nREPORTS ENCLOSED" in prompt

    def test_age_zero_is_not_treated_as_missing(self):
        assert "AGE: 0 YEARS" in build_prompt(_patient(age=0), _clinical())

    def test_consultant_roster_is_listed_in_order(self):
        prompt = build_prompt(_patient(), _clinical())
        for i, doctor in enumerate(CONSULTANT_DOCTORS, start=1):
            assert f"({i}) {doctor}" in prompt

    def test_does_not_leak_other_patients_data(self):
        prompt = build_prompt(_patient(name="Jane Roe"), _clinical())
        assert "JOHN DOE" not in prompt
        assert "JANE ROE" in prompt


class TestFormatDate:
    @pytest.mark.parametrize("value", [None, ""])
    def test_blank_is_na(self, value):
        assert format_date(value) == "N/A"

    def test_iso_string_accepted(self):
        assert format_date("2024-03-15") == "15/03/2024"


def test_messages_are_role_tagged():
    messages = build_messages("prompt body")
    assert messages[0] == {"role": "system", "content": SYSTEM_INSTRUCTION}
    assert messages[1] == {"role": "user", "content": "prompt body"}
