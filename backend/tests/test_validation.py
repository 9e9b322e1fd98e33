from datetime import date

import pytest
from dischargeflow.core.errors import ValidationError
from dischargeflow.services.validation import (
    parse_patient_id,
    validate_clinical_data,
    validate_patient,
    validate_summary_review,
)


class TestPatientValidation:
    def test_valid_payload_is_normalised(self, patient_payload):
        fields = validate_patient(dict(patient_payload, regd_no="  R-1 ", ip_no="   "))
        assert fields["doa"] == date(2024, 1, 1)
        assert fields["regd_no"] == "R-1"
        assert fields["ip_no"] is None
        assert fields["dodeath"] is None

    def test_negative_age_cites_age(self, patient_payload):
        with pytest.raises(ValidationError) as exc_info:
            validate_patient(dict(patient_payload, age=-1))
        assert exc_info.value.fields == ["age"]
        assert exc_info.value.violations[0]["message"] == "Age must be a positive integer"

    @pytest.mark.parametrize("age", ["sixty", 60.5, True, None])
    def test_non_integer_age_rejected(self, patient_payload, age):
        with pytest.raises(ValidationError) as exc_info:
            validate_patient(dict(patient_payload, age=age))
        assert "age" in exc_info.value.fields

    def test_numeric_string_age_accepted(self, patient_payload):
        assert validate_patient(dict(patient_payload, age="45"))["age"] == 45

    @pytest.mark.parametrize("age", [151, 10 ** 20])
    def test_implausible_age_rejected(self, patient_payload, age):
        """Ages beyond the plausible range never reach the database."""
        with pytest.raises(ValidationError) as exc_info:
            validate_patient(dict(patient_payload, age=age))
        assert exc_info.value.fields == ["age"]

    def test_oldest_plausible_age_accepted(self, patient_payload):
        assert validate_patient(dict(patient_payload, age=150))["age"] == 150

    def test_all_violations_collected(self):
        """Every missing field is reported in one batch."""
        with pytest.raises(ValidationError) as exc_info:
            validate_patient({})
        assert set(exc_info.value.fields) == {
            "name", "age", "gender", "department", "ward", "doa", "primary_consultant",
        }

    @pytest.mark.parametrize("field", ["name", "gender", "department", "ward", "primary_consultant"])
    def test_blank_required_text_rejected(self, patient_payload, field):
        with pytest.raises(ValidationError) as exc_info:
            validate_patient(dict(patient_payload, **{field: "  "}))
        assert exc_info.value.fields == [field]

    @pytest.mark.parametrize(
        "value",
        ["2024-02-30", "01/01/2024", "yesterday", 1704067200, "2024-01-01Tgarbage", "2024-01-01 99:99"],
    )
    def test_invalid_admission_date(self, patient_payload, value):
        with pytest.raises(ValidationError) as exc_info:
            validate_patient(dict(patient_payload, doa=value))
        assert exc_info.value.fields == ["doa"]

    def test_iso_datetime_accepted_as_date(self, patient_payload):
        assert validate_patient(dict(patient_payload, doa="2024-01-01T10:30:00Z"))["doa"] == date(2024, 1, 1)

    def test_invalid_death_date(self, patient_payload):
        with pytest.raises(ValidationError) as exc_info:
            validate_patient(dict(patient_payload, dodeath="not-a-date"))
        assert exc_info.value.violations == [
            {"field": "dodeath", "message": "D.O.DEATH must be a valid date"}
        ]

    def test_non_object_body_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_patient(["not", "a", "dict"])
        assert exc_info.value.fields == ["body"]


class TestClinicalDataValidation:
    def test_valid_payload(self, clinical_payload):
        patient_id, fields = validate_clinical_data("3", clinical_payload)
        assert patient_id == 3
        assert fields["final_diagnosis"] == "Sepsis"
        assert fields["oemd"] is None

    def test_path_and_body_violations_reported_together(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_clinical_data("abc", {"final_diagnosis": "Sepsis"})
        assert set(exc_info.value.fields) == {
            "id", "chief_complaints", "hospital_course", "investigations",
        }


class TestSummaryReviewValidation:
    def test_valid(self):
        assert validate_summary_review("7", {"summary_text": "Edited"}) == (7, "Edited")

    def test_blank_text(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_summary_review("7", {"summary_text": ""})
        assert exc_info.value.violations == [
            {"field": "summary_text", "message": "Updated summary text is required"}
        ]


@pytest.mark.parametrize("raw", ["x", "1.5", "", True, "0_1", "1e3", "99999999999999999999999", 2 ** 63])
def test_patient_id_must_be_integer(raw):
    with pytest.raises(ValidationError) as exc_info:
        parse_patient_id(raw)
    assert exc_info.value.violations[0]["message"] == "Patient ID must be an integer"


@pytest.mark.parametrize("raw,expected", [("42", 42), (" 7 ", 7), (5, 5), (str(2 ** 63 - 1), 2 ** 63 - 1)])
def test_patient_id_accepts_plain_integers(raw, expected):
    assert parse_patient_id(raw) == expected
