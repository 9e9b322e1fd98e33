"""
Validation gate applied before any write.

Each operation has a pydantic model describing its rules. Pydantic already
collects every failure in one pass; the gate maps them onto per-field messages
and raises a single ``ValidationError`` carrying the whole batch.
"""
import logging
import re
from datetime import date, datetime
from typing import Annotated, Any, Dict, List, Optional, Type, TypeVar

from pydantic import AfterValidator, BaseModel, Field, StrictStr, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..core.errors import ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

PATIENT_ID_MESSAGE = "Patient ID must be an integer"
PATIENT_ID_PATTERN = re.compile(r"^[+-]?\d+$", re.ASCII)

# SQLite INTEGER is a signed 64-bit value
MAX_DB_INTEGER = 2 ** 63 - 1
MAX_AGE = 150


def _required_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    return value


def _optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _calendar_date(value: Any) -> Any:
    # Only ISO strings (or real dates); pydantic would otherwise accept epoch ints
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError("must be an ISO 8601 date")
    text = value.strip()
    if len(text) > 10:
        # Full datetime; a malformed time part invalidates the whole value
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return datetime.fromisoformat(text).date()
    return date.fromisoformat(text)


RequiredText = Annotated[StrictStr, AfterValidator(_required_text)]
OptionalText = Annotated[Optional[StrictStr], AfterValidator(_optional_text)]


class PatientIn(BaseModel):
    name: RequiredText
    age: int = Field(ge=0, le=MAX_AGE)
    gender: RequiredText
    regd_no: OptionalText = None
    ip_no: OptionalText = None
    department: RequiredText
    ward: RequiredText
    doa: date
    dodeath: Optional[date] = None
    primary_consultant: RequiredText

    @field_validator("age", mode="before")
    @classmethod
    def reject_bool_or_float(cls, value):
        if isinstance(value, bool) or isinstance(value, float):
            raise ValueError("must be an integer")
        return value

    @field_validator("doa", "dodeath", mode="before")
    @classmethod
    def parse_iso_date(cls, value):
        if value is None:
            return None
        return _calendar_date(value)


class ClinicalDataIn(BaseModel):
    final_diagnosis: RequiredText
    chief_complaints: RequiredText
    past_medical_history: OptionalText = None
    oemd: OptionalText = None
    hospital_course: RequiredText
    investigations: RequiredText


class SummaryReviewIn(BaseModel):
    summary_text: RequiredText


FIELD_MESSAGES: Dict[str, str] = {
    "name": "Name is required",
    "age": "Age must be a positive integer",
    "gender": "Gender is required",
    "regd_no": "Registration number must be text",
    "ip_no": "IP number must be text",
    "department": "Department is required",
    "ward": "Ward is required",
    "doa": "DOA must be a valid date",
    "dodeath": "D.O.DEATH must be a valid date",
    "primary_consultant": "Primary Consultant is required",
    "final_diagnosis": "Final diagnosis is required",
    "chief_complaints": "Chief complaints are required",
    "past_medical_history": "Past medical history must be text",
    "oemd": "Examination notes must be text",
    "hospital_course": "Hospital course is required",
    "investigations": "Investigations information is required",
    "summary_text": "Updated summary text is required",
}


def _violations(exc: PydanticValidationError) -> List[Dict[str, str]]:
    seen = []
    violations = []
    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else "body"
        if field in seen:
            continue
        seen.append(field)
        violations.append({"field": field, "message": FIELD_MESSAGES.get(field, err["msg"])})
    return violations


def _check(model: Type[ModelT], payload: Any, violations: List[Dict[str, str]]) -> Optional[ModelT]:
    if not isinstance(payload, dict):
        violations.append({"field": "body", "message": "Request body must be a JSON object"})
        return None
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        violations.extend(_violations(exc))
        return None


def _parse_id(raw: Any, violations: List[Dict[str, str]]) -> Optional[int]:
    patient_id = None
    if isinstance(raw, int) and not isinstance(raw, bool):
        patient_id = raw
    elif isinstance(raw, str) and PATIENT_ID_PATTERN.match(raw.strip()):
        patient_id = int(raw.strip())
    if patient_id is None or abs(patient_id) > MAX_DB_INTEGER:
        violations.append({"field": "id", "message": PATIENT_ID_MESSAGE})
        return None
    return patient_id


def _raise_if_any(violations: List[Dict[str, str]], operation: str) -> None:
    if violations:
        logger.warning("Validation error on %s: %s", operation, violations)
        raise ValidationError(violations)


def parse_patient_id(raw: Any) -> int:
    violations: List[Dict[str, str]] = []
    patient_id = _parse_id(raw, violations)
    _raise_if_any(violations, "patient id")
    return patient_id


def validate_patient(payload: Any) -> Dict:
    violations: List[Dict[str, str]] = []
    data = _check(PatientIn, payload, violations)
    _raise_if_any(violations, "patient creation")
    return data.model_dump()


def validate_clinical_data(raw_patient_id: Any, payload: Any):
    """Returns ``(patient_id, fields)``; path and body violations are reported together."""
    violations: List[Dict[str, str]] = []
    patient_id = _parse_id(raw_patient_id, violations)
    data = _check(ClinicalDataIn, payload, violations)
    _raise_if_any(violations, "clinical data creation")
    return patient_id, data.model_dump()


def validate_summary_review(raw_patient_id: Any, payload: Any):
    violations: List[Dict[str, str]] = []
    patient_id = _parse_id(raw_patient_id, violations)
    data = _check(SummaryReviewIn, payload, violations)
    _raise_if_any(violations, "summary review")
    return patient_id, data.summary_text
