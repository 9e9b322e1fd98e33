"""
Prompt builder for discharge/death summary drafting.

Pure template filling: every value in the output comes from the patient and
clinical records passed in, or from a fixed sentinel when a value is absent.
Same inputs always produce byte-identical text.
"""
from datetime import date, datetime
from typing import Optional, Union

from ..models.patient import Patient
from ..models.clinical import ClinicalData

NOT_AVAILABLE = "N/A"
NIL = "NIL"
REPORTS_ENCLOSED = "REPORTS ENCLOSED"

DATE_DISPLAY_FORMAT = "%d/%m/%Y"

SYSTEM_INSTRUCTION = (
    "You are a precise clinical documentation assistant. Generate outputs that are "
    "factually grounded and follow the exact format provided."
)

CONSULTANT_DOCTORS = (
    "DR. CH. GOPINADH, DNB, IDCCM, FIPM (INTENSIVIST)",
    "DR. V. PRASAD RAO MBBS, DNB (GENERAL MEDICINE)",
    "DR. DIVYA DHATHRI MD (GENERAL MEDICINE)",
    "DR. VAMSHI, DNB (GASTRO)",
    "DR. B. ANIL MD, DM (CARDIOLOGY)",
)

SEPARATOR = "-" * 27


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def safe_upper(value, default: str = NOT_AVAILABLE) -> str:
    if _is_blank(value):
        return default
    return str(value).upper()


def safe_text(value, default: str = NOT_AVAILABLE) -> str:
    if _is_blank(value):
        return default
    return str(value)


def format_date(value: Union[date, datetime, str, None]) -> str:
    """Render a date as DD/MM/YYYY; ISO strings are accepted too."""
    if _is_blank(value):
        return NOT_AVAILABLE
    if isinstance(value, str):
        value = date.fromisoformat(value[:10])
    return value.strftime(DATE_DISPLAY_FORMAT)


def _clinical_value(clinical: Optional[ClinicalData], attr: str):
    return getattr(clinical, attr, None) if clinical is not None else None


def build_prompt(patient: Patient, clinical: Optional[ClinicalData] = None) -> str:
    age = NOT_AVAILABLE if patient.age is None else f"{patient.age}"
    consultants = "\n".join(
        f"({i}) {doctor}" for i, doctor in enumerate(CONSULTANT_DOCTORS, start=1)
    )

    lines = [
        "Generate a discharge summary report in the exact format below.",
        "Do not hallucinate details; only use the provided data.",
        "",
        SEPARATOR,
        "DEPARTMENT OF GENERAL MEDICINE",
        "   DEATH SUMMARY",
        "",
        "PATIENT DETAILS:",
        f"NAME: {safe_upper(patient.name)}    AGE: {age} YEARS    SEX: {safe_upper(patient.gender)}",
        f"REGD. NO: {safe_text(patient.regd_no)}    IP NO : {safe_text(patient.ip_no)}",
        f"DEPARTMENT: {safe_upper(patient.department)}    WARD: {safe_upper(patient.ward)}",
        f"D.O.A: {format_date(patient.doa)}    D.O.DEATH: {format_date(patient.dodeath)}",
        f"PRIMARY CONSULTANT: {safe_upper(patient.primary_consultant)}",
        "",
        f"FINAL DIAGNOSIS: {safe_upper(_clinical_value(clinical, 'final_diagnosis'))}",
        "",
        f"CHIEF COMPLAINTS: {safe_text(_clinical_value(clinical, 'chief_complaints'))}",
        "",
        f"PAST MEDICAL HISTORY: {safe_text(_clinical_value(clinical, 'past_medical_history'), NIL)}",
        "",
        "O/E AT EMD:",
        safe_text(_clinical_value(clinical, "oemd")),
        "",
        "HOSPITAL COURSE:",
        safe_text(_clinical_value(clinical, "hospital_course")),
        "",
        "INVESTIGATIONS:",
        safe_text(_clinical_value(clinical, "investigations"), REPORTS_ENCLOSED),
        "",
        "CONSULTANT DOCTORS:",
        consultants,
        SEPARATOR,
        "",
        "Generate the above discharge summary report exactly in the provided format.",
    ]
    return "\n".join(lines) + "\n"


def build_messages(prompt: str) -> list:
    """Role-tagged message list sent to the generation service."""
    return [
        {"role": "system", "content": SYSTEM_INSTRUCTION},
        {"role": "user", "content": prompt},
    ]
