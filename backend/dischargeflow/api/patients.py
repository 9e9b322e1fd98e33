from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from datetime import date, datetime
from ..models.base import get_db
from ..services.generation_client import GenerationClient, get_generation_client
from ..services.record_store import RecordStore
from ..services.summary_generator import SummaryGenerator
from ..services.summary_review import SummaryReviewer
from ..services.validation import (
    parse_patient_id,
    validate_clinical_data,
    validate_patient,
    validate_summary_review,
)
from ..core.errors import NotFoundError

router = APIRouter(prefix="/patients", tags=["patients"])


class PatientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    age: int
    gender: str
    regd_no: Optional[str]
    ip_no: Optional[str]
    department: str
    ward: str
    doa: date
    dodeath: Optional[date]
    primary_consultant: str
    created_at: datetime


class ClinicalDataResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    patient_id: int
    final_diagnosis: str
    chief_complaints: str
    past_medical_history: Optional[str]
    oemd: Optional[str]
    hospital_course: str
    investigations: str
    created_at: datetime


class SummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    patient_id: int
    summary_text: str
    reviewed: bool
    generated_at: datetime
    updated_at: Optional[datetime]


class PatientEnvelope(BaseModel):
    patient: PatientResponse


class ClinicalDataEnvelope(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    clinical_data: ClinicalDataResponse = Field(alias="clinicalData")


class SummaryEnvelope(BaseModel):
    summary: SummaryResponse


class SummaryHistoryEnvelope(BaseModel):
    summaries: List[SummaryResponse]


def get_store(db: Session = Depends(get_db)) -> RecordStore:
    return RecordStore(db)


@router.post("", response_model=PatientEnvelope, status_code=status.HTTP_201_CREATED)
def create_patient(payload: Any = Body(None), store: RecordStore = Depends(get_store)):
    fields = validate_patient(payload)
    patient = store.create_patient(fields)
    return PatientEnvelope(patient=PatientResponse.model_validate(patient))


@router.get("/{patient_id}", response_model=PatientEnvelope)
def get_patient(patient_id: str, store: RecordStore = Depends(get_store)):
    patient = store.get_patient(parse_patient_id(patient_id))
    if not patient:
        raise NotFoundError("Patient not found")
    return PatientEnvelope(patient=PatientResponse.model_validate(patient))


@router.post(
    "/{patient_id}/clinical-data",
    response_model=ClinicalDataEnvelope,
    status_code=status.HTTP_201_CREATED,
)
def add_clinical_data(
    patient_id: str,
    payload: Any = Body(None),
    store: RecordStore = Depends(get_store),
):
    pid, fields = validate_clinical_data(patient_id, payload)
    clinical = store.create_clinical_data(pid, fields)
    return ClinicalDataEnvelope(clinical_data=ClinicalDataResponse.model_validate(clinical))


@router.api_route(
    "/{patient_id}/generate-summary",
    methods=["GET", "POST"],
    response_model=SummaryEnvelope,
    status_code=status.HTTP_201_CREATED,
)
def generate_summary(
    patient_id: str,
    store: RecordStore = Depends(get_store),
    client: GenerationClient = Depends(get_generation_client),
):
    """Draft a new summary version from the patient's latest clinical data."""
    summary = SummaryGenerator(store, client).generate_summary(parse_patient_id(patient_id))
    return SummaryEnvelope(summary=SummaryResponse.model_validate(summary))


@router.put("/{patient_id}/summary", response_model=SummaryEnvelope)
def review_summary(
    patient_id: str,
    payload: Any = Body(None),
    store: RecordStore = Depends(get_store),
):
    """Human-in-the-loop edit of the latest summary; marks it reviewed."""
    pid, text = validate_summary_review(patient_id, payload)
    summary = SummaryReviewer(store).review_summary(pid, text)
    return SummaryEnvelope(summary=SummaryResponse.model_validate(summary))


@router.get("/{patient_id}/summary", response_model=SummaryEnvelope)
def get_latest_summary(patient_id: str, store: RecordStore = Depends(get_store)):
    summary = store.get_latest_summary(parse_patient_id(patient_id))
    if not summary:
        raise NotFoundError("No discharge summary found for this patient")
    return SummaryEnvelope(summary=SummaryResponse.model_validate(summary))


@router.get("/{patient_id}/summaries", response_model=SummaryHistoryEnvelope)
def list_summaries(patient_id: str, store: RecordStore = Depends(get_store)):
    """All generated versions, newest first."""
    pid = parse_patient_id(patient_id)
    if not store.get_patient(pid):
        raise NotFoundError("Patient not found")
    summaries = store.list_summaries(pid)
    return SummaryHistoryEnvelope(
        summaries=[SummaryResponse.model_validate(s) for s in summaries]
    )
