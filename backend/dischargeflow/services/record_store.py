"""
Record store for patients, clinical data and discharge summaries.

Wraps an injected SQLAlchemy session. Each write commits exactly one row;
storage failures, driver-level integer overflow included, roll back and
surface as ``InternalError`` so callers never see driver messages.
"""
import logging
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.errors import InternalError, NotFoundError
from ..models.base import utcnow
from ..models.patient import Patient
from ..models.clinical import ClinicalData
from ..models.summary import Summary

logger = logging.getLogger(__name__)

PATIENT_FIELDS = (
    "name", "age", "gender", "regd_no", "ip_no", "department",
    "ward", "doa", "dodeath", "primary_consultant",
)
CLINICAL_FIELDS = (
    "final_diagnosis", "chief_complaints", "past_medical_history",
    "oemd", "hospital_course", "investigations",
)


class RecordStore:
    def __init__(self, db: Session):
        self.db = db

    def _commit(self, instance, action: str):
        try:
            self.db.commit()
        except (SQLAlchemyError, OverflowError) as exc:
            self.db.rollback()
            logger.error("Storage failure while %s: %s", action, exc)
            raise InternalError("Storage failure") from exc
        self.db.refresh(instance)
        return instance

    # ── patients ─────────────────────────────────────────────────────────────

    def create_patient(self, fields: Dict) -> Patient:
        patient = Patient(**{k: fields.get(k) for k in PATIENT_FIELDS})
        self.db.add(patient)
        patient = self._commit(patient, "creating patient")
        logger.info("Created patient %s", patient.id)
        return patient

    def get_patient(self, patient_id: int) -> Optional[Patient]:
        return self.db.get(Patient, patient_id)

    def delete_patient(self, patient_id: int) -> None:
        """Administrative removal; clinical data and summaries go with it."""
        patient = self.get_patient(patient_id)
        if not patient:
            raise NotFoundError("Patient not found")
        self.db.delete(patient)
        try:
            self.db.commit()
        except (SQLAlchemyError, OverflowError) as exc:
            self.db.rollback()
            logger.error("Storage failure while deleting patient %s: %s", patient_id, exc)
            raise InternalError("Storage failure") from exc
        logger.info("Deleted patient %s and dependent records", patient_id)

    # ── clinical data ────────────────────────────────────────────────────────

    def create_clinical_data(self, patient_id: int, fields: Dict) -> ClinicalData:
        if not self.get_patient(patient_id):
            raise NotFoundError("Patient not found")
        clinical = ClinicalData(
            patient_id=patient_id,
            **{k: fields.get(k) for k in CLINICAL_FIELDS},
        )
        self.db.add(clinical)
        clinical = self._commit(clinical, "adding clinical data")
        logger.info("Added clinical data %s for patient %s", clinical.id, patient_id)
        return clinical

    def get_clinical_data(self, patient_id: int) -> Optional[ClinicalData]:
        """Most recently recorded clinical data for the patient."""
        return (
            self.db.query(ClinicalData)
            .filter(ClinicalData.patient_id == patient_id)
            .order_by(ClinicalData.created_at.desc(), ClinicalData.id.desc())
            .first()
        )

    # ── summaries ────────────────────────────────────────────────────────────

    def _summaries(self, patient_id: int):
        return (
            self.db.query(Summary)
            .filter(Summary.patient_id == patient_id)
            .order_by(Summary.generated_at.desc(), Summary.id.desc())
        )

    def create_summary(self, patient_id: int, text: str) -> Summary:
        summary = Summary(patient_id=patient_id, summary_text=text, reviewed=False)
        self.db.add(summary)
        summary = self._commit(summary, "storing summary")
        logger.info("Stored summary %s for patient %s", summary.id, patient_id)
        return summary

    def get_latest_summary(self, patient_id: int) -> Optional[Summary]:
        return self._summaries(patient_id).first()

    def list_summaries(self, patient_id: int) -> List[Summary]:
        return self._summaries(patient_id).all()

    def count_summaries(self, patient_id: int) -> int:
        return self.db.query(Summary).filter(Summary.patient_id == patient_id).count()

    def update_latest_summary(self, patient_id: int, new_text: str) -> Summary:
        summary = self.get_latest_summary(patient_id)
        if not summary:
            raise NotFoundError("Discharge summary not found for this patient")
        summary.summary_text = new_text
        summary.reviewed = True
        summary.updated_at = utcnow()
        summary = self._commit(summary, "updating summary")
        logger.info("Summary %s for patient %s marked reviewed", summary.id, patient_id)
        return summary
