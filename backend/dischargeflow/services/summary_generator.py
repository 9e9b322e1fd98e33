"""
Summary generation orchestrator.

Loads a patient and their clinical data, drafts the summary through the
generation client and appends the result as a new summary version. Missing
records stop the run before the generation service is contacted.
"""
import logging
import threading
import weakref
from typing import Optional

from ..core.errors import NotFoundError, PreconditionError
from ..models.summary import Summary
from .generation_client import GenerationClient
from .prompt_builder import build_prompt
from .record_store import RecordStore

logger = logging.getLogger(__name__)


class _PatientLock:
    """Mutex for one patient; weak-referenceable unlike a bare threading.Lock."""

    def __init__(self):
        self._lock = threading.Lock()

    def __enter__(self):
        self._lock.acquire()
        return self

    def __exit__(self, exc_type, exc, tb):
        self._lock.release()

    def locked(self) -> bool:
        return self._lock.locked()


class PatientLocks:
    """Per-patient mutexes so one worker appends summaries in call order.

    Entries are held weakly: a lock lives only while some caller holds it, so
    the registry does not grow with every patient ever generated for.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: "weakref.WeakValueDictionary[int, _PatientLock]" = weakref.WeakValueDictionary()

    def for_patient(self, patient_id: int) -> _PatientLock:
        with self._guard:
            lock = self._locks.get(patient_id)
            if lock is None:
                lock = self._locks[patient_id] = _PatientLock()
            return lock

    def __len__(self) -> int:
        return len(self._locks)


generation_locks = PatientLocks()


class SummaryGenerator:
    def __init__(self, store: RecordStore, client: GenerationClient, locks: Optional[PatientLocks] = None):
        self.store = store
        self.client = client
        self.locks = locks or generation_locks

    def generate_summary(self, patient_id: int) -> Summary:
        patient = self.store.get_patient(patient_id)
        if not patient:
            raise NotFoundError("Patient not found")
        clinical = self.store.get_clinical_data(patient_id)
        if not clinical:
            raise PreconditionError("Clinical data not available for this patient")

        prompt = build_prompt(patient, clinical)
        with self.locks.for_patient(patient_id):
            logger.info("Requesting summary draft for patient %s", patient_id)
            text = self.client.generate(prompt)
            summary = self.store.create_summary(patient_id, text)
        return summary
