"""Human review of the latest generated summary."""
import logging

from ..core.errors import ValidationError
from ..models.summary import Summary
from .record_store import RecordStore

logger = logging.getLogger(__name__)


class SummaryReviewer:
    def __init__(self, store: RecordStore):
        self.store = store

    def review_summary(self, patient_id: int, new_text: str) -> Summary:
        """
        Overwrite the latest summary's text and mark it reviewed.
        Edits in place; never appends a new version.
        """
        if not isinstance(new_text, str) or not new_text.strip():
            raise ValidationError(
                [{"field": "summary_text", "message": "Updated summary text is required"}]
            )
        summary = self.store.update_latest_summary(patient_id, new_text)
        logger.info("Patient %s summary reviewed", patient_id)
        return summary
