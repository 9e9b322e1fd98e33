"""
Error taxonomy for the discharge-summary workflow.

Every error carries a ``kind`` the client can branch on and the HTTP status
class it maps to. The FastAPI handlers in ``main.py`` render them.
"""
from typing import Dict, List, Optional


class WorkflowError(Exception):
    kind = "workflow_error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict:
        return {"kind": self.kind, "message": self.message}


class ValidationError(WorkflowError):
    """Bad or missing input. Carries every violation found, not just the first."""
    kind = "validation_error"
    status_code = 400

    def __init__(self, violations: List[Dict[str, str]], message: Optional[str] = None):
        super().__init__(message or "Request validation failed")
        self.violations = violations

    @property
    def fields(self) -> List[str]:
        return [v["field"] for v in self.violations]

    def to_dict(self) -> Dict:
        payload = super().to_dict()
        payload["violations"] = self.violations
        return payload


class NotFoundError(WorkflowError):
    kind = "not_found"
    status_code = 404


class PreconditionError(WorkflowError):
    """A required earlier workflow step has not been completed."""
    kind = "precondition_failed"
    status_code = 400


class UpstreamError(WorkflowError):
    """The generation service failed or answered with an unusable payload."""
    kind = "upstream_error"
    status_code = 502


class InternalError(WorkflowError):
    kind = "internal_error"
    status_code = 500
