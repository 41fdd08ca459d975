"""Application exceptions.

Every user-facing failure derives from ``PatientorError`` and carries:
- code:        machine-readable error code (VALIDATION_ERROR, ...)
- message:     human-readable description, shown verbatim to the user
- detail:      optional extra payload (field errors, known values, ...)
- http_status: status code the API layer responds with

Routers only raise; the handler registered in ``patientor.main`` formats the
response. ``UnknownVariantError`` is not part of this hierarchy and has no
handler: a dispatch defect surfaces as a server error.
"""

from typing import Any, Dict, List, Optional


class PatientorError(Exception):
    """Base class for all recoverable application errors."""

    code = "UNKNOWN_ERROR"
    http_status = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        detail: Any = None,
        http_status: Optional[int] = None,
    ):
        self.message = message
        if code is not None:
            self.code = code
        if http_status is not None:
            self.http_status = http_status
        self.detail = detail
        super().__init__(message)


class EntryValidationError(PatientorError):
    """Draft values could not be turned into an entry. Never sent upstream."""

    code = "VALIDATION_ERROR"
    http_status = 400

    def __init__(self, errors: List[Dict[str, str]], message: str = "Entry validation failed."):
        super().__init__(message, detail={"errors": errors})
        self.errors = errors

    @property
    def fields(self) -> List[str]:
        return [e["field"] for e in self.errors]


class SubmissionError(PatientorError):
    """The patient store rejected an entry that passed local validation."""

    code = "SUBMISSION_REJECTED"
    http_status = 400


class SubmissionInProgressError(SubmissionError):
    """Another entry submission for the same patient has not settled yet."""

    code = "SUBMISSION_IN_PROGRESS"
    http_status = 409


class PatientNotFoundError(PatientorError):
    code = "PATIENT_NOT_FOUND"
    http_status = 404

    def __init__(self, patient_id: str):
        super().__init__(f"Patient not found: {patient_id}", detail={"patient_id": patient_id})
        self.patient_id = patient_id


class UnknownVariantError(RuntimeError):
    """An entry reached a dispatcher with a discriminant it has no handler for.

    This is a programming defect: the entry union and a dispatcher have
    drifted apart. It is never caught and recovered.
    """

    def __init__(self, kind: Any):
        super().__init__(f"Unhandled entry type: {kind!r}")
        self.kind = kind
