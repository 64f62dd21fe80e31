"""Domain error taxonomy for the decision ledger and risk engine.

Each error carries a stable ``error`` code and the HTTP status the API layer
renders it with. Services raise these; ``archledger.main`` translates them into
``ErrorResponse`` bodies.
"""

from __future__ import annotations

from typing import Any


class ArchLedgerError(Exception):
    """Base class for domain-level rejections."""

    error: str = "error"
    status_code: int = 400

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(ArchLedgerError):
    """One or more required decision fields are missing or blank."""

    error = "validation_error"
    status_code = 422

    def __init__(self, fields: list[str], message: str | None = None):
        self.fields = list(fields)
        super().__init__(
            message or f"Validation failed: {', '.join(self.fields)} required and cannot be empty",
            details={field: f"{field} is required and cannot be empty" for field in self.fields},
        )


class InvalidStatus(ArchLedgerError):
    error = "invalid_status"
    status_code = 422

    def __init__(self, status: Any):
        self.status = status
        super().__init__(f"Invalid status: {status}")


class IllegalTransition(ArchLedgerError):
    error = "illegal_transition"
    status_code = 409


class NotFound(ArchLedgerError):
    error = "not_found"
    status_code = 404

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: {entity_id}")


class SelfSupersession(ArchLedgerError):
    error = "self_supersession"
    status_code = 409

    def __init__(self, decision_id: Any):
        super().__init__(f"A decision cannot supersede itself: {decision_id}")


class AlreadySuperseded(ArchLedgerError):
    error = "already_superseded"
    status_code = 409

    def __init__(self, decision_id: Any):
        super().__init__(
            f"Cannot use a superseded decision to supersede another decision: {decision_id}"
        )


class SupersessionConflict(ArchLedgerError):
    """The supersession would overwrite an existing link on either record."""

    error = "supersession_conflict"
    status_code = 409


class CycleDetected(ArchLedgerError):
    error = "cycle_detected"
    status_code = 409

    def __init__(self, old_id: Any, new_id: Any):
        super().__init__(
            f"Supersession of {old_id} by {new_id} would create a cycle",
            details={"old_decision_id": str(old_id), "new_decision_id": str(new_id)},
        )


class ReferencedBySupersession(ArchLedgerError):
    error = "referenced_by_supersession"
    status_code = 409

    def __init__(self, decision_id: Any, referenced_by: list[Any]):
        super().__init__(
            "Cannot delete decision that is part of a supersession chain. "
            "Remove supersession links first.",
            details={
                "decision_id": str(decision_id),
                "referenced_by": [str(ref) for ref in referenced_by],
            },
        )


class IntegrityError(ArchLedgerError):
    """A stored supersession chain revisits a record (store corruption)."""

    error = "integrity_error"
    status_code = 500
