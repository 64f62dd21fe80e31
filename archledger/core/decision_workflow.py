"""Decision record status workflow."""

from archledger.core.exceptions import IllegalTransition, InvalidStatus
from archledger.models.enums import DecisionStatus

# Statuses reachable through a plain update
# Key: current status, Value: list of allowed next statuses
VALID_TRANSITIONS: dict[DecisionStatus, list[DecisionStatus]] = {
    DecisionStatus.PROPOSED: [
        DecisionStatus.PROPOSED,
        DecisionStatus.ACCEPTED,
        DecisionStatus.DEPRECATED,
    ],
    DecisionStatus.ACCEPTED: [
        DecisionStatus.PROPOSED,
        DecisionStatus.ACCEPTED,
        DecisionStatus.DEPRECATED,
    ],
    DecisionStatus.DEPRECATED: [
        DecisionStatus.PROPOSED,
        DecisionStatus.ACCEPTED,
        DecisionStatus.DEPRECATED,
    ],
    DecisionStatus.SUPERSEDED: [],  # Terminal state - no further transitions
}

REQUIRED_FIELDS: tuple[str, ...] = (
    "title",
    "context",
    "decision",
    "rationale",
    "consequences",
)


def parse_status(value: DecisionStatus | str) -> DecisionStatus:
    """Coerce a raw status value into a DecisionStatus.

    Raises:
        InvalidStatus: if the value is not one of the four statuses
    """
    if isinstance(value, DecisionStatus):
        return value
    try:
        return DecisionStatus(value)
    except ValueError:
        raise InvalidStatus(value) from None


def missing_fields(values: dict) -> list[str]:
    """Return every required field that is absent, not a string, or blank.

    Examples:
        >>> missing_fields({"title": "Use Postgres", "context": " "})
        ['context', 'decision', 'rationale', 'consequences']
    """
    missing = []
    for field in REQUIRED_FIELDS:
        value = values.get(field)
        if not isinstance(value, str) or not value.strip():
            missing.append(field)
    return missing


def is_valid_transition(from_status: DecisionStatus, to_status: DecisionStatus) -> bool:
    """Check if a status change through update is allowed.

    Examples:
        >>> is_valid_transition(DecisionStatus.PROPOSED, DecisionStatus.ACCEPTED)
        True
        >>> is_valid_transition(DecisionStatus.ACCEPTED, DecisionStatus.SUPERSEDED)
        False
        >>> is_valid_transition(DecisionStatus.SUPERSEDED, DecisionStatus.ACCEPTED)
        False
    """
    return to_status in VALID_TRANSITIONS.get(from_status, [])


def get_allowed_transitions(from_status: DecisionStatus) -> list[DecisionStatus]:
    """Get list of statuses an update may move a record to."""
    return VALID_TRANSITIONS.get(from_status, [])


def ensure_updatable(current_status: DecisionStatus) -> None:
    """Superseded records are frozen against every kind of update."""
    if current_status == DecisionStatus.SUPERSEDED:
        raise IllegalTransition("Cannot change a superseded decision")


def validate_status_transition(
    current_status: DecisionStatus, new_status: DecisionStatus
) -> None:
    """Validate a status change requested through update.

    The transition table is the only authority; every pair it rejects has
    SUPERSEDED on one side.

    Raises:
        IllegalTransition: target is SUPERSEDED, or the record is already SUPERSEDED
    """
    if is_valid_transition(current_status, new_status):
        return
    if new_status == DecisionStatus.SUPERSEDED:
        raise IllegalTransition(
            "Cannot manually set status to SUPERSEDED. Use supersede operation instead."
        )
    ensure_updatable(current_status)
