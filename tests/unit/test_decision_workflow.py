"""Unit tests for decision status workflow and field validation."""
import pytest

from archledger.core.decision_workflow import (
    REQUIRED_FIELDS,
    VALID_TRANSITIONS,
    ensure_updatable,
    get_allowed_transitions,
    is_valid_transition,
    missing_fields,
    parse_status,
    validate_status_transition,
)
from archledger.core.exceptions import IllegalTransition, InvalidStatus
from archledger.models.enums import DecisionStatus

EDITABLE = [DecisionStatus.PROPOSED, DecisionStatus.ACCEPTED, DecisionStatus.DEPRECATED]


class TestParseStatus:
    def test_accepts_enum_and_string(self):
        assert parse_status(DecisionStatus.ACCEPTED) is DecisionStatus.ACCEPTED
        assert parse_status("DEPRECATED") is DecisionStatus.DEPRECATED

    @pytest.mark.parametrize("value", ["accepted", "DONE", "", None])
    def test_rejects_unknown_values(self, value):
        with pytest.raises(InvalidStatus):
            parse_status(value)


class TestMissingFields:
    def test_all_five_blank_are_all_reported(self):
        """Every blank field is listed, not just the first one."""
        values = {field: "   " for field in REQUIRED_FIELDS}
        assert missing_fields(values) == list(REQUIRED_FIELDS)

    def test_absent_and_none_count_as_missing(self):
        assert missing_fields({"title": "T", "context": None}) == [
            "context",
            "decision",
            "rationale",
            "consequences",
        ]

    def test_complete_record_has_no_missing_fields(self):
        assert missing_fields({field: "x" for field in REQUIRED_FIELDS}) == []


class TestTransitions:
    @pytest.mark.parametrize("current", EDITABLE)
    @pytest.mark.parametrize("target", EDITABLE)
    def test_editable_statuses_move_freely(self, current, target):
        assert is_valid_transition(current, target)
        validate_status_transition(current, target)

    @pytest.mark.parametrize("current", list(DecisionStatus))
    def test_superseded_is_never_a_target(self, current):
        """No status reaches SUPERSEDED through update."""
        assert not is_valid_transition(current, DecisionStatus.SUPERSEDED)
        with pytest.raises(IllegalTransition):
            validate_status_transition(current, DecisionStatus.SUPERSEDED)

    @pytest.mark.parametrize("target", EDITABLE)
    def test_superseded_is_terminal(self, target):
        with pytest.raises(IllegalTransition):
            validate_status_transition(DecisionStatus.SUPERSEDED, target)

    def test_superseded_has_no_allowed_transitions(self):
        assert get_allowed_transitions(DecisionStatus.SUPERSEDED) == []
        assert VALID_TRANSITIONS[DecisionStatus.SUPERSEDED] == []

    def test_ensure_updatable(self):
        for status in EDITABLE:
            ensure_updatable(status)
        with pytest.raises(IllegalTransition, match="superseded"):
            ensure_updatable(DecisionStatus.SUPERSEDED)


class TestTransitionTable:
    @pytest.mark.parametrize("current", list(DecisionStatus))
    @pytest.mark.parametrize("target", list(DecisionStatus))
    def test_validation_follows_the_table(self, current, target):
        """Every pair the table allows passes; every other pair raises."""
        if target in VALID_TRANSITIONS[current]:
            validate_status_transition(current, target)
        else:
            with pytest.raises(IllegalTransition):
                validate_status_transition(current, target)

    def test_rejections_name_the_reason(self):
        with pytest.raises(IllegalTransition, match="Use supersede operation"):
            validate_status_transition(DecisionStatus.ACCEPTED, DecisionStatus.SUPERSEDED)
        with pytest.raises(IllegalTransition, match="Cannot change a superseded decision"):
            validate_status_transition(DecisionStatus.SUPERSEDED, DecisionStatus.PROPOSED)
