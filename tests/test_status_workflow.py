import pytest

from app.services.status_workflow import StatusWorkflowEngine


@pytest.mark.parametrize("current,target", [
    ("pending", "approved"),
    ("pending", "rejected"),
    ("approved", "resolved"),
    ("pending", "pending"),
])
def test_allowed_transitions(current, target):
    assert StatusWorkflowEngine.is_valid_transition(current, target)


@pytest.mark.parametrize("current,target", [
    ("pending", "resolved"),
    ("approved", "pending"),
    ("rejected", "approved"),
    ("resolved", "pending"),
    ("pending", "closed"),
])
def test_rejected_transitions(current, target):
    assert not StatusWorkflowEngine.is_valid_transition(current, target)
    with pytest.raises(ValueError, match="Invalid status transition"):
        StatusWorkflowEngine.validate_and_transition(current, target, changed_by="reviewer")


def test_terminal_states_have_no_transitions():
    assert StatusWorkflowEngine.get_allowed_transitions("rejected") == []
    assert StatusWorkflowEngine.get_allowed_transitions("resolved") == []
    assert StatusWorkflowEngine.get_allowed_transitions("unknown") == []


def test_transition_builds_history_entry():
    result = StatusWorkflowEngine.validate_and_transition("pending", "approved", changed_by="u1", note="ok")

    assert result["changed"] is True
    entry = result["history_entry"]
    assert entry["from_status"] == "pending"
    assert entry["to_status"] == "approved"
    assert entry["changed_by"] == "u1"
    assert entry["note"] == "ok"
    assert entry["timestamp"].tzinfo is not None


def test_same_status_is_not_a_change():
    result = StatusWorkflowEngine.validate_and_transition("approved", "approved", changed_by="u1")
    assert result["changed"] is False
