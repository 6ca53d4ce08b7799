from pathlib import Path

import pytest
from pydantic import ValidationError

from agent_actions.models import (
    ACTION_ADAPTER,
    ACTION_KINDS,
    ACTION_TYPES,
    CapabilityPolicy,
    ReadFile,
    Response,
    untag,
)

# ---------------------------------------------------------------------------
# Response Invariant Tests
# ---------------------------------------------------------------------------


def test_response_ok_has_no_error():
    response = Response.ok("done", "payload")
    assert response.success is True
    assert response.data == "payload"
    assert response.error is None


def test_response_fail_has_no_data():
    response = Response.fail("bad", "why")
    assert response.success is False
    assert response.data is None
    assert response.error == "why"


def test_response_rejects_success_with_error():
    with pytest.raises(ValidationError):
        Response(success=True, message="m", error="e")


def test_response_rejects_failure_with_data():
    with pytest.raises(ValidationError):
        Response(success=False, message="m", data="d")


def test_response_is_frozen():
    response = Response.ok("done")
    with pytest.raises(ValidationError):
        response.message = "changed"


# ---------------------------------------------------------------------------
# Action Taxonomy Tests
# ---------------------------------------------------------------------------


def test_action_kinds_match_type_literals():
    assert ACTION_KINDS == {kind.model_fields["type"].default for kind in ACTION_TYPES}
    assert len(ACTION_TYPES) == 9


def test_actions_are_frozen():
    action = ReadFile(path="a.txt")
    with pytest.raises(ValidationError):
        action.path = Path("b.txt")


def test_adapter_rejects_unknown_kind():
    with pytest.raises(ValidationError):
        ACTION_ADAPTER.validate_python({"type": "FormatDisk", "path": "/"})


def test_untag_external_shape():
    assert untag({"ReadFile": {"path": "a"}}) == {"type": "ReadFile", "path": "a"}
    assert untag([{"ListDirectory": {"path": "."}}]) == [{"type": "ListDirectory", "path": "."}]


def test_untag_leaves_other_values_alone():
    assert untag({"Unknown": {"path": "a"}}) == {"Unknown": {"path": "a"}}
    assert untag("text") == "text"


def test_policy_is_frozen():
    policy = CapabilityPolicy()
    with pytest.raises(ValidationError):
        policy.can_execute = True
