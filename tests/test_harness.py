from unittest.mock import MagicMock

import pytest

from agent_actions.executor import Executor
from agent_actions.harness import (
    SYSTEM_PROMPT,
    AgentSession,
    process_agent_message,
    run_message,
)
from agent_actions.models import CapabilityPolicy

# ---------------------------------------------------------------------------
# Message Processing Tests
# ---------------------------------------------------------------------------


def test_process_agent_message(tmp_path):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "main.rs").write_text("fn main() {}")
    executor = Executor(tmp_path)

    responses = process_agent_message(
        "read the file src/main.rs and then create a new file called test.txt", executor
    )

    assert len(responses) == 2
    assert responses[0].data == "fn main() {}"
    assert responses[1].success is True
    assert (tmp_path / "test.txt").exists()


def test_process_agent_message_without_actions(tmp_path):
    assert process_agent_message("Sure, happy to help.", Executor(tmp_path)) == []


def test_run_message_returns_report(tmp_path):
    executor = Executor(tmp_path)
    report = run_message(
        '```json\n[{"type": "CreateDirectory", "path": "docs"}, '
        '{"type": "ExecuteCommand", "command": "whoami"}]\n```',
        executor,
    )

    assert (tmp_path / "docs").is_dir()
    assert "1. ✅ Successfully created directory" in report
    assert "2. ❌ Action not permitted" in report


def test_run_message_without_actions(tmp_path):
    assert run_message("No changes needed.", Executor(tmp_path)) == "No actions were executed."


# ---------------------------------------------------------------------------
# Session Tests
# ---------------------------------------------------------------------------


@pytest.fixture
def session(tmp_path):
    return AgentSession("test/model", Executor(tmp_path, CapabilityPolicy()), api_key="test-key")


def test_session_run_acts_on_model_reply(session, tmp_path):
    (tmp_path / "README.md").write_text("# Project")
    session.call_model = MagicMock(
        return_value='Reading it now.\n```json\n{"type": "ReadFile", "path": "README.md"}\n```'
    )

    report = session.run("What does the README say?")

    assert "Successfully read file" in report
    assert "# Project" in report

    messages = session.call_model.call_args.args[0]
    assert messages[0] == {"role": "system", "content": SYSTEM_PROMPT}
    assert messages[1] == {"role": "user", "content": "What does the README say?"}


def test_call_model_strips_reply(session):
    completion = MagicMock()
    completion.choices[0].message.content = "  hello  \n"
    session._client = MagicMock()
    session._client.chat.completions.create.return_value = completion

    assert session.call_model([{"role": "user", "content": "hi"}]) == "hello"
    session._client.chat.completions.create.assert_called_once_with(
        model="test/model",
        messages=[{"role": "user", "content": "hi"}],
    )


def test_session_exposes_executor_directory(session, tmp_path):
    assert session.cwd == tmp_path
