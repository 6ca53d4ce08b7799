import json
import sys

import pytest

from agent_actions import run

MESSAGE = "create a new file called out.txt\n```\nhello\n```\n"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "AGENT_CAN_READ",
        "AGENT_CAN_WRITE",
        "AGENT_CAN_EXECUTE",
        "AGENT_CAN_MODIFY_FS",
        "AGENT_RESTRICTED_PATHS",
    ):
        monkeypatch.delenv(name, raising=False)


def test_parse_command_prints_json(tmp_path, capsys):
    message = tmp_path / "message.txt"
    message.write_text(MESSAGE, encoding="utf-8")

    assert run.main(["parse", str(message)]) == 0

    actions = json.loads(capsys.readouterr().out)
    assert actions == [{"type": "WriteFile", "path": "out.txt", "content": "hello"}]


def test_exec_command_runs_actions(tmp_path):
    message = tmp_path / "message.txt"
    message.write_text(MESSAGE, encoding="utf-8")
    workdir = tmp_path / "work"
    workdir.mkdir()

    assert run.main(["exec", str(message), "--cwd", str(workdir)]) == 0
    assert (workdir / "out.txt").read_text() == "hello"


@pytest.mark.skipif(sys.platform == "win32", reason="uses touch")
def test_exec_allow_exec_flag(tmp_path):
    message = tmp_path / "message.txt"
    message.write_text("run `touch marker`\n", encoding="utf-8")

    run.main(["exec", str(message), "--cwd", str(tmp_path)])
    assert not (tmp_path / "marker").exists()

    run.main(["exec", str(message), "--cwd", str(tmp_path), "--allow-exec"])
    assert (tmp_path / "marker").exists()


def test_bad_configuration_exit_code(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("AGENT_CAN_WRITE", "sometimes")
    message = tmp_path / "message.txt"
    message.write_text(MESSAGE, encoding="utf-8")

    assert run.main(["exec", str(message), "--cwd", str(tmp_path)]) == 2
    assert "AGENT_CAN_WRITE" in capsys.readouterr().err
