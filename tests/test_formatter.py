import re

from agent_actions.formatter import MAX_OUTPUT_LINES, format_responses
from agent_actions.models import Response


def _numbered(text: str) -> list[str]:
    return [line for line in text.splitlines() if re.match(r"^\d+\. ", line)]


def test_empty_batch():
    assert format_responses([]) == "No actions were executed."


def test_success_and_failure_entries():
    text = format_responses([Response.ok("ok", None), Response.fail("bad", "why")])
    numbered = _numbered(text)

    assert len(numbered) == 2
    assert numbered[0] == "1. ✅ ok"
    assert numbered[1] == "2. ❌ bad"
    assert "   Error: why" in text.splitlines()


def test_layout_is_stable():
    text = format_responses([Response.ok("Listed directory: /p", "FILE   a\nFILE   b")])

    assert text == (
        "🤖 Agent Actions Executed:\n"
        "\n"
        "1. ✅ Listed directory: /p\n"
        "   Output:\n"
        "   FILE   a\n"
        "   FILE   b\n"
        "\n"
    )


def test_output_is_truncated():
    data = "\n".join(f"line {i}" for i in range(25))
    lines = format_responses([Response.ok("long", data)]).splitlines()

    assert "   line 0" in lines
    assert f"   line {MAX_OUTPUT_LINES - 1}" in lines
    assert f"   line {MAX_OUTPUT_LINES}" not in lines
    assert "   ... (output truncated)" in lines


def test_exactly_ten_lines_not_truncated():
    data = "\n".join(str(i) for i in range(MAX_OUTPUT_LINES))
    text = format_responses([Response.ok("ten", data)])

    assert "truncated" not in text


def test_empty_data_has_no_output_section():
    text = format_responses([Response.ok("Successfully wrote file: /p/a", "")])
    assert "Output:" not in text
