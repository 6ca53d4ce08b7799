# formatter.py
# Plain-text rendering of a batch of responses, for chat transcripts and
# anything else that cannot take rich markup.

from typing import Sequence

from agent_actions.models import Response

MAX_OUTPUT_LINES = 10


def format_responses(responses: Sequence[Response]) -> str:
    if not responses:
        return "No actions were executed."

    lines: list[str] = ["🤖 Agent Actions Executed:", ""]

    for index, response in enumerate(responses, start=1):
        icon = "✅" if response.success else "❌"
        lines.append(f"{index}. {icon} {response.message}")

        if response.data:
            data_lines = response.data.splitlines()
            lines.append("   Output:")
            lines.extend(f"   {line}" for line in data_lines[:MAX_OUTPUT_LINES])
            if len(data_lines) > MAX_OUTPUT_LINES:
                lines.append("   ... (output truncated)")

        if response.error is not None:
            lines.append(f"   Error: {response.error}")

        lines.append("")

    return "\n".join(lines) + "\n"
