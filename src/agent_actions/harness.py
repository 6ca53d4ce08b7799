# harness.py
# Message processing loop.
#
# The model is a passive text producer. This module owns the flow:
#   prompt → model → parse → authorize/execute each action → report
#
# All terminal output is delegated to display.py — no formatting here.

import os
from pathlib import Path
from typing import Optional

from openai import OpenAI

from agent_actions import display
from agent_actions.executor import Executor
from agent_actions.formatter import format_responses
from agent_actions.models import Response
from agent_actions.parser import parse_actions

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


# ---------------------------------------------------------------------------
# System Prompt
# ---------------------------------------------------------------------------

SYSTEM_PROMPT = """\
You are a coding assistant that can act on the user's project directory.

When you need to touch files or run commands, include ONE fenced ```json block \
holding an array of actions. Each action is an object with a "type" key and \
the fields listed below:

```json
[
  {"type": "ReadFile", "path": "src/main.py"},
  {"type": "WriteFile", "path": "notes/todo.txt", "content": "..."}
]
```

Available actions and their fields:
- ReadFile: {"path"}
- WriteFile: {"path", "content"}
- CreateDirectory: {"path"}
- DeleteFile: {"path"}
- ExecuteCommand: {"command", "working_dir" (optional)}
- SearchFiles: {"pattern", "directory" (optional)}
- ReplaceInFile: {"path", "old", "new"}
- ListDirectory: {"path"}
- GetFileInfo: {"path"}

Use paths relative to the project directory. Actions may be refused by the \
host's capability policy; refused actions are reported back, not retried.

If no action is required, answer in plain prose and do not emit a json block.\
"""


# ---------------------------------------------------------------------------
# Processing
# ---------------------------------------------------------------------------


def process_agent_message(message: str, executor: Executor) -> list[Response]:
    """Parse `message` and execute every action found, quietly."""
    return executor.execute_batch(parse_actions(message))


def run_message(message: str, executor: Executor) -> str:
    """
    Parse, execute and render one model message.

    Returns the plain-text report in all cases, including when no actions
    were found.
    """
    actions = parse_actions(message)

    if not actions:
        display.no_actions()
        result = format_responses([])
        display.final_result(result)
        return result

    display.actions_parsed(actions)
    display.execution_start(len(actions))

    responses: list[Response] = []
    for index, action in enumerate(actions):
        response = executor.execute(action)
        display.action_result(index, len(actions), action, response)
        responses.append(response)

    display.execution_summary(actions, responses)
    result = format_responses(responses)
    display.final_result(result)
    return result


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class AgentSession:
    """
    One model, one executor. The executor's directory and policy are fixed
    for the lifetime of the session.

    Example:
        session = AgentSession(
            model="anthropic/claude-3.5-haiku",
            executor=Executor(Path.cwd()),
        )
        report = session.run("List the files in src and read the README.")
    """

    def __init__(self, model: str, executor: Executor, api_key: Optional[str] = None) -> None:
        self._model = model
        self._executor = executor
        self._client = OpenAI(
            base_url=OPENROUTER_BASE_URL,
            api_key=api_key or os.getenv("OPENROUTER_API_KEY"),
        )
        display.banner(model, executor.cwd, executor.policy)

    @property
    def cwd(self) -> Path:
        return self._executor.cwd

    def call_model(self, messages: list[dict]) -> str:
        response = self._client.chat.completions.create(
            model=self._model,
            messages=messages,
        )
        return (response.choices[0].message.content or "").strip()

    def run(self, prompt: str) -> str:
        """Ask the model, then act on whatever it proposes."""
        display.prompt_received(prompt)
        display.calling_model()

        reply = self.call_model(
            [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ]
        )
        display.message_received(reply)
        return run_message(reply, self._executor)
