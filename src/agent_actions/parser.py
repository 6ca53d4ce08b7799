# parser.py
# Free-form model text → ordered list of Actions.
#
# Two independent strategies, both always attempted:
#   1. Structured: the first ```json block that validates as an Action array
#      or a single Action. Later blocks are never inspected.
#   2. Heuristic: nine case-insensitive pattern categories, each run over the
#      whole text. Every match of every category yields an Action, so overlaps
#      produce duplicates.
#
# Parsing never raises. Unrecognised text, and JSON nested too deeply to
# decode, simply yield no actions.

import json
import logging
import re
from typing import Callable, Iterable, Optional

from pydantic import ValidationError

from agent_actions.models import (
    ACTION_ADAPTER,
    ACTION_LIST_ADAPTER,
    Action,
    DeleteFile,
    ExecuteCommand,
    ListDirectory,
    ReadFile,
    WriteFile,
    untag,
)

logger = logging.getLogger(__name__)

PLACEHOLDER_CONTENT = "// TODO: Add content"
CONTENT_PROXIMITY = 500

# Fenced block bodies may span lines.
_JSON_BLOCK = re.compile(r"```json\s*(.*?)\s*```", re.DOTALL)
_CODE_BLOCK = re.compile(r"```(?:\w+)?\s*(.*?)\s*```", re.DOTALL)

_QUOTES = "`\"'"
_PATH_TARGET = r"[`\"']?([^`\"'\s]+)[`\"']?"
_LINE_TARGET = r"[`\"']?([^`\"'\n]+)[`\"']?"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _clean_target(raw: str) -> str:
    return raw.strip().strip(_QUOTES).strip()


def extract_content_for_file(text: str, filename: str) -> Optional[str]:
    """
    Return the body of the first fenced code block that starts within
    CONTENT_PROXIMITY characters of the first mention of `filename`.
    """
    filename_pos = text.find(filename)
    if filename_pos == -1:
        return None

    for match in _CODE_BLOCK.finditer(text):
        if abs(match.start() - filename_pos) < CONTENT_PROXIMITY:
            return match.group(1)
    return None


# ---------------------------------------------------------------------------
# Matchers
# ---------------------------------------------------------------------------


class ActionMatcher:
    """One extraction strategy. Subclasses return actions in text order."""

    name = "matcher"

    def find(self, text: str) -> list[Action]:
        raise NotImplementedError


class StructuredBlockMatcher(ActionMatcher):
    """Fenced ```json blocks holding an Action array or a single Action."""

    name = "structured"

    def find(self, text: str) -> list[Action]:
        for match in _JSON_BLOCK.finditer(text):
            try:
                payload = untag(json.loads(match.group(1)))
            except (json.JSONDecodeError, RecursionError):
                continue

            try:
                return ACTION_LIST_ADAPTER.validate_python(payload)
            except (ValidationError, RecursionError):
                pass

            try:
                return [ACTION_ADAPTER.validate_python(payload)]
            except (ValidationError, RecursionError):
                continue
        return []


class PatternMatcher(ActionMatcher):
    """
    A single heuristic category: one regex whose first group is the target,
    and a builder turning (target, full text) into an Action.
    """

    def __init__(self, name: str, pattern: str, build: Callable[[str, str], Action]) -> None:
        self.name = name
        self._regex = re.compile(pattern, re.IGNORECASE)
        self._build = build

    def find(self, text: str) -> list[Action]:
        actions: list[Action] = []
        for match in self._regex.finditer(text):
            target = _clean_target(match.group(1))
            if target:
                actions.append(self._build(target, text))
        return actions


def _read(target: str, text: str) -> Action:
    return ReadFile(path=target)


def _write(target: str, text: str) -> Action:
    content = extract_content_for_file(text, target)
    return WriteFile(path=target, content=PLACEHOLDER_CONTENT if content is None else content)


def _delete(target: str, text: str) -> Action:
    return DeleteFile(path=target)


def _list(target: str, text: str) -> Action:
    return ListDirectory(path=target)


def _execute(target: str, text: str) -> Action:
    return ExecuteCommand(command=target)


PATTERN_MATCHERS: list[PatternMatcher] = [
    PatternMatcher("read", r"read\s+(?:the\s+)?file\s+" + _PATH_TARGET, _read),
    PatternMatcher("write", r"write\s+(?:to\s+)?(?:the\s+)?file\s+" + _PATH_TARGET, _write),
    PatternMatcher(
        "create", r"create\s+(?:a\s+)?(?:new\s+)?file(?:\s+called)?\s+" + _PATH_TARGET, _write
    ),
    PatternMatcher("save", r"save\s+(?:to\s+)?" + _PATH_TARGET, _write),
    PatternMatcher("delete", r"delete\s+(?:the\s+)?file\s+" + _PATH_TARGET, _delete),
    PatternMatcher("remove", r"remove\s+(?:the\s+)?file\s+" + _PATH_TARGET, _delete),
    PatternMatcher(
        "list",
        r"list\s+(?:the\s+)?(?:files\s+in\s+)?(?:directory\s+)?" + _PATH_TARGET,
        _list,
    ),
    PatternMatcher("execute", r"execute\s+" + _LINE_TARGET, _execute),
    PatternMatcher("run", r"run\s+" + _LINE_TARGET, _execute),
]


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class ActionParser:
    """Runs matchers in order and concatenates what they find."""

    def __init__(self, matchers: Iterable[ActionMatcher]) -> None:
        self._matchers = list(matchers)

    @property
    def matchers(self) -> list[ActionMatcher]:
        return list(self._matchers)

    def parse(self, text: str) -> list[Action]:
        actions: list[Action] = []
        for matcher in self._matchers:
            found = matcher.find(text)
            if found:
                logger.debug("%s matcher found %d action(s)", matcher.name, len(found))
            actions.extend(found)
        return actions


DEFAULT_PARSER = ActionParser([StructuredBlockMatcher(), *PATTERN_MATCHERS])


def parse_actions(text: str) -> list[Action]:
    """Extract every action the default parser can find in `text`."""
    return DEFAULT_PARSER.parse(text)
