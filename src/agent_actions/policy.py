# policy.py
# Path resolution and the authorization gate.
#
# Pure functions over (action, policy, cwd) — nothing here touches the
# filesystem. Paths are compared lexically; ".." segments are NOT collapsed
# before the restricted-prefix check.

import logging
from pathlib import Path, PurePath
from typing import Union

from agent_actions.models import (
    Action,
    CapabilityPolicy,
    CreateDirectory,
    DeleteFile,
    ExecuteCommand,
    GetFileInfo,
    ListDirectory,
    ReadFile,
    ReplaceInFile,
    SearchFiles,
    WriteFile,
)

logger = logging.getLogger(__name__)

# Which capability flag gates each path-bearing action kind.
_PATH_CAPABILITY: dict[type, str] = {
    ReadFile: "can_read",
    ListDirectory: "can_read",
    GetFileInfo: "can_read",
    WriteFile: "can_write",
    ReplaceInFile: "can_write",
    CreateDirectory: "can_modify_filesystem",
    DeleteFile: "can_modify_filesystem",
}


def resolve_path(path: Union[str, PurePath], cwd: Path) -> Path:
    """Absolute paths pass through; relative ones are joined onto `cwd`."""
    path = Path(path)
    if path.is_absolute():
        return path
    return cwd / path


def is_restricted(path: PurePath, policy: CapabilityPolicy) -> bool:
    """True if any restricted prefix matches `path` component by component."""
    return any(path.is_relative_to(prefix) for prefix in policy.restricted_paths)


def authorize(action: Action, policy: CapabilityPolicy, cwd: Path) -> bool:
    """
    Decide whether `action` may run under `policy`.

    Commands are gated by `can_execute` alone. Searches are gated only by the
    restricted-path list. Every other kind needs its capability flag AND a
    resolved path outside the restricted prefixes.
    """
    if isinstance(action, ExecuteCommand):
        allowed = policy.can_execute
        target = action.command
    elif isinstance(action, SearchFiles):
        resolved = resolve_path(action.directory or cwd, cwd)
        allowed = not is_restricted(resolved, policy)
        target = str(resolved)
    else:
        resolved = resolve_path(action.path, cwd)
        capability = _PATH_CAPABILITY[type(action)]
        allowed = getattr(policy, capability) and not is_restricted(resolved, policy)
        target = str(resolved)

    if not allowed:
        logger.info("Denied %s on %s", action.type, target)
    return allowed
