# config.py
# Environment-driven configuration. A .env file in the working directory is
# loaded first; real environment variables win over it.

import os
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from agent_actions.models import CapabilityPolicy

load_dotenv()

DEFAULT_MODEL = "anthropic/claude-3.5-haiku"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


class ConfigError(ValueError):
    """Raised when an environment variable holds an unusable value."""


def _flag(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ConfigError(f"{name} must be one of {sorted(_TRUTHY | _FALSY)}, got {raw!r}")


def load_policy(environ: Optional[Mapping[str, str]] = None) -> CapabilityPolicy:
    """
    Build a CapabilityPolicy from AGENT_* variables.

    AGENT_CAN_READ, AGENT_CAN_WRITE, AGENT_CAN_EXECUTE, AGENT_CAN_MODIFY_FS
    take boolean text. AGENT_RESTRICTED_PATHS replaces the default prefix list
    and is separated by os.pathsep. Unset variables keep the defaults.
    """
    environ = os.environ if environ is None else environ
    defaults = CapabilityPolicy()

    restricted = defaults.restricted_paths
    raw_paths = environ.get("AGENT_RESTRICTED_PATHS")
    if raw_paths is not None:
        restricted = tuple(Path(p) for p in raw_paths.split(os.pathsep) if p.strip())

    return CapabilityPolicy(
        can_read=_flag(environ, "AGENT_CAN_READ", defaults.can_read),
        can_write=_flag(environ, "AGENT_CAN_WRITE", defaults.can_write),
        can_execute=_flag(environ, "AGENT_CAN_EXECUTE", defaults.can_execute),
        can_modify_filesystem=_flag(environ, "AGENT_CAN_MODIFY_FS", defaults.can_modify_filesystem),
        restricted_paths=restricted,
    )


def load_model(environ: Optional[Mapping[str, str]] = None) -> str:
    environ = os.environ if environ is None else environ
    return environ.get("AGENT_MODEL") or DEFAULT_MODEL
