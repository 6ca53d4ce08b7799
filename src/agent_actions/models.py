# models.py
# Data contracts for the action pipeline.
# No business logic lives here — pure schema and validation.

from pathlib import Path
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------


class _ActionBase(BaseModel):
    model_config = ConfigDict(frozen=True)


class ReadFile(_ActionBase):
    """Read a whole file as text."""

    type: Literal["ReadFile"] = "ReadFile"
    path: Path


class WriteFile(_ActionBase):
    """Create or overwrite a file, creating missing parent directories."""

    type: Literal["WriteFile"] = "WriteFile"
    path: Path
    content: str


class CreateDirectory(_ActionBase):
    type: Literal["CreateDirectory"] = "CreateDirectory"
    path: Path


class DeleteFile(_ActionBase):
    """Delete a file, or a directory tree."""

    type: Literal["DeleteFile"] = "DeleteFile"
    path: Path


class ExecuteCommand(_ActionBase):
    """Run a command line through the host shell."""

    type: Literal["ExecuteCommand"] = "ExecuteCommand"
    command: str
    working_dir: Optional[Path] = None


class SearchFiles(_ActionBase):
    """Match file names in one directory (non-recursive) by substring."""

    type: Literal["SearchFiles"] = "SearchFiles"
    pattern: str
    directory: Optional[Path] = None


class ReplaceInFile(_ActionBase):
    """Literal, global substring replacement inside a file."""

    type: Literal["ReplaceInFile"] = "ReplaceInFile"
    path: Path
    old: str
    new: str


class ListDirectory(_ActionBase):
    type: Literal["ListDirectory"] = "ListDirectory"
    path: Path


class GetFileInfo(_ActionBase):
    type: Literal["GetFileInfo"] = "GetFileInfo"
    path: Path


ACTION_TYPES: tuple[type[BaseModel], ...] = (
    ReadFile,
    WriteFile,
    CreateDirectory,
    DeleteFile,
    ExecuteCommand,
    SearchFiles,
    ReplaceInFile,
    ListDirectory,
    GetFileInfo,
)

ACTION_KINDS: frozenset[str] = frozenset(kind.__name__ for kind in ACTION_TYPES)

Action = Annotated[
    Union[
        ReadFile,
        WriteFile,
        CreateDirectory,
        DeleteFile,
        ExecuteCommand,
        SearchFiles,
        ReplaceInFile,
        ListDirectory,
        GetFileInfo,
    ],
    Field(discriminator="type"),
]

ACTION_ADAPTER: TypeAdapter = TypeAdapter(Action)
ACTION_LIST_ADAPTER: TypeAdapter = TypeAdapter(list[Action])


def untag(value: Any) -> Any:
    """
    Rewrite the externally tagged shape ``{"ReadFile": {"path": "x"}}`` into the
    internally tagged ``{"type": "ReadFile", "path": "x"}`` the adapters expect.

    Lists are rewritten element by element. Anything else is returned untouched
    so validation can reject it.
    """
    if isinstance(value, list):
        return [untag(item) for item in value]
    if isinstance(value, dict) and len(value) == 1:
        ((kind, body),) = value.items()
        if kind in ACTION_KINDS and isinstance(body, dict):
            return {"type": kind, **body}
    return value


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class Response(BaseModel):
    """Outcome of one executed (or refused) action."""

    model_config = ConfigDict(frozen=True)

    success: bool
    message: str
    data: Optional[str] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def _check_polarity(self) -> "Response":
        if self.success and self.error is not None:
            raise ValueError("A successful response cannot carry an error.")
        if not self.success and self.data is not None:
            raise ValueError("A failed response cannot carry data.")
        return self

    @classmethod
    def ok(cls, message: str, data: Optional[str] = None) -> "Response":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, message: str, error: str) -> "Response":
        return cls(success=False, message=message, error=error)


# ---------------------------------------------------------------------------
# Capabilities
# ---------------------------------------------------------------------------

DEFAULT_RESTRICTED_PATHS: tuple[Path, ...] = (
    Path("/etc"),
    Path("/root"),
    Path("/sys"),
    Path("/proc"),
)


class CapabilityPolicy(BaseModel):
    """
    What an executor may do. Command execution is off unless asked for;
    restricted prefixes are denied whatever the capability flags say.
    """

    model_config = ConfigDict(frozen=True)

    can_read: bool = True
    can_write: bool = True
    can_execute: bool = False
    can_modify_filesystem: bool = True
    restricted_paths: tuple[Path, ...] = Field(default=DEFAULT_RESTRICTED_PATHS)
