# executor.py
# Authorize-then-dispatch for single actions and batches.
#
# Every handler converts OS and process failures, and paths or commands the
# OS rejects outright (embedded NUL bytes), into a failed Response.
# Nothing raised by the filesystem or a child process escapes execute().
# A batch of N actions always yields N responses, in order.

import logging
import os
import shutil
import stat
import subprocess
from pathlib import Path
from typing import Any, Callable, Iterable, Optional, Union

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
    Response,
    SearchFiles,
    WriteFile,
)
from agent_actions.policy import authorize, resolve_path

logger = logging.getLogger(__name__)

DENIED_MESSAGE = "Action not permitted"
DENIED_ERROR = "This action is restricted by capabilities"

_WRITE_BITS = stat.S_IWUSR | stat.S_IWGRP | stat.S_IWOTH


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def shell_argv(command: str) -> list[str]:
    """Wrap a command line for the host shell."""
    if os.name == "nt":
        return ["cmd", "/C", command]
    return ["sh", "-c", command]


def combine_output(stdout: str, stderr: str) -> str:
    if not stderr:
        return stdout
    return f"STDOUT:\n{stdout}\n\nSTDERR:\n{stderr}"


# ---------------------------------------------------------------------------
# Executor
# ---------------------------------------------------------------------------


class Executor:
    """
    Runs actions against one working directory under one capability policy.

    Both are fixed at construction; there is no way to change them later.

    Example:
        executor = Executor("/home/me/project", CapabilityPolicy(can_execute=True))
        responses = executor.execute_batch(parse_actions(text))
    """

    def __init__(self, cwd: Union[str, Path], policy: Optional[CapabilityPolicy] = None) -> None:
        self._cwd = Path(cwd).absolute()
        self._policy = policy if policy is not None else CapabilityPolicy()
        self._handlers: dict[type, Callable[[Any], Response]] = {
            ReadFile: self._read_file,
            WriteFile: self._write_file,
            CreateDirectory: self._create_directory,
            DeleteFile: self._delete,
            ExecuteCommand: self._execute_command,
            SearchFiles: self._search_files,
            ReplaceInFile: self._replace_in_file,
            ListDirectory: self._list_directory,
            GetFileInfo: self._get_file_info,
        }

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def cwd(self) -> Path:
        return self._cwd

    @property
    def policy(self) -> CapabilityPolicy:
        return self._policy

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def is_permitted(self, action: Action) -> bool:
        return authorize(action, self._policy, self._cwd)

    def execute(self, action: Action) -> Response:
        """
        Authorize, then perform, one action.

        A denied action touches nothing and returns the fixed
        "Action not permitted" response.
        """
        if not self.is_permitted(action):
            return Response.fail(DENIED_MESSAGE, DENIED_ERROR)

        logger.info("Executing %s", action.model_dump_json())
        response = self._handlers[type(action)](action)

        if not response.success:
            logger.warning("%s: %s", response.message, response.error)
        return response

    def execute_batch(self, actions: Iterable[Action]) -> list[Response]:
        """Execute sequentially; one response per action, same order."""
        return [self.execute(action) for action in actions]

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _resolve(self, path: Path) -> Path:
        return resolve_path(path, self._cwd)

    def _read_file(self, action: ReadFile) -> Response:
        path = self._resolve(action.path)
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, ValueError) as exc:
            return Response.fail(f"Failed to read file: {path}", str(exc))
        return Response.ok(f"Successfully read file: {path}", content)

    def _write_file(self, action: WriteFile) -> Response:
        path = self._resolve(action.path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except (OSError, ValueError) as exc:
            return Response.fail("Failed to create parent directories", str(exc))

        try:
            path.write_text(action.content, encoding="utf-8")
        except (OSError, ValueError) as exc:
            return Response.fail(f"Failed to write file: {path}", str(exc))
        return Response.ok(f"Successfully wrote file: {path}")

    def _create_directory(self, action: CreateDirectory) -> Response:
        path = self._resolve(action.path)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except (OSError, ValueError) as exc:
            return Response.fail(f"Failed to create directory: {path}", str(exc))
        return Response.ok(f"Successfully created directory: {path}")

    def _delete(self, action: DeleteFile) -> Response:
        path = self._resolve(action.path)
        try:
            if path.is_file():
                path.unlink()
            elif path.is_dir():
                shutil.rmtree(path)
            else:
                return Response.fail("Path does not exist", f"Path {path} does not exist")
        except (OSError, ValueError) as exc:
            return Response.fail(f"Failed to delete: {path}", str(exc))
        return Response.ok(f"Successfully deleted: {path}")

    def _execute_command(self, action: ExecuteCommand) -> Response:
        command = action.command
        working_dir = self._resolve(action.working_dir) if action.working_dir else self._cwd
        try:
            proc = subprocess.run(
                shell_argv(command),
                cwd=working_dir,
                text=True,
                errors="replace",
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except (OSError, ValueError) as exc:
            return Response.fail(f"Failed to execute command: {command}", str(exc))

        output = combine_output(proc.stdout, proc.stderr)
        if proc.returncode == 0:
            return Response.ok(f"Command executed successfully: {command}", output)
        return Response.fail(f"Command failed: {command}", output)

    def _search_files(self, action: SearchFiles) -> Response:
        directory = self._resolve(action.directory or self._cwd)
        matches: list[str] = []
        try:
            for child in directory.iterdir():
                if action.pattern in child.name:
                    matches.append(str(child))
        except (OSError, ValueError) as exc:
            # An unreadable directory is reported as zero matches.
            logger.debug("Cannot list %s: %s", directory, exc)

        return Response.ok(
            f"Found {len(matches)} matches for pattern '{action.pattern}'",
            "\n".join(matches),
        )

    def _replace_in_file(self, action: ReplaceInFile) -> Response:
        path = self._resolve(action.path)
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, ValueError) as exc:
            return Response.fail(f"Failed to read file: {path}", str(exc))

        try:
            path.write_text(content.replace(action.old, action.new), encoding="utf-8")
        except (OSError, ValueError) as exc:
            return Response.fail(f"Failed to write file: {path}", str(exc))
        return Response.ok(f"Successfully replaced text in: {path}")

    def _list_directory(self, action: ListDirectory) -> Response:
        path = self._resolve(action.path)
        try:
            items = [
                f"{'DIR' if child.is_dir() else 'FILE':<6} {child.name}"
                for child in path.iterdir()
            ]
        except (OSError, ValueError) as exc:
            return Response.fail(f"Failed to list directory: {path}", str(exc))

        # Sorted on the rendered line, not on (kind, name).
        items.sort()
        return Response.ok(f"Listed directory: {path}", "\n".join(items))

    def _get_file_info(self, action: GetFileInfo) -> Response:
        path = self._resolve(action.path)
        try:
            info = path.stat()
        except (OSError, ValueError) as exc:
            return Response.fail(f"Failed to get file info: {path}", str(exc))

        if stat.S_ISDIR(info.st_mode):
            kind = "Directory"
        elif stat.S_ISREG(info.st_mode):
            kind = "File"
        else:
            kind = "Other"
        size = f"{info.st_size} bytes" if kind == "File" else "N/A"
        readonly = not info.st_mode & _WRITE_BITS

        return Response.ok(
            f"File info for: {path}",
            f"Path: {path}\nType: {kind}\nSize: {size}\nReadonly: {readonly}",
        )
