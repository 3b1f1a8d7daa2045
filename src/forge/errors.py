"""Exception hierarchy for forge."""

from __future__ import annotations

from pathlib import Path


class ForgeError(Exception):
    """Base exception for all forge failures."""


class InputNotFoundError(ForgeError):
    """Raised when the template archive does not exist."""


class ArchiveCorruptError(ForgeError):
    """Raised when the template archive is not a readable zip file."""

    def __init__(self, message: str, staging_dir: Path | None = None) -> None:
        super().__init__(message)
        self.staging_dir = staging_dir


class FilesystemError(ForgeError):
    """Raised when a read, write, rename or traversal fails."""

    def __init__(
        self,
        message: str,
        path: Path | None = None,
        staging_dir: Path | None = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.staging_dir = staging_dir


class ToolInvocationError(ForgeError):
    """Raised when an external command fails to start, exits non-zero or times out."""

    def __init__(
        self,
        command: str,
        stderr: str = "",
        returncode: int | None = None,
        timed_out: bool = False,
    ) -> None:
        self.command = command
        self.stderr = stderr
        self.returncode = returncode
        self.timed_out = timed_out
        super().__init__(self._format())

    def _format(self) -> str:
        if self.timed_out:
            head = f"`{self.command}` timed out"
        elif self.returncode is None:
            head = f"`{self.command}` could not be run"
        else:
            head = f"`{self.command}` exited with status {self.returncode}"
        detail = self.stderr.strip()
        return f"{head}: {detail}" if detail else head


class SequencingError(ForgeError):
    """Raised when a step is invoked before its precondition holds."""


class PipelineError(ForgeError):
    """A pipeline step failed.

    Carries the failing step and the underlying cause so callers can decide
    what to do (rollback, report, keep the partial project).
    """

    def __init__(self, step: str, cause: ForgeError) -> None:
        super().__init__(f"{step} failed: {cause}")
        self.step = step
        self.cause = cause
        self.__cause__ = cause
