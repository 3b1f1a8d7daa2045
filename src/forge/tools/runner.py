"""Uniform adapter for running external command-line tools."""

from __future__ import annotations

import logging
import shlex
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path

from forge.errors import ToolInvocationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolInvocation:
    """Everything needed to run one external command."""

    executable: str
    args: tuple[str, ...]
    cwd: Path

    @property
    def argv(self) -> list[str]:
        return [self.executable, *self.args]

    def describe(self) -> str:
        """Return the command line as a shell-quoted string."""
        return shlex.join(self.argv)


@dataclass(frozen=True)
class ToolResult:
    """Outcome of a finished external command."""

    invocation: ToolInvocation
    returncode: int
    stdout: str
    stderr: str
    duration_ms: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ToolRunner:
    """Runs external commands with captured output and an optional timeout."""

    def __init__(self, timeout: float | None = None) -> None:
        """Initialize with a per-command timeout in seconds (None for no limit)."""
        self.timeout = timeout

    def run(
        self,
        executable: str,
        args: tuple[str, ...] | list[str],
        cwd: str | Path,
        *,
        check: bool = True,
    ) -> ToolResult:
        """Run a command and wait for it to exit.

        Args:
            executable: Program to run, resolved through PATH.
            args: Arguments passed after the executable.
            cwd: Working directory for the child process.
            check: Raise on a non-zero exit status. When False the result is
                returned and the caller inspects ``returncode``.

        Returns:
            ToolResult with captured stdout and stderr.

        Raises:
            ToolInvocationError: The command could not be started, timed out,
                or exited non-zero while ``check`` is set.
        """
        invocation = ToolInvocation(executable, tuple(args), Path(cwd))
        command = invocation.describe()
        logger.info("running %s (cwd=%s)", command, invocation.cwd)

        start = time.monotonic()
        try:
            completed = subprocess.run(
                invocation.argv,
                cwd=invocation.cwd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            stderr = e.stderr or ""
            if isinstance(stderr, bytes):
                stderr = stderr.decode(errors="replace")
            raise ToolInvocationError(command, stderr=stderr, timed_out=True) from e
        except OSError as e:
            raise ToolInvocationError(command, stderr=str(e)) from e
        duration_ms = int((time.monotonic() - start) * 1000)

        result = ToolResult(
            invocation=invocation,
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
            duration_ms=duration_ms,
        )
        if result.stdout.strip():
            logger.debug("%s stdout:\n%s", command, result.stdout.rstrip())

        if check and not result.ok:
            raise ToolInvocationError(
                command, stderr=result.stderr, returncode=result.returncode
            )
        return result
