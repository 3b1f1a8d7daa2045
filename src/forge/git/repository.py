"""Git repository initialization for a freshly created project."""

import logging
from pathlib import Path

from forge.errors import SequencingError, ToolInvocationError
from forge.tools.runner import ToolResult, ToolRunner

logger = logging.getLogger(__name__)


class GitRepository:
    """Initial git operations for a project root (init, stage, commit)."""

    def __init__(
        self,
        root: Path,
        runner: ToolRunner | None = None,
        branch: str = "main",
        author_name: str | None = None,
        author_email: str | None = None,
    ) -> None:
        """Initialize with the project root and commit settings."""
        self._root = root
        self._runner = runner or ToolRunner()
        self.branch = branch
        self._author_name = author_name
        self._author_email = author_email

    def _git(self, *args: str, check: bool = True) -> ToolResult:
        return self._runner.run("git", list(args), self._root, check=check)

    def exists(self) -> bool:
        """Check if the project root holds its own repository."""
        return (self._root / ".git").exists()

    def has_staged_changes(self) -> bool:
        """Check if the index differs from HEAD (or the empty tree).

        Raises:
            ToolInvocationError: git could not answer.
        """
        result = self._git("diff", "--cached", "--quiet", check=False)
        if result.returncode not in (0, 1):
            raise ToolInvocationError(
                result.invocation.describe(),
                stderr=result.stderr,
                returncode=result.returncode,
            )
        return result.returncode == 1

    def commit_count(self) -> int:
        """Get the number of commits reachable from HEAD, 0 if there are none."""
        result = self._git("rev-list", "--count", "HEAD", check=False)
        if result.returncode != 0:
            return 0
        try:
            return int(result.stdout.strip())
        except ValueError:
            return 0

    def init(self) -> ToolResult:
        """Create the repository with the configured initial branch."""
        logger.info("initializing git repo: branch = %s", self.branch)
        return self._git("init", "-b", self.branch)

    def stage_all(self) -> ToolResult:
        """Stage every file in the project root.

        Raises:
            SequencingError: init() has not created a repository yet.
        """
        if not self.exists():
            raise SequencingError(f"cannot stage files: no repository at {self._root}")
        logger.info("staging files on branch %s", self.branch)
        return self._git("add", ".")

    def commit(self, message: str) -> ToolResult:
        """Commit the staged files.

        Raises:
            SequencingError: There is no repository or nothing is staged.
        """
        if not self.exists():
            raise SequencingError(f"cannot commit: no repository at {self._root}")
        if not self.has_staged_changes():
            raise SequencingError("cannot commit: nothing has been staged")

        args: list[str] = []
        if self._author_name:
            args.extend(["-c", f"user.name={self._author_name}"])
        if self._author_email:
            args.extend(["-c", f"user.email={self._author_email}"])
        args.extend(["commit", "-m", message])

        logger.info("creating initial commit")
        return self._git(*args)
