"""Tests for git repository initialization."""

import shutil
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from forge.errors import SequencingError, ToolInvocationError
from forge.git import GitRepository

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "proj"
    root.mkdir()
    (root / "main.go").write_text("package main\n")
    return root


@requires_git
def test_init_stage_commit(project: Path) -> None:
    """Test the happy path produces exactly one commit on main."""
    repo = GitRepository(project, branch="main")

    repo.init()
    assert (project / ".git").is_dir()
    repo.stage_all()
    assert repo.has_staged_changes()
    repo.commit("created by forge: initial commit")

    assert repo.commit_count() == 1
    assert not repo.has_staged_changes()


@requires_git
def test_stage_before_init_fails(project: Path) -> None:
    """Test staging without a repository is a sequencing error."""
    repo = GitRepository(project)

    with pytest.raises(SequencingError):
        repo.stage_all()

    assert not (project / ".git").exists()


@requires_git
def test_commit_before_stage_fails(project: Path) -> None:
    """Test committing with nothing staged is a sequencing error, not an empty commit."""
    repo = GitRepository(project)
    repo.init()

    with pytest.raises(SequencingError):
        repo.commit("initial commit")

    assert repo.commit_count() == 0


@requires_git
def test_commit_before_init_fails(project: Path) -> None:
    """Test committing without a repository is a sequencing error."""
    with pytest.raises(SequencingError):
        GitRepository(project).commit("initial commit")


@requires_git
def test_commit_uses_configured_author(project: Path) -> None:
    """Test the configured author identity ends up on the commit."""
    repo = GitRepository(
        project, author_name="Forge Bot", author_email="forge@example.com"
    )
    repo.init()
    repo.stage_all()
    repo.commit("initial commit")

    result = repo._git("log", "-1", "--format=%an <%ae>")
    assert result.stdout.strip() == "Forge Bot <forge@example.com>"


@requires_git
def test_init_uses_branch_name(project: Path) -> None:
    """Test the repository starts on the configured branch."""
    repo = GitRepository(project, branch="trunk")
    repo.init()

    head = (project / ".git" / "HEAD").read_text().strip()
    assert head == "ref: refs/heads/trunk"


def test_init_failure_raises(tmp_path: Path) -> None:
    """Test git init in a missing directory raises ToolInvocationError."""
    repo = GitRepository(tmp_path / "missing")

    with pytest.raises(ToolInvocationError):
        repo.init()


def test_has_staged_changes_unexpected_status(project: Path) -> None:
    """Test an unexpected git status while probing the index is an error."""
    (project / ".git").mkdir()
    with patch("forge.tools.runner.subprocess") as mock_subprocess:
        mock_subprocess.run.return_value = MagicMock(
            returncode=128, stdout="", stderr="fatal: bad index"
        )
        with pytest.raises(ToolInvocationError) as exc_info:
            GitRepository(project).has_staged_changes()

    assert "bad index" in str(exc_info.value)
