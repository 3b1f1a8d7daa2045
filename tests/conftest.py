"""Shared fixtures for forge tests."""

import os
import sys
import zipfile
from collections.abc import Callable
from pathlib import Path

import pytest

from forge.config.schema import ForgeConfig

# Stand-ins for `go mod init` / `go mod tidy` so tests need no Go toolchain
WRITE_MANIFEST = (
    sys.executable,
    "-c",
    "import pathlib, sys; pathlib.Path('go.mod').write_text(f'module {sys.argv[1]}\\n')",
)
CHECK_MANIFEST = (
    sys.executable,
    "-c",
    "import pathlib, sys; sys.exit(0 if pathlib.Path('go.mod').is_file() else 1)",
)


@pytest.fixture(autouse=True)
def isolated_git(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the user's git configuration out of the tests."""
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", os.devnull)
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Forge Tests")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "tests@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Forge Tests")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "tests@example.com")


@pytest.fixture
def make_template(tmp_path: Path) -> Callable[..., Path]:
    """Build a zip template from a mapping of entry name to content.

    Names ending in "/" become directory entries.
    """

    def _make(files: dict[str, str | bytes], name: str = "template.zip") -> Path:
        archive = tmp_path / "templates" / name
        archive.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(archive, "w") as zf:
            for entry, content in files.items():
                if entry.endswith("/"):
                    zf.writestr(zipfile.ZipInfo(entry), "")
                else:
                    zf.writestr(entry, content)
        return archive

    return _make


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Directory in which projects are created."""
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def test_config() -> ForgeConfig:
    """Config whose manifest commands work without a Go toolchain."""
    return ForgeConfig(
        manifest_init=WRITE_MANIFEST,
        manifest_tidy=CHECK_MANIFEST,
        git_author_name="Forge Tests",
        git_author_email="tests@example.com",
        tool_timeout=60.0,
    )
