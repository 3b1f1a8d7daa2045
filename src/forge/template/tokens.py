"""Placeholder token substitution over an extracted template."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from forge.errors import FilesystemError

logger = logging.getLogger(__name__)

PROJECT_NAME_TOKEN = "{{project_name}}"
MODULE_PATH_TOKEN = "{{module_path}}"
DESCRIPTION_TOKEN = "{{project_description}}"


@dataclass(frozen=True)
class TokenSet:
    """Replacement values for the template placeholders.

    A missing description replaces its token with an empty string.
    """

    project_name: str
    module_path: str
    description: str | None = None

    def replacements(self) -> tuple[tuple[bytes, bytes], ...]:
        """Return (token, value) byte pairs in substitution order."""
        return (
            (PROJECT_NAME_TOKEN.encode(), self.project_name.encode()),
            (MODULE_PATH_TOKEN.encode(), self.module_path.encode()),
            (DESCRIPTION_TOKEN.encode(), (self.description or "").encode()),
        )


@dataclass
class SubstitutionReport:
    """Counts collected while substituting tokens under a root."""

    files_scanned: int = 0
    files_changed: int = 0
    replacements: dict[str, int] = field(default_factory=dict)

    def add(self, counts: dict[str, int]) -> None:
        self.files_scanned += 1
        if any(counts.values()):
            self.files_changed += 1
        for token, count in counts.items():
            self.replacements[token] = self.replacements.get(token, 0) + count


def replace_tokens_in_file(path: str | Path, tokens: TokenSet) -> dict[str, int]:
    """Replace every token occurrence in a single file.

    Each token is replaced over the output of the previous replacement. The
    file is only rewritten when something changed.

    Returns:
        Mapping of token to the number of occurrences replaced.

    Raises:
        FilesystemError: The file could not be read or written.
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise FilesystemError(f"could not read `{path}`: {e}", path=path) from e

    counts: dict[str, int] = {}
    updated = data
    for token, value in tokens.replacements():
        counts[token.decode()] = updated.count(token)
        updated = updated.replace(token, value)

    if updated == data:
        logger.debug("no tokens found in %s", path)
        return counts

    try:
        path.write_bytes(updated)
    except OSError as e:
        raise FilesystemError(f"could not write `{path}`: {e}", path=path) from e

    logger.debug("replaced tokens in %s", path)
    return counts


def _raise_walk_error(error: OSError) -> None:
    raise FilesystemError(
        f"could not traverse `{error.filename}`: {error.strerror}",
        path=Path(error.filename) if error.filename else None,
    ) from error


def replace_tokens(root: str | Path, tokens: TokenSet) -> SubstitutionReport:
    """Replace tokens in every regular file below ``root``.

    Directories are traversed, not rewritten, and symbolic links are skipped.
    Stops at the first file that cannot be read or written.
    """
    root = Path(root)
    if not root.is_dir():
        raise FilesystemError(f"could not traverse `{root}`: not a directory", path=root)

    logger.info(
        "replacing tokens in %s (project_name=%s, module_path=%s)",
        root,
        tokens.project_name,
        tokens.module_path,
    )
    report = SubstitutionReport()
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        dirnames.sort()
        for name in sorted(filenames):
            path = Path(dirpath) / name
            if path.is_symlink() or not path.is_file():
                continue
            report.add(replace_tokens_in_file(path, tokens))

    return report
