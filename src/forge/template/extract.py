"""Template archive extraction."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
import zipfile
import zlib
from pathlib import Path

from forge.errors import ArchiveCorruptError, FilesystemError, InputNotFoundError

logger = logging.getLogger(__name__)

STAGING_PREFIX = "_forge_"


def _entry_target(staging: Path, name: str) -> Path:
    """Resolve an archive entry name inside the staging directory.

    Raises ArchiveCorruptError for names that would land outside of it.
    """
    target = (staging / name).resolve()
    if target != staging and staging not in target.parents:
        raise ArchiveCorruptError(
            f"archive entry escapes the project: {name!r}", staging_dir=staging
        )
    return target


def _extract_entry(archive: zipfile.ZipFile, info: zipfile.ZipInfo, staging: Path) -> None:
    target = _entry_target(staging, info.filename)
    if info.is_dir():
        logger.debug("creating directory %s", info.filename)
        target.mkdir(parents=True, exist_ok=True)
        return

    logger.debug("creating file %s", info.filename)
    target.parent.mkdir(parents=True, exist_ok=True)
    with archive.open(info) as src, target.open("wb") as dst:
        shutil.copyfileobj(src, dst)


def extract_template(archive_path: str | Path, destination: str | Path) -> Path:
    """Extract a zipped template into ``destination``.

    Entries are written to a staging directory next to ``destination`` and
    the staging directory is renamed into place once every entry has been
    written, so ``destination`` never shows up half extracted.

    Args:
        archive_path: Path to the template zip file.
        destination: Project root to create. Must not exist yet.

    Returns:
        The resolved destination path.

    Raises:
        InputNotFoundError: The archive does not exist.
        ArchiveCorruptError: The archive cannot be parsed or has unsafe entries.
        FilesystemError: Writing or renaming failed. ``staging_dir`` is set
            when a staging directory was left behind.
    """
    archive_path = Path(archive_path)
    destination = Path(destination).resolve()

    if not archive_path.is_file():
        raise InputNotFoundError(f"could not find the template `{archive_path}`")
    if destination.exists():
        raise FilesystemError(
            f"destination `{destination}` already exists", path=destination
        )

    try:
        archive = zipfile.ZipFile(archive_path)
    except (zipfile.BadZipFile, OSError) as e:
        raise ArchiveCorruptError(
            f"could not open the template `{archive_path}`: {e}"
        ) from e

    with archive:
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            staging = Path(
                tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=destination.parent)
            ).resolve()
        except OSError as e:
            raise FilesystemError(
                f"could not create a staging directory: {e}", path=destination.parent
            ) from e

        logger.info("extracting %s into %s", archive_path, staging)
        for info in archive.infolist():
            try:
                _extract_entry(archive, info, staging)
            except (
                zipfile.BadZipFile,
                zlib.error,
                EOFError,
                NotImplementedError,
                RuntimeError,
            ) as e:
                # RuntimeError: encrypted entry; NotImplementedError: unsupported method
                raise ArchiveCorruptError(
                    f"could not unzip `{info.filename}`: {e}", staging_dir=staging
                ) from e
            except OSError as e:
                raise FilesystemError(
                    f"could not write `{info.filename}`: {e}",
                    path=staging / info.filename,
                    staging_dir=staging,
                ) from e

    logger.info("renaming %s to %s", staging, destination)
    try:
        os.rename(staging, destination)
    except OSError as e:
        raise FilesystemError(
            f"could not rename the staging directory: {e}",
            path=destination,
            staging_dir=staging,
        ) from e

    return destination
