"""Best-effort cleanup after a failed pipeline run."""

import logging
import shutil
from pathlib import Path

from forge.pipeline.base import PipelineRun

logger = logging.getLogger(__name__)


def _remove_tree(path: Path) -> bool:
    if not path.exists():
        return True
    try:
        shutil.rmtree(path)
    except OSError as e:
        logger.error("rollback could not remove %s: %s", path, e)
        return False
    logger.info("removed %s", path)
    return True


def rollback(run: PipelineRun) -> bool:
    """Delete whatever a failed run left on disk.

    Only removes the project root when this run created it, so a directory
    that already existed is never touched. Leftover staging directories are
    removed too.

    Returns:
        True if nothing is left behind, False if some removal failed. A
        failed removal is logged and never raised, so it cannot mask the
        error that caused the rollback.
    """
    if run.success:
        return True

    clean = True
    if run.root_created:
        logger.info("rolling back %s", run.spec.project_root)
        clean = _remove_tree(run.spec.project_root) and clean
    if run.staging_dir is not None:
        clean = _remove_tree(run.staging_dir) and clean
    return clean
