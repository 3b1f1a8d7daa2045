"""Pipeline orchestrator - sequential project creation."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path

from forge.config.schema import DEFAULT_CONFIG, ForgeConfig
from forge.errors import ForgeError, PipelineError
from forge.git.repository import GitRepository
from forge.pipeline.base import (
    STEP_STATES,
    PipelineRun,
    PipelineState,
    ProjectSpec,
    Step,
    StepResult,
)
from forge.pipeline.rollback import rollback
from forge.template.extract import extract_template
from forge.template.tokens import replace_tokens
from forge.tools.deps import DependencyInstaller
from forge.tools.manifest import ManifestManager
from forge.tools.runner import ToolRunner

logger = logging.getLogger(__name__)


class ProjectPipeline:
    """Runs every step needed to turn a template into a committed project.

    The pipeline stops at the first failing step and reports it through the
    returned PipelineRun. It never deletes anything; rolling back is up to
    the caller (see forge.pipeline.rollback).
    """

    def __init__(
        self,
        spec: ProjectSpec,
        config: ForgeConfig | None = None,
        runner: ToolRunner | None = None,
    ) -> None:
        self.spec = spec
        self.config = DEFAULT_CONFIG.merge(config) if config else DEFAULT_CONFIG
        self.runner = runner or ToolRunner(timeout=self.config.timeout)

        root = spec.project_root
        self.manifest = ManifestManager.from_config(root, self.config, self.runner)
        self.installer = DependencyInstaller.from_config(root, self.config, self.runner)
        self.repository = GitRepository(
            root,
            self.runner,
            branch=self.config.default_branch or "main",
            author_name=self.config.git_author_name,
            author_email=self.config.git_author_email,
        )

    def _steps(self) -> list[tuple[Step, Callable[[PipelineRun], str]]]:
        return [
            (Step.EXTRACT, self._extract),
            (Step.SUBSTITUTE, self._substitute),
            (Step.MANIFEST_INIT, self._manifest_init),
            (Step.INSTALL_DEPS, self._install_deps),
            (Step.MANIFEST_TIDY, self._manifest_tidy),
            (Step.VCS_INIT, self._vcs_init),
            (Step.VCS_ADD, self._vcs_add),
            (Step.VCS_COMMIT, self._vcs_commit),
        ]

    def _extract(self, run: PipelineRun) -> str:
        root = self.spec.project_root
        existed = root.exists()
        try:
            extract_template(self.spec.template_path, root)
        except ForgeError as e:
            run.staging_dir = getattr(e, "staging_dir", None)
            raise
        finally:
            run.root_created = not existed and root.exists()
        return str(root)

    def _substitute(self, run: PipelineRun) -> str:
        report = replace_tokens(self.spec.project_root, self.spec.tokens())
        run.substitution = report
        return f"{report.files_changed}/{report.files_scanned} files changed"

    def _manifest_init(self, run: PipelineRun) -> str:
        return self.manifest.init(self.spec.module_name).invocation.describe()

    def _install_deps(self, run: PipelineRun) -> str:
        result = self.installer.install()
        if result is None:
            return "no setup script"
        return result.invocation.describe()

    def _manifest_tidy(self, run: PipelineRun) -> str:
        return self.manifest.tidy().invocation.describe()

    def _vcs_init(self, run: PipelineRun) -> str:
        return self.repository.init().invocation.describe()

    def _vcs_add(self, run: PipelineRun) -> str:
        return self.repository.stage_all().invocation.describe()

    def _vcs_commit(self, run: PipelineRun) -> str:
        message = self.config.commit_message or "initial commit"
        self.repository.commit(message)
        return message

    def run(self, run: PipelineRun | None = None) -> PipelineRun:
        """Execute every step in order, stopping at the first failure.

        Args:
            run: State object to fill in. Callers that must clean up after
                an unexpected exception pass their own, since nothing is
                returned in that case.

        Returns:
            The run. ForgeError failures are recorded on it, anything else
            marks it failed and propagates.
        """
        if run is None:
            run = PipelineRun(spec=self.spec)
        logger.info(
            "creating project %s (module %s) from %s",
            self.spec.project_name,
            self.spec.module_name,
            self.spec.template_path,
        )

        for step, action in self._steps():
            run.state = STEP_STATES[step]
            start = time.monotonic()
            try:
                detail = action(run)
            except ForgeError as e:
                duration_ms = int((time.monotonic() - start) * 1000)
                run.results.append(StepResult(step, False, duration_ms, str(e)))
                run.error = PipelineError(step, e)
                run.state = PipelineState.FAILED
                logger.error("%s", run.error)
                return run
            except BaseException:
                duration_ms = int((time.monotonic() - start) * 1000)
                run.results.append(StepResult(step, False, duration_ms, "aborted"))
                run.state = PipelineState.FAILED
                logger.error("%s aborted by an unexpected error", step)
                raise
            duration_ms = int((time.monotonic() - start) * 1000)
            run.results.append(StepResult(step, True, duration_ms, detail))

        run.state = PipelineState.DONE
        logger.info("project created at %s", self.spec.project_root)
        return run


def create_project(
    template_path: str | Path,
    project_name: str,
    module_name: str,
    *,
    description: str | None = None,
    work_dir: str | Path | None = None,
    config: ForgeConfig | None = None,
    runner: ToolRunner | None = None,
    rollback_on_failure: bool = True,
) -> PipelineRun:
    """Create a project, rolling back whatever a failed run left behind.

    Returns:
        The successful PipelineRun.

    Raises:
        PipelineError: A step failed. The partial project has already been
            removed unless ``rollback_on_failure`` is False.
    """
    spec = ProjectSpec(
        template_path=Path(template_path),
        project_name=project_name,
        module_name=module_name,
        description=description,
        work_dir=Path(work_dir) if work_dir is not None else Path.cwd(),
    )
    run = PipelineRun(spec=spec)
    try:
        ProjectPipeline(spec, config, runner).run(run)
    except BaseException:
        if rollback_on_failure:
            rollback(run)
        raise
    if run.error is None:
        return run

    if rollback_on_failure:
        rollback(run)
    raise run.error
