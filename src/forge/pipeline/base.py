"""Pipeline inputs and runtime state."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from forge.errors import PipelineError
from forge.template.tokens import SubstitutionReport, TokenSet


class Step(StrEnum):
    """Pipeline steps in execution order."""

    EXTRACT = "extract"
    SUBSTITUTE = "substitute"
    MANIFEST_INIT = "manifest_init"
    INSTALL_DEPS = "install_deps"
    MANIFEST_TIDY = "manifest_tidy"
    VCS_INIT = "vcs_init"
    VCS_ADD = "vcs_add"
    VCS_COMMIT = "vcs_commit"


class PipelineState(StrEnum):
    """Where a pipeline run currently is."""

    IDLE = "idle"
    EXTRACTING = "extracting"
    SUBSTITUTING = "substituting"
    MANIFEST_INIT = "manifest_init"
    INSTALLING_DEPS = "installing_deps"
    MANIFEST_TIDY = "manifest_tidy"
    VCS_INIT = "vcs_init"
    VCS_ADD = "vcs_add"
    VCS_COMMIT = "vcs_commit"
    DONE = "done"
    FAILED = "failed"


STEP_STATES: dict[Step, PipelineState] = {
    Step.EXTRACT: PipelineState.EXTRACTING,
    Step.SUBSTITUTE: PipelineState.SUBSTITUTING,
    Step.MANIFEST_INIT: PipelineState.MANIFEST_INIT,
    Step.INSTALL_DEPS: PipelineState.INSTALLING_DEPS,
    Step.MANIFEST_TIDY: PipelineState.MANIFEST_TIDY,
    Step.VCS_INIT: PipelineState.VCS_INIT,
    Step.VCS_ADD: PipelineState.VCS_ADD,
    Step.VCS_COMMIT: PipelineState.VCS_COMMIT,
}


@dataclass(frozen=True)
class ProjectSpec:
    """Immutable inputs for one project creation.

    Every step takes its paths from here.
    """

    template_path: Path
    project_name: str
    module_name: str
    description: str | None = None
    work_dir: Path = field(default_factory=Path.cwd)

    def __post_init__(self) -> None:
        name = self.project_name
        if not name or name in (".", "..") or "/" in name or "\\" in name:
            raise ValueError(f"invalid project name: {name!r}")
        if not self.module_name:
            raise ValueError("module name must not be empty")
        object.__setattr__(self, "template_path", Path(self.template_path))
        object.__setattr__(self, "work_dir", Path(self.work_dir).resolve())

    @property
    def project_root(self) -> Path:
        return self.work_dir / self.project_name

    def tokens(self) -> TokenSet:
        return TokenSet(
            project_name=self.project_name,
            module_path=self.module_name,
            description=self.description,
        )


@dataclass(frozen=True)
class StepResult:
    """Result of executing a single pipeline step."""

    step: Step
    success: bool
    duration_ms: int
    detail: str = ""


@dataclass
class PipelineRun:
    """Runtime state for one pipeline execution.

    Separates mutable runtime state from the immutable ProjectSpec.
    """

    spec: ProjectSpec
    state: PipelineState = PipelineState.IDLE
    results: list[StepResult] = field(default_factory=list)
    substitution: SubstitutionReport | None = None
    root_created: bool = False
    staging_dir: Path | None = None
    error: PipelineError | None = None

    @property
    def success(self) -> bool:
        return self.state is PipelineState.DONE

    @property
    def failed_step(self) -> Step | None:
        if self.error is None:
            return None
        return Step(self.error.step)

    @property
    def needs_rollback(self) -> bool:
        """Check if a failed run left anything on disk."""
        return not self.success and (self.root_created or self.staging_dir is not None)
