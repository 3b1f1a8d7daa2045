"""Project creation pipeline."""

from forge.pipeline.base import (
    PipelineRun,
    PipelineState,
    ProjectSpec,
    Step,
    StepResult,
)
from forge.pipeline.orchestrator import ProjectPipeline, create_project
from forge.pipeline.rollback import rollback

__all__ = [
    "PipelineRun",
    "PipelineState",
    "ProjectPipeline",
    "ProjectSpec",
    "Step",
    "StepResult",
    "create_project",
    "rollback",
]
