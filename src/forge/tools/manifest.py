"""Dependency manifest bootstrap and tidy commands."""

import logging
from pathlib import Path

from forge.config.schema import DEFAULT_CONFIG, ForgeConfig
from forge.tools.runner import ToolResult, ToolRunner

logger = logging.getLogger(__name__)


class ManifestManager:
    """Runs the ecosystem's manifest commands inside a project root."""

    def __init__(
        self,
        project_root: Path,
        init_command: tuple[str, ...],
        tidy_command: tuple[str, ...],
        runner: ToolRunner | None = None,
    ) -> None:
        if not init_command or not tidy_command:
            raise ValueError("manifest commands must not be empty")
        self._root = project_root
        self._init_command = init_command
        self._tidy_command = tidy_command
        self._runner = runner or ToolRunner()

    @classmethod
    def from_config(
        cls, project_root: Path, config: ForgeConfig, runner: ToolRunner | None = None
    ) -> "ManifestManager":
        """Build a manager from the (merged) configuration."""
        return cls(
            project_root,
            config.manifest_init or DEFAULT_CONFIG.manifest_init or (),
            config.manifest_tidy or DEFAULT_CONFIG.manifest_tidy or (),
            runner,
        )

    def init(self, module_path: str) -> ToolResult:
        """Create the manifest, passing the module path as the only extra argument."""
        logger.info("initializing manifest for %s", module_path)
        executable, *args = self._init_command
        return self._runner.run(executable, [*args, module_path], self._root)

    def tidy(self) -> ToolResult:
        """Resolve the manifest against the project's sources."""
        logger.info("tidying manifest")
        executable, *args = self._tidy_command
        return self._runner.run(executable, args, self._root)
