"""Optional project setup script execution."""

import logging
from pathlib import Path

from forge.config.schema import DEFAULT_CONFIG, ForgeConfig, MissingScriptPolicy
from forge.errors import ToolInvocationError
from forge.tools.runner import ToolResult, ToolRunner

logger = logging.getLogger(__name__)


class DependencyInstaller:
    """Runs the template's setup script to add dependencies.

    The script lives at a fixed path relative to the project root. When it
    is absent the ``on_missing`` policy decides: ``"skip"`` succeeds without
    running anything, ``"fail"`` raises ToolInvocationError.
    """

    def __init__(
        self,
        project_root: Path,
        script: str = "_deps.sh",
        shell: str = "sh",
        on_missing: MissingScriptPolicy = "skip",
        runner: ToolRunner | None = None,
    ) -> None:
        self._root = project_root
        self._script = script
        self._shell = shell
        self._on_missing = on_missing
        self._runner = runner or ToolRunner()

    @classmethod
    def from_config(
        cls, project_root: Path, config: ForgeConfig, runner: ToolRunner | None = None
    ) -> "DependencyInstaller":
        """Build an installer from the (merged) configuration."""
        return cls(
            project_root,
            script=config.setup_script or DEFAULT_CONFIG.setup_script or "_deps.sh",
            shell=config.setup_shell or DEFAULT_CONFIG.setup_shell or "sh",
            on_missing=config.missing_setup_script or "skip",
            runner=runner,
        )

    @property
    def script_path(self) -> Path:
        return self._root / self._script

    def install(self) -> ToolResult | None:
        """Run the setup script.

        Returns:
            The script's ToolResult, or None when the script is absent and
            skipped.
        """
        if not self.script_path.is_file():
            if self._on_missing == "fail":
                raise ToolInvocationError(
                    f"{self._shell} {self._script}",
                    stderr=f"setup script not found: {self.script_path}",
                )
            logger.info("no setup script at %s, skipping", self.script_path)
            return None

        logger.info("running setup script %s", self.script_path)
        return self._runner.run(self._shell, [self._script], self._root)
