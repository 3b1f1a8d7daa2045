"""External tool invocations: runner, manifest commands and setup script."""

from forge.tools.deps import DependencyInstaller
from forge.tools.manifest import ManifestManager
from forge.tools.runner import ToolInvocation, ToolResult, ToolRunner

__all__ = [
    "DependencyInstaller",
    "ManifestManager",
    "ToolInvocation",
    "ToolResult",
    "ToolRunner",
]
