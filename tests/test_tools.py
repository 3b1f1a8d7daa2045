"""Tests for the manifest and setup script steps."""

from pathlib import Path

import pytest

from forge.config.schema import DEFAULT_CONFIG, ForgeConfig
from forge.errors import ToolInvocationError
from forge.tools import DependencyInstaller, ManifestManager
from forge.tools.runner import ToolInvocation, ToolResult, ToolRunner


class RecordingRunner(ToolRunner):
    """Runner that records invocations instead of spawning processes."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[ToolInvocation] = []

    def run(self, executable, args, cwd, *, check=True) -> ToolResult:
        invocation = ToolInvocation(executable, tuple(args), Path(cwd))
        self.calls.append(invocation)
        return ToolResult(invocation, 0, "", "", 0)


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


class TestManifestManager:
    """Tests for ManifestManager."""

    def test_init_appends_module_path(self, tmp_path: Path, runner) -> None:
        """Test the module path is the only extra argument of the init command."""
        manager = ManifestManager.from_config(tmp_path, DEFAULT_CONFIG, runner)
        manager.init("github.com/user/myproj")

        assert runner.calls == [
            ToolInvocation("go", ("mod", "init", "github.com/user/myproj"), tmp_path)
        ]

    def test_tidy_has_no_extra_arguments(self, tmp_path: Path, runner) -> None:
        """Test tidy runs the configured command unchanged."""
        manager = ManifestManager.from_config(tmp_path, DEFAULT_CONFIG, runner)
        manager.tidy()

        assert runner.calls == [ToolInvocation("go", ("mod", "tidy"), tmp_path)]

    def test_configured_commands(self, tmp_path: Path, runner) -> None:
        """Test other ecosystems can be configured."""
        config = ForgeConfig(
            manifest_init=("cargo", "init", "--name"),
            manifest_tidy=("cargo", "update"),
        )
        manager = ManifestManager.from_config(tmp_path, config, runner)
        manager.init("myproj")
        manager.tidy()

        assert [c.argv for c in runner.calls] == [
            ["cargo", "init", "--name", "myproj"],
            ["cargo", "update"],
        ]

    def test_empty_command_rejected(self, tmp_path: Path) -> None:
        """Test an empty command is a configuration error."""
        with pytest.raises(ValueError):
            ManifestManager(tmp_path, (), ("go", "mod", "tidy"))

    def test_init_failure_propagates(self, tmp_path: Path) -> None:
        """Test a failing bootstrap command raises ToolInvocationError."""
        manager = ManifestManager(tmp_path, ("forge-test-no-such-binary",), ("true",))
        with pytest.raises(ToolInvocationError):
            manager.init("example.com/mod")


class TestDependencyInstaller:
    """Tests for DependencyInstaller."""

    def test_runs_script_with_shell(self, tmp_path: Path, runner) -> None:
        """Test a present script is run by the shell inside the project root."""
        (tmp_path / "_deps.sh").write_text("go get example.com/lib\n")
        installer = DependencyInstaller(tmp_path, runner=runner)

        result = installer.install()

        assert result is not None
        assert runner.calls == [ToolInvocation("sh", ("_deps.sh",), tmp_path)]

    def test_missing_script_skipped(self, tmp_path: Path, runner) -> None:
        """Test an absent script is a no-op under the skip policy."""
        installer = DependencyInstaller(tmp_path, on_missing="skip", runner=runner)

        assert installer.install() is None
        assert runner.calls == []

    def test_missing_script_fails(self, tmp_path: Path, runner) -> None:
        """Test an absent script is an error under the fail policy."""
        installer = DependencyInstaller(tmp_path, on_missing="fail", runner=runner)

        with pytest.raises(ToolInvocationError) as exc_info:
            installer.install()

        assert "_deps.sh" in str(exc_info.value)
        assert runner.calls == []

    def test_from_config(self, tmp_path: Path, runner) -> None:
        """Test script path and shell come from configuration."""
        (tmp_path / "scripts").mkdir()
        (tmp_path / "scripts" / "setup.sh").write_text("true\n")
        config = ForgeConfig(setup_script="scripts/setup.sh", setup_shell="bash")

        DependencyInstaller.from_config(tmp_path, config, runner).install()

        assert runner.calls == [ToolInvocation("bash", ("scripts/setup.sh",), tmp_path)]

    def test_script_runs_for_real(self, tmp_path: Path) -> None:
        """Test the script executes with the project root as working directory."""
        (tmp_path / "_deps.sh").write_text("echo installed > deps.txt\n")

        DependencyInstaller(tmp_path).install()

        assert (tmp_path / "deps.txt").read_text().strip() == "installed"

    def test_failing_script_reports_stderr(self, tmp_path: Path) -> None:
        """Test a failing script surfaces its stderr."""
        (tmp_path / "_deps.sh").write_text("echo 'no network' >&2\nexit 4\n")

        with pytest.raises(ToolInvocationError) as exc_info:
            DependencyInstaller(tmp_path).install()

        assert exc_info.value.returncode == 4
        assert "no network" in exc_info.value.stderr
