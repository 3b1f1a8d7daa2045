"""Preflight checks to validate the environment."""

import shutil

from forge.config.schema import DEFAULT_CONFIG, ForgeConfig
from forge.console import console


def check_executable(name: str, purpose: str) -> bool:
    """Check that an executable is available on PATH."""
    path = shutil.which(name)
    if path is None:
        console.print(f"  [red]✗[/red] {name} - [dim]needed for {purpose}[/dim]")
        return False
    console.print(f"  [green]✓[/green] {name} ([cyan]{path}[/cyan])")
    return True


def run_all_checks(config: ForgeConfig = DEFAULT_CONFIG) -> bool:
    """Check every external tool the pipeline will invoke."""
    console.print("[bold]Running preflight checks...[/bold]\n")

    manifest_init = config.manifest_init or DEFAULT_CONFIG.manifest_init or ("go",)
    manifest_tidy = config.manifest_tidy or DEFAULT_CONFIG.manifest_tidy or ("go",)
    checks = {
        "git": "version control",
        config.setup_shell or "sh": "the setup script",
        manifest_init[0]: "manifest initialization",
    }
    checks.setdefault(manifest_tidy[0], "manifest tidy")

    results = [check_executable(name, purpose) for name, purpose in checks.items()]
    all_passed = all(results)

    if all_passed:
        console.print("\n[bold green]All preflight checks passed![/bold green]")
    else:
        console.print("\n[bold red]Some preflight checks failed.[/bold red]")

    return all_passed
