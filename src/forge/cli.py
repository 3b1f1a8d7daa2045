"""Command-line interface for forge."""

import json
from importlib import metadata
from pathlib import Path

import click
from rich.markup import escape

from forge import __version__
from forge.config.loader import (
    get_home_config_path,
    get_local_config_path,
    home_config_exists,
    load_config,
    local_config_exists,
    save_config,
)
from forge.config.preflight import run_all_checks
from forge.config.schema import DEFAULT_CONFIG, ForgeConfig
from forge.console import configure_logging, console
from forge.pipeline import PipelineRun, ProjectPipeline, ProjectSpec, rollback

DISTRIBUTION = "project-forge"


def _build_commit() -> str | None:
    """Get the VCS commit pip recorded when installing forge, if any."""
    try:
        raw = metadata.distribution(DISTRIBUTION).read_text("direct_url.json")
    except metadata.PackageNotFoundError:
        return None
    if not raw:
        return None
    try:
        vcs_info = json.loads(raw).get("vcs_info") or {}
        return vcs_info.get("commit_id")
    except (json.JSONDecodeError, AttributeError):
        return None


def version_callback(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    """Print version and build information, then exit."""
    if not value or ctx.resilient_parsing:
        return
    console.print(f"forge [bold cyan]{__version__}[/bold cyan]")
    commit = _build_commit()
    if commit:
        console.print(f"[dim]commit: {escape(commit)}[/dim]")
    ctx.exit()


def _print_summary(run: PipelineRun) -> None:
    """Print one line per executed step."""
    for result in run.results:
        mark = "[green]✓[/green]" if result.success else "[red]✗[/red]"
        seconds = result.duration_ms / 1000
        line = f"  {mark} {result.step.value} [dim]({seconds:.2f}s)[/dim]"
        if result.success and result.detail:
            line += f" [dim]{escape(result.detail)}[/dim]"
        console.print(line)


def _handle_rollback(run: PipelineRun, config: ForgeConfig) -> None:
    """Roll back a failed run unless configured to keep it."""
    if not run.needs_rollback:
        return
    root = escape(str(run.spec.project_root))
    if config.rollback is False:
        console.print(f"[yellow]Keeping partial project at {root}[/yellow]")
    elif rollback(run):
        console.print("[dim]Rolled back partially created project.[/dim]")
    else:
        console.print(f"[yellow]Rollback incomplete, remnants may remain at {root}[/yellow]")


@click.group(invoke_without_command=True)
@click.option(
    "--version",
    is_flag=True,
    callback=version_callback,
    expose_value=False,
    is_eager=True,
    help="Show version and build information and exit.",
)
@click.option("--verbose", is_flag=True, help="Show debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Forge - create new projects from zipped templates."""
    configure_logging(verbose)

    if ctx.invoked_subcommand is None:
        console.print("[bold]forge[/bold] - create new projects from templates")
        console.print(
            "\nExample: [cyan]forge new -p myProject -m "
            "github.com/<user>/myProject -t template.zip[/cyan]"
        )
        console.print("Run [cyan]forge --help[/cyan] for available commands.")


@main.command()
@click.option(
    "--project-name",
    "-p",
    required=True,
    help="Directory name for the project. It is also the project's name.",
)
@click.option(
    "--module-name",
    "-m",
    required=True,
    help="Module path, root namespace or root package name for the project.",
)
@click.option(
    "--template-path",
    "-t",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to the template (*.zip) file.",
)
@click.option(
    "--description",
    "-d",
    help="Project description substituted for {{project_description}}.",
)
@click.option(
    "--directory",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=Path("."),
    help="Existing directory to create the project in (default: current directory).",
)
@click.option(
    "--timeout",
    type=float,
    envvar="FORGE_TOOL_TIMEOUT",
    help="Seconds each external command may run (0 for no limit).",
)
@click.option(
    "--keep-on-failure",
    is_flag=True,
    default=False,
    help="Keep the partially created project when a step fails.",
)
def new(
    project_name: str,
    module_name: str,
    template_path: Path,
    description: str | None,
    directory: Path,
    timeout: float | None,
    keep_on_failure: bool,
) -> None:
    """Create a new project from a template."""
    config = load_config()
    if timeout is not None:
        config = config.merge(ForgeConfig(tool_timeout=timeout))
    if keep_on_failure:
        config = config.merge(ForgeConfig(rollback=False))

    try:
        spec = ProjectSpec(
            template_path=template_path,
            project_name=project_name,
            module_name=module_name,
            description=description,
            work_dir=directory,
        )
    except ValueError as e:
        raise click.BadParameter(str(e)) from None

    console.print(f"[bold green]Creating project {project_name}...[/bold green]")
    console.print(f"[dim]Module: {module_name}[/dim]")
    console.print(f"[dim]Template: {escape(str(template_path))}[/dim]")

    run = PipelineRun(spec=spec)
    try:
        ProjectPipeline(spec, config).run(run)
    except BaseException:
        _handle_rollback(run, config)
        raise
    _print_summary(run)

    if run.success:
        console.print(f"\n[green]Project created at {escape(str(spec.project_root))}[/green]")
        return

    console.print(f"\n[red]Error: {escape(str(run.error))}[/red]")
    _handle_rollback(run, config)
    raise SystemExit(1)


@main.command()
def preflight() -> None:
    """Validate environment is ready (git, shell, manifest tool)."""
    if not run_all_checks(load_config()):
        raise SystemExit(1)


@main.command()
@click.option(
    "--init",
    "write_defaults",
    is_flag=True,
    help="Write the built-in defaults to a config file.",
)
@click.option(
    "--local",
    "-l",
    is_flag=True,
    help="With --init, write ./.forge/config.yaml instead of ~/.forge/config.yaml.",
)
def config(write_defaults: bool, local: bool) -> None:
    """Show or initialize forge configuration."""
    if write_defaults:
        path = get_local_config_path() if local else get_home_config_path()
        if path.exists():
            console.print(f"[yellow]Config already exists: {path}[/yellow]")
            raise SystemExit(1)
        save_config(DEFAULT_CONFIG, path)
        console.print(f"[green]Configuration saved to {path}[/green]")
        return

    effective = load_config()
    console.print("\n[bold]Current Effective Configuration:[/bold]")
    console.print(f"  [dim]Global: {get_home_config_path()}[/dim]")
    console.print(f"  [dim]Local: {get_local_config_path()}[/dim]")
    console.print()
    for key, value in effective.to_dict().items():
        console.print(f"  {key}: {escape(str(value))}")

    console.print()
    if home_config_exists():
        console.print("  [green]Global config: exists[/green]")
    else:
        console.print("  [dim]Global config: not found[/dim]")
    if local_config_exists():
        console.print("  [green]Local config: exists[/green]")
    else:
        console.print("  [dim]Local config: not found[/dim]")


if __name__ == "__main__":  # pragma: no cover
    main()
