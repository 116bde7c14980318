from __future__ import annotations

from pathlib import Path

import typer
from dotenv import load_dotenv

from .catalog import discover_backends
from .config import QuerydslConfig, load_config
from .core import TaskGraphOrchestrator
from .errors import QuerygraphError
from .host import COMPILE_MAIN_TASK, HostSession
from .logging import add_file_handler, get_logger, set_level
from .scheduler import Scheduler


load_dotenv()

app = typer.Typer(add_completion=False, help="Querydsl code-generation task graph CLI")
log = get_logger("querygraph.cli")


@app.callback()
def options(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level"),
    log_file: str = typer.Option("", help="Also log to this file (rotated at 1 MB)"),
):
    if verbose:
        set_level("DEBUG")
    if log_file:
        add_file_handler(Path(log_file))


def _read_config(path: str) -> QuerydslConfig:
    p = Path(path)
    if not p.exists():
        log.warning("Config %s not found, using defaults", p)
        return QuerydslConfig()
    return load_config(p)


def _apply(config: str, project_dir: str) -> tuple[HostSession, QuerydslConfig]:
    session = HostSession(project_dir=project_dir)
    try:
        cfg = _read_config(config)
        TaskGraphOrchestrator(session).apply(cfg)
    except QuerygraphError as e:
        typer.echo(f"Build configuration failed: {e}", err=True)
        raise typer.Exit(code=1)
    return session, cfg


@app.command("list")
def list_backends():
    """List discovered backends."""
    specs = discover_backends()
    if not specs:
        typer.echo("No backends discovered. Add modules under `backends/` decorated with @backend().")
        raise typer.Exit(code=0)
    typer.echo("Discovered backends:")
    for name in sorted(specs):
        typer.echo(f"- {name}: {specs[name].task_name} ({specs[name].processor})")


@app.command()
def plan(
    config: str = typer.Option("querydsl.yaml", help="Path to YAML config"),
    project_dir: str = typer.Option(".", help="Project directory paths resolve against"),
):
    """Apply the configuration and print the resulting task graph."""
    session, _ = _apply(config, project_dir)
    typer.echo("Tasks:")
    for line in session.describe():
        typer.echo(f"  {line}")
    typer.echo("Source roots:")
    for root in session.source_roots:
        typer.echo(f"  {root}")
    typer.echo("Dependencies:")
    for dep in session.dependencies:
        typer.echo(f"  {dep.configuration} {dep.coordinate}")


@app.command()
def run(
    task: str = typer.Argument(COMPILE_MAIN_TASK, help="Task to run, with its predecessors"),
    config: str = typer.Option("querydsl.yaml", help="Path to YAML config"),
    project_dir: str = typer.Option(".", help="Project directory paths resolve against"),
    jobs: int = typer.Option(1, help="Run up to N independent tasks at once"),
    dry_run: bool = typer.Option(False, help="Only print the steps that would run"),
):
    """Apply the configuration and execute TASK."""
    session, cfg = _apply(config, project_dir)
    if task not in session.graph:
        typer.echo(f"Task not found: {task}", err=True)
        raise typer.Exit(code=1)
    params = cfg.to_params(project_dir)
    steps = Scheduler(session.graph).run(params, only=task, jobs=jobs, dry_run=dry_run)
    if dry_run:
        for step in steps:
            typer.echo(step)


def main():  # pragma: no cover
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
