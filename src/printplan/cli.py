"""Command-line interface for printplan."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer

from .config import DEFAULT_CONFIG_NAME, PlannerConfig, load_planner_config
from .exceptions import PrintPlanError
from .loader import load_jobs, write_jobs
from .logger import setup_logger
from .models import Job, as_local_naive
from .scheduler import PlanResult, SchedulingService, Strategy, find_committed_conflicts

app = typer.Typer(
    name="printplan",
    help="Auto-schedule print jobs onto a printer farm",
    add_completion=False,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=silent (default), 1=show changes, 2=show all checks, 3=debug",
            min=0,
            max=3,
        ),
    ] = 0,
) -> None:
    """Global options for printplan commands."""
    setup_logger(verbose)


def _resolve_config_path(jobs_file: Path, config: Path | None) -> Path | None:
    """Find the planner config.

    Search order: explicit --config, the jobs file's directory, the current directory.
    """
    if config is not None:
        return config
    for candidate in (jobs_file.parent / DEFAULT_CONFIG_NAME, Path(DEFAULT_CONFIG_NAME)):
        if candidate.exists():
            return candidate
    return None


def _load_inputs(jobs_file: Path, config: Path | None) -> tuple[list[Job], PlannerConfig]:
    """Load jobs and planner config, turning load errors into a clean exit."""
    config_path = _resolve_config_path(jobs_file, config)
    try:
        jobs = load_jobs(jobs_file)
        planner_config = (
            load_planner_config(config_path) if config_path is not None else PlannerConfig()
        )
    except (PrintPlanError, FileNotFoundError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None
    return jobs, planner_config


def _parse_datetime_option(value: str | None, option_name: str) -> datetime | None:
    """Parse an ISO datetime from a CLI option."""
    if value is None:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        typer.echo(
            f"Error: Invalid {option_name} '{value}'. Use YYYY-MM-DDTHH:MM format.",
            err=True,
        )
        raise typer.Exit(1) from None
    return as_local_naive(parsed)


def _display_plan(result: PlanResult, jobs: list[Job]) -> None:
    """Display a plan grouped by printer."""
    names = {job.id: job.name for job in jobs}
    stats = result.stats

    typer.echo(f"Plan ({result.strategy.value}) from {result.plan_start.isoformat()}")
    typer.echo("=" * 80)
    typer.echo(
        f"Scheduled {stats.placed} jobs over {stats.makespan_hours:.1f} hours"
        f" ({stats.delayed} delayed for availability, {stats.unplaced} unplaced)"
    )
    typer.echo("")

    by_printer: dict[str, list[str]] = {}
    for placement in sorted(result.placements, key=lambda p: (p.printer_id, p.start)):
        line = (
            f"  {placement.start.isoformat()} -> {placement.end.isoformat()}  "
            f"{names.get(placement.job_id, placement.job_id)} ({placement.job_id})"
        )
        if placement.delayed:
            line += "  [delayed]"
        by_printer.setdefault(placement.printer_id, []).append(line)

    for printer_id, lines in by_printer.items():
        typer.echo(printer_id)
        for line in lines:
            typer.echo(line)
        typer.echo("")

    if result.unplaced_ids:
        typer.echo("Unplaced:")
        for job_id in result.unplaced_ids:
            typer.echo(f"  {names.get(job_id, job_id)} ({job_id})")
        typer.echo("")


@app.command()
def schedule(  # noqa: PLR0913 - CLI command needs multiple options
    file: Annotated[Path, typer.Argument(help="Path to the jobs YAML file")] = Path("jobs.yaml"),
    *,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help=f"Planner config (default: {DEFAULT_CONFIG_NAME})"),
    ] = None,
    start: Annotated[
        str | None,
        typer.Option("--start", "-s", help="Plan start (YYYY-MM-DDTHH:MM). Defaults to now"),
    ] = None,
    strategy: Annotated[
        Strategy | None,
        typer.Option("--strategy", help="lock keeps committed jobs, shuffle re-plans them"),
    ] = None,
    job: Annotated[
        list[str] | None,
        typer.Option("--job", "-j", help="Pending job to schedule (repeatable; default: all)"),
    ] = None,
    printer: Annotated[
        list[str] | None,
        typer.Option("--printer", "-p", help="Printer to use (repeatable; default: all enabled)"),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the updated job list to this YAML file"),
    ] = None,
) -> None:
    """Generate a plan for pending jobs and display or save it."""
    jobs, planner_config = _load_inputs(file, config)
    plan_start = _parse_datetime_option(start, "start") or datetime.now().replace(
        second=0, microsecond=0
    )

    service = SchedulingService(
        jobs,
        planner_config.printers,
        planner_config.build_calendar(),
        planner_config.scheduler,
    )
    try:
        result = service.plan(
            plan_start,
            strategy=strategy,
            job_ids=job or None,
            printer_ids=printer or None,
        )
    except PrintPlanError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    _display_plan(result, jobs)

    if output:
        write_jobs(output, result.reconciliation.jobs)
        typer.echo(f"Updated jobs written to {output}")

    if result.warnings:
        typer.echo("\nWarnings:", err=True)
        for warning in result.warnings:
            typer.echo(f"  - {warning}", err=True)


@app.command()
def check(
    file: Annotated[Path, typer.Argument(help="Path to the jobs YAML file")] = Path("jobs.yaml"),
    *,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help=f"Planner config (default: {DEFAULT_CONFIG_NAME})"),
    ] = None,
) -> None:
    """Check committed jobs for overlaps and unknown printers."""
    jobs, planner_config = _load_inputs(file, config)

    problems = find_committed_conflicts(jobs)
    printer_ids = {printer.id for printer in planner_config.printers}
    if printer_ids:
        for job in jobs:
            if job.is_committed_with_slot() and job.printer_id not in printer_ids:
                problems.append(f"{job.id} is committed to unknown printer {job.printer_id}")

    if problems:
        for problem in problems:
            typer.echo(f"  - {problem}", err=True)
        raise typer.Exit(1)

    typer.echo("No conflicts found")


def main() -> int:
    """Main entry point."""
    # Typer handles sys.exit() internally
    app()
    return 0


if __name__ == "__main__":
    main()
