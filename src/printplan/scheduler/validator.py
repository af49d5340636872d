"""Invariant checks for plans and committed schedules."""

from collections.abc import Mapping
from datetime import datetime
from itertools import combinations

from printplan.models import Job, JobStatus, Printer

from .availability import AvailabilityCalendar
from .core import BusyInterval, ProposedPlacement
from .eligibility import is_eligible
from .timeline import ResourceTimeline


def validate_plan(  # noqa: PLR0913 - one argument per invariant being checked
    placements: list[ProposedPlacement],
    jobs: list[Job],
    printers: list[Printer],
    plan_start: datetime,
    calendar: AvailabilityCalendar | None = None,
    seed_timelines: Mapping[str, ResourceTimeline] | None = None,
) -> list[str]:
    """Check a plan against the placement invariants.

    Checks:
    - No two placements on a printer overlap, nor overlap a seed interval
    - Every placement respects job eligibility
    - No placement starts before plan_start
    - Every finish lands in an availability window (when there are windows)

    Returns:
        List of violation messages (empty = valid)
    """
    errors: list[str] = []
    job_by_id = {job.id: job for job in jobs}
    printer_by_id = {printer.id: printer for printer in printers}

    by_printer: dict[str, list[ProposedPlacement]] = {}
    for placement in placements:
        by_printer.setdefault(placement.printer_id, []).append(placement)

        job = job_by_id.get(placement.job_id)
        printer = printer_by_id.get(placement.printer_id)
        if job is None:
            errors.append(f"{placement.job_id}: not in the job snapshot")
        if printer is None:
            errors.append(f"{placement.job_id}: unknown printer {placement.printer_id}")
        if job is not None and printer is not None and not is_eligible(job, printer):
            errors.append(f"{placement.job_id}: not eligible for printer {printer.id}")
        if job is not None and placement.end - placement.start != job.duration:
            errors.append(f"{placement.job_id}: slot length does not match job duration")

        if placement.start < plan_start:
            errors.append(
                f"{placement.job_id}: starts {placement.start.isoformat()} "
                f"before plan start {plan_start.isoformat()}"
            )
        if calendar is not None and not calendar.is_within_window(placement.end):
            errors.append(
                f"{placement.job_id}: finishes {placement.end.isoformat()} "
                "outside every availability window"
            )

    for printer_id, printer_placements in by_printer.items():
        for first, second in combinations(printer_placements, 2):
            if first.as_interval().overlaps(second.as_interval()):
                errors.append(
                    f"{first.job_id} and {second.job_id} overlap on printer {printer_id}"
                )

        seed = seed_timelines.get(printer_id) if seed_timelines else None
        if seed is None:
            continue
        for placement in printer_placements:
            for busy in seed:
                if busy.overlaps(placement.as_interval()):
                    errors.append(
                        f"{placement.job_id} overlaps existing booking "
                        f"{busy.job_id or 'block'} on printer {printer_id}"
                    )

    return errors


def find_committed_conflicts(jobs: list[Job]) -> list[str]:
    """Report committed jobs that share a printer at the same time.

    Returns:
        List of conflict messages (empty = no conflicts)
    """
    by_printer: dict[str, list[BusyInterval]] = {}
    for job in jobs:
        if job.status != JobStatus.COMMITTED or job.printer_id is None or job.start is None:
            continue
        by_printer.setdefault(job.printer_id, []).append(
            BusyInterval(job.start, job.start + job.duration, job.id)
        )

    conflicts: list[str] = []
    for printer_id in sorted(by_printer):
        intervals = sorted(by_printer[printer_id])
        for first, second in combinations(intervals, 2):
            if first.overlaps(second):
                conflicts.append(
                    f"{first.job_id} and {second.job_id} overlap on printer {printer_id}"
                )
    return conflicts
