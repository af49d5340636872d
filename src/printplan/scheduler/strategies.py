"""Lock and Shuffle: how a run treats jobs that are already committed.

Each strategy is three small functions, picked once per run:

- seed_timelines: busy intervals the printers start with
- build_pool: jobs handed to the placement engine
- reverted_ids: previously committed jobs that must go back to the queue
"""

from collections.abc import Callable
from dataclasses import dataclass

from printplan.logger import get_logger
from printplan.models import Job, JobStatus, Printer

from .config import Strategy
from .core import BusyInterval, ProposedPlacement
from .timeline import ResourceTimeline

logger = get_logger()


def _empty_timelines(printers: list[Printer]) -> dict[str, ResourceTimeline]:
    return {printer.id: ResourceTimeline(printer_id=printer.id) for printer in printers}


def seed_from_committed(jobs: list[Job], printers: list[Printer]) -> dict[str, ResourceTimeline]:
    """Timelines pre-filled with every committed job on a participating printer."""
    timelines = _empty_timelines(printers)
    for job in jobs:
        if job.status != JobStatus.COMMITTED:
            continue
        if job.printer_id is None or job.start is None:
            logger.warning(f"Committed job '{job.id}' has no printer or start time; ignoring it")
            continue
        timeline = timelines.get(job.printer_id)
        if timeline is None:
            logger.checks(
                f"Committed job '{job.id}' is on non-participating printer {job.printer_id}"
            )
            continue
        timeline.insert(BusyInterval(job.start, job.start + job.duration, job.id))
    return timelines


def seed_empty(jobs: list[Job], printers: list[Printer]) -> dict[str, ResourceTimeline]:
    """Timelines with nothing on them: the whole schedule is rebuilt."""
    return _empty_timelines(printers)


def pool_selected(jobs: list[Job], selected_ids: set[str]) -> list[Job]:
    """Only the selected pending jobs, in snapshot order."""
    return [job for job in jobs if job.id in selected_ids and job.status == JobStatus.PENDING]


def pool_committed_and_selected(jobs: list[Job], selected_ids: set[str]) -> list[Job]:
    """Every committed job followed by the selected pending jobs."""
    committed = [job for job in jobs if job.status == JobStatus.COMMITTED]
    committed_ids = {job.id for job in committed}
    selected = [
        job
        for job in pool_selected(jobs, selected_ids)
        if job.id not in committed_ids
    ]
    return committed + selected


def revert_nothing(jobs: list[Job], placements: list[ProposedPlacement]) -> list[str]:
    return []


def revert_unplaced_committed(jobs: list[Job], placements: list[ProposedPlacement]) -> list[str]:
    """Committed jobs that did not make it into the new plan."""
    placed_ids = {placement.job_id for placement in placements}
    return [
        job.id
        for job in jobs
        if job.status == JobStatus.COMMITTED and job.id not in placed_ids
    ]


@dataclass(frozen=True)
class StrategyFunctions:
    """The strategy-specific steps of a scheduling run."""

    seed_timelines: Callable[[list[Job], list[Printer]], dict[str, ResourceTimeline]]
    build_pool: Callable[[list[Job], set[str]], list[Job]]
    reverted_ids: Callable[[list[Job], list[ProposedPlacement]], list[str]]


STRATEGIES: dict[Strategy, StrategyFunctions] = {
    Strategy.LOCK: StrategyFunctions(
        seed_timelines=seed_from_committed,
        build_pool=pool_selected,
        reverted_ids=revert_nothing,
    ),
    Strategy.SHUFFLE: StrategyFunctions(
        seed_timelines=seed_empty,
        build_pool=pool_committed_and_selected,
        reverted_ids=revert_unplaced_committed,
    ),
}


def get_strategy(strategy: Strategy) -> StrategyFunctions:
    """Look up the functions implementing a strategy."""
    try:
        return STRATEGIES[strategy]
    except KeyError:
        msg = f"Unknown scheduling strategy: {strategy}"
        raise ValueError(msg) from None
