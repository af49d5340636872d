"""High-level scheduling service."""

from collections.abc import Iterable
from datetime import datetime

from printplan.exceptions import ConfigurationError
from printplan.logger import get_logger
from printplan.models import Job, JobStatus, Printer, as_local_naive

from .availability import AvailabilityCalendar
from .config import SchedulingConfig, Strategy
from .core import PlanResult, PlanStats
from .engine import PlacementEngine
from .reconciler import PlanReconciler
from .strategies import get_strategy
from .validator import find_committed_conflicts

logger = get_logger()


class SchedulingService:
    """Runs one auto-scheduling pass over a snapshot of jobs and printers.

    This service coordinates:
    - Selection (which pending jobs and which printers take part)
    - The chosen strategy (seed timelines, build the pool)
    - PlacementEngine (greedy placement)
    - PlanReconciler (job records after the plan is applied)

    The snapshot is never modified; the result carries replacement records.
    """

    def __init__(
        self,
        jobs: list[Job],
        printers: list[Printer],
        calendar: AvailabilityCalendar | None = None,
        config: SchedulingConfig | None = None,
    ):
        """Initialize scheduling service.

        Args:
            jobs: Every job, regardless of status
            printers: Every printer, regardless of status
            calendar: Availability windows (defaults to always available)
            config: Optional scheduling configuration; when given, its
                lookahead_days replaces the calendar's own
        """
        self.jobs = list(jobs)
        self.printers = list(printers)
        self.config = config or SchedulingConfig()
        if calendar is None:
            calendar = AvailabilityCalendar(lookahead_days=self.config.lookahead_days)
        elif config is not None and calendar.lookahead_days != config.lookahead_days:
            calendar = AvailabilityCalendar(calendar.windows, lookahead_days=config.lookahead_days)
        self.calendar = calendar

    def select_jobs(self, job_ids: Iterable[str] | None, warnings: list[str]) -> set[str]:
        """Pending job ids taking part; defaults to every pending job."""
        pending_ids = {job.id for job in self.jobs if job.status == JobStatus.PENDING}
        if job_ids is None:
            return pending_ids

        known_ids = {job.id for job in self.jobs}
        selected: set[str] = set()
        for job_id in job_ids:
            if job_id not in known_ids:
                warnings.append(f"Selected job '{job_id}' does not exist")
            elif job_id not in pending_ids:
                logger.checks(f"Selected job '{job_id}' is not pending; skipping")
            else:
                selected.add(job_id)
        return selected

    def select_printers(
        self, printer_ids: Iterable[str] | None, warnings: list[str]
    ) -> list[Printer]:
        """Enabled printers taking part, in snapshot order."""
        if printer_ids is None:
            return [printer for printer in self.printers if printer.is_enabled]

        wanted = set(printer_ids)
        known_ids = {printer.id for printer in self.printers}
        for printer_id in sorted(wanted - known_ids):
            warnings.append(f"Selected printer '{printer_id}' does not exist")

        selected: list[Printer] = []
        for printer in self.printers:
            if printer.id not in wanted:
                continue
            if not printer.is_enabled:
                warnings.append(f"Printer '{printer.id}' is in maintenance; leaving it out")
                continue
            selected.append(printer)
        return selected

    def _snapshot_warnings(self) -> list[str]:
        """Inconsistencies in the snapshot that the run works around."""
        warnings: list[str] = []
        printer_ids = {printer.id for printer in self.printers}
        for job in self.jobs:
            if job.is_committed_with_slot() and job.printer_id not in printer_ids:
                warnings.append(
                    f"Committed job '{job.id}' references unknown printer '{job.printer_id}'"
                )
        warnings.extend(
            f"Existing schedule conflict: {conflict}"
            for conflict in find_committed_conflicts(self.jobs)
        )
        return warnings

    def plan(
        self,
        plan_start: datetime,
        *,
        strategy: Strategy | None = None,
        job_ids: Iterable[str] | None = None,
        printer_ids: Iterable[str] | None = None,
    ) -> PlanResult:
        """Schedule the selected jobs and reconcile the result.

        Args:
            plan_start: Nothing is placed before this instant (aware values become
                naive local time, like job starts)
            strategy: Lock or Shuffle (defaults to the configured strategy)
            job_ids: Pending jobs to schedule (defaults to all pending jobs)
            printer_ids: Printers to use (defaults to all enabled printers)

        Returns:
            PlanResult with placements, reconciled jobs, stats and warnings

        Raises:
            ConfigurationError: If there is nothing to schedule or no printer to use
        """
        plan_start = as_local_naive(plan_start)
        strategy = strategy or self.config.strategy
        functions = get_strategy(strategy)
        warnings = self._snapshot_warnings()

        selected_ids = self.select_jobs(job_ids, warnings)
        printers = self.select_printers(printer_ids, warnings)
        pool = functions.build_pool(self.jobs, selected_ids)

        if not pool:
            raise ConfigurationError("No jobs to schedule: select at least one pending job")
        if not printers:
            raise ConfigurationError("No printers available: select at least one enabled printer")

        logger.changes(
            f"Scheduling {len(pool)} jobs on {len(printers)} printers "
            f"from {plan_start.isoformat()} ({strategy.value})"
        )

        timelines = functions.seed_timelines(self.jobs, printers)
        engine = PlacementEngine(
            pool,
            printers,
            plan_start,
            calendar=self.calendar,
            timelines=timelines,
        )
        engine_result = engine.run()

        reconciliation = PlanReconciler(strategy).reconcile(self.jobs, engine_result.placements)

        for job_id in engine_result.unplaced_ids:
            warnings.append(f"Job '{job_id}' could not be scheduled in this run")
        for job_id in reconciliation.reverted_ids:
            warnings.append(f"Job '{job_id}' was unscheduled and returned to the queue")

        return PlanResult(
            strategy=strategy,
            plan_start=plan_start,
            placements=engine_result.placements,
            unplaced_ids=engine_result.unplaced_ids,
            reconciliation=reconciliation,
            stats=PlanStats.from_plan(engine_result.placements, engine_result.unplaced_ids),
            warnings=warnings,
        )
