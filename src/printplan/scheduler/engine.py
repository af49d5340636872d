"""Greedy placement engine: longest job first, earliest finish wins."""

from collections.abc import Mapping
from datetime import datetime, timedelta

from printplan.logger import get_logger
from printplan.models import Job, Printer

from .availability import AvailabilityCalendar
from .core import BusyInterval, EngineResult, ProposedPlacement
from .eligibility import is_eligible
from .timeline import Gap, ResourceTimeline

logger = get_logger()


class PlacementEngine:
    """Places jobs onto printer timelines one at a time.

    This engine:
    1. Orders the pool longest job first (ties keep pool order)
    2. For each job asks every eligible printer for its earliest valid slot
    3. Takes the slot that finishes first, the first printer winning ties
    4. Books that slot immediately so later jobs see it as busy

    A job no printer can take is left out of the plan. The engine only reads
    jobs and printers; it works on copies of the timelines it is given.
    """

    def __init__(
        self,
        jobs: list[Job],
        printers: list[Printer],
        plan_start: datetime,
        *,
        calendar: AvailabilityCalendar | None = None,
        timelines: Mapping[str, ResourceTimeline] | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            jobs: Pool of jobs to place, in caller order
            printers: Participating printers; their order breaks finish-time ties
            plan_start: Nothing is placed before this instant
            calendar: Availability windows for job completions (None = always available)
            timelines: Seed timelines per printer id; missing printers start empty
        """
        self.jobs = list(jobs)
        self.printers = list(printers)
        self.plan_start = plan_start
        self.calendar = calendar or AvailabilityCalendar()

        seeds = timelines or {}
        self.timelines: dict[str, ResourceTimeline] = {}
        for printer in self.printers:
            seed = seeds.get(printer.id)
            self.timelines[printer.id] = (
                seed.copy() if seed is not None else ResourceTimeline(printer_id=printer.id)
            )

    def ordered_jobs(self) -> list[Job]:
        """Jobs in placement order: longest first, stable for equal durations."""
        return sorted(self.jobs, key=lambda job: job.duration_minutes, reverse=True)

    def run(self) -> EngineResult:
        """Place every job in the pool.

        Returns:
            EngineResult with placements in placement order and the ids of
            jobs that could not be placed
        """
        placements: list[ProposedPlacement] = []
        unplaced_ids: list[str] = []

        for job in self.ordered_jobs():
            logger.checks(f"Placing {job.id} ({job.duration_minutes} min)")
            placement = self._find_best_placement(job)
            if placement is None:
                logger.changes(f"  {job.id}: no printer can take it, left unplaced")
                unplaced_ids.append(job.id)
                continue

            self.timelines[placement.printer_id].insert(placement.as_interval())
            placements.append(placement)
            logger.changes(
                f"  {job.id} -> {placement.printer_id} "
                f"{placement.start.isoformat()} - {placement.end.isoformat()}"
                + (" (delayed for availability)" if placement.delayed else "")
            )

        return EngineResult(placements=placements, unplaced_ids=unplaced_ids)

    def _find_best_placement(self, job: Job) -> ProposedPlacement | None:
        """Earliest-finishing offer across eligible printers, first printer on ties."""
        best: ProposedPlacement | None = None

        for printer in self.printers:
            if not is_eligible(job, printer):
                logger.checks(f"    {printer.id}: not eligible")
                continue

            offer = self.offer_for(job, printer.id)
            if offer is None:
                logger.checks(f"    {printer.id}: no valid gap")
                continue

            logger.checks(
                f"    {printer.id}: offers {offer.start.isoformat()} - {offer.end.isoformat()}"
            )
            if best is None or offer.end < best.end:
                best = offer

        return best

    def offer_for(self, job: Job, printer_id: str) -> ProposedPlacement | None:
        """Earliest valid slot for a job on one printer, or None.

        Gaps are visited in time order and the first one that holds the job,
        after any availability shift, is the offer.
        """
        duration = job.duration
        for gap in self.timelines[printer_id].gaps(self.plan_start):
            slot = self._fit_in_gap(gap, duration)
            if slot is None:
                continue
            start, end, delayed = slot
            return ProposedPlacement(
                job_id=job.id,
                printer_id=printer_id,
                start=start,
                end=end,
                delayed=delayed,
            )
        return None

    def _fit_in_gap(
        self, gap: Gap, duration: timedelta
    ) -> tuple[datetime, datetime, bool] | None:
        """Try to place a job of the given duration inside one gap.

        When the natural finish falls outside every availability window the
        whole slot slides later so that it finishes at the next window start.
        The slid slot must still fit the same gap; a later gap is not tried
        from here.
        """
        gap_start, gap_end = gap
        if gap_end is not None and gap_end - gap_start < duration:
            logger.debug(f"      gap {gap_start.isoformat()}: too short")
            return None

        start = gap_start
        end = start + duration
        delayed = False

        if not self.calendar.is_within_window(end):
            end = self.calendar.next_window_start_at_or_after(end)
            start = end - duration
            delayed = True

        if start < gap_start or (gap_end is not None and end > gap_end):
            logger.debug(
                f"      gap {gap_start.isoformat()}: shifted finish {end.isoformat()} "
                "leaves the gap"
            )
            return None

        return (start, end, delayed)

    def busy_intervals(self, printer_id: str) -> list[BusyInterval]:
        """Busy intervals on a printer as the run left them."""
        return list(self.timelines[printer_id])
