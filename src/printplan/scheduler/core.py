"""Core dataclasses for the scheduling system."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import Strategy
    from .reconciler import ReconciliationResult


def _default_str_list() -> list[str]:
    return []


def _default_count_dict() -> dict[str, int]:
    return {}


@dataclass(frozen=True, order=True)
class BusyInterval:
    """Half-open [start, end) span during which a printer is occupied."""

    start: datetime
    end: datetime
    job_id: str | None = field(default=None, compare=False)  # None for anonymous blocks

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def overlaps(self, other: "BusyInterval") -> bool:
        """True if the two spans share any instant (touching ends do not overlap)."""
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True)
class ProposedPlacement:
    """Where and when the engine wants a job to run."""

    job_id: str
    printer_id: str
    start: datetime
    end: datetime
    delayed: bool  # Finish was pushed later to land inside an availability window

    def as_interval(self) -> BusyInterval:
        return BusyInterval(self.start, self.end, self.job_id)


@dataclass
class EngineResult:
    """Result from the placement engine."""

    placements: list[ProposedPlacement]
    unplaced_ids: list[str] = field(default_factory=_default_str_list)


@dataclass
class PlanStats:
    """Aggregate figures for display; not part of the plan contract."""

    placed: int
    unplaced: int
    delayed: int
    earliest_start: datetime | None
    latest_finish: datetime | None
    per_printer: dict[str, int] = field(default_factory=_default_count_dict)

    @property
    def makespan(self) -> timedelta:
        """Span from the earliest start to the latest finish (zero for an empty plan)."""
        if self.earliest_start is None or self.latest_finish is None:
            return timedelta(0)
        return self.latest_finish - self.earliest_start

    @property
    def makespan_hours(self) -> float:
        return self.makespan.total_seconds() / 3600

    @classmethod
    def from_plan(
        cls, placements: "list[ProposedPlacement]", unplaced_ids: list[str]
    ) -> "PlanStats":
        per_printer: dict[str, int] = {}
        for placement in placements:
            per_printer[placement.printer_id] = per_printer.get(placement.printer_id, 0) + 1

        return cls(
            placed=len(placements),
            unplaced=len(unplaced_ids),
            delayed=sum(1 for p in placements if p.delayed),
            earliest_start=min((p.start for p in placements), default=None),
            latest_finish=max((p.end for p in placements), default=None),
            per_printer=per_printer,
        )


@dataclass
class PlanResult:
    """Complete result of a scheduling run."""

    strategy: "Strategy"
    plan_start: datetime
    placements: list[ProposedPlacement]
    unplaced_ids: list[str]
    reconciliation: "ReconciliationResult"
    stats: PlanStats
    warnings: list[str] = field(default_factory=_default_str_list)

    def placement_for(self, job_id: str) -> ProposedPlacement | None:
        for placement in self.placements:
            if placement.job_id == job_id:
                return placement
        return None
