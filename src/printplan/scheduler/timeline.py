"""Per-printer busy interval tracking."""

import bisect
from collections.abc import Iterable, Iterator
from datetime import datetime

from .core import BusyInterval

# (gap_start, gap_end); gap_end is None for the open-ended gap after the last interval
Gap = tuple[datetime, datetime | None]


class ResourceTimeline:
    """Tracks busy intervals for one printer, sorted by start.

    Intervals are never merged: each one belongs to a job, and callers only
    insert intervals they have already checked against the existing ones.
    """

    def __init__(
        self,
        printer_id: str = "",
        intervals: Iterable[BusyInterval] | None = None,
    ) -> None:
        """Initialize with optional pre-existing busy intervals.

        Args:
            printer_id: Printer this timeline belongs to (for verbose logging)
            intervals: Optional busy intervals, in any order
        """
        self.printer_id = printer_id
        self.intervals: list[BusyInterval] = sorted(intervals) if intervals else []

    def copy(self) -> "ResourceTimeline":
        """Create an independent copy so a run never alters its seed."""
        new_timeline = ResourceTimeline(printer_id=self.printer_id)
        new_timeline.intervals = list(self.intervals)
        return new_timeline

    def insert(self, interval: BusyInterval) -> None:
        """Add a busy interval, keeping start order.

        The caller guarantees that interval does not overlap an existing one.
        """
        idx = bisect.bisect_right(self.intervals, interval.start, key=lambda x: x.start)
        self.intervals.insert(idx, interval)

    def overlaps(self, interval: BusyInterval) -> bool:
        """True if interval intersects any busy interval on this timeline."""
        for busy in self.intervals:
            if busy.start >= interval.end:
                break
            if busy.overlaps(interval):
                return True
        return False

    def gaps(self, from_instant: datetime) -> Iterator[Gap]:
        """Yield free intervals at or after from_instant, in time order.

        Back-to-back intervals leave no gap between them. The last gap is
        open-ended. Produced lazily so a caller can stop at the first fit.
        """
        cursor = from_instant
        for busy in self.intervals:
            if busy.start > cursor:
                yield (cursor, busy.start)
            cursor = max(cursor, busy.end)
        yield (cursor, None)

    def __iter__(self) -> Iterator[BusyInterval]:
        return iter(self.intervals)

    def __len__(self) -> int:
        return len(self.intervals)

    def __repr__(self) -> str:
        return f"ResourceTimeline({self.printer_id!r}, {len(self.intervals)} intervals)"
