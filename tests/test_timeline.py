"""Tests for per-printer timelines and gap enumeration."""

from printplan.scheduler import BusyInterval, ResourceTimeline
from tests.conftest import T0, at


class TestBusyInterval:
    """Tests for BusyInterval overlap semantics."""

    def test_touching_intervals_do_not_overlap(self) -> None:
        first = BusyInterval(at(0), at(60), "a")
        second = BusyInterval(at(60), at(90), "b")
        assert not first.overlaps(second)
        assert not second.overlaps(first)

    def test_shared_instant_overlaps(self) -> None:
        assert BusyInterval(at(0), at(61)).overlaps(BusyInterval(at(60), at(90)))

    def test_job_id_not_part_of_ordering(self) -> None:
        assert BusyInterval(at(0), at(10), "z") == BusyInterval(at(0), at(10), "a")


class TestGaps:
    """Tests for ResourceTimeline.gaps."""

    def test_empty_timeline_single_open_gap(self) -> None:
        assert list(ResourceTimeline("p1").gaps(T0)) == [(T0, None)]

    def test_gap_before_between_and_after(self) -> None:
        timeline = ResourceTimeline(
            "p1",
            [BusyInterval(at(30), at(60), "a"), BusyInterval(at(90), at(120), "b")],
        )
        assert list(timeline.gaps(T0)) == [
            (at(0), at(30)),
            (at(60), at(90)),
            (at(120), None),
        ]

    def test_back_to_back_intervals_leave_no_gap(self) -> None:
        timeline = ResourceTimeline(
            "p1",
            [BusyInterval(at(0), at(40), "a"), BusyInterval(at(40), at(70), "b")],
        )
        assert list(timeline.gaps(T0)) == [(at(70), None)]

    def test_intervals_before_start_are_skipped(self) -> None:
        """A booking that ends before from_instant does not move the cursor back."""
        timeline = ResourceTimeline(
            "p1",
            [BusyInterval(at(-120), at(-60), "old"), BusyInterval(at(-30), at(20), "running")],
        )
        assert list(timeline.gaps(T0)) == [(at(20), None)]

    def test_overlapping_seed_intervals_tolerated(self) -> None:
        """Conflicting bookings are treated as one busy stretch."""
        timeline = ResourceTimeline(
            "p1",
            [BusyInterval(at(0), at(60), "a"), BusyInterval(at(30), at(45), "b")],
        )
        assert list(timeline.gaps(T0)) == [(at(60), None)]

    def test_gaps_are_lazy(self) -> None:
        timeline = ResourceTimeline("p1", [BusyInterval(at(30), at(60), "a")])
        gaps = timeline.gaps(T0)
        assert next(gaps) == (at(0), at(30))
        assert next(gaps) == (at(60), None)


class TestInsertAndCopy:
    """Tests for ResourceTimeline mutation."""

    def test_insert_keeps_start_order(self) -> None:
        timeline = ResourceTimeline("p1")
        timeline.insert(BusyInterval(at(60), at(90), "b"))
        timeline.insert(BusyInterval(at(0), at(30), "a"))
        timeline.insert(BusyInterval(at(30), at(60), "c"))
        assert [i.job_id for i in timeline] == ["a", "c", "b"]
        assert len(timeline) == 3

    def test_constructor_sorts(self) -> None:
        timeline = ResourceTimeline(
            "p1", [BusyInterval(at(60), at(90), "b"), BusyInterval(at(0), at(30), "a")]
        )
        assert [i.job_id for i in timeline] == ["a", "b"]

    def test_copy_is_independent(self) -> None:
        original = ResourceTimeline("p1", [BusyInterval(at(0), at(30), "a")])
        clone = original.copy()
        clone.insert(BusyInterval(at(30), at(60), "b"))
        assert len(original) == 1
        assert len(clone) == 2
        assert clone.printer_id == "p1"

    def test_overlaps(self) -> None:
        timeline = ResourceTimeline("p1", [BusyInterval(at(30), at(60), "a")])
        assert timeline.overlaps(BusyInterval(at(50), at(70)))
        assert not timeline.overlaps(BusyInterval(at(60), at(70)))
        assert not timeline.overlaps(BusyInterval(at(0), at(30)))
