"""Pytest configuration and fixtures for printplan tests."""

from __future__ import annotations

from collections.abc import Generator
from datetime import datetime, timedelta
from typing import Any

import pytest

from printplan.logger import reset_logger
from printplan.models import Job, JobStatus, Printer
from printplan.scheduler import AvailabilityCalendar, AvailabilityWindow, validate_plan
from printplan.scheduler.core import ProposedPlacement

# Monday morning; minute of day 480
T0 = datetime(2025, 1, 6, 8, 0)


@pytest.fixture(autouse=True)
def clean_logger() -> Generator[None, None, None]:
    """Leave the printplan logger unconfigured after each test."""
    yield
    reset_logger()


def at(minutes: int) -> datetime:
    """T0 plus a number of minutes."""
    return T0 + timedelta(minutes=minutes)


def make_job(job_id: str, duration: int, **kwargs: Any) -> Job:
    """Create a pending job unless a status is given."""
    return Job(id=job_id, duration_minutes=duration, **kwargs)


def committed_job(job_id: str, duration: int, printer_id: str, start: datetime) -> Job:
    """Create a job already committed to a printer slot."""
    return Job(
        id=job_id,
        duration_minutes=duration,
        status=JobStatus.COMMITTED,
        printer_id=printer_id,
        start=start,
    )


def make_printer(printer_id: str, **kwargs: Any) -> Printer:
    return Printer(id=printer_id, **kwargs)


def window_calendar(*windows: tuple[int, int]) -> AvailabilityCalendar:
    """Calendar from (start, end) pairs given in minutes since midnight."""
    return AvailabilityCalendar([AvailabilityWindow(start=s, end=e) for s, e in windows])


def assert_valid_plan(
    placements: list[ProposedPlacement],
    jobs: list[Job],
    printers: list[Printer],
    plan_start: datetime = T0,
    calendar: AvailabilityCalendar | None = None,
) -> None:
    """Assert a plan satisfies every placement invariant."""
    errors = validate_plan(placements, jobs, printers, plan_start, calendar)
    assert errors == [], errors
