"""Data models for printplan."""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def as_local_naive(value: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive values pass through.

    Every instant the scheduler compares is naive local time.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


class JobStatus(str, Enum):
    """Lifecycle state of a print job."""

    PENDING = "pending"  # Waiting in the queue
    COMMITTED = "committed"  # Has a printer and a start time
    DONE = "done"
    FAILED = "failed"


class Urgency(str, Enum):
    """How soon the owner wants a job printed."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    CRITICAL = "critical"


class PrinterStatus(str, Enum):
    """Operational state of a printer."""

    IDLE = "idle"
    PRINTING = "printing"
    MAINTENANCE = "maintenance"  # Disabled: never receives placements


class Job(BaseModel):
    """A print job.

    Records are immutable; lifecycle transitions return updated copies.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    duration_minutes: int = Field(gt=0)
    urgency: Urgency = Urgency.NORMAL
    requires_multi_material: bool = False
    compatible_printer_ids: list[str] = Field(default_factory=list)  # Empty = any printer
    status: JobStatus = JobStatus.PENDING
    printer_id: str | None = None
    start: datetime | None = None
    notes: str | None = None

    @model_validator(mode="before")
    @classmethod
    def default_name(cls, data: Any) -> Any:
        """Fall back to the id when no display name is given."""
        if isinstance(data, dict) and not data.get("name"):
            return {**data, "name": data.get("id", "")}
        return data

    @field_validator("start")
    @classmethod
    def normalize_start(cls, value: datetime | None) -> datetime | None:
        """Stored starts may carry an offset (e.g. a trailing Z); drop it."""
        return as_local_naive(value) if value is not None else None

    @property
    def duration(self) -> timedelta:
        return timedelta(minutes=self.duration_minutes)

    @property
    def end(self) -> datetime | None:
        """Finish instant of a committed job, or None when it has no slot."""
        if self.start is None:
            return None
        return self.start + self.duration

    def is_committed_with_slot(self) -> bool:
        """True if the job is committed and knows where and when it runs."""
        return (
            self.status == JobStatus.COMMITTED
            and self.printer_id is not None
            and self.start is not None
        )

    def committed_to(self, printer_id: str, start: datetime) -> Job:
        """Return a copy committed to a printer at a start instant."""
        return self.model_copy(
            update={"status": JobStatus.COMMITTED, "printer_id": printer_id, "start": start}
        )

    def reverted_to_pending(self) -> Job:
        """Return a copy back in the queue with its slot cleared."""
        return self.model_copy(
            update={"status": JobStatus.PENDING, "printer_id": None, "start": None}
        )


class Printer(BaseModel):
    """A printer that processes one job at a time."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    has_multi_material: bool = False
    status: PrinterStatus = PrinterStatus.IDLE

    @model_validator(mode="before")
    @classmethod
    def default_name(cls, data: Any) -> Any:
        """Fall back to the id when no display name is given."""
        if isinstance(data, dict) and not data.get("name"):
            return {**data, "name": data.get("id", "")}
        return data

    @property
    def is_enabled(self) -> bool:
        return self.status != PrinterStatus.MAINTENANCE
