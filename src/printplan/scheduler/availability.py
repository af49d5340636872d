"""Recurring daily availability windows.

An availability window is a time-of-day range during which a job is allowed
to finish, because finishing is the moment somebody has to be around to take
the print off the bed. The calendar repeats every day; an empty calendar means
any time is fine.
"""

from collections.abc import Iterable
from datetime import datetime, time, timedelta
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator, model_validator

from printplan.logger import get_logger

from .config import DEFAULT_LOOKAHEAD_DAYS

logger = get_logger()

MINUTES_PER_DAY = 24 * 60


def parse_minute_of_day(value: Any) -> int:
    """Parse "HH:MM" (or an int/str count of minutes) to minutes since midnight.

    "24:00" is accepted as the end of the day.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid time of day: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, time):
        return value.hour * 60 + value.minute

    text = str(value).strip()
    if text.isdigit():
        return int(text)
    if text == "24:00":
        return MINUTES_PER_DAY
    try:
        parsed = time.fromisoformat(text)
    except ValueError as e:
        raise ValueError(f"Invalid time of day {text!r}: expected HH:MM") from e
    return parsed.hour * 60 + parsed.minute


def format_minute_of_day(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


class AvailabilityWindow(BaseModel):
    """A recurring daily [start, end] range in minutes since midnight."""

    start: int
    end: int

    @field_validator("start", "end", mode="before")
    @classmethod
    def parse_time_of_day(cls, value: Any) -> int:
        return parse_minute_of_day(value)

    @model_validator(mode="after")
    def validate_range(self) -> "AvailabilityWindow":
        """Ensure 0 <= start < 24:00 and start <= end <= 24:00."""
        if not 0 <= self.start <= MINUTES_PER_DAY or not 0 <= self.end <= MINUTES_PER_DAY:
            raise ValueError("window times must lie between 00:00 and 24:00")
        if self.start == MINUTES_PER_DAY:
            raise ValueError("window start must be before 24:00")
        if self.end < self.start:
            raise ValueError("window end must not be before window start")
        return self

    def contains(self, minute_of_day: int) -> bool:
        """Both endpoints are inclusive."""
        return self.start <= minute_of_day <= self.end

    def __str__(self) -> str:
        return f"{format_minute_of_day(self.start)}-{format_minute_of_day(self.end)}"


class AvailabilityCalendar:
    """Answers "may a job finish now?" and "when is the next window?".

    Windows are kept sorted by start so that the forward scan visits them in
    time order within each day.
    """

    def __init__(
        self,
        windows: Iterable[AvailabilityWindow] | None = None,
        lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS,
    ) -> None:
        self.windows: list[AvailabilityWindow] = sorted(
            windows or [], key=lambda w: (w.start, w.end)
        )
        self.lookahead_days = lookahead_days

    @classmethod
    def from_pairs(
        cls,
        pairs: Iterable[tuple[Any, Any]],
        lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS,
    ) -> "AvailabilityCalendar":
        """Build a calendar from raw (start, end) pairs, skipping malformed ones.

        One bad window must not block scheduling, so invalid pairs are logged
        and dropped instead of raising.
        """
        windows: list[AvailabilityWindow] = []
        for start, end in pairs:
            try:
                windows.append(AvailabilityWindow(start=start, end=end))
            except ValidationError as e:
                logger.warning(
                    f"Ignoring malformed availability window ({start!r}, {end!r}): "
                    f"{e.errors()[0]['msg']}"
                )
        return cls(windows, lookahead_days=lookahead_days)

    @property
    def is_empty(self) -> bool:
        return not self.windows

    def is_within_window(self, instant: datetime) -> bool:
        """True if the time of day of instant falls in any window (or there are none)."""
        if not self.windows:
            return True
        minute_of_day = instant.hour * 60 + instant.minute
        return any(window.contains(minute_of_day) for window in self.windows)

    def next_window_start_at_or_after(self, instant: datetime) -> datetime:
        """Earliest window start that is >= instant.

        Scans day by day from the date of instant. If nothing matches within
        the lookahead (or the calendar is empty) instant is returned unchanged.
        """
        if not self.windows:
            return instant

        midnight = datetime.combine(instant.date(), time(0, 0), tzinfo=instant.tzinfo)
        for day_offset in range(self.lookahead_days):
            day_start = midnight + timedelta(days=day_offset)
            for window in self.windows:
                candidate = day_start + timedelta(minutes=window.start)
                if candidate >= instant:
                    return candidate

        logger.warning(
            f"No availability window starts within {self.lookahead_days} days of "
            f"{instant.isoformat()}; keeping the unshifted time"
        )
        return instant

    def __len__(self) -> int:
        return len(self.windows)

    def __repr__(self) -> str:
        return f"AvailabilityCalendar([{', '.join(str(w) for w in self.windows)}])"
