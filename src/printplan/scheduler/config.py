"""Configuration classes for the scheduling system."""

from enum import Enum

from pydantic import BaseModel, Field


class Strategy(str, Enum):
    """How a run treats jobs that are already committed."""

    LOCK = "lock"  # Keep committed jobs in place, fill the gaps around them
    SHUFFLE = "shuffle"  # Re-plan committed jobs together with the new ones


DEFAULT_LOOKAHEAD_DAYS = 7


class SchedulingConfig(BaseModel):
    """Configuration for a scheduling run."""

    strategy: Strategy = Strategy.LOCK

    # Days scanned when looking for the next availability window
    lookahead_days: int = Field(default=DEFAULT_LOOKAHEAD_DAYS, ge=1)
