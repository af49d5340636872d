"""Planner configuration: printers, availability windows and scheduler settings.

A single YAML file (printplan_config.yaml) describes the farm:

    printers:
      - id: p1
        name: Bambu X1C
        has_multi_material: true
      - id: p2
        name: Prusa MK4
    availability:
      - {start: "08:00", end: "12:00"}
      - {start: "13:00", end: "18:00"}
    scheduler:
      strategy: lock
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator

from .exceptions import ParseError
from .models import Printer
from .scheduler import AvailabilityCalendar, SchedulingConfig

DEFAULT_CONFIG_NAME = "printplan_config.yaml"


class PlannerConfig(BaseModel):
    """Complete planner configuration."""

    printers: list[Printer] = Field(default_factory=list[Printer])
    # Raw windows; malformed entries are dropped with a warning when the calendar is built
    availability: list[Any] = Field(default_factory=list)
    scheduler: SchedulingConfig = SchedulingConfig()

    @model_validator(mode="after")
    def validate_unique_printer_ids(self) -> PlannerConfig:
        """Ensure every printer id is defined once."""
        seen: set[str] = set()
        for printer in self.printers:
            if printer.id in seen:
                raise ValueError(f"Printer '{printer.id}' is defined more than once")
            seen.add(printer.id)
        return self

    def availability_pairs(self) -> list[tuple[Any, Any]]:
        """Windows as (start, end) pairs, from {start, end} mappings or [start, end] lists."""
        pairs: list[tuple[Any, Any]] = []
        for entry in self.availability:
            if isinstance(entry, dict):
                pairs.append((entry.get("start"), entry.get("end")))
            elif isinstance(entry, (list, tuple)) and len(entry) == 2:
                pairs.append((entry[0], entry[1]))
            else:
                pairs.append((entry, None))
        return pairs

    def build_calendar(self) -> AvailabilityCalendar:
        return AvailabilityCalendar.from_pairs(
            self.availability_pairs(), lookahead_days=self.scheduler.lookahead_days
        )


def load_planner_config(config_path: Path | str) -> PlannerConfig:
    """Load planner configuration from a YAML file.

    Args:
        config_path: Path to printplan_config.yaml

    Returns:
        PlannerConfig with printers, availability windows and scheduler settings

    Raises:
        FileNotFoundError: If config file doesn't exist
        ParseError: If the file is not valid YAML
        ValueError: If config is invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with config_path.open() as f:
            data: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ParseError(f"Invalid YAML in {config_path}: {e}") from e

    if not data:
        raise ValueError("Empty configuration file")
    if not isinstance(data, dict):
        raise ValueError(f"Invalid config format: expected a mapping, got {type(data).__name__}")

    return PlannerConfig.model_validate(data)
