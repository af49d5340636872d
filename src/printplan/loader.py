"""Job snapshot loading and writing.

Jobs live in a YAML file with a top-level ``jobs`` list:

    jobs:
      - id: benchy
        duration_minutes: 45
      - id: helmet
        duration_minutes: 1400
        requires_multi_material: true
        compatible_printer_ids: [p1]
        status: committed
        printer_id: p1
        start: 2025-01-06T08:00:00
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, cast

import yaml
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ParseError, ValidationError
from .models import Job


def load_jobs(path: Path | str) -> list[Job]:
    """Load a job snapshot.

    Args:
        path: Path to the jobs YAML file

    Returns:
        Jobs in file order

    Raises:
        ParseError: If the file is not valid YAML or has the wrong shape
        ValidationError: If a job record is invalid or ids repeat
    """
    path = Path(path)
    try:
        with path.open() as f:
            raw_data: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ParseError(f"Invalid YAML in {path}: {e}") from e

    if raw_data is None:
        return []
    if not isinstance(raw_data, dict) or "jobs" not in raw_data:
        raise ParseError(f"{path.name}: expected a mapping with a 'jobs' list")

    data = cast(dict[str, Any], raw_data)
    raw_jobs = data["jobs"] or []
    if not isinstance(raw_jobs, list):
        raise ParseError(f"{path.name}: 'jobs' must be a list")

    jobs: list[Job] = []
    seen: set[str] = set()
    for index, raw_job in enumerate(cast(list[Any], raw_jobs)):
        try:
            job = Job.model_validate(raw_job)
        except PydanticValidationError as e:
            raise ValidationError(f"{path.name}: job #{index + 1} is invalid: {e}") from e
        if job.id in seen:
            raise ValidationError(f"{path.name}: job id '{job.id}' is used more than once")
        seen.add(job.id)
        jobs.append(job)

    return jobs


def write_jobs(path: Path, jobs: list[Job]) -> None:
    """Write a job snapshot in the format load_jobs reads."""
    records: list[dict[str, Any]] = []
    for job in jobs:
        record = job.model_dump(mode="json", exclude_none=True)
        if not record.get("compatible_printer_ids"):
            record.pop("compatible_printer_ids", None)
        records.append(record)

    with path.open("w") as f:
        yaml.safe_dump({"jobs": records}, f, default_flow_style=False, sort_keys=False)
