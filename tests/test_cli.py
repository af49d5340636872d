"""Tests for CLI commands."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from printplan.cli import app
from printplan.loader import load_jobs
from printplan.models import JobStatus

runner = CliRunner()

CONFIG = """
printers:
  - id: p1
    name: Bambu X1C
    has_multi_material: true
  - id: p2
    name: Prusa MK4
"""

JOBS = """
jobs:
  - id: benchy
    name: Benchy
    duration_minutes: 45
  - id: vase
    name: Spiral vase
    duration_minutes: 120
  - id: keychain
    duration_minutes: 15
    status: done
"""


@pytest.fixture
def farm(tmp_path: Path) -> Path:
    """Jobs file with a planner config beside it."""
    (tmp_path / "printplan_config.yaml").write_text(CONFIG)
    jobs_file = tmp_path / "jobs.yaml"
    jobs_file.write_text(JOBS)
    return jobs_file


class TestScheduleCommand:
    """Test the schedule CLI command."""

    def test_schedule_basic_output(self, farm: Path) -> None:
        result = runner.invoke(app, ["schedule", str(farm), "--start", "2025-01-06T08:00"])

        assert result.exit_code == 0, result.output
        assert "Plan (lock) from 2025-01-06T08:00:00" in result.stdout
        assert "Scheduled 2 jobs over 2.0 hours (0 delayed for availability, 0 unplaced)" in (
            result.stdout
        )
        assert "2025-01-06T08:00:00 -> 2025-01-06T10:00:00  Spiral vase (vase)" in result.stdout
        assert "2025-01-06T08:00:00 -> 2025-01-06T08:45:00  Benchy (benchy)" in result.stdout
        assert "keychain" not in result.stdout

    def test_schedule_selected_job_and_printer(self, farm: Path) -> None:
        result = runner.invoke(
            app,
            [
                "schedule",
                str(farm),
                "--start",
                "2025-01-06T08:00",
                "--job",
                "benchy",
                "--printer",
                "p2",
            ],
        )

        assert result.exit_code == 0, result.output
        assert "Scheduled 1 jobs" in result.stdout
        assert "p2\n  2025-01-06T08:00:00 -> 2025-01-06T08:45:00  Benchy (benchy)" in (
            result.stdout
        )
        assert "vase" not in result.stdout

    def test_schedule_delayed_with_availability(self, farm: Path) -> None:
        config = farm.parent / "printplan_config.yaml"
        config.write_text(CONFIG + 'availability:\n  - {start: "09:00", end: "17:00"}\n')

        result = runner.invoke(
            app, ["schedule", str(farm), "--start", "2025-01-06T08:00", "--job", "benchy"]
        )

        assert result.exit_code == 0, result.output
        assert "2025-01-06T08:15:00 -> 2025-01-06T09:00:00  Benchy (benchy)  [delayed]" in (
            result.stdout
        )
        assert "1 delayed for availability" in result.stdout

    def test_schedule_output_file(self, farm: Path, tmp_path: Path) -> None:
        output_file = tmp_path / "planned.yaml"
        result = runner.invoke(
            app,
            ["schedule", str(farm), "--start", "2025-01-06T08:00", "--output", str(output_file)],
        )

        assert result.exit_code == 0, result.output
        assert f"Updated jobs written to {output_file}" in result.stdout

        jobs = {job.id: job for job in load_jobs(output_file)}
        assert jobs["vase"].status == JobStatus.COMMITTED
        assert jobs["vase"].printer_id == "p1"
        assert jobs["benchy"].printer_id == "p2"
        assert jobs["keychain"].status == JobStatus.DONE

    def test_schedule_shuffle_reverts(self, tmp_path: Path) -> None:
        (tmp_path / "printplan_config.yaml").write_text(CONFIG)
        jobs_file = tmp_path / "jobs.yaml"
        jobs_file.write_text(
            """
jobs:
  - id: helmet
    duration_minutes: 300
    requires_multi_material: true
    status: committed
    printer_id: p1
    start: 2025-01-06T08:00:00
"""
        )

        result = runner.invoke(
            app,
            [
                "schedule",
                str(jobs_file),
                "--start",
                "2025-01-06T08:00",
                "--strategy",
                "shuffle",
                "--printer",
                "p2",
            ],
        )

        assert result.exit_code == 0, result.output
        assert "Unplaced:" in result.stdout
        assert "Job 'helmet' was unscheduled and returned to the queue" in result.output

    def test_schedule_explicit_config(self, farm: Path, tmp_path: Path) -> None:
        other = tmp_path / "other.yaml"
        other.write_text("printers:\n  - id: only\n")

        result = runner.invoke(
            app,
            ["schedule", str(farm), "--config", str(other), "--start", "2025-01-06T08:00"],
        )

        assert result.exit_code == 0, result.output
        assert "only\n" in result.stdout
        assert "p1" not in result.stdout

    def test_schedule_nothing_to_do(self, farm: Path) -> None:
        result = runner.invoke(
            app, ["schedule", str(farm), "--start", "2025-01-06T08:00", "--job", "keychain"]
        )
        assert result.exit_code == 1
        assert "No jobs to schedule" in result.output

    def test_schedule_invalid_start(self, farm: Path) -> None:
        result = runner.invoke(app, ["schedule", str(farm), "--start", "next tuesday"])
        assert result.exit_code == 1
        assert "Invalid start 'next tuesday'" in result.output

    def test_schedule_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["schedule", str(tmp_path / "missing.yaml")])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_schedule_verbose_logs_changes(self, farm: Path) -> None:
        result = runner.invoke(
            app, ["-v", "1", "schedule", str(farm), "--start", "2025-01-06T08:00"]
        )
        assert result.exit_code == 0, result.output
        assert "Scheduling 2 jobs on 2 printers" in result.output

    def test_schedule_committed_start_in_utc(self, tmp_path: Path) -> None:
        """Committed starts saved with a Z suffix mix with a naive --start."""
        (tmp_path / "printplan_config.yaml").write_text(CONFIG)
        jobs_file = tmp_path / "jobs.yaml"
        jobs_file.write_text(
            """
jobs:
  - id: x
    duration_minutes: 60
    status: committed
    printer_id: p1
    start: '2025-01-06T08:00:00Z'
  - id: y
    duration_minutes: 30
"""
        )

        result = runner.invoke(app, ["schedule", str(jobs_file), "--start", "2025-01-06T08:00"])

        assert result.exit_code == 0, result.output
        assert result.exception is None
        assert "Scheduled 1 jobs" in result.stdout
        assert "(y)" in result.stdout

class TestCheckCommand:
    """Test the check CLI command."""

    def test_check_clean(self, farm: Path) -> None:
        result = runner.invoke(app, ["check", str(farm)])
        assert result.exit_code == 0
        assert "No conflicts found" in result.stdout

    def test_check_reports_conflicts(self, tmp_path: Path) -> None:
        (tmp_path / "printplan_config.yaml").write_text(CONFIG)
        jobs_file = tmp_path / "jobs.yaml"
        jobs_file.write_text(
            """
jobs:
  - {id: x, duration_minutes: 60, status: committed, printer_id: p1, start: 2025-01-06T08:00:00}
  - {id: y, duration_minutes: 60, status: committed, printer_id: p1, start: 2025-01-06T08:30:00}
  - {id: z, duration_minutes: 60, status: committed, printer_id: p7, start: 2025-01-06T08:30:00}
"""
        )

        result = runner.invoke(app, ["check", str(jobs_file)])

        assert result.exit_code == 1
        assert "x and y overlap on printer p1" in result.output
        assert "z is committed to unknown printer p7" in result.output


class TestExampleFarm:
    """Run the commands against the files in examples/."""

    examples = Path(__file__).parent.parent / "examples"

    def test_check_example(self) -> None:
        result = runner.invoke(app, ["check", str(self.examples / "jobs.yaml")])
        assert result.exit_code == 0, result.output

    def test_schedule_example(self) -> None:
        result = runner.invoke(
            app, ["schedule", str(self.examples / "jobs.yaml"), "--start", "2025-01-06T08:00"]
        )

        assert result.exit_code == 0, result.output
        assert "Scheduled 4 jobs" in result.stdout
        assert "Cosplay helmet (helmet)" in result.stdout
        assert "p3" not in result.stdout
