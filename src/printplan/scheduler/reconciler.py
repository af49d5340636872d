"""Turn a proposed plan back into job records."""

from dataclasses import dataclass, field

from printplan.logger import get_logger
from printplan.models import Job

from .config import Strategy
from .core import ProposedPlacement
from .strategies import get_strategy

logger = get_logger()


def _default_job_list() -> list[Job]:
    return []


def _default_str_list() -> list[str]:
    return []


@dataclass
class ReconciliationResult:
    """Job records after applying a plan."""

    jobs: list[Job]  # Full replacement set, in snapshot order
    committed_ids: list[str] = field(default_factory=_default_str_list)
    reverted_ids: list[str] = field(default_factory=_default_str_list)
    changed: list[Job] = field(default_factory=_default_job_list)  # Updated records only

    def job(self, job_id: str) -> Job | None:
        for job in self.jobs:
            if job.id == job_id:
                return job
        return None


class PlanReconciler:
    """The only place job lifecycle transitions happen.

    Every placement commits its job to the chosen printer and start. Under
    Shuffle, committed jobs that fell out of the plan go back to pending with
    their slot cleared. Everything else is returned unchanged.
    """

    def __init__(self, strategy: Strategy) -> None:
        self.strategy = strategy
        self._functions = get_strategy(strategy)

    def reconcile(
        self, jobs: list[Job], placements: list[ProposedPlacement]
    ) -> ReconciliationResult:
        """Apply placements to the job snapshot.

        Args:
            jobs: Every job in the snapshot, regardless of status
            placements: Plan produced by the placement engine

        Returns:
            ReconciliationResult with the full job list and the changes made
        """
        by_job = {placement.job_id: placement for placement in placements}
        reverted = set(self._functions.reverted_ids(jobs, placements))

        result = ReconciliationResult(jobs=[])
        for job in jobs:
            placement = by_job.get(job.id)
            if placement is not None:
                updated = job.committed_to(placement.printer_id, placement.start)
                result.committed_ids.append(job.id)
                result.changed.append(updated)
                result.jobs.append(updated)
            elif job.id in reverted:
                updated = job.reverted_to_pending()
                logger.changes(f"  {job.id}: no longer fits, back to pending")
                result.reverted_ids.append(job.id)
                result.changed.append(updated)
                result.jobs.append(updated)
            else:
                result.jobs.append(job)

        unknown = set(by_job) - {job.id for job in jobs}
        if unknown:
            logger.warning(
                f"Plan places jobs missing from the snapshot: {', '.join(sorted(unknown))}"
            )

        return result
