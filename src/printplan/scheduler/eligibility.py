"""Which printers may run which jobs."""

from printplan.models import Job, Printer


def is_eligible(job: Job, printer: Printer) -> bool:
    """Check whether a job may run on a printer.

    A job that needs a multi-material unit only runs on printers that have one,
    and a non-empty allow-list restricts the job to the printers it names.
    """
    if job.requires_multi_material and not printer.has_multi_material:
        return False
    if job.compatible_printer_ids and printer.id not in job.compatible_printer_ids:
        return False
    return True


def eligible_printers(job: Job, printers: list[Printer]) -> list[Printer]:
    """Eligible printers for a job, in the given order."""
    return [printer for printer in printers if is_eligible(job, printer)]
