"""
Console and CSV reporting for organizer runs.
"""

import csv
import logging
from pathlib import Path
from typing import List

from models.schemas import BatchResult, FileOutcome, OutcomeStatus
from utils.exceptions import FilesystemError

logger = logging.getLogger(__name__)


def format_outcome(outcome: FileOutcome) -> List[str]:
    """
    Report lines for one file.

    Planned files show the source name and the planned relative path, the
    same way whether or not the run is a dry run. Errors add a line of
    their own. Skipped files produce no lines.
    """
    lines = []
    if outcome.plan is not None or outcome.status is OutcomeStatus.ERRORED:
        lines.append(outcome.source_path.name)
    if outcome.plan is not None:
        lines.append(f"  -> {outcome.plan.relative_target}")
    if outcome.status is OutcomeStatus.ERRORED:
        lines.append(f"  ! Error: {outcome.error_message}")
    return lines


def format_summary(result: BatchResult) -> str:
    return (
        f"Done. Processed: {result.processed}, "
        f"Skipped: {result.skipped}, Errors: {result.errors}"
    )


def write_csv_report(result: BatchResult, csv_file: Path):
    """
    Save every outcome of a run as CSV.

    Raises:
        FilesystemError: If the report cannot be written
    """
    try:
        csv_file.parent.mkdir(parents=True, exist_ok=True)
        with open(csv_file, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(['Source Path', 'Relative Path', 'Target Path', 'Status', 'Error'])

            for outcome in result.outcomes:
                target = outcome.final_target or (outcome.plan.abs_target if outcome.plan else None)
                writer.writerow([
                    str(outcome.source_path),
                    outcome.relative_target or '',
                    str(target) if target else '',
                    outcome.status.value,
                    outcome.error_message or ''
                ])
    except OSError as e:
        raise FilesystemError(str(csv_file), "write_report", str(e))

    logger.info(f"Report saved to: {csv_file}")
