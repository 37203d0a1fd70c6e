"""
Report Data Assembler

Composes KPI groups and provenance into a Report value. No rendering here.
"""

from datetime import datetime
from typing import Iterable, Optional

from models import KpiGroup, Report


def assemble(groups: Iterable[KpiGroup], provenance: str,
             generated_at: Optional[datetime] = None) -> Report:
    """
    Assemble a KPI report.

    Args:
        groups: KPI groups, usually straight from the aggregator
        provenance: Description of the detection source (e.g. "3 files selected.")
        generated_at: Report timestamp, defaults to now

    Returns:
        Report with groups sorted by total descending (stable)
    """
    ordered = sorted(groups, key=lambda group: group.total(), reverse=True)
    return Report(
        groups=tuple(ordered),
        provenance=provenance,
        generated_at=generated_at or datetime.now(),
    )


def describe_selection(file_count: int) -> str:
    """
    Provenance line for a selection of detection files.

    Example:
        >>> describe_selection(1)
        '1 file selected.'
    """
    if file_count == 0:
        return 'No files selected.'
    return f"{file_count} file{'s' if file_count > 1 else ''} selected."
