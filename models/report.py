"""
Report Model

KPI report data handed to renderers.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Tuple

from .detection import KpiGroup


@dataclass(frozen=True)
class Report:
    """
    Assembled KPI report, ready for rendering.

    Attributes:
        groups: KPI groups sorted by total detections, descending
        provenance: Where the detections came from (file selection summary)
        generated_at: When the report was assembled
    """

    groups: Tuple[KpiGroup, ...]
    provenance: str
    generated_at: datetime

    @property
    def total_detections(self) -> int:
        return sum(group.total() for group in self.groups)

    @property
    def is_empty(self) -> bool:
        return not self.groups

    def to_dict(self) -> dict:
        """Convert report to dictionary representation."""
        return {
            'groups': [group.to_dict() for group in self.groups],
            'provenance': self.provenance,
            'generated_at': self.generated_at.isoformat(),
            'total_detections': self.total_detections,
        }
