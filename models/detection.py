"""
Detection Models

Represents object-detection results and their per-class confidence KPIs.
"""

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional


# Fixed confidence ranges, in display order
SCORE_RANGE_LABELS = ("0-20%", "20-49%", "50-79%", "80-100%")


def clamp_score(score: float) -> float:
    """Clamp a confidence score into [0.0, 1.0]; NaN becomes 0.0."""
    if math.isnan(score):
        return 0.0
    return min(max(score, 0.0), 1.0)


@dataclass(frozen=True)
class Detection:
    """
    One object-recognition result.

    The score is clamped to [0.0, 1.0] on construction whatever scale the
    source file used.

    Example:
        >>> Detection("meter", 1.7).score
        1.0
    """

    class_name: str
    score: float

    def __post_init__(self):
        object.__setattr__(self, 'score', clamp_score(float(self.score)))

    def to_dict(self) -> dict:
        return {'class_name': self.class_name, 'score': self.score}


@dataclass(frozen=True)
class KpiGroup:
    """
    Detection counts for one class, bucketed by confidence range.

    Attributes:
        class_name: Detected object class
        score_ranges: Read-only mapping of range label to count, always holding
            exactly the four SCORE_RANGE_LABELS in order

    Example:
        >>> group = KpiGroup("meter", {"0-20%": 1, "20-49%": 0, "50-79%": 0, "80-100%": 1})
        >>> group.total()
        2
        >>> group.fraction("80-100%")
        0.5
    """

    class_name: str
    score_ranges: Mapping[str, int] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        counts = dict(self.score_ranges) or dict.fromkeys(SCORE_RANGE_LABELS, 0)
        if tuple(counts) != SCORE_RANGE_LABELS:
            if set(counts) != set(SCORE_RANGE_LABELS):
                raise ValueError(f"score ranges must be exactly {SCORE_RANGE_LABELS}, got {tuple(counts)}")
            counts = {label: counts[label] for label in SCORE_RANGE_LABELS}
        if any(count < 0 for count in counts.values()):
            raise ValueError("score range counts must not be negative")
        object.__setattr__(self, 'score_ranges', MappingProxyType(counts))

    def total(self) -> int:
        """Total number of detections across all ranges."""
        return sum(self.score_ranges.values())

    def fraction(self, label: str) -> float:
        """Share of the total falling in one range, 0.0 for an empty group."""
        total = self.total()
        return self.score_ranges[label] / total if total > 0 else 0.0

    def count(self, label: str) -> Optional[int]:
        return self.score_ranges.get(label)

    def to_dict(self) -> dict:
        return {
            'class_name': self.class_name,
            'score_ranges': dict(self.score_ranges),
            'total': self.total(),
        }

    def __repr__(self) -> str:
        return f"KpiGroup(class_name='{self.class_name}', total={self.total()})"
