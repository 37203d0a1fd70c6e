"""
KPI Aggregator

Buckets detections by confidence range, per class.
"""

import logging
from typing import Dict, Iterable, List

from models import SCORE_RANGE_LABELS, Detection, KpiGroup
from models.detection import clamp_score

logger = logging.getLogger(__name__)

# Inclusive upper bound of each range; the ranges are intentionally uneven
RANGE_UPPER_BOUNDS = (
    (0.20, "0-20%"),
    (0.49, "20-49%"),
    (0.79, "50-79%"),
    (1.00, "80-100%"),
)


def range_label(score: float) -> str:
    """
    Map a confidence score to its range label.

    [0, 0.20] -> "0-20%", (0.20, 0.49] -> "20-49%",
    (0.49, 0.79] -> "50-79%", (0.79, 1.0] -> "80-100%".

    Example:
        >>> range_label(0.20), range_label(0.2001), range_label(0.79), range_label(0.8)
        ('0-20%', '20-49%', '50-79%', '80-100%')
    """
    score = clamp_score(score)
    for upper, label in RANGE_UPPER_BOUNDS:
        if score <= upper:
            return label
    return SCORE_RANGE_LABELS[-1]


def aggregate(detections: Iterable[Detection]) -> List[KpiGroup]:
    """
    Aggregate a batch of detections into per-class KPI groups.

    The batch must already hold the detections of every file; this is not
    an incremental update.

    Args:
        detections: Detections merged across files

    Returns:
        One KpiGroup per class, sorted by total descending; classes with
        equal totals keep the order in which they were first seen

    Example:
        >>> groups = aggregate([Detection("meter", 0.05), Detection("meter", 0.95),
        ...                     Detection("pole", 0.95)])
        >>> [(g.class_name, g.total()) for g in groups]
        [('meter', 2), ('pole', 1)]
    """
    counts: Dict[str, Dict[str, int]] = {}
    for detection in detections:
        ranges = counts.setdefault(detection.class_name, dict.fromkeys(SCORE_RANGE_LABELS, 0))
        ranges[range_label(detection.score)] += 1

    groups = [KpiGroup(class_name, ranges) for class_name, ranges in counts.items()]
    groups.sort(key=lambda group: group.total(), reverse=True)

    logger.debug(f"Aggregated {sum(g.total() for g in groups)} detections into {len(groups)} classes")
    return groups
