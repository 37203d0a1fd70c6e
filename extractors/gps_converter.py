"""
GPS Coordinate Converter

Converts EXIF degree/minute/second rationals to signed decimal degrees and
reads altitude. All functions are pure and never raise.
"""

import logging
from collections.abc import Sequence as SequenceABC
from typing import Any, Callable, Optional, Sequence, Tuple

from models.tag_dictionary import TagValue

logger = logging.getLogger(__name__)

LATITUDE_REFS = ('N', 'S')
LONGITUDE_REFS = ('E', 'W')
NEGATIVE_REFS = ('S', 'W')
BELOW_SEA_LEVEL = '1'


def _from_ratio(component: Any) -> Optional[float]:
    numerator = getattr(component, 'numerator', None)
    denominator = getattr(component, 'denominator', None)
    if numerator is None or denominator is None or denominator == 0:
        return None
    try:
        return numerator / denominator
    except (TypeError, ZeroDivisionError):
        return None


def _from_number(component: Any) -> Optional[float]:
    try:
        return float(component)
    except (TypeError, ValueError):
        return None


# Tried in order; the first attempt returning a value wins
_CONVERSIONS: Tuple[Callable[[Any], Optional[float]], ...] = (_from_ratio, _from_number)


def rational_to_float(component: Any) -> float:
    """
    Convert one EXIF component to a float.

    Tries numerator/denominator (when the denominator is non-zero), then the
    raw value as a number, and falls back to 0.0.

    Example:
        >>> rational_to_float(Rational(54, 1))
        54.0
        >>> rational_to_float(Rational(1, 0))
        0.0
        >>> rational_to_float("12.5")
        12.5
    """
    for convert in _CONVERSIONS:
        value = convert(component)
        if value is not None:
            return value
    return 0.0


def _normalize_ref(ref: Optional[str]) -> str:
    return str(ref or '').strip().upper()


def is_valid_hemisphere(ref: Optional[str], latitude: bool) -> bool:
    """Check a hemisphere letter against the axis it belongs to."""
    allowed = LATITUDE_REFS if latitude else LONGITUDE_REFS
    return _normalize_ref(ref) in allowed


def to_decimal_degrees(values: Optional[Sequence[Any]], hemisphere_ref: Optional[str]) -> Optional[float]:
    """
    Convert a degree/minute/second triple to signed decimal degrees.

    Args:
        values: Exactly three components (degrees, minutes, seconds)
        hemisphere_ref: One of N, S, E, W (case-insensitive)

    Returns:
        Decimal degrees, negative for S and W, or None when the triple is
        malformed or evaluates to exactly 0.0 (treated as "not recorded")

    Example:
        >>> to_decimal_degrees([34, 36, 54], "S")
        -34.615
    """
    if not isinstance(values, SequenceABC) or isinstance(values, (str, bytes)) or len(values) != 3:
        return None

    degrees, minutes, seconds = (rational_to_float(component) for component in values)
    decimal = degrees + (minutes / 60) + (seconds / 3600)

    if decimal == 0.0:
        return None

    if _normalize_ref(hemisphere_ref) in NEGATIVE_REFS:
        decimal = -decimal
    return decimal


def altitude_from_tags(altitude: Optional[TagValue],
                       altitude_ref: Optional[TagValue] = None) -> Optional[float]:
    """
    Read altitude in meters from the GPSAltitude / GPSAltitudeRef pair.

    Uses the first component of the altitude tag; a reference of "1" means
    below sea level and flips the sign.

    Returns:
        Altitude in meters, or None if the tag is missing or unreadable
    """
    if altitude is None:
        return None
    try:
        value = rational_to_float(altitude.values[0])
        if altitude_ref is not None and altitude_ref.printable.strip() == BELOW_SEA_LEVEL:
            value = -value
        return value
    except Exception as e:
        logger.warning(f"Error parsing GPS altitude '{altitude.printable}': {e}")
        return None
