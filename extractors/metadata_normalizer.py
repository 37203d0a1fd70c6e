"""
Metadata Normalizer

Turns a decoded tag dictionary into a PhotoMetadata record.

Decoders disagree on key names and on how values are quoted, so every field
is resolved through the priority lists in models.tag_dictionary and every
printable value is cleaned before it is stored. Normalization never raises:
a dictionary that cannot be interpreted yields a record full of sentinels so
that one bad file never blocks the rest of a batch.
"""

import logging
import re
from typing import Dict, Optional, Tuple

from models.photo_metadata import NOT_AVAILABLE, PhotoMetadata
from models.tag_dictionary import (
    EXPLICIT_KEYS,
    FIELD_KEYS,
    MetadataField,
    TagDictionary,
    lookup,
)
from .gps_converter import altitude_from_tags, is_valid_hemisphere, to_decimal_degrees

logger = logging.getLogger(__name__)

DATE_TAKEN_LENGTH = 19
DEFAULT_LATITUDE_REF = 'N'
DEFAULT_LONGITUDE_REF = 'E'

# Placeholder values some decoders print for empty tags
PLACEHOLDER_VALUES = frozenset({'N/A', NOT_AVAILABLE})

_UNPRINTABLE = re.compile(r'^(IfdTag|<[\w.]+ object at 0x[0-9a-fA-F]+>)')


def clean_string(value: str) -> str:
    """
    Clean a printable tag value.

    Trims whitespace, strips one pair of matching enclosing quotes, removes
    embedded NUL characters and trims again.

    Example:
        >>> clean_string('  "Canon EOS R5\\x00"  ')
        'Canon EOS R5'
    """
    cleaned = value.strip()
    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in ('"', "'"):
        cleaned = cleaned[1:-1].strip()
    return cleaned.replace('\x00', '').strip()


def looks_unprintable(value: str) -> bool:
    """Detect decoder object dumps that leaked into a printable value."""
    return bool(_UNPRINTABLE.match(value))


def resolve_text(tags: TagDictionary, field: MetadataField) -> Optional[str]:
    """Return the first present, non-empty cleaned value for a logical field."""
    for key in FIELD_KEYS[field]:
        tag = tags.get(key.value)
        if tag is None:
            continue
        cleaned = clean_string(tag.printable)
        if cleaned:
            return cleaned
    return None


def collect_other_tags(tags: TagDictionary) -> Dict[str, str]:
    """Copy every tag without explicit handling, cleaned, skipping junk values."""
    other_tags = {}
    for key, tag in tags.items():
        if key in EXPLICIT_KEYS:
            continue
        cleaned = clean_string(tag.printable)
        if cleaned and cleaned not in PLACEHOLDER_VALUES and not looks_unprintable(cleaned):
            other_tags[key] = cleaned
    return other_tags


def resolve_coordinates(tags: TagDictionary) -> Tuple[Optional[float], Optional[float]]:
    """
    Resolve latitude and longitude as a pair.

    Both raw tags must be present and both hemisphere references valid;
    otherwise, or if either conversion fails, neither coordinate is returned.
    """
    latitude_tag = lookup(tags, MetadataField.LATITUDE)
    longitude_tag = lookup(tags, MetadataField.LONGITUDE)
    if latitude_tag is None or longitude_tag is None:
        return None, None

    latitude_ref = (resolve_text(tags, MetadataField.LATITUDE_REF) or DEFAULT_LATITUDE_REF).upper()
    longitude_ref = (resolve_text(tags, MetadataField.LONGITUDE_REF) or DEFAULT_LONGITUDE_REF).upper()
    if not (is_valid_hemisphere(latitude_ref, latitude=True)
            and is_valid_hemisphere(longitude_ref, latitude=False)):
        logger.debug(f"Skipping GPS conversion, invalid references: {latitude_ref}/{longitude_ref}")
        return None, None

    latitude = to_decimal_degrees(latitude_tag.values, latitude_ref)
    longitude = to_decimal_degrees(longitude_tag.values, longitude_ref)
    if latitude is None or longitude is None:
        return None, None
    if not (-90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0):
        logger.warning(f"Discarding out-of-range coordinates: {latitude}, {longitude}")
        return None, None
    return latitude, longitude


def format_date_taken(value: Optional[str]) -> str:
    """Make DateTimeOriginal sortable: colons become hyphens, 19 chars max."""
    if not value:
        return NOT_AVAILABLE
    return value.replace(':', '-')[:DATE_TAKEN_LENGTH]


def normalize(tags: TagDictionary) -> PhotoMetadata:
    """
    Build a PhotoMetadata record from a tag dictionary.

    Args:
        tags: Decoded tag dictionary (not mutated)

    Returns:
        Normalized metadata. An empty dictionary gives the "no EXIF" record;
        any internal failure gives the "error reading file" record.

    Example:
        >>> meta = normalize({
        ...     "GPSLatitude": TagValue("[34, 36, 54]", (34, 36, 54)),
        ...     "GPSLatitudeRef": TagValue("S"),
        ...     "GPSLongitude": TagValue("[58, 22, 12]", (58, 22, 12)),
        ...     "GPSLongitudeRef": TagValue("W"),
        ... })
        >>> round(meta.latitude, 3), round(meta.longitude, 3)
        (-34.615, -58.37)
    """
    try:
        if not tags:
            return PhotoMetadata.no_exif()

        latitude, longitude = resolve_coordinates(tags)
        altitude = altitude_from_tags(
            lookup(tags, MetadataField.ALTITUDE),
            lookup(tags, MetadataField.ALTITUDE_REF),
        )

        return PhotoMetadata(
            date_taken=format_date_taken(resolve_text(tags, MetadataField.DATE_TAKEN)),
            camera_model=resolve_text(tags, MetadataField.CAMERA) or NOT_AVAILABLE,
            focal_length=resolve_text(tags, MetadataField.FOCAL_LENGTH) or NOT_AVAILABLE,
            latitude=latitude,
            longitude=longitude,
            altitude=altitude,
            other_tags=collect_other_tags(tags),
        )

    except Exception as e:
        logger.error(f"Error normalizing tag dictionary: {e}")
        return PhotoMetadata.unreadable()
