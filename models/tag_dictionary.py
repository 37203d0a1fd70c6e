"""
Tag Dictionary Model

Typed view over the key/value tag mapping produced by an EXIF decoder.

A tag dictionary maps an opaque tag-key string to a TagValue. Decoders do not
agree on key names: exiftool reports standard names ("GPSLatitude", "Model")
while exifread prefixes them with the IFD they came from ("GPS GPSLatitude",
"Image Model"). TagKey enumerates every key this system understands and
FIELD_KEYS lists, per logical field, the keys to try in priority order.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union


@dataclass(frozen=True)
class Rational:
    """
    Numerator/denominator pair as stored by EXIF.

    Intentionally has no __float__: conversion goes through
    extractors.gps_converter.rational_to_float so that a zero denominator
    degrades to a default instead of raising.
    """

    numerator: Union[int, float]
    denominator: Union[int, float]

    def __str__(self) -> str:
        return f"{self.numerator}/{self.denominator}"


# A component is either a Rational or whatever raw scalar the decoder gave us
TagComponent = Union[Rational, int, float, str]


@dataclass(frozen=True)
class TagValue:
    """
    A single decoded tag.

    Attributes:
        printable: Human readable form of the value
        values: Ordered components (rationals or raw scalars), or None for
            tags that only carry a printable form

    Example:
        >>> TagValue("[34, 36, 54]", (Rational(34, 1), Rational(36, 1), Rational(54, 1)))
    """

    printable: str
    values: Optional[Tuple[TagComponent, ...]] = None

    def __str__(self) -> str:
        return self.printable


TagDictionary = Mapping[str, TagValue]


class TagKey(str, Enum):
    """Tag keys with explicit handling, standard and vendor-prefixed forms."""

    # Date
    DATE_TIME_ORIGINAL = "DateTimeOriginal"
    EXIF_DATE_TIME_ORIGINAL = "EXIF DateTimeOriginal"

    # Camera
    MODEL = "Model"
    CAMERA_MODEL_NAME = "CameraModelName"
    MAKE = "Make"
    IMAGE_MODEL = "ImageModel"
    IMAGE_MODEL_PREFIXED = "Image Model"
    IMAGE_MAKE_PREFIXED = "Image Make"

    # Optics
    FOCAL_LENGTH = "FocalLength"
    EXIF_FOCAL_LENGTH = "EXIF FocalLength"

    # GPS
    GPS_LATITUDE = "GPSLatitude"
    GPS_LONGITUDE = "GPSLongitude"
    GPS_LATITUDE_REF = "GPSLatitudeRef"
    GPS_LONGITUDE_REF = "GPSLongitudeRef"
    GPS_ALTITUDE = "GPSAltitude"
    GPS_ALTITUDE_REF = "GPSAltitudeRef"
    GPS_LATITUDE_PREFIXED = "GPS GPSLatitude"
    GPS_LONGITUDE_PREFIXED = "GPS GPSLongitude"
    GPS_LATITUDE_REF_PREFIXED = "GPS GPSLatitudeRef"
    GPS_LONGITUDE_REF_PREFIXED = "GPS GPSLongitudeRef"
    GPS_ALTITUDE_PREFIXED = "GPS GPSAltitude"
    GPS_ALTITUDE_REF_PREFIXED = "GPS GPSAltitudeRef"

    # Description / version
    IMAGE_DESCRIPTION = "ImageDescription"
    IMAGE_DESCRIPTION_PREFIXED = "Image ImageDescription"
    EXIF_VERSION = "ExifVersion"
    EXIF_VERSION_PREFIXED = "EXIF ExifVersion"


class MetadataField(Enum):
    """Logical fields resolved from one or more tag keys."""
    DATE_TAKEN = "date_taken"
    CAMERA = "camera"
    FOCAL_LENGTH = "focal_length"
    LATITUDE = "latitude"
    LONGITUDE = "longitude"
    LATITUDE_REF = "latitude_ref"
    LONGITUDE_REF = "longitude_ref"
    ALTITUDE = "altitude"
    ALTITUDE_REF = "altitude_ref"


FIELD_KEYS: Dict[MetadataField, Tuple[TagKey, ...]] = {
    MetadataField.DATE_TAKEN: (TagKey.DATE_TIME_ORIGINAL, TagKey.EXIF_DATE_TIME_ORIGINAL),
    MetadataField.CAMERA: (
        TagKey.MODEL,
        TagKey.CAMERA_MODEL_NAME,
        TagKey.MAKE,
        TagKey.IMAGE_MODEL,
        TagKey.IMAGE_MODEL_PREFIXED,
        TagKey.IMAGE_MAKE_PREFIXED,
    ),
    MetadataField.FOCAL_LENGTH: (TagKey.FOCAL_LENGTH, TagKey.EXIF_FOCAL_LENGTH),
    MetadataField.LATITUDE: (TagKey.GPS_LATITUDE, TagKey.GPS_LATITUDE_PREFIXED),
    MetadataField.LONGITUDE: (TagKey.GPS_LONGITUDE, TagKey.GPS_LONGITUDE_PREFIXED),
    MetadataField.LATITUDE_REF: (TagKey.GPS_LATITUDE_REF, TagKey.GPS_LATITUDE_REF_PREFIXED),
    MetadataField.LONGITUDE_REF: (TagKey.GPS_LONGITUDE_REF, TagKey.GPS_LONGITUDE_REF_PREFIXED),
    MetadataField.ALTITUDE: (TagKey.GPS_ALTITUDE, TagKey.GPS_ALTITUDE_PREFIXED),
    MetadataField.ALTITUDE_REF: (TagKey.GPS_ALTITUDE_REF, TagKey.GPS_ALTITUDE_REF_PREFIXED),
}

EXPLICIT_KEYS = frozenset(key.value for key in TagKey)


def lookup(tags: TagDictionary, field: MetadataField) -> Optional[TagValue]:
    """
    Return the first tag present for a logical field.

    Args:
        tags: Tag dictionary to search
        field: Logical field to resolve

    Returns:
        The TagValue of the highest-priority key present, or None
    """
    for key in FIELD_KEYS[field]:
        tag = tags.get(key.value)
        if tag is not None:
            return tag
    return None


def tag_from_raw(printable: Any, values: Any = None) -> TagValue:
    """Build a TagValue from loosely typed decoder output."""
    if values is None or isinstance(values, (str, bytes)):
        return TagValue(str(printable))
    if not isinstance(values, (list, tuple)):
        values = [values]
    return TagValue(str(printable), tuple(_component(v) for v in values))


def _component(value: Any) -> TagComponent:
    numerator = getattr(value, 'numerator', getattr(value, 'num', None))
    denominator = getattr(value, 'denominator', getattr(value, 'den', None))
    if isinstance(value, (int, float)) or numerator is None or denominator is None:
        return value
    return Rational(numerator, denominator)
