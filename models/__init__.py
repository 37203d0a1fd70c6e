"""
Domain models for the Photo Metadata & Detection KPI system.

This package contains the normalized records consumers work with: photo
metadata and assets on one side, detections, KPI groups and reports on the
other, plus the typed tag dictionary the metadata is built from.
"""

from .tag_dictionary import (
    EXPLICIT_KEYS,
    FIELD_KEYS,
    MetadataField,
    Rational,
    TagDictionary,
    TagKey,
    TagValue,
)
from .photo_metadata import (
    ERROR_READING_FILE,
    NOT_AVAILABLE,
    NOT_AVAILABLE_NO_EXIF,
    PhotoAsset,
    PhotoMetadata,
)
from .detection import SCORE_RANGE_LABELS, Detection, KpiGroup
from .report import Report

__all__ = [
    'EXPLICIT_KEYS',
    'FIELD_KEYS',
    'MetadataField',
    'Rational',
    'TagDictionary',
    'TagKey',
    'TagValue',
    'ERROR_READING_FILE',
    'NOT_AVAILABLE',
    'NOT_AVAILABLE_NO_EXIF',
    'PhotoAsset',
    'PhotoMetadata',
    'SCORE_RANGE_LABELS',
    'Detection',
    'KpiGroup',
    'Report',
]
