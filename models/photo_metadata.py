"""
Photo Metadata Model

Represents normalized EXIF metadata extracted from a single photograph, and
the asset record that carries it through the system.
"""

import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional


NOT_AVAILABLE = "not available"
NOT_AVAILABLE_NO_EXIF = "not available (no EXIF)"
ERROR_READING_FILE = "error reading file"


@dataclass(frozen=True)
class PhotoMetadata:
    """
    Normalized EXIF metadata for a single photograph.

    Consumers only ever see this record, never the raw tag dictionary it was
    built from. String fields hold either a cleaned tag value or one of the
    module sentinels (NOT_AVAILABLE, NOT_AVAILABLE_NO_EXIF, ERROR_READING_FILE).

    Attributes:
        date_taken: Capture time as "YYYY-MM-DD HH-MM-SS" (at most 19 chars) or a sentinel
        camera_model: Camera description
        focal_length: Focal length as printed by the decoder
        latitude: Decimal degrees in [-90, 90], or None
        longitude: Decimal degrees in [-180, 180], or None
        altitude: Meters, negative below sea level, or None
        other_tags: Read-only cleaned printable values of every tag without explicit handling

    Example:
        >>> meta = PhotoMetadata(
        ...     date_taken="2024-06-01 15-00-00",
        ...     camera_model="FC3411",
        ...     focal_length="8.4",
        ...     latitude=-34.615,
        ...     longitude=-58.370,
        ... )
        >>> meta.has_location
        True
    """

    date_taken: str
    camera_model: str
    focal_length: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    altitude: Optional[float] = None
    other_tags: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        """Enforce the coordinate invariants and freeze other_tags."""
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be both present or both absent")
        if self.latitude is not None and not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude out of range: {self.latitude}")
        if self.longitude is not None and not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"longitude out of range: {self.longitude}")
        object.__setattr__(self, 'other_tags', MappingProxyType(dict(self.other_tags)))

    @property
    def has_location(self) -> bool:
        """Whether the photo can be placed on a map."""
        return self.latitude is not None and self.longitude is not None

    @classmethod
    def no_exif(cls) -> 'PhotoMetadata':
        """Record for an image that carries no EXIF block at all."""
        return cls(
            date_taken=NOT_AVAILABLE_NO_EXIF,
            camera_model=NOT_AVAILABLE,
            focal_length=NOT_AVAILABLE,
        )

    @classmethod
    def unreadable(cls) -> 'PhotoMetadata':
        """Record for a file whose bytes or tags could not be decoded."""
        return cls(
            date_taken=ERROR_READING_FILE,
            camera_model=NOT_AVAILABLE,
            focal_length=NOT_AVAILABLE,
        )

    def to_dict(self) -> dict:
        """
        Convert photo metadata to dictionary representation.

        Returns:
            Dictionary with all metadata fields
        """
        return {
            'date_taken': self.date_taken,
            'camera_model': self.camera_model,
            'focal_length': self.focal_length,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'altitude': self.altitude,
            'other_tags': dict(self.other_tags),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'PhotoMetadata':
        """Create PhotoMetadata instance from dictionary."""
        data = dict(data)
        data['other_tags'] = dict(data.get('other_tags') or {})
        return cls(**data)

    def __repr__(self) -> str:
        """String representation of PhotoMetadata."""
        return (
            f"PhotoMetadata(date_taken='{self.date_taken}', "
            f"camera_model='{self.camera_model}', "
            f"latitude={self.latitude}, longitude={self.longitude})"
        )


def file_kind_from_name(file_name: str) -> str:
    """
    Derive the display kind of a file from its extension.

    Example:
        >>> file_kind_from_name("DJI_0042.jpeg")
        'JPEG'
        >>> file_kind_from_name("README")
        'N/A'
    """
    extension = os.path.splitext(file_name)[1]
    return extension[1:].upper() if len(extension) > 1 else "N/A"


@dataclass(frozen=True)
class PhotoAsset:
    """
    An image known to the system, local or remote, with its metadata.

    Attributes:
        file_name: Base name of the image file
        folder: Folder label or storage URI prefix the file came from
        file_kind: Upper-cased extension ("JPEG", "TIFF", ...)
        exif: Normalized metadata
    """

    file_name: str
    folder: str
    file_kind: str
    exif: PhotoMetadata

    @property
    def has_location(self) -> bool:
        return self.exif.has_location

    def to_dict(self) -> dict:
        """Convert asset to dictionary representation."""
        return {
            'file_name': self.file_name,
            'folder': self.folder,
            'file_kind': self.file_kind,
            'exif': self.exif.to_dict(),
        }
