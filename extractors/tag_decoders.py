"""
Tag Decoders

Adapters from third-party EXIF readers to the TagDictionary model. These are
the only functions that touch image bytes; everything downstream works on the
decoded dictionary.

Two decoders are supported:

- exifread (pure Python, reads from a binary stream) reports IFD-prefixed
  keys such as "GPS GPSLatitude" and "Image Model" with rational values.
- exiftool (through pyexiftool, needs the exiftool binary) reports standard
  keys such as "GPSLatitude" and "Model"; run with -n it gives plain numbers.
"""

import json
import logging
from typing import BinaryIO, Dict, Optional

import exifread
import exiftool  # type: ignore

from models.tag_dictionary import TagKey, TagValue, tag_from_raw

logger = logging.getLogger(__name__)

EXIFREAD = 'exifread'
EXIFTOOL = 'exiftool'
SUPPORTED_DECODERS = (EXIFREAD, EXIFTOOL)

# exiftool groups that duplicate or describe the file rather than the photo
_EXIFTOOL_SKIPPED_GROUPS = {'Composite', 'File', 'ExifTool', 'System', 'SourceFile'}

# Tags exiftool -n reports as unsigned decimal degrees
_DECIMAL_DEGREE_TAGS = {TagKey.GPS_LATITUDE.value, TagKey.GPS_LONGITUDE.value}


def decode_exifread(stream: BinaryIO) -> Dict[str, TagValue]:
    """
    Decode EXIF tags from a binary stream with exifread.

    Args:
        stream: Open binary file object positioned at the start of the image

    Returns:
        Tag dictionary keyed by exifread's prefixed tag names; empty when the
        image has no EXIF block
    """
    raw_tags = exifread.process_file(stream, details=False)

    tags = {}
    for key, tag in raw_tags.items():
        if not hasattr(tag, 'printable'):
            # Thumbnails and other binary blobs
            continue
        tags[key] = tag_from_raw(tag.printable, getattr(tag, 'values', None))

    logger.debug(f"exifread decoded {len(tags)} tags")
    return tags


def decode_exiftool(file_path: str) -> Dict[str, TagValue]:
    """
    Decode EXIF tags from a file with exiftool.

    Runs ``exiftool -j -n -G`` so that every key carries its group and every
    value is numeric where possible. EXIF-group tags keep their bare standard
    name; other groups keep a "<Group> <Name>" key.

    Args:
        file_path: Path to the image file

    Returns:
        Tag dictionary keyed by standard tag names
    """
    with exiftool.ExifTool() as et:
        output = et.execute("-j", "-n", "-G", file_path)

    metadata_list = json.loads(output)
    if not metadata_list:
        logger.warning(f"No metadata found for: {file_path}")
        return {}

    tags = {}
    for key, value in metadata_list[0].items():
        group, sep, name = key.partition(':')
        if not sep or group in _EXIFTOOL_SKIPPED_GROUPS:
            continue
        tag_key = name if group == 'EXIF' else f"{group} {name}"
        tags[tag_key] = _exiftool_value(tag_key, value)

    logger.debug(f"exiftool decoded {len(tags)} tags from {file_path}")
    return tags


def _exiftool_value(tag_key: str, value) -> TagValue:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return TagValue(str(value))
    if tag_key in _DECIMAL_DEGREE_TAGS:
        # Already decimal degrees: whole value in the degrees slot
        return TagValue(str(value), (value, 0, 0))
    return TagValue(str(value), (value,))


def decode_file(file_path: str, stream: Optional[BinaryIO] = None,
                decoder: str = EXIFREAD) -> Dict[str, TagValue]:
    """
    Decode a file with the named decoder.

    Args:
        file_path: Path of the image (used by exiftool and for logging)
        stream: Binary stream of the image (required for exifread)
        decoder: 'exifread' or 'exiftool'

    Raises:
        ValueError: Unknown decoder name, or exifread without a stream
    """
    if decoder == EXIFREAD:
        if stream is None:
            raise ValueError("exifread decoder requires an open binary stream")
        return decode_exifread(stream)
    if decoder == EXIFTOOL:
        return decode_exiftool(file_path)
    raise ValueError(f"Unsupported decoder: {decoder}")
