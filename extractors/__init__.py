"""
Extractors package: EXIF decoding, GPS conversion and metadata normalization.
"""

from .gps_converter import altitude_from_tags, rational_to_float, to_decimal_degrees
from .metadata_normalizer import clean_string, normalize
from .tag_decoders import decode_exifread, decode_exiftool
from .exif_extractor import ExifExtractor

__all__ = [
    'altitude_from_tags',
    'rational_to_float',
    'to_decimal_degrees',
    'clean_string',
    'normalize',
    'decode_exifread',
    'decode_exiftool',
    'ExifExtractor',
]
