"""
Parsers package: detection result files (JSON / XML) to Detection records.
"""

from .detection_parser import (
    DetectionFormat,
    DetectionParser,
    parse,
    parse_detection_file,
)

__all__ = [
    'DetectionFormat',
    'DetectionParser',
    'parse',
    'parse_detection_file',
]
