"""
Pytest fixtures shared by the test suite.
"""

import sys
from pathlib import Path

import pytest
import yaml

# Add project root to path so tests can import the top-level packages
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from models import Rational, TagValue


def dms(degrees, minutes, seconds, printable=None) -> TagValue:
    """Degree/minute/second tag with whole-number rationals."""
    values = (Rational(degrees, 1), Rational(minutes, 1), Rational(seconds, 1))
    return TagValue(printable or f"[{degrees}, {minutes}, {seconds}]", values)


@pytest.fixture
def buenos_aires_tags():
    """Standard-key GPS tags for a point in the southern/western hemispheres."""
    return {
        'GPSLatitude': dms(34, 36, 54),
        'GPSLatitudeRef': TagValue('S'),
        'GPSLongitude': dms(58, 22, 12),
        'GPSLongitudeRef': TagValue('W'),
    }


@pytest.fixture
def make_config(tmp_path):
    """Write a config.yaml into tmp_path and return its path."""
    def _make(**sections) -> str:
        config = {
            'extraction': {'decoder': 'exifread'},
            'detection': {'supported_extensions': ['.json', '.xml']},
            'storage': {'type': 'local', 'local': {'base_path': None}},
            'reporting': {'text_reports_path': str(tmp_path / 'reports')},
        }
        config.update(sections)
        config_path = tmp_path / 'config.yaml'
        config_path.write_text(yaml.safe_dump(config))
        return str(config_path)
    return _make
