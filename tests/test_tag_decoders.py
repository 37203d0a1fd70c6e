"""
Tests for the exifread and exiftool adapters.

Both third-party readers are replaced with fakes so no real image or exiftool
binary is needed.
"""

import io
import json
from fractions import Fraction

import pytest

from extractors import tag_decoders
from extractors.metadata_normalizer import normalize
from extractors.tag_decoders import decode_exifread, decode_exiftool, decode_file
from models import Rational


class FakeIfdTag:
    """Mimics exifread.classes.IfdTag."""

    def __init__(self, printable, values):
        self.printable = printable
        self.values = values


class FakeRatio:
    """Mimics older exifread Ratio objects exposing num/den only."""

    def __init__(self, num, den):
        self.num = num
        self.den = den


class FakeExifTool:
    """Mimics pyexiftool's ExifTool context manager."""

    output = '[]'
    calls = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, *params):
        FakeExifTool.calls.append(params)
        return FakeExifTool.output


@pytest.fixture
def fake_exifread(monkeypatch):
    def _install(raw_tags):
        monkeypatch.setattr(tag_decoders.exifread, 'process_file',
                            lambda stream, details=False: raw_tags)
    return _install


@pytest.fixture
def fake_exiftool(monkeypatch):
    def _install(metadata):
        FakeExifTool.output = json.dumps(metadata)
        FakeExifTool.calls = []
        monkeypatch.setattr(tag_decoders.exiftool, 'ExifTool', FakeExifTool)
    return _install


class TestExifRead:

    def test_ratios_become_rationals(self, fake_exifread):
        fake_exifread({
            'GPS GPSLatitude': FakeIfdTag('[34, 36, 54]', [Fraction(34), Fraction(36), Fraction(54)]),
            'GPS GPSLatitudeRef': FakeIfdTag('S', 'S'),
            'Image Model': FakeIfdTag('FC3411', 'FC3411'),
        })
        tags = decode_exifread(io.BytesIO(b''))

        assert tags['GPS GPSLatitude'].values == (Rational(34, 1), Rational(36, 1), Rational(54, 1))
        assert tags['GPS GPSLatitudeRef'].printable == 'S'
        assert tags['GPS GPSLatitudeRef'].values is None
        assert tags['Image Model'].printable == 'FC3411'

    def test_legacy_ratio_objects(self, fake_exifread):
        fake_exifread({'GPS GPSAltitude': FakeIfdTag('181/2', [FakeRatio(181, 2)])})
        tags = decode_exifread(io.BytesIO(b''))
        assert tags['GPS GPSAltitude'].values == (Rational(181, 2),)

    def test_binary_entries_skipped(self, fake_exifread):
        fake_exifread({'JPEGThumbnail': b'\xff\xd8', 'Image Make': FakeIfdTag('DJI', 'DJI')})
        assert list(decode_exifread(io.BytesIO(b''))) == ['Image Make']

    def test_full_pipeline_with_prefixed_keys(self, fake_exifread):
        fake_exifread({
            'GPS GPSLatitude': FakeIfdTag('[34, 36, 54]', [Fraction(34), Fraction(36), Fraction(54)]),
            'GPS GPSLatitudeRef': FakeIfdTag('S', 'S'),
            'GPS GPSLongitude': FakeIfdTag('[58, 22, 12]', [Fraction(58), Fraction(22), Fraction(12)]),
            'GPS GPSLongitudeRef': FakeIfdTag('W', 'W'),
            'EXIF DateTimeOriginal': FakeIfdTag('2024:06:01 15:00:00', '2024:06:01 15:00:00'),
            'EXIF ISOSpeedRatings': FakeIfdTag('100', [100]),
        })
        meta = normalize(decode_exifread(io.BytesIO(b'')))

        assert meta.latitude == pytest.approx(-34.615, abs=1e-3)
        assert meta.longitude == pytest.approx(-58.370, abs=1e-3)
        assert meta.date_taken == '2024-06-01 15-00-00'
        assert meta.other_tags == {'EXIF ISOSpeedRatings': '100'}


class TestExifTool:

    def test_groups_mapped_to_keys(self, fake_exiftool):
        fake_exiftool([{
            'SourceFile': 'a.jpg',
            'File:FileSize': 1024,
            'Composite:GPSLatitude': -34.615,
            'EXIF:Model': 'ILCE-7M4',
            'EXIF:GPSLatitude': 34.615,
            'EXIF:GPSLatitudeRef': 'S',
            'MakerNotes:ShutterCount': 1200,
        }])
        tags = decode_exiftool('a.jpg')

        assert set(tags) == {'Model', 'GPSLatitude', 'GPSLatitudeRef', 'MakerNotes ShutterCount'}
        assert tags['GPSLatitude'].values == (34.615, 0, 0)
        assert tags['MakerNotes ShutterCount'].values == (1200,)
        assert tags['Model'].values is None
        assert FakeExifTool.calls == [('-j', '-n', '-G', 'a.jpg')]

    def test_full_pipeline_with_standard_keys(self, fake_exiftool):
        fake_exiftool([{
            'EXIF:Make': 'SONY',
            'EXIF:DateTimeOriginal': '2025:04:03 18:30:12',
            'EXIF:GPSLatitude': 34.615,
            'EXIF:GPSLatitudeRef': 'S',
            'EXIF:GPSLongitude': 58.37,
            'EXIF:GPSLongitudeRef': 'W',
            'EXIF:GPSAltitude': 18.5,
            'EXIF:GPSAltitudeRef': 1,
        }])
        meta = normalize(decode_exiftool('b.jpg'))

        assert meta.camera_model == 'SONY'
        assert meta.date_taken == '2025-04-03 18-30-12'
        assert meta.latitude == pytest.approx(-34.615)
        assert meta.longitude == pytest.approx(-58.37)
        assert meta.altitude == pytest.approx(-18.5)

    def test_no_metadata(self, fake_exiftool):
        fake_exiftool([])
        assert decode_exiftool('c.jpg') == {}


class TestDecodeFile:

    def test_unknown_decoder(self):
        with pytest.raises(ValueError):
            decode_file('a.jpg', decoder='piexif')

    def test_exifread_requires_stream(self):
        with pytest.raises(ValueError):
            decode_file('a.jpg', decoder='exifread')
