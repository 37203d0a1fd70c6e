"""
Tests for JSON/XML detection parsing and score normalization.
"""

import json

import pytest

from models import Detection
from parsers import DetectionFormat, DetectionParser, parse, parse_detection_file
from parsers.detection_parser import normalize_score
from storage import LocalStorageProvider


def as_pairs(detections):
    return [(d.class_name, pytest.approx(d.score)) for d in detections]


class TestDetectionModel:

    @pytest.mark.parametrize('raw, expected', [
        (-5.0, 0.0), (0.0, 0.0), (0.5, 0.5), (1.0, 1.0), (250.0, 1.0), (float('inf'), 1.0),
        (float('-inf'), 0.0), (float('nan'), 0.0),
    ])
    def test_score_clamped(self, raw, expected):
        assert Detection('x', raw).score == expected


class TestScoreNormalization:

    def test_percentages(self):
        assert normalize_score(95) == pytest.approx(0.95)
        assert normalize_score(100.0) == pytest.approx(1.0)
        assert normalize_score(1.5) == pytest.approx(0.015)

    def test_fractions_untouched(self):
        assert normalize_score(1.0) == 1.0
        assert normalize_score(0.42) == 0.42

    def test_out_of_scale_left_for_clamp(self):
        assert normalize_score(150.0) == 150.0
        assert normalize_score(-3.0) == -3.0

    @pytest.mark.parametrize('raw', [-1e9, -1.0, 0.0, 0.3, 1.0, 1.01, 50, 100, 100.01, 1e9])
    def test_always_in_unit_range_after_construction(self, raw):
        score = Detection('x', normalize_score(raw)).score
        assert 0.0 <= score <= 1.0


class TestDetectionFormat:

    def test_from_extension(self):
        assert DetectionFormat.from_extension('json') is DetectionFormat.JSON
        assert DetectionFormat.from_extension('.XML') is DetectionFormat.XML
        assert DetectionFormat.from_extension('csv') is None
        assert DetectionFormat.from_extension('') is None


class TestJson:

    def test_valid_file(self):
        content = json.dumps([
            {'class_name': 'meter', 'score': 0.93},
            {'class_name': 'pole', 'score': 71},
            {'class_name': 'cabinet', 'score': 1},
        ])
        assert as_pairs(parse(content, 'json')) == [('meter', 0.93), ('pole', 0.71), ('cabinet', 1.0)]

    def test_malformed_file(self):
        assert parse('not json', DetectionFormat.JSON) == []
        assert parse('', DetectionFormat.JSON) == []
        assert parse('[{"class_name": "meter", "score": 0.9}', 'json') == []

    def test_top_level_must_be_array(self):
        assert parse('{"class_name": "meter", "score": 0.9}', 'json') == []

    def test_bad_records_skipped_individually(self):
        content = json.dumps([
            {'class_name': 'meter', 'score': 0.9},
            {'class_name': 'meter'},
            {'score': 0.4},
            {'class_name': 'pole', 'score': '0.5'},
            {'class_name': 7, 'score': 0.5},
            {'class_name': 'pole', 'score': True},
            {'class_name': 'pole', 'score': None},
            'meter',
            ['meter', 0.5],
            {'class_name': 'pole', 'score': 0.25, 'bbox': [1, 2, 3, 4]},
        ])
        assert as_pairs(parse(content, 'json')) == [('meter', 0.9), ('pole', 0.25)]

    def test_nan_score_skipped(self):
        assert parse('[{"class_name": "meter", "score": NaN}]', 'json') == []

    def test_empty_array(self):
        assert parse('[]', 'json') == []


class TestXml:

    def test_valid_file(self):
        content = """<?xml version="1.0"?>
        <detections>
          <detection><class_name> meter </class_name><score>0.93</score></detection>
          <detection><class_name>pole</class_name><score> 71 </score></detection>
          <group>
            <detection><class_name>cabinet</class_name><score>0.1</score></detection>
          </group>
        </detections>"""
        assert as_pairs(parse(content, 'xml')) == [('meter', 0.93), ('pole', 0.71), ('cabinet', 0.1)]

    def test_bad_elements_skipped_individually(self):
        content = """<detections>
          <detection><class_name>meter</class_name><score>high</score></detection>
          <detection><class_name>meter</class_name></detection>
          <detection><score>0.5</score></detection>
          <detection><class_name>pole</class_name><score></score></detection>
          <detection><class_name>pole</class_name><score>0.6</score></detection>
        </detections>"""
        assert as_pairs(parse(content, 'xml')) == [('pole', 0.6)]

    def test_root_detection_element(self):
        content = "<detection><class_name>meter</class_name><score>80</score></detection>"
        assert as_pairs(parse(content, 'xml')) == [('meter', 0.8)]

    def test_malformed_file(self):
        assert parse('<detections><detection>', 'xml') == []
        assert parse('not xml at all', 'xml') == []
        assert parse('', 'xml') == []


class TestFileDispatch:

    def test_unsupported_extension(self):
        assert parse_detection_file('[{"class_name": "meter", "score": 0.9}]', 'csv') == []
        assert parse('[{"class_name": "meter", "score": 0.9}]', 'yaml') == []

    def test_extension_selects_grammar(self):
        assert len(parse_detection_file('[{"class_name": "a", "score": 0.9}]', 'JSON')) == 1
        assert parse_detection_file('[{"class_name": "a", "score": 0.9}]', 'xml') == []


class TestDetectionParser:

    def test_parse_files_merges_in_order(self, tmp_path):
        (tmp_path / 'a.json').write_text(json.dumps([{'class_name': 'meter', 'score': 0.9}]))
        (tmp_path / 'b.xml').write_text(
            '<d><detection><class_name>pole</class_name><score>40</score></detection></d>')
        (tmp_path / 'c.json').write_text('not json')

        parser = DetectionParser(LocalStorageProvider())
        detections = parser.parse_files([str(tmp_path / name) for name in ('a.json', 'b.xml', 'c.json')])

        assert as_pairs(detections) == [('meter', 0.9), ('pole', 0.4)]

    def test_unreadable_files_contribute_nothing(self, tmp_path):
        (tmp_path / 'binary.json').write_bytes(b'\xff\xfe\x00garbage')
        parser = DetectionParser(LocalStorageProvider())
        assert parser.parse_file(str(tmp_path / 'missing.json')) == []
        assert parser.parse_file(str(tmp_path / 'binary.json')) == []

    def test_unsupported_extension_file(self, tmp_path):
        (tmp_path / 'notes.txt').write_text('[{"class_name": "meter", "score": 0.9}]')
        parser = DetectionParser(LocalStorageProvider())
        assert parser.parse_file(str(tmp_path / 'notes.txt')) == []

    def test_parse_folder(self, tmp_path):
        (tmp_path / 'run1').mkdir()
        (tmp_path / 'run1' / 'a.json').write_text(json.dumps([{'class_name': 'meter', 'score': 0.9}]))
        (tmp_path / 'run1' / 'readme.md').write_text('ignore me')
        parser = DetectionParser(LocalStorageProvider(str(tmp_path)))
        assert as_pairs(parser.parse_folder('run1')) == [('meter', 0.9)]

    def test_from_config(self, make_config):
        parser = DetectionParser.from_config(make_config())
        assert isinstance(parser.storage, LocalStorageProvider)
        assert parser.supported_extensions == ['.json', '.xml']

    def test_parse_folder_with_relative_base_path(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / 'data' / 'run1').mkdir(parents=True)
        (tmp_path / 'data' / 'run1' / 'a.json').write_text(json.dumps([{'class_name': 'meter', 'score': 0.9}]))

        parser = DetectionParser(LocalStorageProvider('data'))

        assert as_pairs(parser.parse_folder('run1')) == [('meter', 0.9)]
