"""
Detection Parser

Decodes object-detection result files into Detection records.

Two unrelated serializations are supported, each implemented as an
independent strategy selected by DetectionFormat:

JSON::

    [{"class_name": "meter", "score": 0.93}, {"class_name": "pole", "score": 71}]

XML::

    <detections>
      <detection><class_name>meter</class_name><score>0.93</score></detection>
    </detections>

Scores above 1.0 and up to 100.0 are read as percentages. Parsing never
raises: a malformed file yields no detections and a malformed record is
skipped on its own.
"""

import json
import logging
import math
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, List, Optional, Union

from models import Detection
from storage import StorageProvider, create_storage_provider

logger = logging.getLogger(__name__)

CLASS_NAME_FIELD = 'class_name'
SCORE_FIELD = 'score'
DETECTION_ELEMENT = 'detection'


class DetectionFormat(Enum):
    """Supported detection file grammars."""
    JSON = "json"
    XML = "xml"

    @classmethod
    def from_extension(cls, extension: str) -> Optional['DetectionFormat']:
        """
        Select a format from a file extension.

        Example:
            >>> DetectionFormat.from_extension('.XML')
            <DetectionFormat.XML: 'xml'>
            >>> DetectionFormat.from_extension('csv') is None
            True
        """
        normalized = extension.strip().lower().lstrip('.')
        for fmt in cls:
            if fmt.value == normalized:
                return fmt
        return None


def normalize_score(score: float) -> float:
    """Read scores in (1, 100] as percentages; leave everything else as-is."""
    if 1.0 < score <= 100.0:
        return score / 100.0
    return score


class DetectionStrategy(ABC):
    """Decodes one serialization of detection results."""

    @abstractmethod
    def decode(self, content: str) -> List[Detection]:
        """
        Decode detections from file content.

        Raises:
            Any parse error of the underlying grammar; the caller handles it
        """
        pass


class JsonDetectionStrategy(DetectionStrategy):
    """Top-level JSON array of {"class_name": str, "score": number} objects."""

    def decode(self, content: str) -> List[Detection]:
        data = json.loads(content)
        if not isinstance(data, list):
            logger.warning(f"Expected a JSON array of detections, got {type(data).__name__}")
            return []

        detections = []
        for index, item in enumerate(data):
            detection = self._decode_item(item)
            if detection is None:
                logger.debug(f"Skipping malformed JSON detection at index {index}")
                continue
            detections.append(detection)
        return detections

    @staticmethod
    def _decode_item(item) -> Optional[Detection]:
        if not isinstance(item, dict) or CLASS_NAME_FIELD not in item or SCORE_FIELD not in item:
            return None
        class_name = item[CLASS_NAME_FIELD]
        score = item[SCORE_FIELD]
        if not isinstance(class_name, str):
            return None
        if isinstance(score, bool) or not isinstance(score, (int, float)) or math.isnan(score):
            return None
        return Detection(class_name, normalize_score(float(score)))


class XmlDetectionStrategy(DetectionStrategy):
    """Every <detection> element with <class_name> and <score> children."""

    def decode(self, content: str) -> List[Detection]:
        root = ET.fromstring(content)

        detections = []
        for element in root.iter(DETECTION_ELEMENT):
            detection = self._decode_element(element)
            if detection is None:
                logger.debug("Skipping malformed XML detection element")
                continue
            detections.append(detection)
        return detections

    @staticmethod
    def _decode_element(element: ET.Element) -> Optional[Detection]:
        class_name_element = element.find(CLASS_NAME_FIELD)
        score_element = element.find(SCORE_FIELD)
        if class_name_element is None or score_element is None:
            return None

        class_name = ''.join(class_name_element.itertext()).strip()
        score_text = ''.join(score_element.itertext()).strip()
        try:
            score = float(score_text)
        except ValueError:
            return None
        if math.isnan(score):
            return None
        return Detection(class_name, normalize_score(score))


STRATEGIES: Dict[DetectionFormat, DetectionStrategy] = {
    DetectionFormat.JSON: JsonDetectionStrategy(),
    DetectionFormat.XML: XmlDetectionStrategy(),
}


def parse(content: str, fmt: Union[DetectionFormat, str]) -> List[Detection]:
    """
    Decode detections from text.

    Args:
        content: Whole file content
        fmt: DetectionFormat, or its name ('json' / 'xml')

    Returns:
        Detections in document order; empty for malformed content or an
        unsupported format

    Example:
        >>> parse('[{"class_name": "meter", "score": 95}]', 'json')
        [Detection(class_name='meter', score=0.95)]
        >>> parse('not json', DetectionFormat.JSON)
        []
    """
    if not isinstance(fmt, DetectionFormat):
        fmt = DetectionFormat.from_extension(str(fmt))
        if fmt is None:
            return []

    try:
        return STRATEGIES[fmt].decode(content)
    except Exception as e:
        logger.warning(f"Could not parse {fmt.value} detection content: {e}")
        return []


def parse_detection_file(content: str, extension: str) -> List[Detection]:
    """Decode detections using the grammar selected by a file extension."""
    fmt = DetectionFormat.from_extension(extension)
    if fmt is None:
        logger.warning(f"Unsupported detection file extension: {extension}")
        return []
    return parse(content, fmt)


class DetectionParser:
    """
    Reads detection files through a storage provider.

    Attributes:
        storage: StorageProvider instance
        supported_extensions: Extensions picked up when listing a folder

    Example:
        >>> parser = DetectionParser.from_config('config.yaml')
        >>> detections = parser.parse_files(['run1/results.json', 'run2/results.xml'])
    """

    def __init__(self, storage: StorageProvider,
                 supported_extensions: Optional[List[str]] = None):
        self.storage = storage
        self.supported_extensions = supported_extensions or [
            '.' + fmt.value for fmt in DetectionFormat
        ]

    @classmethod
    def from_config(cls, config_path: str = 'config.yaml') -> 'DetectionParser':
        """Create DetectionParser from configuration file."""
        import yaml

        with open(config_path, 'r') as f:
            config = yaml.safe_load(f) or {}

        storage = create_storage_provider(config_path)
        detection_config = config.get('detection', {})
        return cls(
            storage=storage,
            supported_extensions=detection_config.get('supported_extensions', None),
        )

    def parse_file(self, file_path: str) -> List[Detection]:
        """
        Parse a single detection file.

        Returns:
            Detections in the file; empty if the file cannot be read, is not
            valid text, or has an unsupported extension
        """
        extension = file_path.rsplit('.', 1)[-1] if '.' in file_path else ''
        try:
            content = self.storage.read_text(file_path)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error processing file {file_path}: {e}")
            return []

        detections = parse_detection_file(content, extension)
        logger.debug(f"  {file_path}: {len(detections)} detections")
        return detections

    def parse_files(self, file_paths: List[str]) -> List[Detection]:
        """
        Parse several files and merge their detections into one batch.

        Args:
            file_paths: Files to parse

        Returns:
            Union of all per-file detections, in file order
        """
        all_detections = []
        for file_path in file_paths:
            all_detections.extend(self.parse_file(file_path))
        logger.info(f"Parsed {len(all_detections)} detections from {len(file_paths)} files")
        return all_detections

    def parse_folder(self, folder_path: str) -> List[Detection]:
        """Parse every supported detection file under a folder."""
        file_paths = sorted(self.storage.list_files(folder_path, self.supported_extensions))
        if not file_paths:
            logger.warning(f"No detection files found in {folder_path}")
        return self.parse_files(file_paths)
