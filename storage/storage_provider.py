"""
Storage Provider

Unified interface for listing and reading image and detection files from the
local filesystem, plus a mock object-store provider that stands in for a real
cloud bucket scan.
"""

import os
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from io import BytesIO
from typing import List, Optional, BinaryIO

import yaml

from models import PhotoAsset, PhotoMetadata

logger = logging.getLogger(__name__)

DEFAULT_MOCK_BUCKET = 'gnutilities'
DEFAULT_MOCK_SCAN_FOLDER = '/output/images'


class StorageProvider(ABC):
    """
    Abstract base class for storage providers.

    Defines the interface that all storage providers must implement,
    enabling seamless switching between local and (mock) cloud storage.
    """

    @abstractmethod
    def list_files(self, prefix: str, extensions: Optional[List[str]] = None) -> List[str]:
        """
        List files in storage matching prefix and extensions.

        Args:
            prefix: Path prefix to search under
            extensions: List of file extensions to filter (e.g., ['.jpg', '.json'])

        Returns:
            List of file paths/URIs
        """
        pass

    @abstractmethod
    def file_exists(self, path: str) -> bool:
        """Check if file exists."""
        pass

    @abstractmethod
    def get_file(self, path: str) -> BinaryIO:
        """
        Get file content as binary stream.

        Args:
            path: Path to file

        Returns:
            Binary file stream
        """
        pass

    def read_text(self, path: str, encoding: str = 'utf-8') -> str:
        """Read a whole file as text."""
        with self.get_file(path) as stream:
            return stream.read().decode(encoding)

    def resolve_path(self, path: str) -> str:
        """Location of a listed file for tools that open it by path."""
        return path


def _matches(name: str, extensions: Optional[List[str]]) -> bool:
    if not extensions:
        return True
    return any(name.lower().endswith(ext.lower()) for ext in extensions)


class LocalStorageProvider(StorageProvider):
    """
    Local filesystem storage provider.

    Attributes:
        base_path: Base directory for file operations

    Example:
        >>> storage = LocalStorageProvider('/surveys')
        >>> files = storage.list_files('2024-06-01', ['.jpg', '.jpeg'])
    """

    def __init__(self, base_path: Optional[str] = None):
        """
        Initialize local storage provider.

        Args:
            base_path: Base directory path (optional)
        """
        self.base_path = base_path

    def _full_path(self, path: str) -> str:
        return os.path.join(self.base_path, path) if self.base_path else path

    def _storage_path(self, full_path: str) -> str:
        return os.path.relpath(full_path, self.base_path) if self.base_path else full_path

    def list_files(self, prefix: str, extensions: Optional[List[str]] = None) -> List[str]:
        """
        List files in local directory, recursively.

        Returned paths are relative to base_path when one is set, so they can
        be handed straight back to get_file.
        """
        search_path = self._full_path(prefix)
        files = []

        if not os.path.exists(search_path):
            logger.warning(f"Path does not exist: {search_path}")
            return files

        if os.path.isfile(search_path):
            return [self._storage_path(search_path)] if _matches(search_path, extensions) else []

        for root, dirs, filenames in os.walk(search_path):
            for filename in filenames:
                if _matches(filename, extensions):
                    files.append(self._storage_path(os.path.join(root, filename)))

        return files

    def file_exists(self, path: str) -> bool:
        """Check if file exists locally."""
        return os.path.exists(self._full_path(path))

    def get_file(self, path: str) -> BinaryIO:
        """Open local file for reading."""
        return open(self._full_path(path), 'rb')

    def resolve_path(self, path: str) -> str:
        """Filesystem path of a file, with base_path applied."""
        return self._full_path(path)


class MockCloudStorageProvider(StorageProvider):
    """
    Stand-in for an object-store bucket scan.

    Performs no network I/O. Scanning the configured folder returns a fixed
    set of synthetic, already-normalized assets under
    ``s3://<bucket><scan_folder>``; any other folder is empty. A real
    implementation would replace this with a bucket listing API.

    Attributes:
        bucket: Fictitious bucket name
        scan_folder: The only folder holding synthetic assets

    Example:
        >>> storage = MockCloudStorageProvider()
        >>> [a.file_name for a in storage.scan_assets('/output/images')]
        ['S3_METER_004.jpeg', 'S3_CABINET_005.jpg']
    """

    def __init__(self, bucket: str = DEFAULT_MOCK_BUCKET,
                 scan_folder: str = DEFAULT_MOCK_SCAN_FOLDER):
        self.bucket = bucket
        self.scan_folder = scan_folder
        logger.info(f"Using mock cloud bucket: {bucket}")

    @property
    def folder_uri(self) -> str:
        return f"s3://{self.bucket}{self.scan_folder}"

    def scan_assets(self, folder_path: str) -> List[PhotoAsset]:
        """
        Scan a bucket folder for assets.

        Args:
            folder_path: Folder to scan

        Returns:
            Synthetic assets for the configured scan folder, otherwise []
        """
        if folder_path != self.scan_folder:
            logger.info(f"No files found in s3://{self.bucket}{folder_path}")
            return []

        sync_time = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
        provenance = {'Source': 'S3 Cloud', 'SyncTime': sync_time}

        assets = [
            PhotoAsset(
                file_name='S3_METER_004.jpeg',
                folder=self.folder_uri,
                file_kind='JPEG',
                exif=PhotoMetadata(
                    date_taken='2024-06-01 15-00-00',
                    camera_model='Cloud_Camera_v1',
                    focal_length='10.0mm',
                    latitude=-34.615,
                    longitude=-58.370,
                    altitude=18.0,
                    other_tags=dict(provenance),
                ),
            ),
            PhotoAsset(
                file_name='S3_CABINET_005.jpg',
                folder=self.folder_uri,
                file_kind='JPG',
                exif=PhotoMetadata(
                    date_taken='2024-06-02 09-12-00',
                    camera_model='Cloud_Camera_v2',
                    focal_length='8.0mm',
                    altitude=20.0,
                    other_tags=dict(provenance),
                ),
            ),
        ]
        logger.info(f"Scanned {len(assets)} assets from {self.folder_uri}")
        return assets

    def list_files(self, prefix: str, extensions: Optional[List[str]] = None) -> List[str]:
        """List synthetic object URIs under the scan folder."""
        return [
            f"{asset.folder}/{asset.file_name}"
            for asset in self.scan_assets(prefix)
            if _matches(asset.file_name, extensions)
        ]

    def file_exists(self, path: str) -> bool:
        """Check if a synthetic object exists."""
        return path in self.list_files(self.scan_folder)

    def get_file(self, path: str) -> BinaryIO:
        """
        Synthetic objects have no content; return an empty stream.

        Raises:
            FileNotFoundError: If the object is not part of the mock bucket
        """
        if not self.file_exists(path):
            raise FileNotFoundError(path)
        return BytesIO(b'')


def create_storage_provider(config_path: str = 'config.yaml') -> StorageProvider:
    """
    Factory function to create storage provider from configuration.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Configured StorageProvider instance

    Raises:
        ValueError: Unsupported storage type

    Example:
        >>> storage = create_storage_provider('config.yaml')
        >>> files = storage.list_files('surveys/2024', ['.jpg'])
    """
    with open(config_path, 'r') as f:
        config = yaml.safe_load(f) or {}

    storage_config = config.get('storage', {})
    storage_type = storage_config.get('type', 'local')

    if storage_type == 'local':
        local_config = storage_config.get('local', {})
        return LocalStorageProvider(
            base_path=local_config.get('base_path')
        )

    elif storage_type == 'mock':
        mock_config = storage_config.get('mock', {})
        return MockCloudStorageProvider(
            bucket=os.getenv('MOCK_BUCKET', mock_config.get('bucket', DEFAULT_MOCK_BUCKET)),
            scan_folder=mock_config.get('scan_folder', DEFAULT_MOCK_SCAN_FOLDER),
        )

    else:
        raise ValueError(f"Unsupported storage type: {storage_type}")
