"""
EXIF Extractor

Extracts normalized metadata from image files and wraps it in PhotoAsset
records. Supports local storage and the mock cloud provider.
"""

import os
import logging
from typing import List, Optional

from models import PhotoAsset, PhotoMetadata
from models.photo_metadata import file_kind_from_name
from storage import StorageProvider, create_storage_provider
from .metadata_normalizer import normalize
from .tag_decoders import EXIFREAD, EXIFTOOL, SUPPORTED_DECODERS, decode_file

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_EXTENSIONS = ['.jpg', '.jpeg', '.png', '.tiff', '.tif']


class ExifExtractor:
    """
    Extracts EXIF metadata from photos.

    Decodes each file with the configured decoder, normalizes the resulting
    tag dictionary and returns one PhotoAsset per file. Decoding failures are
    logged and produce an "error reading file" record instead of aborting the
    folder.

    Attributes:
        storage: StorageProvider instance
        decoder: Tag decoder name ('exifread' or 'exiftool')
        supported_extensions: List of supported file extensions

    Example:
        >>> extractor = ExifExtractor.from_config('config.yaml')
        >>> assets = extractor.extract_folder('/surveys/2024-06-01')
        >>> [a.file_name for a in assets if a.has_location]
        ['DJI_0001.JPG', 'DJI_0002.JPG']
    """

    def __init__(self, storage: StorageProvider, decoder: str = EXIFREAD,
                 supported_extensions: Optional[List[str]] = None):
        """
        Initialize EXIF extractor.

        Args:
            storage: StorageProvider instance
            decoder: Tag decoder name
            supported_extensions: List of file extensions to process

        Raises:
            ValueError: If the decoder name is not supported
        """
        if decoder not in SUPPORTED_DECODERS:
            raise ValueError(f"Unsupported decoder: {decoder}")
        self.storage = storage
        self.decoder = decoder
        self.supported_extensions = supported_extensions or list(DEFAULT_IMAGE_EXTENSIONS)

    @classmethod
    def from_config(cls, config_path: str = 'config.yaml') -> 'ExifExtractor':
        """
        Create ExifExtractor from configuration file.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            Configured ExifExtractor instance
        """
        import yaml

        with open(config_path, 'r') as f:
            config = yaml.safe_load(f) or {}

        storage = create_storage_provider(config_path)

        extraction_config = config.get('extraction', {})
        return cls(
            storage=storage,
            decoder=extraction_config.get('decoder', EXIFREAD),
            supported_extensions=extraction_config.get('supported_extensions', None),
        )

    def extract_metadata_from_file(self, file_path: str) -> PhotoMetadata:
        """
        Extract normalized metadata from a single image file.

        Args:
            file_path: Path or URI to image file

        Returns:
            PhotoMetadata; the "error reading file" record if decoding failed
        """
        try:
            if self.decoder == EXIFTOOL:
                tags = decode_file(self.storage.resolve_path(file_path), decoder=EXIFTOOL)
            else:
                with self.storage.get_file(file_path) as stream:
                    tags = decode_file(file_path, stream=stream, decoder=EXIFREAD)
        except Exception as e:
            logger.error(f"Error extracting metadata from {file_path}: {e}")
            return PhotoMetadata.unreadable()

        if not tags:
            logger.info(f"No EXIF data in: {file_path}")
        return normalize(tags)

    def extract_asset(self, file_path: str, folder: str) -> PhotoAsset:
        """
        Extract a single file into a PhotoAsset.

        Args:
            file_path: Path or URI to image file
            folder: Folder label recorded on the asset
        """
        file_name = os.path.basename(file_path)
        return PhotoAsset(
            file_name=file_name,
            folder=folder,
            file_kind=file_kind_from_name(file_name),
            exif=self.extract_metadata_from_file(file_path),
        )

    def extract_folder(self, folder_path: str,
                       folder_label: Optional[str] = None) -> List[PhotoAsset]:
        """
        Extract metadata from all photos in a folder.

        Args:
            folder_path: Path to folder containing photos
            folder_label: Label stored on each asset (defaults to folder_path)

        Returns:
            One PhotoAsset per image file, in listing order; empty if the
            folder is missing or holds no images

        Example:
            >>> assets = extractor.extract_folder('/surveys/site_a', folder_label='Local_Upload')
            >>> print(f"Extracted {len(assets)} photos")
        """
        logger.info(f"Extracting metadata from: {folder_path}")

        image_files = self.storage.list_files(folder_path, self.supported_extensions)
        logger.info(f"Found {len(image_files)} image files")

        if not image_files:
            logger.warning(f"No image files found in {folder_path}")
            return []

        label = folder_label or folder_path
        assets = []
        for file_path in sorted(image_files):
            asset = self.extract_asset(file_path, label)
            assets.append(asset)
            logger.debug(f"  Processed: {asset.file_name}")

        located = sum(1 for asset in assets if asset.has_location)
        logger.info(f"Successfully extracted {len(assets)} photos ({located} with location)")
        return assets

    def extract_files(self, file_paths: List[str], folder_label: str = 'Local_Upload') -> List[PhotoAsset]:
        """
        Extract an explicit selection of files.

        Files whose extension is not supported are skipped with a warning.
        """
        assets = []
        for i, file_path in enumerate(file_paths, 1):
            if not any(file_path.lower().endswith(ext.lower()) for ext in self.supported_extensions):
                logger.warning(f"Skipping unsupported file: {file_path}")
                continue
            logger.info(f"Processing file {i}/{len(file_paths)}: {file_path}")
            assets.append(self.extract_asset(file_path, folder_label))
        return assets
