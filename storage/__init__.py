"""
Storage package for the Photo Metadata & Detection KPI system.
"""

from .storage_provider import (
    StorageProvider,
    LocalStorageProvider,
    MockCloudStorageProvider,
    create_storage_provider
)

__all__ = [
    'StorageProvider',
    'LocalStorageProvider',
    'MockCloudStorageProvider',
    'create_storage_provider',
]
