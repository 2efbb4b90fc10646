"""
Storage service integration.

StorageApi is the HTTP transport; StorageClient is what callers use.
"""

from .api import StorageApi
from .client import StorageClient, create_storage_client
from .schemas import FileMetadata, ObjectMetadata, PresignedUrl

__all__ = [
    "StorageApi",
    "StorageClient",
    "create_storage_client",
    "FileMetadata",
    "ObjectMetadata",
    "PresignedUrl",
]
