"""
nhost-storage - async Python client for the Nhost/Hasura storage service.

This package contains:
- core: Request models, faults and string encoding (no I/O)
- infrastructure: The httpx transport and the caller-facing client
- config: Settings loaded from the environment
"""

from .core import (
    DataURLFormatError,
    FileUpload,
    InvalidResponseError,
    RemoteResult,
    StorageError,
    StorageTransportError,
    StorageValidationError,
    StringFormat,
    StringUploadSpec,
)
from .infrastructure.storage import (
    FileMetadata,
    PresignedUrl,
    StorageApi,
    StorageClient,
    create_storage_client,
)

__version__ = "0.1.0"

__all__ = [
    "DataURLFormatError",
    "FileUpload",
    "InvalidResponseError",
    "RemoteResult",
    "StorageError",
    "StorageTransportError",
    "StorageValidationError",
    "StringFormat",
    "StringUploadSpec",
    "FileMetadata",
    "PresignedUrl",
    "StorageApi",
    "StorageClient",
    "create_storage_client",
]
