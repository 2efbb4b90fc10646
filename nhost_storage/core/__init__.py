"""
Core storage logic.

Framework-agnostic: no httpx, no pydantic. Request shaping and string
encoding live here so they can be tested without a transport.
"""

from .encoding import encode_string, parse_data_url
from .errors import (
    DataURLFormatError,
    InvalidResponseError,
    StorageError,
    StorageTransportError,
    StorageValidationError,
)
from .models import (
    DataURLContent,
    FileUpload,
    FormPayload,
    RemoteResult,
    StringFormat,
    StringUploadSpec,
    UploadProgressCallback,
    UploadRequest,
)

__all__ = [
    "encode_string",
    "parse_data_url",
    "DataURLFormatError",
    "InvalidResponseError",
    "StorageError",
    "StorageTransportError",
    "StorageValidationError",
    "DataURLContent",
    "FileUpload",
    "FormPayload",
    "RemoteResult",
    "StringFormat",
    "StringUploadSpec",
    "UploadProgressCallback",
    "UploadRequest",
]
