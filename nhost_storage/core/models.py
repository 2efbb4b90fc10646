"""
Domain models for storage requests and results.

These models carry no HTTP or serialization concerns. The adapter
turns them into requests; the facade builds them from caller input.
"""

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Optional, TypeVar, Union

from .errors import StorageError


T = TypeVar("T")

# Called with (bytes_sent, total_bytes) while an upload body streams out.
UploadProgressCallback = Callable[[int, int], Union[None, Awaitable[None]]]

DEFAULT_FILE_NAME = "untitled"
DEFAULT_FORM_FIELD = "file"


class StringFormat(Enum):
    """How the `data` of a string upload is encoded."""
    RAW = "raw"
    BASE64 = "base64"
    BASE64URL = "base64url"
    DATA_URL = "data_url"


@dataclass(frozen=True)
class RemoteResult(Generic[T]):
    """
    Outcome of a storage operation.

    At most one of value and error is set. Delete operations succeed
    with both unset; every other operation is normalized by the
    client so a caller never sees an empty value without an error.
    """
    value: Optional[T] = None
    error: Optional[StorageError] = None

    def __post_init__(self) -> None:
        if self.value is not None and self.error is not None:
            raise ValueError("RemoteResult cannot carry both a value and an error")

    @classmethod
    def success(cls, value: Optional[T] = None) -> "RemoteResult[T]":
        return cls(value=value, error=None)

    @classmethod
    def failure(cls, error: StorageError) -> "RemoteResult[T]":
        return cls(value=None, error=error)

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class FileUpload:
    """
    A named file ready to go into a multipart body.

    content_type None means "let the server infer it".
    """
    content: bytes
    name: str = DEFAULT_FILE_NAME
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class FormPayload:
    """Multipart form body: form field name -> file."""
    files: Mapping[str, FileUpload]

    def __post_init__(self) -> None:
        if not self.files:
            raise ValueError("FormPayload needs at least one file")

    @classmethod
    def single(cls, file: FileUpload) -> "FormPayload":
        return cls(files={DEFAULT_FORM_FIELD: file})

    @property
    def total_size(self) -> int:
        return sum(f.size for f in self.files.values())


@dataclass(frozen=True)
class UploadRequest:
    """
    Upload to the `/files` endpoint.

    The identifying fields are forwarded as headers. None means
    unset and the header is omitted; an empty string is a value.
    """
    payload: FormPayload
    bucket_id: Optional[str] = None
    file_id: Optional[str] = None
    file_name: Optional[str] = None


@dataclass
class StringUploadSpec:
    """
    A string to upload at a path.

    encoding None is treated as raw. metadata keys are header names;
    only "content-type" is consulted today.
    """
    path: str
    data: str
    encoding: Optional[Union[StringFormat, str]] = None
    metadata: Optional[Mapping[str, str]] = None
    on_upload_progress: Optional[UploadProgressCallback] = None

    def content_type_hint(self) -> Optional[str]:
        """Caller-supplied content type, matched case-insensitively."""
        if not self.metadata:
            return None
        lowered = {key.lower(): value for key, value in self.metadata.items()}
        return lowered.get("content-type")


@dataclass(frozen=True)
class DataURLContent:
    """Parsed `data:[<mediatype>][;base64],<data>` string."""
    mime_type: Optional[str]
    is_base64: bool
    payload: str = field(repr=False)
