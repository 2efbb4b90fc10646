"""
Fault types for storage operations.

Faults are exceptions, but the client never raises them out of an
async operation. They travel back to the caller inside a RemoteResult
so every call site inspects `result.error` the same way.
"""

from typing import Optional


class StorageError(Exception):
    """Base class for every storage fault."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class StorageValidationError(StorageError):
    """Caller input was rejected before any network call."""
    pass


class DataURLFormatError(StorageValidationError):
    """A string upload claimed to be a data URL but wasn't one."""

    def __init__(self) -> None:
        super().__init__(
            "Data must be formatted 'data:[<mediatype>][;base64],<data>'"
        )


class StorageTransportError(StorageError):
    """
    The request failed on the wire.

    status_code is None for network-level failures (DNS, timeout,
    refused connection) and the HTTP status for non-2xx responses.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class InvalidResponseError(StorageError):
    """The server answered 2xx but the body was empty or unusable."""
    pass
