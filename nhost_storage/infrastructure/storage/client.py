"""
Caller-facing storage client.

StorageClient validates and encodes input, then delegates the wire
work to StorageApi. It adds one rule on the way back: a call that
succeeded on the wire but returned nothing usable is reported as an
InvalidResponseError, so callers never get an empty value paired with
an empty error.

Every async method returns a RemoteResult. Bad input (a path without
a leading slash, a malformed data URL, an empty payload) comes back as
a StorageValidationError value and no request is sent.
"""

import logging
from typing import Any, Optional, Union

import httpx

from ...config.settings import StorageSettings, get_settings
from ...core.encoding import encode_string
from ...core.errors import InvalidResponseError, StorageValidationError
from ...core.models import (
    FileUpload,
    FormPayload,
    RemoteResult,
    StringUploadSpec,
    UploadProgressCallback,
    UploadRequest,
)
from .api import DEFAULT_HEADER_PREFIX, DEFAULT_TIMEOUT_SECONDS, StorageApi
from .schemas import FileMetadata, ObjectMetadata, PresignedUrl


logger = logging.getLogger(__name__)

# Raw bytes or an already-named file. Raw bytes are sent under
# file_name when one is given.
UploadInput = Union[bytes, FileUpload]


def _as_file(file: UploadInput, file_name: Optional[str] = None) -> FileUpload:
    if isinstance(file, FileUpload):
        return file
    if isinstance(file, (bytes, bytearray, memoryview)):
        if file_name is not None:
            return FileUpload(content=bytes(file), name=file_name)
        return FileUpload(content=bytes(file))
    raise TypeError(f"Unsupported upload input: {type(file).__name__}")


def _check_path(path: str) -> Optional[StorageValidationError]:
    if not path.startswith("/"):
        return StorageValidationError("`path` must start with `/`")
    return None


class StorageClient:
    """
    Storage client for a single service (optionally one tenant of it).

    Typical use:

        async with StorageClient(url="https://storage.example.com/v1") as storage:
            storage.set_access_token(token)
            result = await storage.upload(b"hello", file_name="hello.txt")
            if result.error:
                ...
    """

    def __init__(
        self,
        url: str,
        app_id: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        header_prefix: str = DEFAULT_HEADER_PREFIX,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        api: Optional[StorageApi] = None,
    ) -> None:
        self._url = url.rstrip("/")
        self._app_id = app_id
        self._api = api or StorageApi(
            url=self._url,
            app_id=app_id,
            timeout=timeout,
            header_prefix=header_prefix,
            transport=transport,
        )

    @property
    def api(self) -> StorageApi:
        return self._api

    async def aclose(self) -> None:
        await self._api.aclose()

    async def __aenter__(self) -> "StorageClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def set_access_token(self, access_token: Optional[str]) -> None:
        """Set the bearer token for subsequent requests. None clears it."""
        self._api.set_access_token(access_token)

    # ------------------------------------------------------------------
    # File id operations
    # ------------------------------------------------------------------

    async def upload(
        self,
        file: UploadInput,
        bucket_id: Optional[str] = None,
        file_id: Optional[str] = None,
        file_name: Optional[str] = None,
    ) -> RemoteResult[FileMetadata]:
        """
        Upload a file.

        Example:
            await storage.upload(b"...", bucket_id="default", file_name="a.png")
        """
        request = UploadRequest(
            payload=FormPayload.single(_as_file(file, file_name)),
            bucket_id=bucket_id,
            file_id=file_id,
            file_name=file_name,
        )
        result = await self._api.upload(request)
        return self._require_value(result, "Invalid file returned")

    def get_url(self, file_id: str) -> str:
        """
        Direct URL for a file. No request is made.

        Example:
            storage.get_url("uuid")
        """
        if self._app_id:
            return f"/custom/storage/{self._app_id}/o/{file_id}"
        return f"{self._url}/files/{file_id}"

    async def get_presigned_url(self, file_id: str) -> RemoteResult[PresignedUrl]:
        """
        Presigned URL for a file.

        Example:
            await storage.get_presigned_url("uuid")
        """
        result = await self._api.get_presigned_url(file_id)
        return self._require_value(result, "Invalid file id")

    async def delete(self, file_id: str) -> RemoteResult[None]:
        """
        Delete a file.

        Example:
            await storage.delete("uuid")
        """
        result = await self._api.delete(file_id)
        if result.error:
            return RemoteResult.failure(result.error)
        return RemoteResult.success()

    # ------------------------------------------------------------------
    # Path operations
    # ------------------------------------------------------------------

    async def upload_file_at_path(
        self,
        path: str,
        file: UploadInput,
        on_upload_progress: Optional[UploadProgressCallback] = None,
    ) -> RemoteResult[FileMetadata]:
        error = _check_path(path)
        if error:
            return self._reject("upload_file_at_path", path, error)

        result = await self._api.upload_to_path(
            path,
            FormPayload.single(_as_file(file)),
            on_upload_progress=on_upload_progress,
        )
        return self._require_value(result, "Invalid file returned")

    async def upload_string_at_path(
        self,
        spec: StringUploadSpec,
    ) -> RemoteResult[FileMetadata]:
        """
        Upload a string as a file at a path.

        raw strings are sent as UTF-8 with the content type from
        metadata["content-type"], if any. data URLs carry their own
        content type and are base64- or percent-decoded first.
        """
        error = _check_path(spec.path)
        if error:
            return self._reject("upload_string_at_path", spec.path, error)

        try:
            file = encode_string(
                spec.data,
                encoding=spec.encoding,
                content_type=spec.content_type_hint(),
            )
        except StorageValidationError as e:
            return self._reject("upload_string_at_path", spec.path, e)

        logger.debug(
            "Encoded string upload",
            extra={
                "path": spec.path,
                "size_bytes": file.size,
                "content_type": file.content_type,
            }
        )

        result = await self._api.upload_to_path(
            spec.path,
            FormPayload.single(file),
            on_upload_progress=spec.on_upload_progress,
        )
        return self._require_value(result, "Invalid file returned")

    async def delete_file_at_path(self, path: str) -> RemoteResult[None]:
        error = _check_path(path)
        if error:
            return self._reject("delete_file_at_path", path, error)

        result = await self._api.delete_from_path(path)
        if result.error:
            return RemoteResult.failure(result.error)
        return RemoteResult.success()

    async def get_metadata_at_path(self, path: str) -> RemoteResult[ObjectMetadata]:
        error = _check_path(path)
        if error:
            return self._reject("get_metadata_at_path", path, error)

        result = await self._api.get_metadata_from_path(path)
        return self._require_value(result, "Invalid metadata returned")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _require_value(result: RemoteResult[Any], message: str) -> RemoteResult[Any]:
        if result.error:
            return RemoteResult.failure(result.error)
        if result.value is None:
            return RemoteResult.failure(InvalidResponseError(message))
        return RemoteResult.success(result.value)

    @staticmethod
    def _reject(
        operation: str,
        path: str,
        error: StorageValidationError,
    ) -> RemoteResult[Any]:
        logger.warning(
            "Rejected storage request",
            extra={"operation": operation, "path": path, "error": error.message}
        )
        return RemoteResult.failure(error)


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_storage_client(
    url: Optional[str] = None,
    app_id: Optional[str] = None,
    settings: Optional[StorageSettings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> StorageClient:
    """
    Create a storage client from arguments, falling back to settings.

    Args:
        url: Storage service URL (overrides STORAGE_URL)
        app_id: Tenant namespace (overrides STORAGE_APP_ID)
        settings: Settings to read defaults from; get_settings() if None
        transport: httpx transport, mainly for tests

    Returns:
        StorageClient with the configured access token already set
    """
    settings = settings or get_settings()

    url = url or settings.storage_url
    if not url:
        raise ValueError("A storage URL is required (pass url or set STORAGE_URL)")

    client = StorageClient(
        url=url,
        app_id=app_id if app_id is not None else settings.storage_app_id,
        timeout=settings.storage_timeout_seconds,
        header_prefix=settings.storage_header_prefix,
        transport=transport,
    )
    if settings.storage_access_token:
        client.set_access_token(settings.storage_access_token)

    return client
