"""
HTTP transport for the storage service.

StorageApi maps one method to one remote endpoint. It knows about
URLs, headers and multipart bodies, but not about path validation or
string encoding; that is StorageClient's job.

Every method returns a RemoteResult. Transport failures (timeouts,
DNS, refused connections, non-2xx responses) are caught here, logged,
and handed back as StorageTransportError values.
"""

import inspect
import logging
import os
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
from typing import Any, Optional, TypeVar, cast
from urllib.parse import quote

import httpx

from ...core.errors import (
    InvalidResponseError,
    StorageError,
    StorageTransportError,
    StorageValidationError,
)
from ...core.models import (
    FormPayload,
    RemoteResult,
    UploadProgressCallback,
    UploadRequest,
)
from .schemas import FileMetadata, ObjectMetadata, PresignedUrl


logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_HEADER_PREFIX = "x-nhost"
PROGRESS_CHUNK_SIZE = 64 * 1024


def build_base_url(url: str, app_id: Optional[str]) -> str:
    """Tenant-scoped services live under /custom/storage/{app_id}."""
    url = url.rstrip("/")
    return f"{url}/custom/storage/{app_id}" if app_id else url


async def _emit_progress(
    callback: UploadProgressCallback,
    sent: int,
    total: int,
) -> None:
    result = callback(sent, total)
    if inspect.isawaitable(result):
        await cast(Awaitable[None], result)


class ProgressByteStream(httpx.AsyncByteStream):
    """
    Request body that reports progress as it is consumed.

    The body is already fully encoded, so total is exact and the
    reported byte counts only ever grow.
    """

    def __init__(
        self,
        body: bytes,
        callback: UploadProgressCallback,
        chunk_size: int = PROGRESS_CHUNK_SIZE,
    ) -> None:
        self._body = body
        self._callback = callback
        self._chunk_size = chunk_size

    async def __aiter__(self) -> AsyncIterator[bytes]:
        total = len(self._body)
        sent = 0
        for start in range(0, total, self._chunk_size):
            chunk = self._body[start:start + self._chunk_size]
            yield chunk
            sent += len(chunk)
            await _emit_progress(self._callback, sent, total)


def _form_files(payload: FormPayload) -> dict[str, tuple]:
    files: dict[str, tuple] = {}
    for field_name, file in payload.files.items():
        if file.content_type is None:
            files[field_name] = (file.name, file.content)
        else:
            files[field_name] = (file.name, file.content, file.content_type)
    return files


def _error_message(response: httpx.Response) -> str:
    """Prefer the service's own error message over the bare status line."""
    try:
        data = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        if data.get("message"):
            return str(data["message"])

    return f"Request failed with status code {response.status_code}"


def _decode_json(response: httpx.Response) -> Any:
    if not response.content:
        return None
    return response.json()


def _decode_model(model: type[T]) -> Callable[[httpx.Response], Optional[T]]:
    def decode(response: httpx.Response) -> Optional[T]:
        data = _decode_json(response)
        if data is None:
            return None
        return model.model_validate(data)  # type: ignore[attr-defined]
    return decode


def _decode_object_metadata(response: httpx.Response) -> Optional[ObjectMetadata]:
    data = _decode_json(response)
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ValueError("Object metadata must be a JSON object")
    return data


def _decode_nothing(response: httpx.Response) -> None:
    return None


class StorageApi:
    """
    Thin async wrapper over the storage REST endpoints.

    One httpx.AsyncClient per instance; the timeout is fixed at
    construction. The bearer token is plain instance state and may be
    swapped at any time; each request reads it once when it is built.
    """

    def __init__(
        self,
        url: str,
        app_id: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        header_prefix: str = DEFAULT_HEADER_PREFIX,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._url = url
        self._app_id = app_id
        self._header_prefix = header_prefix
        self._access_token: Optional[str] = None

        self._client = httpx.AsyncClient(
            base_url=build_base_url(url, app_id),
            timeout=timeout,
            transport=transport,
        )

        logger.info(
            "Initialized storage API",
            extra={
                "base_url": str(self._client.base_url),
                "timeout": timeout,
            }
        )

    @property
    def base_url(self) -> str:
        return str(self._client.base_url)

    @property
    def access_token(self) -> Optional[str]:
        return self._access_token

    def set_access_token(self, access_token: Optional[str]) -> None:
        self._access_token = access_token

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "StorageApi":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # File id endpoints
    # ------------------------------------------------------------------

    async def upload(self, request: UploadRequest) -> RemoteResult[FileMetadata]:
        """POST /files with optional identifying headers."""
        return await self._execute(
            "upload",
            lambda: self._client.build_request(
                "POST",
                "/files",
                files=_form_files(request.payload),
                headers={
                    **self._upload_headers(request),
                    **self._auth_headers(),
                },
            ),
            _decode_model(FileMetadata),
        )

    async def get_presigned_url(self, file_id: str) -> RemoteResult[PresignedUrl]:
        return await self._execute(
            "get_presigned_url",
            lambda: self._client.build_request(
                "GET",
                f"/files/{file_id}/presignedurl",
                headers=self._auth_headers(),
            ),
            _decode_model(PresignedUrl),
        )

    async def delete(self, file_id: str) -> RemoteResult[None]:
        return await self._execute(
            "delete",
            lambda: self._client.build_request(
                "DELETE",
                f"/files/{file_id}",
                headers=self._auth_headers(),
            ),
            _decode_nothing,
        )

    # ------------------------------------------------------------------
    # Path endpoints
    # ------------------------------------------------------------------

    async def upload_to_path(
        self,
        path: str,
        payload: FormPayload,
        on_upload_progress: Optional[UploadProgressCallback] = None,
    ) -> RemoteResult[FileMetadata]:
        """
        POST /o{path} as multipart/form-data.

        The content type is set explicitly, boundary included, so the
        server never has to sniff the body.
        """
        def build() -> httpx.Request:
            boundary = os.urandom(16).hex()
            http_request = self._client.build_request(
                "POST",
                f"/o{path}",
                files=_form_files(payload),
                headers={
                    "Content-Type": f"multipart/form-data; boundary={boundary}",
                    **self._auth_headers(),
                },
            )
            if on_upload_progress is not None:
                body = b"".join(cast(Iterable[bytes], http_request.stream))
                http_request.stream = ProgressByteStream(body, on_upload_progress)
            return http_request

        return await self._execute("upload_to_path", build, _decode_model(FileMetadata))

    async def delete_from_path(self, path: str) -> RemoteResult[None]:
        return await self._execute(
            "delete_from_path",
            lambda: self._client.build_request(
                "DELETE",
                f"/o{path}",
                headers=self._auth_headers(),
            ),
            _decode_nothing,
        )

    async def get_metadata_from_path(self, path: str) -> RemoteResult[ObjectMetadata]:
        return await self._execute(
            "get_metadata_from_path",
            lambda: self._client.build_request(
                "GET",
                f"/m{path}",
                headers=self._auth_headers(),
            ),
            _decode_object_metadata,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _upload_headers(self, request: UploadRequest) -> dict[str, str]:
        headers: dict[str, str] = {}
        if request.bucket_id is not None:
            headers[f"{self._header_prefix}-bucket-id"] = request.bucket_id
        if request.file_id is not None:
            headers[f"{self._header_prefix}-file-id"] = request.file_id
        if request.file_name is not None:
            # Header values are ASCII; the service unquotes the name.
            headers[f"{self._header_prefix}-file-name"] = quote(request.file_name)
        return headers

    def _auth_headers(self) -> dict[str, str]:
        if not self._access_token:
            return {}
        return {"Authorization": f"Bearer {self._access_token}"}

    async def _execute(
        self,
        operation: str,
        build: Callable[[], httpx.Request],
        decode: Callable[[httpx.Response], Optional[T]],
    ) -> RemoteResult[T]:
        try:
            request = build()
        except (UnicodeEncodeError, httpx.InvalidURL) as e:
            return self._failure(
                operation,
                StorageValidationError(f"Request could not be built: {e}"),
            )

        logger.debug(
            "Sending storage request",
            extra={
                "operation": operation,
                "method": request.method,
                "url": str(request.url),
            }
        )

        try:
            response = await self._client.send(request)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            return self._failure(
                operation,
                StorageTransportError(
                    _error_message(e.response),
                    status_code=e.response.status_code,
                ),
            )
        except httpx.HTTPError as e:
            return self._failure(
                operation,
                StorageTransportError(str(e) or type(e).__name__),
            )

        try:
            value = decode(response)
        except ValueError as e:
            return self._failure(
                operation,
                InvalidResponseError(f"Unexpected response body: {e}"),
            )

        return RemoteResult.success(value)

    def _failure(self, operation: str, error: StorageError) -> RemoteResult[Any]:
        logger.error(
            "Storage request failed",
            extra={
                "operation": operation,
                "error": error.message,
                "status": getattr(error, "status_code", None),
            }
        )
        return RemoteResult.failure(error)
