"""
Shared fixtures for storage client tests.

No test touches the network. Requests go to an httpx.MockTransport
that records them and answers with whatever the test configured.
"""

from typing import Callable, Optional

import httpx
import pytest

from nhost_storage.infrastructure.storage.api import StorageApi
from nhost_storage.infrastructure.storage.client import StorageClient


STORAGE_URL = "https://storage.example.com/v1"

FILE_METADATA_JSON = {
    "id": "8f3a2c1e-0000-4000-8000-000000000001",
    "name": "untitled",
    "size": 5,
    "bucketId": "default",
    "etag": '"d41d8cd98f00b204e9800998ecf8427e"',
    "createdAt": "2024-01-01T12:00:00Z",
    "updatedAt": "2024-01-01T12:00:00Z",
    "isUploaded": True,
    "mimeType": "text/plain",
    "uploadedByUserId": "user-1",
}


class RecordingHandler:
    """
    MockTransport handler that remembers every request.

    The response (or exception) can be swapped per test.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.respond: Callable[[httpx.Request], httpx.Response] = (
            lambda request: httpx.Response(200, json=FILE_METADATA_JSON)
        )
        self.raise_error: Optional[Exception] = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raise_error is not None:
            raise self.raise_error
        return self.respond(request)

    @property
    def last(self) -> httpx.Request:
        assert self.requests, "no request was sent"
        return self.requests[-1]


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def transport(handler: RecordingHandler) -> httpx.MockTransport:
    return httpx.MockTransport(handler)


@pytest.fixture
async def api(transport: httpx.MockTransport):
    storage_api = StorageApi(url=STORAGE_URL, transport=transport)
    yield storage_api
    await storage_api.aclose()


@pytest.fixture
async def storage(transport: httpx.MockTransport):
    client = StorageClient(url=STORAGE_URL, transport=transport)
    yield client
    await client.aclose()
