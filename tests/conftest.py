from __future__ import annotations

from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from gamelog.api.client import ApiClient
from gamelog.api.transport import ApiRequest, ApiResponse, Transport
from gamelog.app import GameLogApp
from gamelog.auth.credentials import CredentialStore


class FakeTransport(Transport):
    """Scripted transport. handler(request) -> ApiResponse decides every reply."""

    def __init__(self, handler=None):
        self.handler = handler
        self.requests: list[ApiRequest] = []
        self.urls: list[str] = []
        self.closed = False

    async def send(self, request: ApiRequest, url: str) -> ApiResponse:
        self.requests.append(request)
        self.urls.append(url)
        if self.handler is None:
            return ApiResponse(200)
        return await self.handler(request)

    def requests_to(self, path: str) -> list[ApiRequest]:
        return [request for request in self.requests if request.path == path]

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def token_file(tmp_path):
    return str(tmp_path / "config" / "tokens.json")


@pytest.fixture
def credential_store(token_file):
    return CredentialStore(token_file)


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def client(credential_store, fake_transport):
    return ApiClient("https://api.example.test/api", credential_store, fake_transport)


@pytest.fixture
def app(client):
    return GameLogApp(client)
