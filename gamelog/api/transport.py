"""
HTTP transport seam for the API client.

ApiClient never talks to aiohttp directly; it hands a fully built request to
a Transport. AiohttpTransport is the production implementation, tests swap in
a scripted fake.
"""
import asyncio
import json
import logging
import ssl
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import aiohttp
import certifi

from ..errors import NetworkError

logger = logging.getLogger(__name__)


@dataclass
class ApiRequest:
    """A request relative to the API base URL"""
    method: str
    path: str
    params: Optional[Dict[str, Any]] = None
    json: Any = None
    headers: Dict[str, str] = field(default_factory=dict)
    public: bool = False  # skip bearer header and refresh handling


@dataclass
class ApiResponse:
    status: int
    data: Any = None
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def decode_body(body: str, content_type: str) -> Any:
    """Decode a response body: JSON when it parses, text otherwise, None if empty."""
    if not body:
        return None
    if content_type == 'application/json' or body[:1] in ('{', '['):
        try:
            return json.loads(body)
        except ValueError:
            logger.debug(f"[API] Response declared {content_type} but is not valid JSON")
    return body


class Transport(ABC):
    """Sends one HTTP request and returns the response, whatever its status."""

    @abstractmethod
    async def send(self, request: ApiRequest, url: str) -> ApiResponse:
        """
        Send a request.

        Args:
            request: Request with final headers already attached.
            url: Absolute URL for the request.

        Returns:
            ApiResponse for any HTTP status.

        Raises:
            NetworkError: If no response was received.
        """
        pass

    async def close(self) -> None:
        return None


class AiohttpTransport(Transport):
    """Transport built on a lazily created aiohttp.ClientSession."""

    def __init__(self, default_headers: Optional[Dict[str, str]] = None):
        self.default_headers = default_headers or {"Content-Type": "application/json"}
        self.session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self.session is None or self.session.closed:
            ssl_context = ssl.create_default_context(cafile=certifi.where())
            connector = aiohttp.TCPConnector(ssl=ssl_context)
            self.session = aiohttp.ClientSession(
                connector=connector,
                headers=self.default_headers
            )
        return self.session

    async def send(self, request: ApiRequest, url: str) -> ApiResponse:
        session = await self._get_session()
        try:
            async with session.request(
                request.method,
                url,
                params=request.params,
                json=request.json,
                headers=request.headers
            ) as resp:
                body = await resp.text()
                return ApiResponse(
                    status=resp.status,
                    data=decode_body(body, resp.content_type),
                    headers=dict(resp.headers)
                )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.debug(f"[API] {request.method} {url} failed without response: {e!r}")
            raise NetworkError(f"Could not reach server: {e}") from e

    async def close(self) -> None:
        if self.session is not None and not self.session.closed:
            await self.session.close()
        self.session = None
