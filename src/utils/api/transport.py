# src/utils/api/transport.py
# Created: 2025-02-01 22:05:50
# Author: Genterr

from typing import Dict, Any, Optional
from dataclasses import dataclass, field
from enum import Enum
import asyncio
import logging
import time
import aiohttp
import yarl
from asyncio import Lock
from multidict import CIMultiDict, CIMultiDictProxy

from src.core.config import Config, DEFAULT_API_HOST
from src.core.exceptions import HttpFailureError, TransportError
from src.core.utils import validate_string
from .cancellation import CancellationToken
from .serializer import Encoding

logger = logging.getLogger(__name__)

class RequestMethod(Enum):
    """HTTP request methods"""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"

@dataclass(frozen=True)
class Connection:
    """Account identity and credentials shared by every request of a client"""
    user_id: str
    api_token: str
    api_secret: str = field(repr=False)
    host: str = DEFAULT_API_HOST

    def __post_init__(self) -> None:
        validate_string(self.user_id, "user_id")
        validate_string(self.api_token, "api_token")
        validate_string(self.api_secret, "api_secret")
        validate_string(self.host, "host")

@dataclass(frozen=True)
class TransportConfig:
    """Configuration for the HTTP transport"""
    scheme: str = "https"
    api_version: str = "v1"
    timeout: float = 30.0
    verify_ssl: bool = True
    user_agent: str = "bandwidth-client/1.0"
    max_connections: int = 100

    @classmethod
    def from_config(cls, config: Config) -> "TransportConfig":
        """Snapshot the api.* section of a Config"""
        api = config.section("api")
        defaults = cls()
        return cls(
            scheme=api.get("scheme", defaults.scheme),
            api_version=str(api.get("version", defaults.api_version)),
            timeout=float(api.get("timeout", defaults.timeout)),
            verify_ssl=bool(api.get("verify_ssl", defaults.verify_ssl)),
            user_agent=api.get("user_agent", defaults.user_agent),
            max_connections=int(api.get("max_connections", defaults.max_connections))
        )

@dataclass
class ResponseEnvelope:
    """Container for a raw API response"""
    status: int
    content_type: str
    body: bytes
    headers: CIMultiDictProxy
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    @classmethod
    def build(
        cls,
        status: int,
        body: bytes = b"",
        content_type: str = "",
        headers: Optional[Dict[str, str]] = None,
        elapsed: float = 0.0
    ) -> "ResponseEnvelope":
        """Build an envelope from plain values"""
        return cls(
            status=status,
            content_type=content_type,
            body=body,
            headers=CIMultiDictProxy(CIMultiDict(headers or {})),
            elapsed=elapsed
        )

class Transport:
    """
    Owns the pooled HTTP session for one Connection.

    This class provides:
    - Base URL composition from host and API version
    - Basic authentication on every request
    - Lazy session creation and idempotent shutdown
    - Mapping of non-2xx statuses and connection failures to client errors
    """

    def __init__(
        self,
        connection: Connection,
        config: Optional[TransportConfig] = None
    ):
        self.connection = connection
        self.config = config or TransportConfig()
        self.base_url = yarl.URL.build(
            scheme=self.config.scheme,
            authority=connection.host,
            path=f"/{self.config.api_version}"
        )
        self.headers: Dict[str, str] = {
            "Authorization": aiohttp.BasicAuth(connection.api_token, connection.api_secret).encode(),
            "User-Agent": self.config.user_agent
        }
        self._session: Optional[aiohttp.ClientSession] = None
        self._session_lock = Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session"""
        async with self._session_lock:
            if self._closed:
                raise TransportError("Transport is closed")
            if self._session is None:
                self._session = aiohttp.ClientSession(
                    timeout=aiohttp.ClientTimeout(total=self.config.timeout),
                    connector=aiohttp.TCPConnector(limit=self.config.max_connections),
                    headers=self.headers
                )
            return self._session

    async def close(self) -> None:
        """Release the session; calling it again is a no-op"""
        async with self._session_lock:
            if self._closed:
                return
            self._closed = True
            session, self._session = self._session, None
        if session is not None and not session.closed:
            await session.close()

    async def __aenter__(self) -> "Transport":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def url_for(self, path: str) -> yarl.URL:
        """Append an already-encoded path (and query) to the base URL"""
        if not path.startswith('/'):
            path = '/' + path
        return yarl.URL(str(self.base_url) + path, encoded=True)

    async def send(
        self,
        method: RequestMethod,
        path: str,
        body: Optional[bytes] = None,
        encoding: Encoding = Encoding.JSON,
        cancel_token: Optional[CancellationToken] = None
    ) -> ResponseEnvelope:
        """
        Perform one HTTP round trip

        Args:
            method: HTTP method to use
            path: Account-relative path, query string included
            body: Encoded request body
            encoding: Encoding of the body and of the expected response
            cancel_token: Optional token that abandons the request

        Returns:
            ResponseEnvelope for a 2xx response

        Raises:
            HttpFailureError: The API answered with a non-2xx status
            TransportError: The request failed before a response was read
            RequestCancelledError: cancel_token was triggered
        """
        token = cancel_token or CancellationToken()
        url = self.url_for(path)
        headers = {"Accept": encoding.mime_type}
        if body is not None:
            headers["Content-Type"] = encoding.content_type

        with token.bind():
            session = await self._get_session()
            start_time = time.monotonic()
            try:
                async with session.request(
                    method.value,
                    url,
                    data=body,
                    headers=headers,
                    ssl=self.config.verify_ssl
                ) as response:
                    raw = await response.read()
                    envelope = ResponseEnvelope(
                        status=response.status,
                        content_type=response.content_type or "",
                        body=raw or b"",
                        headers=CIMultiDictProxy(CIMultiDict(response.headers)),
                        elapsed=time.monotonic() - start_time
                    )
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                raise TransportError(f"{method.value} {url.path} failed: {str(e)}") from e

        logger.debug(
            "%s %s -> %s (%.3fs)", method.value, url.path_qs, envelope.status, envelope.elapsed
        )
        if not envelope.ok:
            raise HttpFailureError(envelope.status, envelope.body)
        return envelope

