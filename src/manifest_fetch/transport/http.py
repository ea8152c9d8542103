"""HTTP 传输层：基于 httpx 的异步 GET 请求，保证响应体在所有路径上被关闭。

HTTP transport using httpx for async requests.

Provides:
- One streamed GET per fetch, with the body closed on every exit path
- Optional timeout (none by default)
- Proxy support
- Mapping of httpx failures onto the manifest-fetch error taxonomy
"""

from __future__ import annotations

import importlib.util
import os
from contextlib import asynccontextmanager, suppress
from typing import TYPE_CHECKING

import httpx

from manifest_fetch.errors import HTTPStatusError, RequestError, TransportError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

_SUPPORTED_SCHEMES = ("http", "https")

_UA_VERSION: str | None = None


def _http2_enabled() -> bool:
    """Enable HTTP/2 only when optional dependency is present."""
    return importlib.util.find_spec("h2") is not None


def _trust_env_enabled() -> bool:
    """Use env proxy settings only when explicitly enabled."""
    return os.getenv("MANIFEST_FETCH_TRUST_ENV", "0") == "1"


def _get_ua_version() -> str:
    """Get package version for User-Agent (cached)."""
    global _UA_VERSION
    if _UA_VERSION is None:
        try:
            from importlib.metadata import version

            _UA_VERSION = version("manifest-fetch")
        except Exception:
            _UA_VERSION = "0.1.0"
    return _UA_VERSION


def _resolve_timeout(timeout: float | None) -> float | None:
    if timeout is not None:
        return timeout
    env_timeout = os.getenv("MANIFEST_FETCH_TIMEOUT_SECS")
    if env_timeout:
        with suppress(ValueError):
            return float(env_timeout)
    return None


class HttpTransport:
    """HTTP transport for manifest downloads.

    Each call to :meth:`open` uses its own ``httpx.AsyncClient`` so that
    concurrent fetches share no connection state.

    Example:
        >>> transport = HttpTransport()
        >>> async with transport.open("https://example.com/app.yaml") as response:
        ...     transport.check_status(response)
        ...     async for chunk in transport.iter_body(response):
        ...         process(chunk)
    """

    def __init__(
        self,
        *,
        timeout: float | None = None,
        proxy: str | None = None,
        follow_redirects: bool = True,
        user_agent: str | None = None,
    ) -> None:
        """Initialize HTTP transport.

        Args:
            timeout: Request timeout in seconds (None: no timeout)
            proxy: Proxy URL
            follow_redirects: Follow 3xx responses before checking the status
            user_agent: Override the User-Agent header
        """
        self._timeout = _resolve_timeout(timeout)

        # Resolve proxy: default to direct connection unless trust_env is enabled.
        if proxy is not None:
            self._proxy = proxy
        elif _trust_env_enabled():
            self._proxy = os.getenv("MANIFEST_FETCH_PROXY_URL")
        else:
            self._proxy = None

        self._follow_redirects = follow_redirects
        self._user_agent = user_agent or f"manifest-fetch/{_get_ua_version()}"

    @property
    def timeout(self) -> float | None:
        """Resolved timeout in seconds."""
        return self._timeout

    @property
    def proxy(self) -> str | None:
        """Resolved proxy URL."""
        return self._proxy

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout),
            proxy=self._proxy,
            http2=_http2_enabled(),
            trust_env=_trust_env_enabled(),
            follow_redirects=self._follow_redirects,
        )

    def _build_headers(self) -> dict[str, str]:
        return {"User-Agent": self._user_agent}

    @staticmethod
    def parse_url(url: str) -> httpx.URL:
        """Validate a manifest URL.

        Args:
            url: URL to fetch

        Returns:
            Parsed URL

        Raises:
            RequestError: If the URL is malformed or not http(s)
        """
        try:
            parsed = httpx.URL(url)
        except (httpx.InvalidURL, TypeError) as e:
            raise RequestError(
                f"Error creating request: {e}", url=url, cause=e
            ) from e

        if parsed.scheme not in _SUPPORTED_SCHEMES:
            raise RequestError(
                f'Error creating request: unsupported protocol scheme "{parsed.scheme}"',
                url=url,
            ).with_hint("Supported schemes are http and https")
        if not parsed.host:
            raise RequestError("Error creating request: no host in request URL", url=url)
        return parsed

    @staticmethod
    def check_status(response: httpx.Response) -> None:
        """Accept exactly status 200.

        Raises:
            HTTPStatusError: For any other status, 2xx included
        """
        if response.status_code != 200:
            raise HTTPStatusError(response.status_code, url=str(response.url))

    @asynccontextmanager
    async def open(self, url: str) -> AsyncIterator[httpx.Response]:
        """Send a GET request and yield the streamed response.

        Redirects are followed first. The body is closed when the context
        exits, whether or not it was read.

        Args:
            url: URL to fetch

        Yields:
            Response with an unread body

        Raises:
            RequestError: If the request cannot be built
            TransportError: On network/connection errors
        """
        parsed = self.parse_url(url)

        async with self._build_client() as client:
            request = client.build_request("GET", parsed, headers=self._build_headers())

            try:
                response = await client.send(request, stream=True)
            except httpx.UnsupportedProtocol as e:
                raise RequestError(
                    f"Error creating request: {e}", url=url, cause=e
                ) from e
            except httpx.HTTPError as e:
                raise TransportError(
                    f"Error making request: {e}", url=url, cause=e
                ) from e

            try:
                yield response
            finally:
                await response.aclose()

    async def iter_body(self, response: httpx.Response) -> AsyncIterator[bytes]:
        """Stream the response body.

        Args:
            response: Response from :meth:`open`

        Yields:
            Raw body chunks

        Raises:
            TransportError: If the connection fails mid-body
        """
        try:
            async for chunk in response.aiter_bytes():
                yield chunk
        except httpx.HTTPError as e:
            raise TransportError(
                f"Error making request: {e}", url=str(response.url), cause=e
            ) from e
