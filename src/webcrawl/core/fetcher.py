"""HTTP fetcher implementation using httpx."""

import asyncio

import httpx

from ..config import CrawlerSettings
from ..errors import BodyDecodeError, FetchError
from .protocols import Fetcher, Response

DEFAULT_USER_AGENT = "WebCrawl/0.1 (+https://github.com/webcrawl)"


class HttpFetcher:
    """Async HTTP fetcher using httpx with connection reuse."""

    def __init__(
        self,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        max_connections: int = 100,
        max_keepalive_connections: int = 20,
    ):
        self.timeout = httpx.Timeout(timeout)
        self.user_agent = user_agent
        self.limits = httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive_connections,
        )
        self._client: httpx.AsyncClient | None = None
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: CrawlerSettings) -> "HttpFetcher":
        """Build a fetcher from crawler settings."""
        return cls(
            timeout=settings.timeout,
            user_agent=settings.user_agent,
            max_connections=settings.max_connections,
            max_keepalive_connections=settings.max_keepalive_connections,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client with double-checked locking."""
        if self._client is None:
            async with self._lock:
                if self._client is None:
                    self._client = httpx.AsyncClient(
                        timeout=self.timeout,
                        limits=self.limits,
                        headers={"User-Agent": self.user_agent},
                        follow_redirects=True,
                    )
        return self._client

    async def fetch(self, url: str) -> Response:
        """Fetch a URL and return the response."""
        client = await self._get_client()
        resp = await client.get(url)
        return Response(
            url=str(resp.url),
            status=resp.status_code,
            content=resp.content,
            headers=dict(resp.headers),
            encoding=resp.charset_encoding,
        )

    async def close(self):
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


async def fetch_body(fetcher: Fetcher, url: str) -> str:
    """Fetch a page and return its body as text.

    Transport failures become FetchError, undecodable bodies BodyDecodeError.
    Non-2xx responses are not errors: their body is returned like any other.
    """
    try:
        response = await fetcher.fetch(url)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise FetchError(url, str(e) or type(e).__name__) from e

    try:
        return response.decode()
    except (UnicodeDecodeError, LookupError) as e:
        raise BodyDecodeError(url, str(e)) from e
