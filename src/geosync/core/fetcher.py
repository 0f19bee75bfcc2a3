"""HTTP fetcher implementation using httpx."""

import asyncio
import io
import logging

import httpx

from ..errors import DownloadError, HttpStatusError, Stage
from .protocols import CancelSignal, check_cancelled

DEFAULT_USER_AGENT = "geosync/0.1 (+https://github.com/geosync)"
DEFAULT_CHUNK_SIZE = 64 * 1024

logger = logging.getLogger(__name__)


class HttpFetcher:
    """Async HTTP fetcher using httpx with connection reuse.

    Bodies are buffered fully in memory, which is fine for the single-digit
    megabyte files published by the dump service.
    """

    def __init__(
        self,
        timeout: float = 60.0,
        user_agent: str = DEFAULT_USER_AGENT,
        max_connections: int = 10,
        max_keepalive_connections: int = 5,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        client: httpx.AsyncClient | None = None,
    ):
        self.timeout = httpx.Timeout(timeout)
        self.user_agent = user_agent
        self.limits = httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive_connections,
        )
        self.chunk_size = chunk_size
        self._client = client
        self._owns_client = client is None
        self._lock = asyncio.Lock()

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

    async def download(self, url: str, cancel: CancelSignal | None = None) -> bytes:
        """Download a URL into memory, checking for cancellation per chunk."""
        check_cancelled(cancel, Stage.DOWNLOAD)
        client = await self._get_client()
        buffer = io.BytesIO()

        try:
            async with client.stream("GET", url) as resp:
                if not resp.is_success:
                    raise HttpStatusError(resp.status_code, url)
                async for chunk in resp.aiter_bytes(self.chunk_size):
                    check_cancelled(cancel, Stage.DOWNLOAD)
                    buffer.write(chunk)
        except httpx.HTTPError as e:
            raise DownloadError(f"Failed to download file from {url}: {e}") from e

        logger.debug("Downloaded %d bytes from %s", buffer.tell(), url)
        return buffer.getvalue()

    async def close(self):
        """Close the HTTP client if this fetcher created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None
