"""Tests for HttpFetcher."""

import asyncio

import httpx
import pytest

from geosync.core import HttpFetcher
from geosync.errors import DownloadError, HttpStatusError, Stage, SyncCancelled

DUMP_URL = "http://download.geonames.org/export/dump/"


class CountdownSignal:
    """Reports cancellation after being polled a given number of times."""

    def __init__(self, polls_before_set: int):
        self.polls_before_set = polls_before_set
        self.polls = 0

    def is_set(self) -> bool:
        self.polls += 1
        return self.polls > self.polls_before_set


@pytest.fixture
async def fetcher():
    fetcher = HttpFetcher(timeout=10.0, chunk_size=8)
    yield fetcher
    await fetcher.close()


class TestHttpFetcherDownload:
    async def test_returns_full_body(self, fetcher, httpx_mock):
        """Body should be buffered completely regardless of chunk size."""
        body = b"1\tfoo\n2\tbar\n3\tbaz\n"
        httpx_mock.add_response(url=DUMP_URL + "modifications-2024-03-05.txt", content=body)

        data = await fetcher.download(DUMP_URL + "modifications-2024-03-05.txt")

        assert data == body

    async def test_sends_single_get(self, fetcher, httpx_mock):
        """Should issue exactly one GET for the given URL."""
        httpx_mock.add_response(url=DUMP_URL + "deletes-2024-03-05.txt", content=b"ok")

        await fetcher.download(DUMP_URL + "deletes-2024-03-05.txt")

        requests = httpx_mock.get_requests()
        assert len(requests) == 1
        assert requests[0].method == "GET"
        assert "geosync" in requests[0].headers["user-agent"]

    async def test_non_success_status_raises(self, fetcher, httpx_mock):
        """Non-2xx responses should raise HttpStatusError with the status code."""
        httpx_mock.add_response(url=DUMP_URL + "missing.txt", status_code=404, text="not found")

        with pytest.raises(HttpStatusError) as exc_info:
            await fetcher.download(DUMP_URL + "missing.txt")

        assert exc_info.value.status_code == 404
        assert "404" in str(exc_info.value)
        assert exc_info.value.url == DUMP_URL + "missing.txt"

    async def test_server_error_raises(self, fetcher, httpx_mock):
        httpx_mock.add_response(url=DUMP_URL + "file.txt", status_code=503)

        with pytest.raises(HttpStatusError) as exc_info:
            await fetcher.download(DUMP_URL + "file.txt")

        assert exc_info.value.status_code == 503

    async def test_transport_error_wrapped(self, fetcher, httpx_mock):
        """httpx transport errors should surface as DownloadError with the cause chained."""
        httpx_mock.add_exception(
            httpx.ConnectError("connection refused"),
            url=DUMP_URL + "file.txt",
        )

        with pytest.raises(DownloadError) as exc_info:
            await fetcher.download(DUMP_URL + "file.txt")

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        assert DUMP_URL + "file.txt" in str(exc_info.value)

    async def test_cancelled_before_request(self, fetcher, httpx_mock):
        """A signal set up front should stop the download before any request."""
        cancel = asyncio.Event()
        cancel.set()

        with pytest.raises(SyncCancelled) as exc_info:
            await fetcher.download(DUMP_URL + "file.txt", cancel)

        assert httpx_mock.get_requests() == []
        assert exc_info.value.stage is Stage.DOWNLOAD

    async def test_cancelled_while_copying_body(self, fetcher, httpx_mock):
        """A signal raised mid-body should abort the copy."""
        httpx_mock.add_response(url=DUMP_URL + "file.txt", content=b"x" * 64)
        cancel = CountdownSignal(polls_before_set=2)

        with pytest.raises(SyncCancelled):
            await fetcher.download(DUMP_URL + "file.txt", cancel)

        assert cancel.polls == 3

    async def test_cancelled_is_not_an_exception(self, fetcher):
        """Cancellation must not be caught by generic exception handlers."""
        cancel = asyncio.Event()
        cancel.set()

        with pytest.raises(asyncio.CancelledError):
            try:
                await fetcher.download(DUMP_URL + "file.txt", cancel)
            except Exception:
                pytest.fail("cancellation was caught as a generic failure")


class TestHttpFetcherLifecycle:
    async def test_close_leaves_injected_client_open(self):
        """An injected client belongs to the caller and should not be closed."""
        client = httpx.AsyncClient()
        fetcher = HttpFetcher(client=client)

        await fetcher.close()

        assert not client.is_closed
        await client.aclose()

    async def test_uses_injected_client(self, httpx_mock):
        httpx_mock.add_response(url=DUMP_URL + "file.txt", content=b"shared")
        async with httpx.AsyncClient() as client:
            fetcher = HttpFetcher(client=client)

            assert await fetcher.download(DUMP_URL + "file.txt") == b"shared"
            assert await fetcher._get_client() is client

    async def test_close_own_client(self):
        """A lazily created client should be closed and dropped."""
        fetcher = HttpFetcher()
        client = await fetcher._get_client()

        await fetcher.close()

        assert client.is_closed
        assert fetcher._client is None

    async def test_reuses_client(self):
        """Repeated calls should share one connection pool."""
        fetcher = HttpFetcher()
        first = await fetcher._get_client()
        second = await fetcher._get_client()

        assert first is second
        await fetcher.close()
