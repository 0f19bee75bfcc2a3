"""Protocol definitions for synchronization components."""

from collections.abc import Mapping
from typing import Protocol

from ..errors import Stage, SyncCancelled


class CancelSignal(Protocol):
    """Anything that can report a cancellation request, e.g. ``asyncio.Event``."""

    def is_set(self) -> bool:
        ...


class Fetcher(Protocol):
    """Protocol for artifact downloaders.

    Implementations decide how the body is buffered; the client only sees bytes.
    """

    async def download(self, url: str, cancel: CancelSignal | None = None) -> bytes:
        """Download a URL and return its full body."""
        ...

    async def close(self) -> None:
        ...


class ArchiveReader(Protocol):
    """Protocol for compressed container readers."""

    def extract_all(self, data: bytes) -> Mapping[str, bytes]:
        """Return every entry of the container keyed by entry name."""
        ...


def check_cancelled(cancel: CancelSignal | None, stage: Stage) -> None:
    """Raise SyncCancelled if the signal has been set."""
    if cancel is not None and cancel.is_set():
        raise SyncCancelled(stage=stage)
