"""GeoNames dump synchronization client."""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import date, datetime

from .config import SyncSettings
from .config import settings as default_settings
from .core import ArchiveReader, CancelSignal, Fetcher, HttpFetcher, ZipArchiveReader, check_cancelled
from .dates import (
    FULL_SNAPSHOT_ENTRY,
    FULL_SNAPSHOT_FILENAME,
    deletions_filename,
    modifications_filename,
    reference_date as yesterday_utc,
    utc_now,
)
from .errors import MissingEntryError, Stage, SyncCancelled, SyncFailure
from .records import DeletionRecord, PlaceRecord, parse_deletion_rows, parse_place_rows

logger = logging.getLogger(__name__)


class _Progress:
    """Tracks which stage an operation has reached."""

    def __init__(self):
        self.stage = Stage.DOWNLOAD


class GeoNamesClient:
    """Fetches the full snapshot and the daily diffs from the GeoNames dump.

    Every call downloads, decompresses when needed, and parses into fresh
    record lists. Callers only ever see ``SyncFailure`` or ``SyncCancelled``,
    except that cancelling the calling task re-raises its own ``CancelledError``.

    The reference date used to name the diff files is computed once, at
    construction, unless ``settings.pin_reference_date`` is False.
    """

    def __init__(
        self,
        fetcher: Fetcher | None = None,
        archive_reader: ArchiveReader | None = None,
        settings: SyncSettings | None = None,
        reference_date: date | None = None,
        clock: Callable[[], datetime] | None = None,
        strict: bool | None = None,
    ):
        self.settings = settings or default_settings
        self.base_url = self.settings.base_url.rstrip("/") + "/"
        self.strict = self.settings.strict_parsing if strict is None else strict
        self._clock = clock or utc_now
        self._fixed_date = reference_date
        self._pinned_date = reference_date or _yesterday(self._clock)

        self._owns_fetcher = fetcher is None
        self._fetcher = fetcher or HttpFetcher(
            timeout=self.settings.timeout,
            user_agent=self.settings.user_agent,
            max_connections=self.settings.max_connections,
            max_keepalive_connections=self.settings.max_keepalive_connections,
            chunk_size=self.settings.chunk_size,
        )
        self._archive_reader = archive_reader or ZipArchiveReader()

    async def __aenter__(self) -> "GeoNamesClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self):
        """Close the fetcher if this client created it."""
        if self._owns_fetcher:
            await self._fetcher.close()

    @property
    def reference_date(self) -> date:
        if self._fixed_date is None and not self.settings.pin_reference_date:
            return _yesterday(self._clock)
        return self._pinned_date

    def full_snapshot_url(self) -> str:
        return self.base_url + FULL_SNAPSHOT_FILENAME

    def modifications_url(self) -> str:
        return self.base_url + modifications_filename(self.reference_date)

    def deletions_url(self) -> str:
        return self.base_url + deletions_filename(self.reference_date)

    @asynccontextmanager
    async def _normalized(self, operation: str, message: str) -> AsyncIterator[_Progress]:
        """Funnel every failure of one operation into SyncCancelled or SyncFailure."""
        progress = _Progress()
        try:
            yield progress
        except SyncCancelled as e:
            logger.info("%s cancelled during %s", operation, progress.stage.value)
            raise SyncCancelled(operation=operation, stage=progress.stage) from e
        except asyncio.CancelledError:
            # Task cancellation must reach asyncio.timeout() and TaskGroup as-is
            logger.info("%s task cancelled during %s", operation, progress.stage.value)
            raise
        except Exception as e:
            logger.info("%s failed during %s: %s", operation, progress.stage.value, e)
            raise SyncFailure(message, operation, progress.stage, e) from e

    async def fetch_full_snapshot(self, cancel: CancelSignal | None = None) -> list[PlaceRecord]:
        """Download cities500.zip and parse every place it contains."""
        logger.info("fetch_full_snapshot called")
        async with self._normalized("full_snapshot", "Failed to get db from geonames.org.") as progress:
            check_cancelled(cancel, Stage.DOWNLOAD)
            data = await self._fetcher.download(self.full_snapshot_url(), cancel)

            progress.stage = Stage.EXTRACT
            files = self._archive_reader.extract_all(data)
            entry = files.get(FULL_SNAPSHOT_ENTRY)
            if entry is None:
                raise MissingEntryError(FULL_SNAPSHOT_ENTRY)

            progress.stage = Stage.PARSE
            check_cancelled(cancel, Stage.PARSE)
            records = parse_place_rows(entry, strict=self.strict)

        logger.info("fetch_full_snapshot returned %d places", len(records))
        return records

    async def fetch_modifications(self, cancel: CancelSignal | None = None) -> list[PlaceRecord]:
        """Download the modifications diff for the reference date."""
        logger.info("fetch_modifications called")
        async with self._normalized("modifications", "Failed to get modifications from geonames.org.") as progress:
            check_cancelled(cancel, Stage.DOWNLOAD)
            data = await self._fetcher.download(self.modifications_url(), cancel)

            progress.stage = Stage.PARSE
            check_cancelled(cancel, Stage.PARSE)
            records = parse_place_rows(data, strict=self.strict)

        logger.info("fetch_modifications returned %d places", len(records))
        return records

    async def fetch_deletions(self, cancel: CancelSignal | None = None) -> list[DeletionRecord]:
        """Download the deletions diff for the reference date."""
        logger.info("fetch_deletions called")
        async with self._normalized("deletions", "Failed to get deletes from geonames.org.") as progress:
            check_cancelled(cancel, Stage.DOWNLOAD)
            data = await self._fetcher.download(self.deletions_url(), cancel)

            progress.stage = Stage.PARSE
            check_cancelled(cancel, Stage.PARSE)
            records = parse_deletion_rows(data, strict=self.strict)

        logger.info("fetch_deletions returned %d deletions", len(records))
        return records


def _yesterday(clock: Callable[[], datetime]) -> date:
    return yesterday_utc(clock())
