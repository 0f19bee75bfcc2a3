"""Error taxonomy for synchronization calls."""

import asyncio
from enum import Enum


class Stage(str, Enum):
    """Step of a fetch operation where a failure or cancellation surfaced."""

    DOWNLOAD = "download"
    EXTRACT = "extract"
    PARSE = "parse"


class SyncError(Exception):
    """Base class for the specific causes raised by internal helpers."""


class DownloadError(SyncError):
    """Transport-level failure while downloading an artifact."""


class HttpStatusError(DownloadError):
    """The server answered with a non-success status code."""

    def __init__(self, status_code: int, url: str):
        self.status_code = status_code
        self.url = url
        super().__init__(f"Bad response status code {status_code} for {url}")


class ArchiveError(SyncError):
    """The archive could not be opened or one of its entries could not be read."""


class MissingEntryError(ArchiveError):
    def __init__(self, entry: str):
        self.entry = entry
        super().__init__(f"Archive has no entry named {entry!r}")


class RowFormatError(SyncError):
    """A row did not match the expected layout (strict parsing only)."""

    def __init__(self, line: int, column: str, value: str | None = None):
        self.line = line
        self.column = column
        self.value = value
        if value is None:
            message = f"Line {line}: missing column {column!r}"
        else:
            message = f"Line {line}: invalid value {value!r} for column {column!r}"
        super().__init__(message)


class SyncFailure(Exception):
    """Normalized failure of one public fetch operation.

    The original exception is kept as ``__cause__``; ``str()`` appends its
    message so details such as the HTTP status are visible without walking
    the chain.
    """

    def __init__(self, message: str, operation: str, stage: Stage, cause: BaseException | None = None):
        self.message = message
        self.operation = operation
        self.stage = stage
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message} ({self.stage.value}: {self.cause})"


class SyncCancelled(asyncio.CancelledError):
    """The caller's cancel signal was observed at a checkpoint.

    Subclasses ``asyncio.CancelledError`` so cancellation keeps propagating
    as cancellation and is never caught by ``except Exception``. A plain
    ``CancelledError`` from ``task.cancel()`` or ``asyncio.timeout()`` is
    passed through untouched.
    """

    def __init__(self, message: str = "A task was cancelled.", operation: str | None = None,
                 stage: Stage | None = None):
        self.message = message
        self.operation = operation
        self.stage = stage
        super().__init__(message)
