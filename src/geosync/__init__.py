"""Client for the GeoNames dump: full snapshot plus daily diffs."""

from .client import GeoNamesClient
from .errors import Stage, SyncCancelled, SyncFailure
from .records import DeletionRecord, PlaceRecord

__version__ = "0.1.0"

__all__ = [
    "DeletionRecord",
    "GeoNamesClient",
    "PlaceRecord",
    "Stage",
    "SyncCancelled",
    "SyncFailure",
]
