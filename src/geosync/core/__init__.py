"""Core sync components."""

from .archive import ZipArchiveReader
from .fetcher import HttpFetcher
from .protocols import ArchiveReader, CancelSignal, Fetcher, check_cancelled

__all__ = [
    "ArchiveReader",
    "CancelSignal",
    "Fetcher",
    "HttpFetcher",
    "ZipArchiveReader",
    "check_cancelled",
]
