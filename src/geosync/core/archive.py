"""Zip archive extraction into in-memory buffers."""

import io
import logging
import zipfile
import zlib

from ..errors import ArchiveError

logger = logging.getLogger(__name__)


class ZipArchiveReader:
    """Reads every entry of a zip archive held in memory."""

    def extract_all(self, data: bytes) -> dict[str, bytes]:
        files: dict[str, bytes] = {}
        try:
            with zipfile.ZipFile(io.BytesIO(data)) as archive:
                for info in archive.infolist():
                    if info.is_dir():
                        continue
                    files[info.filename] = archive.read(info)
        except (zipfile.BadZipFile, zipfile.LargeZipFile, zlib.error, OSError, EOFError, RuntimeError) as e:
            raise ArchiveError(f"Failed to get files from zip: {e}") from e

        logger.debug("Extracted %d entries: %s", len(files), sorted(files))
        return files
