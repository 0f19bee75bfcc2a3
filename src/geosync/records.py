"""GeoNames record types and tab-delimited row parsing.

Rows have no header and are mapped by position. The dump files are not a
validated API: columns go missing and numbers are sometimes garbled, so by
default anomalies are absorbed and the row is still produced with empty
values. ``strict=True`` turns the first anomaly into a ``RowFormatError``.
"""

import logging
from dataclasses import asdict, dataclass
from datetime import date

from .errors import RowFormatError

logger = logging.getLogger(__name__)

PLACE_COLUMNS = (
    "geoname_id",
    "name",
    "ascii_name",
    "alternate_names",
    "latitude",
    "longitude",
    "feature_class",
    "feature_code",
    "country_code",
    "cc2",
    "admin1_code",
    "admin2_code",
    "admin3_code",
    "admin4_code",
    "population",
    "elevation",
    "dem",
    "timezone",
    "modification_date",
)

DELETION_COLUMNS = ("geoname_id", "name", "comment")


@dataclass(frozen=True)
class PlaceRecord:
    """One row of the geoname table (full snapshot or modifications diff)."""

    geoname_id: int
    name: str = ""
    ascii_name: str = ""
    alternate_names: tuple[str, ...] = ()
    latitude: float | None = None
    longitude: float | None = None
    feature_class: str = ""
    feature_code: str = ""
    country_code: str = ""
    cc2: tuple[str, ...] = ()
    admin1_code: str = ""
    admin2_code: str = ""
    admin3_code: str = ""
    admin4_code: str = ""
    population: int | None = None
    elevation: int | None = None
    dem: int | None = None
    timezone: str = ""
    modification_date: date | None = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["alternate_names"] = list(self.alternate_names)
        data["cc2"] = list(self.cc2)
        if self.modification_date is not None:
            data["modification_date"] = self.modification_date.isoformat()
        return data


@dataclass(frozen=True)
class DeletionRecord:
    """A place removed upstream, with the reason given by the editor."""

    geoname_id: int
    name: str = ""
    comment: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


class _RowReader:
    """Positional field access for one row with tolerant or strict conversion."""

    def __init__(self, fields: list[str], columns: tuple[str, ...], line: int, strict: bool):
        self.fields = fields
        self.columns = columns
        self.line = line
        self.strict = strict
        self.defaulted = 0

    def _raw(self, column: str) -> str | None:
        index = self.columns.index(column)
        if index < len(self.fields):
            return self.fields[index]
        if self.strict:
            raise RowFormatError(self.line, column)
        self.defaulted += 1
        return None

    def _invalid(self, column: str, value: str) -> None:
        if self.strict:
            raise RowFormatError(self.line, column, value)
        self.defaulted += 1

    def text(self, column: str) -> str:
        return self._raw(column) or ""

    def items(self, column: str) -> tuple[str, ...]:
        raw = self._raw(column)
        if not raw:
            return ()
        return tuple(item for item in raw.split(",") if item)

    def integer(self, column: str, required: bool = False) -> int | None:
        raw = self._raw(column)
        if raw is None:
            return 0 if required else None
        raw = raw.strip()
        if not raw:
            if required:
                self._invalid(column, raw)
                return 0
            return None
        try:
            return int(raw)
        except ValueError:
            self._invalid(column, raw)
            return 0 if required else None

    def number(self, column: str) -> float | None:
        raw = self._raw(column)
        if raw is None or not raw.strip():
            return None
        try:
            return float(raw)
        except ValueError:
            self._invalid(column, raw)
            return None

    def day(self, column: str) -> date | None:
        raw = self._raw(column)
        if raw is None or not raw.strip():
            return None
        try:
            return date.fromisoformat(raw.strip())
        except ValueError:
            self._invalid(column, raw)
            return None


def _iter_rows(data: bytes, strict: bool):
    text = data.decode("utf-8", errors="strict" if strict else "replace")
    if text.startswith("\ufeff"):
        text = text[1:]
    for line_no, line in enumerate(text.split("\n"), start=1):
        line = line.rstrip("\r")
        if not line:
            continue
        yield line_no, line.split("\t")


def parse_place_row(fields: list[str], line: int = 1, strict: bool = False) -> PlaceRecord:
    """Map one split row to a PlaceRecord."""
    return _place_from_reader(_RowReader(fields, PLACE_COLUMNS, line, strict))


def _place_from_reader(row: _RowReader) -> PlaceRecord:
    return PlaceRecord(
        geoname_id=row.integer("geoname_id", required=True),
        name=row.text("name"),
        ascii_name=row.text("ascii_name"),
        alternate_names=row.items("alternate_names"),
        latitude=row.number("latitude"),
        longitude=row.number("longitude"),
        feature_class=row.text("feature_class"),
        feature_code=row.text("feature_code"),
        country_code=row.text("country_code"),
        cc2=row.items("cc2"),
        admin1_code=row.text("admin1_code"),
        admin2_code=row.text("admin2_code"),
        admin3_code=row.text("admin3_code"),
        admin4_code=row.text("admin4_code"),
        population=row.integer("population"),
        elevation=row.integer("elevation"),
        dem=row.integer("dem"),
        timezone=row.text("timezone"),
        modification_date=row.day("modification_date"),
    )


def parse_place_rows(data: bytes, strict: bool = False) -> list[PlaceRecord]:
    """Parse a geoname table dump into records, in file order."""
    records = []
    defaulted = 0
    for line_no, fields in _iter_rows(data, strict):
        row = _RowReader(fields, PLACE_COLUMNS, line_no, strict)
        records.append(_place_from_reader(row))
        defaulted += row.defaulted
    if defaulted:
        logger.debug("Defaulted %d unreadable fields across %d place rows", defaulted, len(records))
    return records


def parse_deletion_rows(data: bytes, strict: bool = False) -> list[DeletionRecord]:
    """Parse a deletes-YYYY-MM-DD.txt file into records, in file order."""
    records = []
    defaulted = 0
    for line_no, fields in _iter_rows(data, strict):
        row = _RowReader(fields, DELETION_COLUMNS, line_no, strict)
        records.append(DeletionRecord(
            geoname_id=row.integer("geoname_id", required=True),
            name=row.text("name"),
            comment=row.text("comment"),
        ))
        defaulted += row.defaulted
    if defaulted:
        logger.debug("Defaulted %d unreadable fields across %d deletion rows", defaulted, len(records))
    return records
