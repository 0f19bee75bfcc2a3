"""Reference-date helpers and remote artifact names."""

from datetime import date, datetime, timedelta, timezone

FULL_SNAPSHOT_FILENAME = "cities500.zip"
FULL_SNAPSHOT_ENTRY = "cities500.txt"


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def reference_date(now: datetime | None = None) -> date:
    """Return the UTC calendar day before ``now``.

    Naive datetimes are taken to be UTC already.
    """
    if now is None:
        now = utc_now()
    elif now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.date() - timedelta(days=1)


def modifications_filename(day: date) -> str:
    return f"modifications-{day.isoformat()}.txt"


def deletions_filename(day: date) -> str:
    return f"deletes-{day.isoformat()}.txt"
