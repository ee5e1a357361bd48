"""Artifact naming derived from the creation timestamp.

Filenames embed a millisecond UTC timestamp, so plain string sorting of
keys is chronological sorting.  Two backups started within the same
millisecond produce the same name; nothing here detects that.

Usage:
    >>> from datetime import datetime, timezone
    >>> next_filename(datetime(2025, 11, 19, 1, 0, tzinfo=timezone.utc))
    'backup-2025-11-19T01-00-00-000Z.sql'
"""

import re
from datetime import date, datetime, time, timezone

BACKUP_PREFIX = "backup-"
BACKUP_SUFFIX = ".sql"

_FILENAME_PATTERN = re.compile(
    r"^backup-(\d{4})-(\d{2})-(\d{2})T(\d{2})-(\d{2})-(\d{2})-(\d{3})Z\.sql$"
)


def _as_utc(value: datetime) -> datetime:
    # Naive datetimes are taken to already be UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def isoformat_utc(value: datetime | date) -> str:
    """Format as ISO-8601 in UTC with millisecond precision and ``Z``.

    A ``date`` is treated as midnight UTC.

    Example:
        >>> isoformat_utc(datetime(2024, 3, 1, 12, 30, 5, 123456, tzinfo=timezone.utc))
        '2024-03-01T12:30:05.123Z'
    """
    if not isinstance(value, datetime):
        value = datetime.combine(value, time(0, 0), tzinfo=timezone.utc)
    utc = _as_utc(value)
    return utc.strftime("%Y-%m-%dT%H:%M:%S") + f".{utc.microsecond // 1000:03d}Z"


def next_filename(now: datetime) -> str:
    """Derive the artifact name for a backup created at ``now``."""
    stamp = isoformat_utc(now).replace(":", "-").replace(".", "-")
    return f"{BACKUP_PREFIX}{stamp}{BACKUP_SUFFIX}"


def backup_date(now: datetime) -> str:
    """Calendar date (UTC) of a backup, ``YYYY-MM-DD``."""
    return isoformat_utc(now).split("T")[0]


def parse_filename(key: str) -> datetime | None:
    """Recover the creation time from an artifact name.

    Returns:
        Aware UTC datetime, or ``None`` if ``key`` was not produced by
        ``next_filename``.
    """
    match = _FILENAME_PATTERN.match(key)
    if not match:
        return None
    year, month, day, hour, minute, second, millis = (int(g) for g in match.groups())
    try:
        return datetime(
            year, month, day, hour, minute, second, millis * 1000, tzinfo=timezone.utc
        )
    except ValueError:
        return None
