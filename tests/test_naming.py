"""Tests for artifact naming."""

from datetime import date, datetime, timedelta, timezone

from db_backup.backup.naming import (
    BACKUP_PREFIX,
    backup_date,
    isoformat_utc,
    next_filename,
    parse_filename,
)


class TestIsoformatUtc:
    """UTC ISO-8601 with milliseconds."""

    def test_millisecond_precision(self):
        value = datetime(2024, 3, 1, 12, 30, 5, 999999, tzinfo=timezone.utc)
        assert isoformat_utc(value) == "2024-03-01T12:30:05.999Z"

    def test_offset_is_normalized(self):
        value = datetime(2024, 1, 1, 0, 30, tzinfo=timezone(timedelta(hours=-5)))
        assert isoformat_utc(value) == "2024-01-01T05:30:00.000Z"

    def test_date(self):
        assert isoformat_utc(date(2024, 2, 29)) == "2024-02-29T00:00:00.000Z"


class TestNextFilename:
    """Filenames are derived from the creation time."""

    def test_example_name(self):
        now = datetime(2025, 11, 19, 1, 0, 0, tzinfo=timezone.utc)
        assert next_filename(now) == "backup-2025-11-19T01-00-00-000Z.sql"

    def test_prefix(self):
        assert next_filename(datetime.now(timezone.utc)).startswith(BACKUP_PREFIX)

    def test_lexicographic_order_is_chronological(self):
        start = datetime(2025, 1, 31, 23, 59, 59, 998000, tzinfo=timezone.utc)
        times = [start + timedelta(milliseconds=i) for i in range(5)]
        times += [start + timedelta(days=40), start + timedelta(days=400)]
        names = [next_filename(t) for t in times]
        assert sorted(names) == names
        assert len(set(names)) == len(names)

    def test_backup_date(self):
        now = datetime(2025, 11, 19, 23, 0, tzinfo=timezone(timedelta(hours=-3)))
        assert backup_date(now) == "2025-11-20"


class TestParseFilename:
    """Recovering the creation time from a key."""

    def test_recovers_timestamp(self):
        now = datetime(2025, 11, 19, 1, 2, 3, 456000, tzinfo=timezone.utc)
        assert parse_filename(next_filename(now)) == now

    def test_foreign_key_returns_none(self):
        assert parse_filename("notes.txt") is None
        assert parse_filename("backup-latest.sql") is None

    def test_impossible_date_returns_none(self):
        assert parse_filename("backup-2025-13-40T01-00-00-000Z.sql") is None
