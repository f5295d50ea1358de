"""Tests for tolerant timestamp parsing."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from town_doctor.doctor.timestamps import TIMESTAMP_PARSERS, parse_timestamp
from town_doctor.errors import UnparseableTimestamp


class TestParseTimestamp:
    def test_rfc3339_utc(self):
        assert parse_timestamp("2025-01-02T15:04:05Z") == datetime(
            2025, 1, 2, 15, 4, 5, tzinfo=UTC
        )

    def test_rfc3339_with_offset(self):
        parsed = parse_timestamp("2025-01-02T15:04:05-08:00")
        assert parsed.utcoffset() == timedelta(hours=-8)
        assert parsed == datetime(2025, 1, 2, 23, 4, 5, tzinfo=UTC)

    def test_rfc3339_fractional_seconds(self):
        parsed = parse_timestamp("2025-01-02T15:04:05.123456+00:00")
        assert parsed.microsecond == 123456

    def test_without_offset_is_utc(self):
        parsed = parse_timestamp("2025-01-02T15:04:05")
        assert parsed == datetime(2025, 1, 2, 15, 4, 5, tzinfo=UTC)

    def test_without_offset_fractional_seconds(self):
        parsed = parse_timestamp("2026-01-15T09:00:00.5")
        assert parsed == datetime(2026, 1, 15, 9, 0, 0, 500000, tzinfo=UTC)

    def test_without_offset_nanoseconds(self):
        parsed = parse_timestamp("2026-01-15T09:00:00.123456789")
        assert parsed.tzinfo is UTC
        assert parsed.replace(microsecond=0) == datetime(2026, 1, 15, 9, tzinfo=UTC)
        assert parsed.microsecond // 1000 == 123

    def test_space_separator_rejected_by_datetime_parsers(self):
        with pytest.raises(UnparseableTimestamp):
            parse_timestamp("2026-01-15 09:00:00")

    def test_date_only_is_midnight_utc(self):
        parsed = parse_timestamp("2025-01-02")
        assert parsed == datetime(2025, 1, 2, tzinfo=UTC)

    def test_surrounding_whitespace(self):
        assert parse_timestamp("  2025-01-02  ") == datetime(2025, 1, 2, tzinfo=UTC)

    def test_always_timezone_aware(self):
        for value in ("2025-01-02T15:04:05+02:00", "2025-01-02T15:04:05", "2025-01-02"):
            assert parse_timestamp(value).tzinfo is not None

    def test_offset_preserved(self):
        parsed = parse_timestamp("2025-06-01T08:00:00+05:30")
        assert parsed.tzinfo == timezone(timedelta(hours=5, minutes=30))

    @pytest.mark.parametrize(
        "value", ["not-a-date", "", "2025-13-45", "15:04:05", "yesterday", "2025/01/02"]
    )
    def test_unparseable(self, value):
        with pytest.raises(UnparseableTimestamp) as exc_info:
            parse_timestamp(value)
        assert exc_info.value.value == value

    def test_unparseable_is_value_error(self):
        with pytest.raises(ValueError):
            parse_timestamp("not-a-date")

    def test_parser_priority_order(self):
        assert [name for name, _ in TIMESTAMP_PARSERS] == ["rfc3339", "datetime", "date"]
