"""Tolerant parsing of record-store ``updated_at`` timestamps.

Stores write timestamps in slightly different shapes depending on the
writer version.  Formats are tried in a fixed priority order and the first
successful parse wins::

    2025-01-02T15:04:05.123-08:00   # date-time with offset
    2025-01-02T15:04:05             # date-time, no offset (UTC)
    2025-01-02                      # date only (midnight UTC)

Results are always timezone-aware so they compare cleanly against the scan
cutoff.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from town_doctor.errors import UnparseableTimestamp


def _parse_with_offset(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None or "T" not in value.upper():
        raise ValueError("missing time or offset")
    return parsed


def _parse_naive_datetime(value: str) -> datetime:
    # Fractional seconds are allowed even though the writer format omits them
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None or "T" not in value.upper():
        raise ValueError("not a zone-less date-time")
    return parsed.replace(tzinfo=UTC)


def _parse_date_only(value: str) -> datetime:
    return datetime.strptime(value, "%Y-%m-%d").replace(tzinfo=UTC)


TIMESTAMP_PARSERS: tuple[tuple[str, Callable[[str], datetime]], ...] = (
    ("rfc3339", _parse_with_offset),
    ("datetime", _parse_naive_datetime),
    ("date", _parse_date_only),
)


def parse_timestamp(value: str) -> datetime:
    """Parse a store timestamp, trying each known format in order.

    Raises:
        UnparseableTimestamp: If no format matches.
    """
    text = (value or "").strip()
    for _name, parser in TIMESTAMP_PARSERS:
        try:
            return parser(text)
        except ValueError:
            continue
    raise UnparseableTimestamp(value)


__all__ = ["TIMESTAMP_PARSERS", "parse_timestamp"]
