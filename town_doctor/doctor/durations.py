"""Compact duration strings (``2h0m0s``) for check output and config."""

from __future__ import annotations

import re
from datetime import timedelta

_UNIT_SECONDS = {"h": 3600.0, "m": 60.0, "s": 1.0, "ms": 0.001}
_COMPONENT = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")


def format_duration(duration: timedelta) -> str:
    """Format a duration as hours/minutes/seconds, e.g. ``2h0m0s``.

    Sub-second precision is truncated; hours are not folded into days.
    """
    total = int(duration.total_seconds())
    sign = "-" if total < 0 else ""
    total = abs(total)
    hours, remainder = divmod(total, 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{sign}{minutes}m{seconds}s"
    return f"{sign}{seconds}s"


def parse_duration(value: str | int | float | timedelta) -> timedelta:
    """Parse ``1h``, ``90m``, ``1h30m``, ``1.5h`` or a bare number of seconds.

    Raises:
        ValueError: If the value is empty, malformed or negative.
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, int | float):
        seconds = float(value)
    else:
        text = value.strip().lower()
        if not text:
            raise ValueError("empty duration")
        try:
            seconds = float(text)
        except ValueError:
            pos = 0
            seconds = 0.0
            for match in _COMPONENT.finditer(text):
                if match.start() != pos:
                    break
                seconds += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
                pos = match.end()
            if pos != len(text):
                raise ValueError(f"invalid duration: {value!r}") from None
    if seconds < 0:
        raise ValueError(f"negative duration: {value!r}")
    return timedelta(seconds=seconds)


__all__ = ["format_duration", "parse_duration"]
