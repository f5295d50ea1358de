"""Exceptions raised by town-doctor checks and store adapters."""

from __future__ import annotations


class DoctorError(Exception):
    """Base class for health-check failures."""


class DiscoveryError(DoctorError):
    """The town root could not be listed, so no rigs can be discovered."""


class StoreUnavailable(DoctorError):
    """A record store could not be listed."""

    def __init__(self, location: str, reason: str) -> None:
        super().__init__(f"{location}: {reason}")
        self.location = location
        self.reason = reason


class AttachedUnitUnresolvable(DoctorError):
    """An anchor references a unit that cannot be fetched."""

    def __init__(self, issue_id: str, reason: str = "not found") -> None:
        super().__init__(f"{issue_id}: {reason}")
        self.issue_id = issue_id
        self.reason = reason


class UnparseableTimestamp(DoctorError, ValueError):
    """A timestamp matched none of the supported formats."""

    def __init__(self, value: str) -> None:
        super().__init__(f"unable to parse timestamp: {value!r}")
        self.value = value


__all__ = [
    "AttachedUnitUnresolvable",
    "DiscoveryError",
    "DoctorError",
    "StoreUnavailable",
    "UnparseableTimestamp",
]
