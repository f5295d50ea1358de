"""Doctor health checks for a town."""

from town_doctor.doctor.base import BaseCheck, CheckContext, CheckResult, CheckStatus
from town_doctor.doctor.stale_check import (
    DEFAULT_STALE_THRESHOLD,
    StaleAttachmentsCheck,
)

__all__ = [
    "BaseCheck",
    "CheckContext",
    "CheckResult",
    "CheckStatus",
    "DEFAULT_STALE_THRESHOLD",
    "StaleAttachmentsCheck",
]
