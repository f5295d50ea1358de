"""Health-check interface shared by all doctor checks."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class CheckStatus(str, Enum):
    """Outcome level of a single check."""

    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class CheckContext:
    """Inputs for one check invocation.

    ``rig_name`` restricts the scan to a single rig; ``None`` means all rigs.
    """

    town_root: Path
    rig_name: str | None = None
    verbose: bool = False


@dataclass
class CheckResult:
    """Structured outcome returned by ``BaseCheck.run``."""

    name: str
    status: CheckStatus
    message: str
    details: list[str] = field(default_factory=list)
    fix_hint: str = ""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "status": self.status.value,
            "message": self.message,
            "details": list(self.details),
            "fix_hint": self.fix_hint,
        }


class BaseCheck(ABC):
    """A named, self-describing health check."""

    name: str = ""
    description: str = ""

    @abstractmethod
    def run(self, ctx: CheckContext) -> CheckResult:
        """Run the check. Implementations report failures in the result."""

    def result(
        self,
        status: CheckStatus,
        message: str,
        details: list[str] | None = None,
        fix_hint: str = "",
    ) -> CheckResult:
        return CheckResult(
            name=self.name,
            status=status,
            message=message,
            details=details or [],
            fix_hint=fix_hint,
        )


__all__ = ["BaseCheck", "CheckContext", "CheckResult", "CheckStatus"]
