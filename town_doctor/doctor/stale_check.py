"""Stale-attachments check: find attached molecules nobody is working on.

A polecat that crashes or hangs leaves its pinned bead pointing at an
``in_progress`` molecule that stops receiving updates.  This check walks
every rig's worker stores plus the town-level store, and reports molecules
idle for longer than the threshold, or no longer resolvable at all.

One unreadable store never blocks the report: it is skipped and logged, and
the rest of the town is still checked.  Only an unreadable town root makes
the check fail.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import Path

from town_doctor.beads.client import BeadsClient, RecordStore
from town_doctor.doctor.anchors import StaleAttachment, check_store
from town_doctor.doctor.base import BaseCheck, CheckContext, CheckResult, CheckStatus
from town_doctor.doctor.discovery import (
    WorkerStore,
    find_worker_stores,
    rigs_to_scan,
    town_store,
)
from town_doctor.doctor.durations import format_duration
from town_doctor.errors import DiscoveryError, StoreUnavailable

logger = logging.getLogger(__name__)

# Attachments with no molecule activity for this long may indicate stuck work
DEFAULT_STALE_THRESHOLD = timedelta(hours=1)

FIX_HINT = (
    "Check if polecats are stuck or crashed. Use 'gt witness nudge <polecat>' "
    "or 'gt polecat kill <name>' if needed"
)

StoreFactory = Callable[[WorkerStore], RecordStore]


def default_store_factory(worker_store: WorkerStore) -> RecordStore:
    """Open a ``bd``-backed store using the configured command and timeout."""
    from town_doctor.settings import get_bd_command, get_bd_timeout

    return BeadsClient(
        worker_store.work_dir,
        command=get_bd_command(),
        timeout=get_bd_timeout(),
    )


@dataclass
class ScanAccumulator:
    """Per-run state, created by ``run`` and discarded when it returns."""

    cutoff: datetime
    now: datetime
    findings: list[StaleAttachment] = field(default_factory=list)
    checked: int = 0
    skipped: list[tuple[WorkerStore, str]] = field(default_factory=list)


class StaleAttachmentsCheck(BaseCheck):
    """Detect attached molecules that haven't been updated in too long."""

    name = "stale-attachments"
    description = "Check for attached molecules that haven't been updated in too long"

    def __init__(
        self,
        threshold: timedelta = DEFAULT_STALE_THRESHOLD,
        *,
        store_factory: StoreFactory = default_store_factory,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.threshold = threshold
        self.store_factory = store_factory
        self.clock = clock or (lambda: datetime.now(UTC))

    def run(self, ctx: CheckContext) -> CheckResult:
        town_root = Path(ctx.town_root)
        try:
            rigs = rigs_to_scan(town_root, ctx.rig_name)
        except DiscoveryError as e:
            logger.error("Rig discovery failed: %s", e)
            return self.result(
                CheckStatus.ERROR, "Failed to discover rigs", details=[str(e)]
            )

        if not rigs:
            return self.result(CheckStatus.OK, "No rigs configured")

        now = self.clock()
        acc = ScanAccumulator(cutoff=now - self.threshold, now=now)

        for rig in rigs:
            for worker_store in find_worker_stores(town_root, rig):
                self._scan_store(worker_store, acc)

        town = town_store(town_root)
        try:
            has_town_store = town.store_path.is_dir()
        except OSError as e:
            logger.info("Skipping town store %s: %s", town.store_path, e)
            acc.skipped.append((town, str(e)))
            has_town_store = False
        if has_town_store:
            self._scan_store(town, acc)

        if acc.skipped:
            logger.info(
                "Skipped %d unreadable store(s) during %s", len(acc.skipped), self.name
            )
        return self._render(acc, verbose=ctx.verbose)

    def _scan_store(self, worker_store: WorkerStore, acc: ScanAccumulator) -> None:
        try:
            scan = check_store(
                self.store_factory(worker_store),
                acc.cutoff,
                self.threshold,
                rig=worker_store.rig,
                worker=worker_store.worker,
                now=acc.now,
            )
        except StoreUnavailable as e:
            logger.info("Skipping store %s: %s", worker_store.location, e)
            acc.skipped.append((worker_store, str(e)))
            return
        acc.findings.extend(scan.findings)
        acc.checked += scan.checked

    def _render(self, acc: ScanAccumulator, *, verbose: bool = False) -> CheckResult:
        if acc.findings:
            details = [
                self._format_finding(finding, verbose=verbose) for finding in acc.findings
            ]
            return self.result(
                CheckStatus.WARNING,
                f"{len(acc.findings)} stale attachment(s) found "
                f"(no activity for >{format_duration(self.threshold)})",
                details=details,
                fix_hint=FIX_HINT,
            )

        if acc.checked == 0:
            return self.result(CheckStatus.OK, "No attachments to check")

        return self.result(
            CheckStatus.OK, f"Checked {acc.checked} attachment(s), none stale"
        )

    @staticmethod
    def _format_finding(finding: StaleAttachment, *, verbose: bool = False) -> str:
        location = finding.rig or "town"
        if verbose and finding.rig and finding.worker:
            location = f"{finding.rig}/{finding.worker}"
        assignee = f" (assignee: {finding.assignee})" if finding.assignee else ""
        return (
            f"{location}: {finding.pinned_title} → {finding.molecule_title}"
            f"{assignee} (stale for {format_duration(finding.stale_duration)})"
        )


__all__ = [
    "DEFAULT_STALE_THRESHOLD",
    "FIX_HINT",
    "ScanAccumulator",
    "StaleAttachmentsCheck",
    "default_store_factory",
]
