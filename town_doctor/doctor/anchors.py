"""Resolve pinned anchors in one store and classify their attachments."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from town_doctor.beads.client import RecordStore
from town_doctor.beads.models import (
    STATUS_IN_PROGRESS,
    STATUS_PINNED,
    parse_attachment_fields,
)
from town_doctor.errors import AttachedUnitUnresolvable, UnparseableTimestamp
from town_doctor.doctor.timestamps import parse_timestamp

logger = logging.getLogger(__name__)

MISSING_MOLECULE_TITLE = "(molecule not found)"


@dataclass
class StaleAttachment:
    """One attached molecule that looks stuck.

    ``last_updated`` is ``None`` when the molecule could not be fetched; the
    ``stale_duration`` of such findings is synthesized, not measured.
    """

    rig: str
    worker: str
    pinned_bead_id: str
    pinned_title: str
    assignee: str
    molecule_id: str
    molecule_title: str
    last_updated: datetime | None
    stale_duration: timedelta

    @property
    def unresolved(self) -> bool:
        return self.last_updated is None


@dataclass
class StoreScan:
    """Findings from a single store plus the number of attachments examined."""

    findings: list[StaleAttachment] = field(default_factory=list)
    checked: int = 0


def check_store(
    store: RecordStore,
    cutoff: datetime,
    threshold: timedelta,
    *,
    rig: str = "",
    worker: str = "",
    now: datetime | None = None,
) -> StoreScan:
    """Scan one store's pinned anchors for stale attachments.

    Every anchor that declares an attached molecule is counted as checked.
    A molecule is stale when it is ``in_progress`` and was last updated
    strictly before ``cutoff``.  A molecule that cannot be fetched is always
    reported, with a duration of ``(now - cutoff) + threshold`` so it sorts
    beyond any real finding.

    Raises:
        StoreUnavailable: If the store's pinned anchors cannot be listed.
    """
    now = now or datetime.now(UTC)
    scan = StoreScan()

    for pinned in store.list(status=STATUS_PINNED):
        attachment = parse_attachment_fields(pinned)
        if attachment is None or not attachment.attached_molecule:
            continue

        scan.checked += 1
        molecule_id = attachment.attached_molecule

        try:
            mol = store.show(molecule_id)
        except AttachedUnitUnresolvable as e:
            logger.debug("Attached molecule %s unresolvable: %s", molecule_id, e)
            scan.findings.append(
                StaleAttachment(
                    rig=rig,
                    worker=worker,
                    pinned_bead_id=pinned.id,
                    pinned_title=pinned.title,
                    assignee=pinned.assignee,
                    molecule_id=molecule_id,
                    molecule_title=MISSING_MOLECULE_TITLE,
                    last_updated=None,
                    stale_duration=(now - cutoff) + threshold,
                )
            )
            continue

        try:
            updated_at = parse_timestamp(mol.updated_at)
        except UnparseableTimestamp as e:
            logger.debug("Skipping %s -> %s: %s", pinned.id, molecule_id, e)
            continue

        if mol.status == STATUS_IN_PROGRESS and updated_at < cutoff:
            scan.findings.append(
                StaleAttachment(
                    rig=rig,
                    worker=worker,
                    pinned_bead_id=pinned.id,
                    pinned_title=pinned.title,
                    assignee=pinned.assignee,
                    molecule_id=mol.id,
                    molecule_title=mol.title,
                    last_updated=updated_at,
                    stale_duration=now - updated_at,
                )
            )

    return scan


__all__ = ["MISSING_MOLECULE_TITLE", "StaleAttachment", "StoreScan", "check_store"]
