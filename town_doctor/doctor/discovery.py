"""Rig and worker discovery for a town directory.

Town layout::

    <town>/
        .beads/                     ← town-level store (global anchors)
        mayor/
        <rig>/
            polecats/<name>/.beads  ← primary workers
            crew/<name>/.beads      ← auxiliary workers

Discovery reflects the filesystem at scan time only.  Workers appearing or
disappearing mid-scan are tolerated, not synchronized against.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from town_doctor.errors import DiscoveryError

logger = logging.getLogger(__name__)

STORE_MARKER = ".beads"

# Subdirectories whose presence marks a directory as a rig
RIG_MARKERS = ("polecats", "crew", STORE_MARKER)


@dataclass(frozen=True)
class WorkerKind:
    """A worker directory shape and the label prefix used when reporting."""

    directory: str
    label_prefix: str = ""

    def label(self, name: str) -> str:
        return f"{self.label_prefix}{name}"


POLECAT = WorkerKind("polecats")
CREW = WorkerKind("crew", label_prefix="crew/")
WORKER_KINDS: tuple[WorkerKind, ...] = (POLECAT, CREW)


@dataclass(frozen=True)
class WorkerStore:
    """One record store to scan: which rig and worker own it, and where it is.

    ``rig`` and ``worker`` are empty for the town-level store.
    """

    rig: str
    worker: str
    store_path: Path

    @property
    def work_dir(self) -> Path:
        """Directory containing the ``.beads`` store."""
        return self.store_path.parent

    @property
    def location(self) -> str:
        if not self.rig:
            return "town"
        return f"{self.rig}/{self.worker}" if self.worker else self.rig


def discover_rigs(town_root: Path) -> list[str]:
    """List rig names under ``town_root``, sorted by name.

    A rig is any non-hidden subdirectory containing one of ``RIG_MARKERS``.

    Raises:
        DiscoveryError: If the town root cannot be listed.
    """
    try:
        entries = sorted(town_root.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise DiscoveryError(f"cannot read town root {town_root}: {e}") from e

    rigs: list[str] = []
    for entry in entries:
        if entry.name.startswith("."):
            continue
        try:
            if not entry.is_dir():
                continue
            if any((entry / marker).is_dir() for marker in RIG_MARKERS):
                rigs.append(entry.name)
        except OSError as e:
            logger.debug("Skipping unreadable entry %s: %s", entry, e)
    return rigs


def rigs_to_scan(town_root: Path, rig_name: str | None = None) -> list[str]:
    """Return the rigs a check should visit.

    An explicit ``rig_name`` bypasses discovery entirely.
    """
    if rig_name:
        return [rig_name]
    return discover_rigs(town_root)


def find_worker_stores(
    town_root: Path,
    rig_name: str,
    kinds: tuple[WorkerKind, ...] = WORKER_KINDS,
) -> list[WorkerStore]:
    """Find every worker store in a rig, one kind at a time.

    A failure while globbing one kind is logged and does not prevent the
    remaining kinds from being scanned.
    """
    rig_path = town_root / rig_name
    stores: list[WorkerStore] = []
    for kind in kinds:
        pattern = f"{kind.directory}/*/{STORE_MARKER}"
        try:
            matches = sorted(rig_path.glob(pattern))
        except OSError as e:
            logger.info("Cannot scan %s/%s: %s", rig_name, kind.directory, e)
            continue
        for store_path in matches:
            stores.append(
                WorkerStore(
                    rig=rig_name,
                    worker=kind.label(store_path.parent.name),
                    store_path=store_path,
                )
            )
    return stores


def town_store(town_root: Path) -> WorkerStore:
    """The town-level store holding global anchors."""
    return WorkerStore(rig="", worker="", store_path=town_root / STORE_MARKER)


__all__ = [
    "CREW",
    "POLECAT",
    "STORE_MARKER",
    "WORKER_KINDS",
    "WorkerKind",
    "WorkerStore",
    "discover_rigs",
    "find_worker_stores",
    "rigs_to_scan",
    "town_store",
]
