"""Shared fixtures: in-memory record stores and on-disk town layouts."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from town_doctor.beads.models import Issue
from town_doctor.errors import AttachedUnitUnresolvable, StoreUnavailable

NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=UTC)


def ts(delta: timedelta) -> str:
    """RFC 3339 timestamp ``delta`` before NOW."""
    return (NOW - delta).isoformat()


def anchor(
    issue_id: str,
    molecule: str | None = None,
    *,
    title: str = "",
    assignee: str = "",
) -> Issue:
    """A pinned issue, optionally carrying an attachment."""
    description = ""
    if molecule:
        description = f"attached_molecule: {molecule}\nattached_at: {ts(timedelta())}"
    return Issue(
        id=issue_id,
        title=title or f"Work on {issue_id}",
        assignee=assignee,
        status="pinned",
        description=description,
    )


def molecule(
    issue_id: str,
    updated_at: str,
    *,
    status: str = "in_progress",
    title: str = "",
) -> Issue:
    return Issue(
        id=issue_id,
        title=title or f"Molecule {issue_id}",
        status=status,
        updated_at=updated_at,
    )


class FakeStore:
    """In-memory ``RecordStore``."""

    def __init__(self, *issues: Issue, fail_list: bool = False) -> None:
        self.issues = {issue.id: issue for issue in issues}
        self.fail_list = fail_list
        self.shown: list[str] = []

    def list(self, status: str) -> list[Issue]:
        if self.fail_list:
            raise StoreUnavailable("fake", "store is locked")
        return [i for i in self.issues.values() if i.status == status]

    def show(self, issue_id: str) -> Issue:
        self.shown.append(issue_id)
        try:
            return self.issues[issue_id]
        except KeyError:
            raise AttachedUnitUnresolvable(issue_id) from None


class StoreMap:
    """Store factory keyed by ``WorkerStore.location``; unknown stores are empty."""

    def __init__(self, stores: dict[str, FakeStore] | None = None) -> None:
        self.stores = stores or {}
        self.opened: list[str] = []

    def __call__(self, worker_store):
        self.opened.append(worker_store.location)
        return self.stores.get(worker_store.location, FakeStore())


def make_town(
    root: Path, layout: dict[str, list[str]], *, town_store: bool = False
) -> Path:
    """Create a town on disk.

    ``layout`` maps rig name to worker paths such as ``polecats/toast`` or
    ``crew/max``; each worker gets a ``.beads`` directory.
    """
    root.mkdir(parents=True, exist_ok=True)
    (root / "mayor").mkdir(exist_ok=True)
    (root / "mayor" / "town.json").write_text("{}")
    if town_store:
        (root / ".beads").mkdir(exist_ok=True)
    for rig, workers in layout.items():
        (root / rig).mkdir(exist_ok=True)
        if not workers:
            (root / rig / "polecats").mkdir(exist_ok=True)
        for worker in workers:
            (root / rig / worker / ".beads").mkdir(parents=True, exist_ok=True)
    return root


@pytest.fixture
def town(tmp_path):
    return tmp_path / "town"
