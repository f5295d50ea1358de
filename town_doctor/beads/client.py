"""Read-only access to beads stores through the ``bd`` CLI.

Health checks only ever need two operations, captured by the
:class:`RecordStore` protocol so tests can substitute an in-memory store::

    store = BeadsClient(rig_path / "polecats" / "toast")
    pinned = store.list(status="pinned")
    mol = store.show("gt-mol-42")

``bd`` is run with its working directory set to the directory that contains
``.beads/``, which is how it locates the store.
"""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import ValidationError

from town_doctor.beads.models import Issue
from town_doctor.errors import AttachedUnitUnresolvable, StoreUnavailable

logger = logging.getLogger(__name__)

DEFAULT_BD_COMMAND = "bd"
DEFAULT_BD_TIMEOUT = 30.0


@runtime_checkable
class RecordStore(Protocol):
    """The two record-store operations the health checks consume."""

    def list(self, status: str) -> list[Issue]:
        """Return records with ``status``; raise ``StoreUnavailable`` on failure."""
        ...

    def show(self, issue_id: str) -> Issue:
        """Return one record; raise ``AttachedUnitUnresolvable`` on failure."""
        ...


class BdCommandError(RuntimeError):
    """``bd`` could not be run or exited non-zero."""


class BeadsClient:
    """``RecordStore`` backed by the ``bd`` command-line tool."""

    def __init__(
        self,
        work_dir: str | Path,
        *,
        command: str = DEFAULT_BD_COMMAND,
        timeout: float = DEFAULT_BD_TIMEOUT,
    ) -> None:
        self.work_dir = Path(work_dir)
        self.command = command
        self.timeout = timeout

    def __repr__(self) -> str:
        return f"BeadsClient({str(self.work_dir)!r})"

    def _run(self, *args: str) -> str:
        cmd = [self.command, *args, "--json"]
        logger.debug("Running %s in %s", " ".join(cmd), self.work_dir)
        try:
            result = subprocess.run(
                cmd,
                cwd=self.work_dir,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise BdCommandError(f"{self.command} not found") from e
        except subprocess.TimeoutExpired as e:
            raise BdCommandError(f"timed out after {self.timeout:g}s") from e
        except OSError as e:
            raise BdCommandError(str(e)) from e

        if result.returncode != 0:
            error = result.stderr.strip().split("\n")[0] if result.stderr else ""
            raise BdCommandError(error or f"exit status {result.returncode}")
        return result.stdout

    @staticmethod
    def _decode(output: str) -> object:
        if not output.strip():
            return []
        return json.loads(output)

    def list(self, status: str) -> list[Issue]:
        location = str(self.work_dir)
        try:
            payload = self._decode(self._run("list", "--status", status))
        except BdCommandError as e:
            raise StoreUnavailable(location, str(e)) from e
        except json.JSONDecodeError as e:
            raise StoreUnavailable(location, f"invalid JSON from bd: {e}") from e

        if payload is None:
            return []
        if not isinstance(payload, list):
            raise StoreUnavailable(location, "expected a JSON array from bd list")
        try:
            return [Issue.model_validate(item) for item in payload]
        except ValidationError as e:
            raise StoreUnavailable(location, f"malformed record: {e}") from e

    def show(self, issue_id: str) -> Issue:
        try:
            payload = self._decode(self._run("show", issue_id))
        except BdCommandError as e:
            raise AttachedUnitUnresolvable(issue_id, str(e)) from e
        except json.JSONDecodeError as e:
            raise AttachedUnitUnresolvable(issue_id, f"invalid JSON: {e}") from e

        # Newer bd versions wrap the record in a one-element array
        if isinstance(payload, list):
            if not payload:
                raise AttachedUnitUnresolvable(issue_id)
            payload = payload[0]
        try:
            return Issue.model_validate(payload)
        except ValidationError as e:
            raise AttachedUnitUnresolvable(issue_id, f"malformed record: {e}") from e
