"""Project settings loaded from pyproject.toml [tool.town-doctor] section.

Recognised keys::

  [tool.town-doctor]
  stale-threshold = "1h"     # idle time before an attachment is stale
  bd-command = "bd"          # beads CLI used to read record stores
  bd-timeout = 30            # seconds per bd invocation
  town-root = "~/gt"         # town directory when not given on the CLI

All settings support environment variable overrides (TOWN_DOCTOR_* prefix).
"""

import os
import tomllib
from datetime import timedelta
from functools import cache
from pathlib import Path

from town_doctor.doctor.durations import parse_duration

# A town root is the nearest ancestor containing this file
TOWN_MARKER = Path("mayor") / "town.json"

DEFAULT_STALE_THRESHOLD = "1h"
DEFAULT_BD_COMMAND = "bd"
DEFAULT_BD_TIMEOUT = 30.0


@cache
def _load_pyproject_settings() -> dict:
    """Load settings from pyproject.toml [tool.town-doctor] section.

    Walks up from this file to find the nearest ``pyproject.toml``.

    Returns:
        Dictionary of settings from pyproject.toml, empty dict if not found.
    """
    current = Path(__file__).resolve().parent
    while current != current.parent:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            try:
                data = tomllib.loads(candidate.read_text())
            except (OSError, tomllib.TOMLDecodeError):
                return {}
            return data.get("tool", {}).get("town-doctor", {})
        current = current.parent
    return {}


def get_stale_threshold() -> timedelta:
    """Get the staleness threshold for attached molecules.

    Priority: TOWN_DOCTOR_STALE_THRESHOLD env → stale-threshold → 1h.

    Raises:
        ValueError: If the configured value is not a valid duration.
    """
    if env := os.getenv("TOWN_DOCTOR_STALE_THRESHOLD"):
        return parse_duration(env)
    value = _load_pyproject_settings().get("stale-threshold", DEFAULT_STALE_THRESHOLD)
    return parse_duration(value)


def get_bd_command() -> str:
    """Get the beads CLI executable.

    Priority: TOWN_DOCTOR_BD env → bd-command → 'bd'.
    """
    if env := os.getenv("TOWN_DOCTOR_BD"):
        return env
    return str(_load_pyproject_settings().get("bd-command", DEFAULT_BD_COMMAND))


def get_bd_timeout() -> float:
    """Get the per-invocation timeout for the beads CLI in seconds.

    Priority: TOWN_DOCTOR_BD_TIMEOUT env → bd-timeout → 30.
    """
    if env := os.getenv("TOWN_DOCTOR_BD_TIMEOUT"):
        return float(env)
    return float(_load_pyproject_settings().get("bd-timeout", DEFAULT_BD_TIMEOUT))


def find_town_root(start: Path | None = None) -> Path:
    """Locate the town root directory.

    Priority: TOWN_DOCTOR_TOWN_ROOT env → GT_TOWN_ROOT env → town-root
    setting → nearest ancestor of ``start`` containing ``mayor/town.json``
    → ``start`` itself.
    """
    for var in ("TOWN_DOCTOR_TOWN_ROOT", "GT_TOWN_ROOT"):
        if env := os.getenv(var):
            return Path(env).expanduser()
    if configured := _load_pyproject_settings().get("town-root"):
        return Path(str(configured)).expanduser()

    start = (start or Path.cwd()).resolve()
    for candidate in (start, *start.parents):
        if (candidate / TOWN_MARKER).is_file():
            return candidate
    return start
