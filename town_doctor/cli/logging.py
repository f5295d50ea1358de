"""CLI logging configuration with file output.

Log files live under ``~/.local/share/town-doctor/logs/``, one per command::

    check.log

Skipped stores and other recoverable scan problems are logged at INFO, so
they show up in the log file (and on the console with ``--verbose``) without
cluttering normal output::

    tail -f ~/.local/share/town-doctor/logs/check.log
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Standard log directory follows XDG convention
LOG_DIR = Path.home() / ".local" / "share" / "town-doctor" / "logs"

_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def get_log_dir() -> Path:
    """Return the CLI log directory, creating it if needed."""
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    return LOG_DIR


def get_log_file(command: str) -> Path:
    """Return the log file path for a CLI command."""
    return get_log_dir() / f"{command}.log"


def configure_cli_logging(
    command: str,
    *,
    verbose: bool = False,
    console_level: int | None = None,
    file_level: int = logging.DEBUG,
    max_bytes: int = 5 * 1024 * 1024,  # 5 MB
    backup_count: int = 3,
) -> Path | None:
    """Configure console and rotating file logging for a CLI command.

    Args:
        command: CLI command name (e.g., "check")
        verbose: If True, set console to INFO level
        console_level: Override console level (takes precedence over verbose)
        file_level: File log level (default: DEBUG)
        max_bytes: Max size per log file before rotation
        backup_count: Number of rotated backups to keep

    Returns:
        Path to the log file, or None if the log directory is not writable.
    """
    root_logger = logging.getLogger("town_doctor")

    # Remove our handlers from a previous call to avoid duplicates
    for handler in root_logger.handlers[:]:
        if getattr(handler, "_town_doctor", False):
            root_logger.removeHandler(handler)
            handler.close()

    if console_level is None:
        console_level = logging.INFO if verbose else logging.WARNING
    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    console_handler._town_doctor = True  # type: ignore[attr-defined]
    root_logger.addHandler(console_handler)

    log_file: Path | None = None
    try:
        log_file = get_log_file(command)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        root_logger.debug("File logging disabled: %s", e)
        log_file = None
    else:
        file_handler.setLevel(file_level)
        file_handler.setFormatter(
            logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        )
        file_handler._town_doctor = True  # type: ignore[attr-defined]
        root_logger.addHandler(file_handler)

    lowest = min(console_level, file_level if log_file else console_level)
    if root_logger.level == logging.NOTSET or root_logger.level > lowest:
        root_logger.setLevel(lowest)

    return log_file
