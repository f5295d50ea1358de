"""CLI interface for Town Doctor.

Modular CLI structure with commands split by functionality.
"""

from logging import getLogger

import click
from dotenv import load_dotenv

from town_doctor import __version__

# Load environment variables from .env file
load_dotenv(override=True)

logger = getLogger(__name__)


@click.group(invoke_without_command=True)
@click.option(
    "--version",
    is_flag=True,
    help="Show the town-doctor version and exit.",
)
@click.pass_context
def main(ctx: click.Context, version: bool) -> None:
    """Town Doctor - health checks for a Gas Town workspace.

    \b
      town-doctor list                      List available checks
      town-doctor check                     Run every check across all rigs
      town-doctor check --rig gastown       Check a single rig
      town-doctor check stale-attachments --threshold 30m
    """
    if version:
        click.echo(__version__)
        ctx.exit()

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


def register_commands() -> None:
    """Register all commands with the main CLI."""
    from town_doctor.cli.check import check, list_checks

    main.add_command(check)
    main.add_command(list_checks)


# Register commands at import time
register_commands()

__all__ = ["main"]
