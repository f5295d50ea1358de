"""Check commands - run doctor checks against a town."""

from __future__ import annotations

import json
import logging
import os
from datetime import timedelta
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from town_doctor.doctor.base import BaseCheck, CheckContext, CheckResult, CheckStatus
from town_doctor.doctor.durations import parse_duration

logger = logging.getLogger(__name__)

console = Console()

_STATUS_STYLE = {
    CheckStatus.OK: ("✓", "green"),
    CheckStatus.WARNING: ("⚠", "yellow"),
    CheckStatus.ERROR: ("✗", "red"),
}


def build_checks(threshold: timedelta | None = None) -> dict[str, BaseCheck]:
    """Instantiate every available check, keyed by name."""
    from town_doctor.doctor.stale_check import StaleAttachmentsCheck
    from town_doctor.settings import get_stale_threshold

    if threshold is None:
        threshold = get_stale_threshold()
    stale = StaleAttachmentsCheck(threshold)
    return {stale.name: stale}


def _load_checks(threshold: timedelta | None = None) -> dict[str, BaseCheck]:
    try:
        return build_checks(threshold)
    except ValueError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e


def styled_output() -> bool:
    """Whether results are printed with rich markup instead of plain lines.

    ``TOWN_DOCTOR_RICH`` forces the choice.  Otherwise markup is used only on a
    colour-capable terminal, so piped or logged output stays one plain line
    per result.
    """
    forced = os.environ.get("TOWN_DOCTOR_RICH", "").strip().lower()
    if forced:
        return forced in ("1", "true", "yes")
    if "NO_COLOR" in os.environ:
        return False
    return console.is_terminal and not console.is_dumb_terminal


def _parse_threshold(
    ctx: click.Context, param: click.Parameter, value: str | None
) -> timedelta | None:
    if value is None:
        return None
    try:
        return parse_duration(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


def render_result(result: CheckResult, *, use_rich: bool) -> None:
    """Print one check result with its details and fix hint."""
    icon, color = _STATUS_STYLE[result.status]
    if not use_rich:
        click.echo(f"{icon} {result.name}: {result.message}")
        for line in result.details:
            click.echo(f"    {line}")
        if result.fix_hint:
            click.echo(f"    → {result.fix_hint}")
        return

    console.print(
        f"[{color}]{icon}[/{color}] [bold]{escape(result.name)}[/bold]: "
        f"{escape(result.message)}"
    )
    for line in result.details:
        console.print(f"    [dim]{escape(line)}[/dim]")
    if result.fix_hint:
        console.print(f"    [cyan]→ {escape(result.fix_hint)}[/cyan]")


@click.command("check")
@click.argument("names", nargs=-1)
@click.option(
    "--town",
    "town_root",
    type=click.Path(file_okay=False, path_type=Path),
    help="Town root directory (default: auto-detect from cwd)",
)
@click.option("--rig", "rig_name", help="Only check this rig")
@click.option(
    "--threshold",
    callback=_parse_threshold,
    help="Staleness threshold, e.g. 30m or 2h (default: 1h)",
)
@click.option("--strict", is_flag=True, help="Exit non-zero on warnings too")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
def check(
    names: tuple[str, ...],
    town_root: Path | None,
    rig_name: str | None,
    threshold: timedelta | None,
    strict: bool,
    as_json: bool,
    verbose: bool,
) -> None:
    """Run health checks against a town.

    Runs every check unless NAMES are given.
    """
    from town_doctor.cli.logging import configure_cli_logging
    from town_doctor.settings import find_town_root

    configure_cli_logging("check", verbose=verbose)

    checks = _load_checks(threshold)

    unknown = [n for n in names if n not in checks]
    if unknown:
        raise click.BadParameter(
            f"Unknown check(s): {', '.join(unknown)}. "
            f"Available: {', '.join(sorted(checks))}",
            param_hint="NAMES",
        )
    selected = [checks[n] for n in names] if names else list(checks.values())

    ctx = CheckContext(
        town_root=town_root or find_town_root(),
        rig_name=rig_name,
        verbose=verbose,
    )
    logger.info("Running %d check(s) in %s", len(selected), ctx.town_root)

    results = [c.run(ctx) for c in selected]

    if as_json:
        click.echo(json.dumps([r.to_dict() for r in results], indent=2))
    else:
        use_rich = styled_output()
        for result in results:
            render_result(result, use_rich=use_rich)

    failing = {CheckStatus.ERROR}
    if strict:
        failing.add(CheckStatus.WARNING)
    if any(r.status in failing for r in results):
        raise SystemExit(1)


@click.command("list")
def list_checks() -> None:
    """List available checks."""
    from rich.table import Table

    table = Table(title="Doctor Checks")
    table.add_column("Name", style="cyan")
    table.add_column("Description", style="white")
    for name, c in sorted(_load_checks().items()):
        table.add_row(name, c.description)
    console.print(table)
