"""CLI commands for the diagnostics log."""

from __future__ import annotations

import click

from invoicing.infrastructure.bootstrap import diagnostics_log


@click.command("recent")
@click.option("--limit", default=50, show_default=True, type=int, help="Entries to show.")
def diagnostics_recent(limit: int) -> None:
    """Show the latest log entries, newest first."""
    entries = diagnostics_log().recent(limit)

    if not entries:
        click.echo("No diagnostics recorded.")
        return

    for entry in entries:
        click.echo(f"{entry.timestamp:%Y-%m-%d %H:%M:%S}  {entry.level:<8} {entry.message}")


@click.command("stats")
def diagnostics_stats() -> None:
    """Summarise the log by level and recency."""
    stats = diagnostics_log().stats()

    click.echo(f"Total entries:   {stats.total}")
    click.echo(f"Last 24 hours:   {stats.recent_24h}")
    for level, count in sorted(stats.by_level.items()):
        click.echo(f"  {level:<10} {count:>6}")


@click.command("clear")
@click.confirmation_option(prompt="Delete the diagnostics log?")
def diagnostics_clear() -> None:
    """Delete the diagnostics log."""
    diagnostics_log().clear()
    click.echo("Diagnostics log cleared.")
