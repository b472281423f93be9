"""
CLI interface for the Copilot dashboard.

Renders seat utilization and usage metrics in the terminal.
"""

import asyncio
import json
import sys
from typing import List, Optional

import typer
from loguru import logger
from rich.columns import Columns
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from copilot_dashboard.client.github_client import GitHubClient, RemoteError
from copilot_dashboard.client.models import SeatAssignment
from copilot_dashboard.config.loader import (
    ConfigurationError,
    DashboardConfig,
    load_dashboard_config,
    parse_failure_policy,
)
from copilot_dashboard.core.adoption import (
    AdoptionClassification,
    AdoptionStatus,
    classify_adoption,
)
from copilot_dashboard.core.fetcher import load_summary
from copilot_dashboard.core.metrics import MetricsSummary, editor_breakdown

app = typer.Typer()
console = Console()

EXIT_CODE_PASS = 0
EXIT_CODE_FAIL = 1

CHART_WIDTH = 40

_STATUS_STYLES = {
    AdoptionStatus.STRONG: "bold white on green",
    AdoptionStatus.MODERATE: "bold black on yellow",
    AdoptionStatus.UNDERUTILIZED: "bold white on red",
}

ConfigOption = typer.Option(
    None,
    "--config",
    "-c",
    help="Path to a YAML dashboard config file"
)
VerboseOption = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Show debug logging"
)


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    # Resolve stderr at write time so redirected streams are honoured
    logger.add(
        lambda message: sys.stderr.write(message),
        level="DEBUG" if verbose else "WARNING",
        format="{time:HH:mm:ss} | {level: <8} | {message}",
    )


def _load_config(config_path: Optional[str]) -> DashboardConfig:
    try:
        return load_dashboard_config(config_path)
    except ConfigurationError as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        sys.exit(EXIT_CODE_FAIL)


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context):
    """Copilot seat utilization dashboard."""
    if ctx.invoked_subcommand is None:
        console.print("Copilot Dashboard - Use --help to see available commands")


@app.command()
def status(config_path: Optional[str] = ConfigOption):
    """Show the resolved dashboard configuration."""
    config = _load_config(config_path)
    console.print(f"Enterprise: {escape(config.enterprise)}")
    console.print(f"API: {escape(config.api_base_url)} (version {escape(config.api_version)})")
    console.print(f"On failure: {config.on_failure.value}")
    if config.has_token:
        console.print(f"[green]✓[/] {config.token_env} is set")
    else:
        console.print(f"[yellow]![/] {config.token_env} is not set")
    sys.exit(EXIT_CODE_PASS)


@app.command()
def show(
    config_path: Optional[str] = ConfigOption,
    on_failure: Optional[str] = typer.Option(
        None,
        "--on-failure",
        help="Override failure policy: 'fallback' or 'error'"
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the summary as JSON instead of rendering it"
    ),
    verbose: bool = VerboseOption,
):
    """
    Render the Copilot usage dashboard.

    Shows active users, seats, acceptance rate, the daily acceptance rate
    for the last 7 days and an adoption assessment.
    """
    _configure_logging(verbose)
    config = _load_config(config_path)

    try:
        if on_failure is not None:
            config = config.with_policy(parse_failure_policy(on_failure, "--on-failure"))
        summary = asyncio.run(load_summary(config))
    except (ConfigurationError, RemoteError) as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        sys.exit(EXIT_CODE_FAIL)

    adoption = classify_adoption(summary.active_users, summary.total_seats)

    if as_json:
        payload = summary.to_dict()
        payload["adoption"] = {"ratio": adoption.ratio, "status": adoption.status.value}
        typer.echo(json.dumps(payload, indent=2))
    else:
        _display_dashboard(summary, adoption)
    sys.exit(EXIT_CODE_PASS)


@app.command()
def seats(
    config_path: Optional[str] = ConfigOption,
    inactive: bool = typer.Option(
        False,
        "--inactive",
        help="Only list seats with no recorded activity"
    ),
    verbose: bool = VerboseOption,
):
    """List seat assignments and the editors they were last used from."""
    _configure_logging(verbose)
    config = _load_config(config_path)

    try:
        total_seats, assignments = asyncio.run(_fetch_seats(config))
    except (ConfigurationError, RemoteError) as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        sys.exit(EXIT_CODE_FAIL)

    _display_seats(total_seats, assignments, inactive)
    sys.exit(EXIT_CODE_PASS)


async def _fetch_seats(config: DashboardConfig):
    async with GitHubClient(config) as client:
        return await client.get_seats()


def _format_trend(trend: int) -> str:
    """Format trend with a direction arrow."""
    if trend >= 0:
        return f"[green]▲ {abs(trend)}%[/]"
    return f"[red]▼ {abs(trend)}%[/]"


def _display_dashboard(summary: MetricsSummary, adoption: AdoptionClassification) -> None:
    """Display metric cards, the daily chart and the adoption assessment."""
    console.print("\n[bold]Copilot Value Explorer[/bold]")
    console.print("-" * 40)

    cards = [
        Panel(
            f"[bold]{summary.active_users}[/]  {_format_trend(summary.usage_trend)}",
            title="Active Users",
        ),
        Panel(f"[bold]{summary.total_seats}[/]", title="Total Seats"),
        Panel(f"[bold]{summary.acceptance_rate}%[/]", title="Acceptance Rate"),
    ]
    console.print(Columns(cards))

    console.print("\n[bold]Daily Acceptance Rate (Last 7 Days)[/bold]")
    if not summary.daily_acceptance_rates:
        console.print("[dim]No usage data available.[/]")
    else:
        chart = Table(show_header=False, box=None, pad_edge=False)
        chart.add_column("Day", no_wrap=True)
        chart.add_column("Bar", no_wrap=True)
        chart.add_column("Rate", justify="right", no_wrap=True)
        for point in summary.daily_acceptance_rates:
            bar = "█" * round(point.rate * CHART_WIDTH / 100)
            chart.add_row(point.label, f"[blue]{bar}[/]", f"{point.rate}%")
        console.print(chart)

    console.print("\n[bold]Adoption Assessment[/bold]")
    style = _STATUS_STYLES[adoption.status]
    console.print(f"[{style}] {adoption.status.value} [/]  {adoption.ratio}% of seats active")
    console.print(adoption.description)
    console.print(f"[dim]Recommendation:[/] {adoption.recommendation}")
    print()


def _display_seats(total_seats: int, assignments: List[SeatAssignment], inactive: bool) -> None:
    """Display the seat list and editor breakdown."""
    active_count = sum(1 for seat in assignments if seat.is_active)
    console.print(f"\n[bold]Seats:[/bold] {total_seats} total, {active_count} active")

    listed = [seat for seat in assignments if not seat.is_active] if inactive else assignments
    if not listed:
        console.print("[dim]No seats to show.[/]")
    else:
        table = Table()
        table.add_column("User")
        table.add_column("Team")
        table.add_column("Last activity")
        table.add_column("Editor")
        for seat in sorted(listed, key=lambda s: s.login.lower()):
            last_activity = (
                seat.last_activity_at.strftime("%Y-%m-%d") if seat.last_activity_at else "never"
            )
            table.add_row(
                escape(seat.login),
                escape(seat.team or "-"),
                last_activity,
                escape(seat.last_activity_editor or "-"),
            )
        console.print(table)

    breakdown = editor_breakdown(assignments)
    if breakdown:
        console.print("\n[bold]Editors[/bold]")
        editors = Table(show_header=False, box=None)
        editors.add_column("Editor")
        editors.add_column("Seats", justify="right")
        for editor, count in breakdown:
            editors.add_row(escape(editor), str(count))
        console.print(editors)


if __name__ == "__main__":
    app()
