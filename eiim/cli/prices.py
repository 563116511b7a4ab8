"""Price analysis commands."""

from typing import Optional

import typer
from rich.panel import Panel
from rich.table import Table

from ..collectors import TrendReport
from .common import connect, console, load_config

prices_app = typer.Typer(help="Inspect collected carbon prices", no_args_is_help=True)


@prices_app.command("trends")
def prices_trends(
    ctx: typer.Context,
    market: Optional[str] = typer.Option(None, "--market", "-m", help="Market code (default: all markets)"),
    days: int = typer.Option(30, "--days", "-d", help="Look-back window in days", min=1),
) -> None:
    """Show price statistics, with AI commentary for a single market."""
    orchestrator = connect(load_config(ctx))
    collector = orchestrator.prices
    try:
        if market:
            report = collector.trend_report(market, days)
            reports = [report] if report else []
        else:
            statistics = (collector.get_historical_analysis(m, days) for m in collector.baselines)
            reports = [TrendReport(statistics=s) for s in statistics if s]
    finally:
        orchestrator.close()

    if not reports:
        console.print("[yellow]Insufficient data for trend analysis.[/yellow]")
        raise typer.Exit(1)

    table = Table(title=f"Carbon Price Trends ({days} days)")
    table.add_column("Market", style="cyan")
    table.add_column("Points", justify="right")
    table.add_column("Average", justify="right")
    table.add_column("Min", justify="right")
    table.add_column("Max", justify="right")
    table.add_column("Volatility", justify="right")
    table.add_column("Trend", style="bold")
    table.add_column("Range %", justify="right")

    for report in reports:
        stats = report.statistics
        table.add_row(
            stats.market,
            str(stats.data_points),
            f"{stats.average:.2f}",
            f"{stats.minimum:.2f}",
            f"{stats.maximum:.2f}",
            f"{stats.volatility:.2f}",
            stats.trend,
            f"{stats.change_percent:.2f}",
        )
    console.print(table)

    for report in reports:
        if report.commentary is not None:
            console.print(Panel(report.commentary.analysis, title=f"AI analysis ({report.commentary.ai_model})"))
