"""One-off collection and brief commands."""

from typing import Optional

import pendulum
import typer
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from .common import connect, console, load_config

run_app = typer.Typer(help="Run a single collection job or build a brief", no_args_is_help=True)


@run_app.command("news")
def run_news(ctx: typer.Context) -> None:
    """Poll every active feed once."""
    orchestrator = connect(load_config(ctx))
    try:
        result = orchestrator.news.run_all_sources()
    finally:
        orchestrator.close()

    table = Table(title="News Collection")
    table.add_column("Source", style="cyan")
    table.add_column("New articles", style="green", justify="right")
    for name, count in result.per_source.items():
        table.add_row(name, str(count))
    for name in result.failed_sources:
        table.add_row(name, "[red]failed[/red]")
    console.print(table)
    console.print(
        f"[bold]{result.total_articles}[/bold] new articles, "
        f"{result.skipped_duplicates} already stored, {len(result.failed_sources)} failed sources"
    )


@run_app.command("prices")
def run_prices(ctx: typer.Context) -> None:
    """Collect one price point per market."""
    orchestrator = connect(load_config(ctx))
    try:
        stored = orchestrator.prices.collect_all_prices()
        latest = orchestrator.prices.prices.latest()
    finally:
        orchestrator.close()

    table = Table(title="Latest Carbon Prices")
    table.add_column("Market", style="cyan")
    table.add_column("Price", style="green", justify="right")
    table.add_column("Currency")
    table.add_column("Source", style="dim")
    table.add_column("Timestamp", style="dim")
    for point in latest:
        table.add_row(point.market, f"{point.price:.2f}", point.currency, point.data_source, point.timestamp.isoformat())
    console.print(table)
    console.print(f"[bold]{stored}[/bold] price points stored")


@run_app.command("metrics")
def run_metrics(
    ctx: typer.Context,
    anomalies: bool = typer.Option(False, "--anomalies", help="Review the latest values for anomalies"),
) -> None:
    """Collect every ecosystem indicator once."""
    orchestrator = connect(load_config(ctx))
    alerts = []
    try:
        result = orchestrator.metrics.collect_all_metrics()
        if anomalies:
            if orchestrator.summarizer is None:
                console.print("[yellow]No LLM configured, skipping anomaly review[/yellow]")
            else:
                alerts = orchestrator.summarizer.detect_anomalies(orchestrator.metrics.metrics.latest())
    finally:
        orchestrator.close()

    console.print(f"[bold]{result.total_collected}/{result.total_indicators}[/bold] metrics collected")
    if result.from_fallback:
        console.print(f"[yellow]From fallback cache: {', '.join(result.from_fallback)}[/yellow]")
    if result.omitted:
        console.print(f"[red]Omitted: {', '.join(result.omitted)}[/red]")

    if alerts:
        table = Table(title="Anomaly Alerts")
        table.add_column("Severity")
        table.add_column("Alert")
        colors = {"HIGH": "red", "MEDIUM": "yellow", "LOW": "dim"}
        for alert in alerts:
            color = colors.get(alert.severity, "white")
            table.add_row(f"[{color}]{alert.severity}[/{color}]", alert.message)
        console.print(table)


@run_app.command("brief")
def run_brief(
    ctx: typer.Context,
    brief_date: Optional[str] = typer.Option(
        None,
        "--date",
        help="Date of the brief (YYYY-MM-DD). Default: today",
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Regenerate even if a brief exists"),
) -> None:
    """Generate (or show) the daily brief."""
    config = load_config(ctx)
    tz = config.config.timezone
    try:
        target = pendulum.parse(brief_date, tz=tz).date() if brief_date else pendulum.now(tz).date()
    except ValueError as e:
        console.print(f"[red]Invalid date '{brief_date}': {e}[/red]")
        raise typer.Exit(1)

    orchestrator = connect(config)
    try:
        brief = orchestrator.briefs.generate_brief_for_date(target, force=force)
    finally:
        orchestrator.close()

    if brief is None:
        console.print(f"[yellow]No summarized articles found around {target}; no brief generated.[/yellow]")
        raise typer.Exit(1)

    console.print(Panel(
        Markdown(brief.content),
        title=f"Daily Brief {brief.brief_date}",
        subtitle=f"{brief.article_count} articles • {', '.join(brief.top_categories)} • {brief.ai_model_used}",
    ))
    if orchestrator.summarizer is not None:
        stats = orchestrator.summarizer.get_usage_stats()
        console.print(
            f"[dim]LLM calls: {stats['api_calls']}, tokens: {stats['total_tokens']}, "
            f"failures: {stats['failures']}, model: {stats['analysis_model']}[/dim]"
        )
