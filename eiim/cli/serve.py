"""Serve command: run the scheduler until interrupted."""

import signal

import typer
from rich.panel import Panel

from .common import connect, console, load_config


def serve_command(
    ctx: typer.Context,
    skip_initial: bool = typer.Option(
        False,
        "--skip-initial",
        help="Do not run news and prices before the schedule starts",
    ),
) -> None:
    """Run collection jobs and the daily brief on their schedules."""
    config = load_config(ctx)
    schedule = config.config.schedule
    if skip_initial:
        schedule.run_on_start = False

    console.print(Panel.fit(
        f"🌱 EIIM scheduler\n"
        f"News every {schedule.news_interval_minutes} min • Prices every {schedule.price_interval_minutes} min • "
        f"Brief at {schedule.brief_hour:02d}:00 • Metrics at {schedule.metrics_hour:02d}:00 ({config.config.timezone})",
        style="bold blue",
    ))

    orchestrator = connect(config)
    signal.signal(signal.SIGTERM, lambda *_: orchestrator.stop())
    try:
        orchestrator.start()
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopping scheduler, waiting for running jobs...[/yellow]")
        orchestrator.stop()
        orchestrator.join()
    finally:
        orchestrator.close()
