"""Sources management commands."""

import typer
from rich.table import Table

from ..config import SourceConfig, load_sources, save_sources
from ..db import SourceStore
from .common import connect, console, load_config

sources_app = typer.Typer(help="Manage RSS sources", no_args_is_help=True)


@sources_app.command("list")
def sources_list(ctx: typer.Context) -> None:
    """List registered sources with their polling health."""
    orchestrator = connect(load_config(ctx))
    try:
        sources = SourceStore(orchestrator.gateway).list_all()
    finally:
        orchestrator.close()

    if not sources:
        console.print("[yellow]No sources registered.[/yellow]")
        return

    table = Table(title="Registered Sources")
    table.add_column("Name", style="cyan")
    table.add_column("Active", style="yellow")
    table.add_column("Errors", style="red", justify="right")
    table.add_column("Last scraped", style="dim")
    table.add_column("URL", style="blue")

    for source in sources:
        table.add_row(
            source.name,
            "✓" if source.is_active else "✗",
            str(source.error_count),
            source.last_scraped.strftime("%Y-%m-%d %H:%M") if source.last_scraped else "-",
            source.url,
        )

    console.print(table)


@sources_app.command("add")
def sources_add(
    ctx: typer.Context,
    name: str = typer.Option(..., "--name", "-n", help="Source name"),
    url: str = typer.Option(..., "--url", "-u", help="RSS feed URL"),
) -> None:
    """Add a new RSS source to sources.yaml and the database."""
    config = load_config(ctx)

    try:
        sources = load_sources(config.sources_path)
    except FileNotFoundError:
        sources = []

    if any(s.name == name or s.url == url for s in sources):
        console.print(f"[red]Source '{name}' or URL already exists.[/red]")
        raise typer.Exit(1)

    sources.append(SourceConfig(name=name, url=url))
    save_sources(sources, config.sources_path)

    orchestrator = connect(config)
    try:
        SourceStore(orchestrator.gateway).sync_sources(sources)
    finally:
        orchestrator.close()

    console.print(f"[green]✅ Added source: {name}[/green]")


def _set_active(ctx: typer.Context, name: str, active: bool) -> None:
    config = load_config(ctx)

    orchestrator = connect(config)
    try:
        found = SourceStore(orchestrator.gateway).set_active(name, active)
    finally:
        orchestrator.close()

    if not found:
        console.print(f"[red]Source '{name}' not found.[/red]")
        raise typer.Exit(1)

    try:
        sources = load_sources(config.sources_path)
    except FileNotFoundError:
        sources = []
    for source in sources:
        if source.name == name:
            source.enabled = active
    save_sources(sources, config.sources_path)

    console.print(f"[green]✅ {'Enabled' if active else 'Disabled'} source: {name}[/green]")


@sources_app.command("enable")
def sources_enable(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Source name"),
) -> None:
    """Resume polling a source."""
    _set_active(ctx, name, True)


@sources_app.command("disable")
def sources_disable(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Source name"),
) -> None:
    """Stop polling a source."""
    _set_active(ctx, name, False)
