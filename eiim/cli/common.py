"""Helpers shared by CLI commands."""

import typer
from rich.console import Console

from ..config import Config
from ..db import validate_connection
from ..exceptions import ConfigurationError
from ..logs import setup_logging
from ..pipeline import Orchestrator

console = Console()


def load_config(ctx: typer.Context) -> Config:
    """Load the config selected by the global --config option and apply its logging."""
    config: Config = ctx.obj
    try:
        model = config.config
    except FileNotFoundError:
        console.print(f"[red]Config not found at {config.config_path}. Run 'eiim init' first.[/red]")
        raise typer.Exit(1)
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    setup_logging(model.logging, console=console)
    return config


def connect(config: Config) -> Orchestrator:
    """Wire every component, exiting cleanly if the database is unreachable."""
    console.print("[dim]Checking database connection...[/dim]")
    orchestrator = Orchestrator.from_config(config)
    if not validate_connection(orchestrator.gateway):
        orchestrator.close()
        console.print("[red]❌ Database connection failed![/red]")
        console.print("Please check your database configuration and ensure Postgres is running.")
        raise typer.Exit(1)
    return orchestrator
