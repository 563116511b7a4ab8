"""Init command implementation."""

from typing import List

import typer
from rich.panel import Panel

from ..config import Config, ConfigModel, SourceConfig, load_sources, save_config, save_sources
from ..db import Gateway, SourceStore, init_database, validate_connection
from ..logs import setup_logging
from .common import console


def create_default_sources() -> List[SourceConfig]:
    """Create default environmental finance news sources."""
    return [
        SourceConfig(name="Environmental Finance", url="https://www.environmental-finance.com/rss"),
        SourceConfig(name="Carbon Pulse", url="https://carbon-pulse.com/feed/"),
        SourceConfig(name="Bloomberg Green", url="https://feeds.bloomberg.com/green/news.rss"),
        SourceConfig(name="Carbon Brief", url="https://www.carbonbrief.org/feed/"),
        SourceConfig(name="GreenBiz", url="https://www.greenbiz.com/feeds/all"),
        SourceConfig(name="CleanTechnica", url="https://cleantechnica.com/feed/"),
        SourceConfig(name="ESG Today", url="https://www.esgtoday.com/feed/"),
    ]


def init_command(
    ctx: typer.Context,
    db_host: str = typer.Option("localhost", "--db-host", help="Postgres host"),
    db_port: int = typer.Option(5432, "--db-port", help="Postgres port"),
    db_name: str = typer.Option("eiim", "--db-name", help="Database name"),
    db_user: str = typer.Option("eiim_user", "--db-user", help="Database user"),
    redis_url: str = typer.Option("redis://localhost:6379/0", "--redis-url", help="Redis URL"),
    seed_sources: bool = typer.Option(
        True,
        "--seed-sources/--no-seed-sources",
        help="Seed default environmental finance feeds",
    ),
    overwrite: bool = typer.Option(False, "--overwrite", help="Replace an existing config file"),
) -> None:
    """Initialize EIIM configuration, database schema and feed sources."""
    console.print(Panel.fit("🌱 Environmental Impact Investing Monitor - Initialization", style="bold blue"))

    config_path = ctx.obj.config_path
    sources_path = ctx.obj.sources_path

    config = ConfigModel(
        postgres={
            "host": db_host,
            "port": db_port,
            "database": db_name,
            "user": db_user,
            "password_env": "EIIM_DB_PASSWORD",
        },
        redis={"url": redis_url},
    )
    setup_logging(config.logging, console=console)

    if config_path.exists() and not overwrite:
        console.print(f"[yellow]Config already exists: {config_path} (use --overwrite to replace)[/yellow]")
    else:
        save_config(config, config_path)
        console.print(f"✅ Created config: {config_path}")

    if sources_path.exists() and not overwrite:
        sources = load_sources(sources_path)
        console.print(f"[yellow]Keeping existing sources: {sources_path} ({len(sources)} sources)[/yellow]")
    elif seed_sources:
        sources = create_default_sources()
        save_sources(sources, sources_path)
        console.print(f"✅ Created sources: {sources_path} (seeded with {len(sources)} sources)")
    else:
        sources = []
        save_sources(sources, sources_path)
        console.print(f"✅ Created sources: {sources_path} (empty)")

    console.print("\n[bold]Testing database connection...[/bold]")
    loaded = Config(config_path)
    gateway = Gateway.connect(loaded.get_db_config(), loaded.get_redis_url())
    try:
        if not validate_connection(gateway):
            console.print(
                "[red]❌ Database connection failed![/red]\n"
                "Please ensure Postgres is running and credentials are correct.\n"
                "Set the password via environment variable: [bold]export EIIM_DB_PASSWORD=your_password[/bold]"
            )
            raise typer.Exit(1)
        console.print("✅ Database connection successful")

        console.print("\n[bold]Initializing database schema...[/bold]")
        try:
            init_database(gateway)
        except Exception as e:
            console.print(f"[red]❌ Failed to initialize database: {e}[/red]")
            raise typer.Exit(1)
        console.print("✅ Database schema initialized")

        source_map = SourceStore(gateway).sync_sources(sources)
        console.print(f"✅ Registered {len(source_map)} feed sources")
    finally:
        gateway.close()

    console.print(
        Panel(
            f"[green]✅ EIIM initialized successfully![/green]\n\n"
            f"Configuration: {config_path}\n"
            f"Sources: {sources_path}\n\n"
            f"Next steps:\n"
            f"1. Set database password: [bold]export EIIM_DB_PASSWORD=your_password[/bold]\n"
            f"2. Set LLM API key: [bold]export OPENROUTER_API_KEY=your_key[/bold]\n"
            f"3. Run once: [bold]eiim run news[/bold], or start the scheduler: [bold]eiim serve[/bold]",
            style="green",
        )
    )
