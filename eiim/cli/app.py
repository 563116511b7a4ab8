"""Main CLI application."""

from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

from ..config import Config, LoggingConfig
from ..logs import setup_logging
from .common import console
from .init import init_command
from .prices import prices_app
from .run import run_app
from .serve import serve_command
from .sources import sources_app

app = typer.Typer(
    name="eiim",
    help="Environmental Impact Investing Monitor - news, carbon prices, metrics and daily briefs",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        envvar="EIIM_CONFIG",
        help="Config file (default: ~/.config/eiim/config.yaml)",
    ),
    log_level: str = typer.Option("INFO", "--log-level", help="Log level before the config is loaded"),
) -> None:
    """Environmental Impact Investing Monitor."""
    setup_logging(LoggingConfig(level=log_level), console=console)
    ctx.obj = Config(config_path)


# Register commands
app.command("init")(init_command)
app.command("serve")(serve_command)
app.add_typer(run_app, name="run", help="Run a single job")
app.add_typer(sources_app, name="sources", help="Manage RSS sources")
app.add_typer(prices_app, name="prices", help="Inspect carbon prices")


if __name__ == "__main__":
    app()
