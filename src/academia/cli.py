"""Command line entry point for Academia."""

from __future__ import annotations

import sys

import click
import uvicorn

from academia.config import ConfigError, Settings
from academia.logging import setup_logging
from academia.records import Database


def load_settings() -> Settings:
    """Load settings from the environment, exiting on invalid values."""
    try:
        return Settings.from_env()
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(package_name="academia")
def main() -> None:
    """Academia - academic semester and registration records API."""


@main.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Bind address")
@click.option("--port", default=8000, show_default=True, type=int, help="Bind port")
@click.option("--reload", is_flag=True, help="Reload on code changes (development only)")
def serve(host: str, port: int, reload: bool) -> None:
    """Run the HTTP API."""
    settings = load_settings()
    setup_logging(settings)
    uvicorn.run(
        "academia.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_config=None,
    )


@main.command("init-db")
def init_db() -> None:
    """Create database tables at the configured path."""
    settings = load_settings()
    db = Database(settings.db_path)
    try:
        db.create_tables()
    finally:
        db.close()
    click.echo(f"Initialized database at {settings.db_path}")


if __name__ == "__main__":
    main()
