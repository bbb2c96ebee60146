#!/usr/bin/env python3
"""
FeedLoader - Offline-capable Feed Retrieval
==========================================

Command line interface for loading feeds and checking configuration.

Usage:
    python main.py --help                    # Show all commands
    python main.py check-config              # Validate configuration
    python main.py load URL                  # Load a feed (network, then cache)
    python main.py load URL --offline        # Load a feed from the cache only
"""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent))

from feedloader.config.settings import get_settings
from feedloader.connectivity import StaticConnectivity
from feedloader.loader import FeedLoader
from feedloader.utils.logging import configure_application_logging
from feedloader.utils.exceptions import FeedLoaderError, get_user_friendly_message

console = Console()

EXIT_NOTHING_AVAILABLE = 2


@click.group(invoke_without_command=True)
@click.option('--debug', is_flag=True, help='Enable debug mode')
@click.pass_context
def cli(ctx, debug):
    """FeedLoader - fetch RSS/Atom feeds with an offline cache."""
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


def _setup_logging(debug: bool) -> None:
    settings = get_settings()
    configure_application_logging(
        log_level="DEBUG" if debug else settings.get_effective_log_level(),
        log_file=settings.logging.file_path,
        enable_console=settings.logging.console_logging,
        structured_logging=settings.logging.structured_logging,
        max_file_size_mb=settings.logging.max_file_size_mb,
        backup_count=settings.logging.backup_count,
    )


@cli.command()
def check_config():
    """Validate configuration and environment variables."""
    console.print("[bold blue]Checking FeedLoader Configuration[/bold blue]")

    try:
        settings = get_settings()
    except FeedLoaderError as e:
        console.print(f"[bold red]Configuration error: {e}[/bold red]")
        sys.exit(1)

    table = Table(title="Configuration")
    table.add_column("Section", style="cyan")
    table.add_column("Setting")
    table.add_column("Value", style="green")

    table.add_row("HTTP", "timeout", f"{settings.http.timeout}s")
    table.add_row("HTTP", "user agent", settings.http.user_agent)
    table.add_row("HTTP", "max connections", str(settings.http.max_connections))
    table.add_row("Cache", "enabled", str(settings.cache.enabled))
    table.add_row("Cache", "directory", settings.cache.directory)
    table.add_row("Parser", "max items", str(settings.parser.max_items or "unlimited"))
    table.add_row("Logging", "level", settings.get_effective_log_level())
    table.add_row("Logging", "file", settings.logging.file_path or "-")

    console.print(table)
    console.print("[bold green]Configuration is valid[/bold green]")


@cli.command()
@click.argument('url')
@click.option('--offline', is_flag=True, help='Skip the network and read the cached copy')
@click.option('--limit', type=int, default=10, show_default=True, help='Number of items to show')
@click.pass_context
def load(ctx, url: str, offline: bool, limit: Optional[int]):
    """Load a feed from the network, falling back to the cached copy."""
    try:
        _setup_logging(ctx.obj.get('debug', False))
        connectivity = StaticConnectivity(False) if offline else None

        with FeedLoader.from_settings(connectivity=connectivity) as loader:
            feed = loader.load(url)
    except FeedLoaderError as e:
        console.print(f"[bold red]{get_user_friendly_message(e)}[/bold red]")
        sys.exit(1)

    if feed is None:
        console.print(f"[yellow]No feed available for {url} (offline and never cached)[/yellow]")
        sys.exit(EXIT_NOTHING_AVAILABLE)

    console.print(f"[bold blue]{feed.title or url}[/bold blue]  [dim]{feed.link}[/dim]")
    if feed.description:
        console.print(feed.description)

    table = Table(title=f"{len(feed.items)} items")
    table.add_column("Published", style="cyan")
    table.add_column("Title")
    table.add_column("Link", style="dim")

    for item in feed.items[:limit]:
        published = item.published.strftime("%Y-%m-%d %H:%M") if item.published else "-"
        table.add_row(published, item.title or "(untitled)", item.link or "")

    console.print(table)


if __name__ == '__main__':
    cli()
