#!/usr/bin/env python3
"""
Main CLI entry point for switchboard
"""

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from switchboard import __version__
from switchboard.commands import CommandCategory, build_default_registry
from switchboard.config import load_settings
from switchboard.config.settings import get_env_info, validate_all_env_vars
from switchboard.exceptions import SwitchboardError

app = typer.Typer(help="switchboard - keyboard-driven terminal dashboard")
console = Console()
logger = logging.getLogger(__name__)


@app.command()
def tui(
    view: Optional[str] = typer.Option(None, "--view", "-v", help="View to open at startup"),
    log_level: Optional[str] = typer.Option(None, "--log-level", "-l", help="DEBUG, INFO, WARNING or ERROR"),
):
    """Run the dashboard against the demo client."""
    from dataclasses import replace

    from switchboard.services import DemoClient
    from switchboard.ui.app import DashboardApp
    from switchboard.utils.logging import setup_tui_logging

    try:
        settings = load_settings()
    except SwitchboardError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1) from e

    if view:
        settings = replace(settings, default_view=view.lower())
    if log_level:
        settings = replace(settings, log_level=log_level.upper())

    setup_tui_logging(settings.log_level, settings.config_dir)
    logger.info(f"Starting switchboard {__version__} (view={settings.default_view})")

    client = DemoClient(latency=settings.demo_latency, request_timeout=settings.request_timeout)
    try:
        DashboardApp(client, settings).run()
    except KeyboardInterrupt:
        pass
    except Exception as e:
        logger.exception("Dashboard crashed")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e


@app.command("commands")
def list_commands(
    query: Optional[str] = typer.Argument(None, help="Rank commands against this text"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Only show this category"),
):
    """List prompt commands, or rank them against a query."""
    registry = build_default_registry()

    if query:
        commands = registry.search(query)
        title = f"Commands matching '{query}'"
    else:
        commands = [cmd for group in registry.get_by_category() for cmd in group.commands]
        title = "Commands"

    if category:
        wanted = category.lower()
        commands = [
            cmd for cmd in commands
            if cmd.category.value.lower() == wanted or cmd.category.name.lower() == wanted
        ]
        if not commands:
            valid = ", ".join(c.name.lower() for c in CommandCategory)
            console.print(f"[yellow]No commands in category '{category}'. Categories: {valid}[/yellow]")
            raise typer.Exit(1)

    if not commands:
        console.print(f"[yellow]No commands match '{query}'[/yellow]")
        return

    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Command", style="cyan", no_wrap=True)
    table.add_column("Aliases", style="green")
    table.add_column("Category", style="yellow")
    table.add_column("Description")
    table.add_column("Key", style="blue")

    for cmd in commands:
        name = cmd.name
        subs = registry.get_sub_commands(cmd.name)
        if subs:
            name += " <" + "|".join(sub.name for sub in subs) + ">"
        table.add_row(name, cmd.display_aliases, cmd.category.value, cmd.description, cmd.shortcut)

    console.print(table)


@app.command()
def env():
    """Show switchboard environment variables."""
    table = Table(title="Environment", show_header=True, header_style="bold magenta")
    table.add_column("Variable", style="cyan", no_wrap=True)
    table.add_column("Value")
    table.add_column("Default", style="dim")
    table.add_column("Description")

    for name, info in get_env_info().items():
        if info["is_set"]:
            value = info["value"] if info["valid"] else f"[red]{info['value']} (invalid)[/red]"
        else:
            value = "[dim]-[/dim]"
        table.add_row(name, value, str(info["default"] or ""), info["description"])

    console.print(table)

    errors = validate_all_env_vars()
    for error in errors:
        console.print(f"[red]•[/red] {error}")
    if errors:
        raise typer.Exit(1)


@app.command()
def version():
    """Show switchboard version"""
    typer.echo(f"switchboard version {__version__}")


def run():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    run()
