import json

import click
from rich.console import Console
from rich.json import JSON
from rich.markup import escape

from shutdown_hook.config import load_settings
from shutdown_hook.errors import ConfigurationError

console = Console()


@click.group(name='config')
def config_cli():
    """Configuration commands."""
    pass


@config_cli.command()
def show() -> None:
    """Shows the effective settings (environment and .env applied)."""
    try:
        settings = load_settings()
    except ConfigurationError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise SystemExit(1)
    console.print(JSON(json.dumps(settings.model_dump())))
