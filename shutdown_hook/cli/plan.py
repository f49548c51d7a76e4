import importlib

import click
from rich.console import Console
from rich.table import Table

from shutdown_hook.shutdown import ShutdownHook

console = Console()


def load_hook(target: str) -> ShutdownHook:
    """
    Resolve ``module:attribute`` to a ShutdownHook.

    The attribute may be a hook instance or a zero-argument factory returning one.
    """
    module_name, sep, attr = target.partition(':')
    if not sep or not module_name or not attr:
        raise click.BadParameter("expected MODULE:ATTRIBUTE", param_hint="TARGET")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"cannot import '{module_name}': {e}", param_hint="TARGET")

    try:
        obj = getattr(module, attr)
    except AttributeError:
        raise click.BadParameter(f"'{module_name}' has no attribute '{attr}'", param_hint="TARGET")

    if not isinstance(obj, ShutdownHook) and callable(obj):
        obj = obj()
    if not isinstance(obj, ShutdownHook):
        raise click.BadParameter(f"'{target}' is not a ShutdownHook", param_hint="TARGET")
    return obj


@click.command()
@click.argument('target')
def plan(target: str) -> None:
    """Prints the execution order of the hook at TARGET (module:attribute)."""
    hook = load_hook(target)
    tasks = hook.execution_plan()

    table = Table(title=f"Shutdown plan (lifo={hook.lifo}, timeout={hook.timeout_ms}ms)")
    table.add_column("Index", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Order", justify="right")
    table.add_column("Registered", justify="right")
    for index, task in enumerate(tasks):
        table.add_row(str(index), task.name, str(task.order), f"#{task.sequence}")

    if tasks:
        console.print(table)
    else:
        console.print("[yellow]No shutdown tasks registered[/yellow]")
