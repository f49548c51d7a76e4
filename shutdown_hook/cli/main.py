import logging

import click

from shutdown_hook.utils.logging import setup_logging

from .config import config_cli
from .plan import plan


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enables verbose mode.')
@click.option('--quiet', '-q', is_flag=True, help='Enables quiet mode.')
@click.pass_context
def app(ctx, verbose, quiet):
    """
    shutdown-hook CLI.
    """
    ctx.ensure_object(dict)
    ctx.obj['VERBOSE'] = verbose
    ctx.obj['QUIET'] = quiet

    if verbose:
        setup_logging(level=logging.DEBUG)
    elif quiet:
        setup_logging(level=logging.ERROR)
    else:
        setup_logging()

# Add subcommands
app.add_command(config_cli, name='config')
app.add_command(plan, name='plan')

if __name__ == '__main__':
    app()
