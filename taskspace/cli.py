"""
CLI for Taskspace.
"""
import click

from taskspace.commands.config import config
from taskspace.commands.workspace import workspace
from taskspace.constants import LOG_LEVELS, get_log_level
from taskspace.logging_setup import setup_logging


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Log level (defaults to the configured log_level).",
)
def cli(log_level):
    """A command-line interface for inspecting and extending task workspaces."""
    setup_logging(log_level or get_log_level())


cli.add_command(config)
cli.add_command(workspace)


if __name__ == '__main__':
    cli()
