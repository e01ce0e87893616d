"""
Config command group for the Taskspace CLI.

Commands for viewing and editing configuration. The file location is
.taskspace/config.json, or $TASKSPACE_CONFIG when set.
"""
import json

import click
from pydantic import ValidationError

from taskspace.constants import get_config_manager
from taskspace.exceptions import TaskspaceError
from taskspace.models.files import ConfigFile
from taskspace.storage import load_config, save_config

CONFIG_KEYS = [name for name in ConfigFile.model_fields if name != "schema_version"]


def _load() -> ConfigFile:
    try:
        return load_config(get_config_manager().config_path)
    except TaskspaceError as e:
        raise click.ClickException(str(e))


@click.group()
def config():
    """View and edit configuration."""
    pass


@config.command(name="show")
@click.option("-j", "--json", "json_output", is_flag=True, help="Output in JSON format.")
def show_config(json_output):
    """Show current configuration."""
    current = _load()
    if json_output:
        click.echo(json.dumps(current.model_dump(), indent=2))
        return
    click.echo(f"Config file: {get_config_manager().config_path}")
    for key in CONFIG_KEYS:
        click.echo(f"  {key}: {getattr(current, key)}")


@config.command(name="get")
@click.argument("key", type=click.Choice(CONFIG_KEYS))
def get_config(key):
    """Get a configuration value."""
    click.echo(getattr(_load(), key))


@config.command(name="set")
@click.argument("key", type=click.Choice(CONFIG_KEYS))
@click.argument("value")
def set_config(key, value):
    """Set a configuration value."""
    data = _load().model_dump()
    data[key] = value
    try:
        updated = ConfigFile.model_validate(data)
    except ValidationError:
        raise click.ClickException(f"Invalid value for {key}: {value}")

    manager = get_config_manager()
    try:
        save_config(manager.config_path, updated)
    except TaskspaceError as e:
        raise click.ClickException(str(e))
    manager.reload()
    click.echo(f"✓ Set {key} = {getattr(updated, key)}")
