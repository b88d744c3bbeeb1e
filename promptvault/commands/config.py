"""
Config command group for promptvault.

Commands for viewing and editing vault configuration.
"""
import json

import click
from pydantic import ValidationError as PydanticValidationError

from promptvault.commands import vault_errors
from promptvault.exceptions import ConfigurationError
from promptvault.managers import StorageManager
from promptvault.models.files import ConfigFile

READ_ONLY_KEYS = {"schema_version"}


def _storage(ctx: click.Context) -> StorageManager:
    obj = ctx.find_root().obj or {}
    return StorageManager(obj.get("vault_dir"))


def _check_key(key: str) -> None:
    if key not in ConfigFile.model_fields:
        raise ConfigurationError(
            f"Unknown config key: '{key}'. "
            f"Valid keys are: {', '.join(ConfigFile.model_fields)}."
        )


@click.group()
def config():
    """View and edit vault configuration.

    Configuration is stored in .promptvault/config.json.
    """
    pass


@config.command(name="show")
@click.pass_context
def show_config(ctx):
    """Show current configuration."""
    with vault_errors():
        settings = _storage(ctx).load_config()
        click.echo(json.dumps(settings.model_dump(mode="json"), indent=2))


@config.command(name="get")
@click.argument("key")
@click.pass_context
def get_config(ctx, key):
    """Get a configuration value."""
    with vault_errors():
        _check_key(key)
        settings = _storage(ctx).load_config()
        click.echo(getattr(settings, key))


@config.command(name="set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def set_config(ctx, key, value):
    """Set a configuration value."""
    with vault_errors():
        _check_key(key)
        if key in READ_ONLY_KEYS:
            raise ConfigurationError(f"Config key '{key}' is read-only.")

        storage = _storage(ctx)
        data = storage.load_config().model_dump()
        data[key] = value
        try:
            updated = ConfigFile.model_validate(data)
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid value for '{key}': {e.errors()[0]['msg']}")

        storage.save_config(updated)
        click.echo(f"Set {key} = {value!r}")
