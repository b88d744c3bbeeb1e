"""
Shared helpers for promptvault command modules.
"""
from contextlib import contextmanager
from typing import Iterator

import click

from promptvault.core import VaultCore
from promptvault.exceptions import (
    ConfigurationError,
    ImportFormatError,
    InvalidStateError,
    NotFoundError,
    PromptVaultError,
    ValidationError,
)


def get_core(ctx: click.Context) -> VaultCore:
    """Build a VaultCore from the root group's --vault-dir and --user options."""
    obj = ctx.find_root().obj or {}
    return VaultCore(vault_dir=obj.get("vault_dir"), user_id=obj.get("user_id"))


@contextmanager
def vault_errors() -> Iterator[None]:
    """Translate vault exceptions into click errors with a category prefix."""
    try:
        yield
    except NotFoundError as e:
        raise click.ClickException(str(e))
    except ImportFormatError as e:
        raise click.ClickException(f"Import Error: {e}")
    except ValidationError as e:
        raise click.ClickException(f"Validation Error: {e}")
    except InvalidStateError as e:
        raise click.ClickException(f"Operation Error: {e}")
    except ConfigurationError as e:
        raise click.ClickException(f"Configuration Error: {e}")
    except PromptVaultError as e:
        raise click.ClickException(f"Error: {e}")
