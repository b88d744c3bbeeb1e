"""
CLI for promptvault.

Each command builds a VaultCore for the selected vault directory and user,
applies one operation and saves before exiting.
"""
import logging
from pathlib import Path
from typing import Optional

import click

from promptvault.commands import get_core, vault_errors
from promptvault.commands.config import config
from promptvault.commands.folder import folder
from promptvault.commands.prompt import prompt
from promptvault.commands.transfer import transfer
from promptvault.constants import ENV_USER_ID, ENV_VAULT_DIR
from promptvault.models.base import Folder


@click.group()
@click.option("--vault-dir", envvar=ENV_VAULT_DIR, type=click.Path(file_okay=False, path_type=Path),
              help="Vault directory (default: .promptvault).")
@click.option("-u", "--user", "user_id", envvar=ENV_USER_ID, help="User whose prompts to use.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx, vault_dir: Optional[Path], user_id: Optional[str], verbose: bool):
    """Organize prompts in folders with automatic version history."""
    ctx.obj = {"vault_dir": vault_dir, "user_id": user_id}
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _echo_tree(items, depth: int = 0) -> None:
    for item in items:
        indent = "  " * depth
        if isinstance(item, Folder):
            click.echo(f"{indent}[{item.name}]  {item.id}")
            _echo_tree(item.children, depth + 1)
        else:
            star = " *" if item.is_favorite else ""
            click.echo(f"{indent}{item.name} (v{item.version_number}){star}  {item.id}")


@cli.command(name="tree")
@click.pass_context
def tree(ctx):
    """Show all folders and prompts."""
    with vault_errors():
        core = get_core(ctx)
        if not core.forest:
            click.echo("Vault is empty.")
            return
        _echo_tree(core.forest)
        counts = core.forest_manager.count(core.forest)
        click.echo(f"\n{counts['folders']} folder(s), {counts['prompts']} prompt(s)")


cli.add_command(folder)
cli.add_command(prompt)
cli.add_command(transfer)
cli.add_command(config)


if __name__ == '__main__':
    cli()
