"""
Folder commands for promptvault.
"""
import json
from typing import Optional

import click

from promptvault.commands import get_core, vault_errors


@click.group()
def folder():
    """Manage folders."""
    pass


@folder.command(name="add")
@click.argument("name")
@click.option("-p", "--parent", "parent_id", help="Parent folder id (default: top level).")
@click.pass_context
def add(ctx, name: str, parent_id: Optional[str]):
    """Create a folder called NAME."""
    with vault_errors():
        core = get_core(ctx)
        created = core.create_folder(name, parent_id)
        click.echo(f"Folder '{created.name}' created successfully. ({created.id})")


@folder.command(name="rename")
@click.argument("folder_id")
@click.argument("name")
@click.pass_context
def rename(ctx, folder_id: str, name: str):
    """Rename folder FOLDER_ID to NAME."""
    with vault_errors():
        core = get_core(ctx)
        updated = core.update_folder(folder_id, name=name)
        click.echo(f"Folder renamed to '{updated.name}'.")


@folder.command(name="move")
@click.argument("folder_id")
@click.argument("parent_id")
@click.pass_context
def move(ctx, folder_id: str, parent_id: str):
    """Move FOLDER_ID under PARENT_ID ('root' for top level)."""
    with vault_errors():
        core = get_core(ctx)
        updated = core.update_folder(folder_id, parent_id=parent_id)
        click.echo(f"Folder '{updated.name}' moved successfully.")


@folder.command(name="delete")
@click.argument("folder_id")
@click.confirmation_option(prompt="Are you sure you want to delete this folder?")
@click.pass_context
def delete(ctx, folder_id: str):
    """Delete an empty folder.

    Folders that still contain prompts or subfolders are refused.
    """
    with vault_errors():
        core = get_core(ctx)
        core.get_folder(folder_id)
        removed = core.delete_item(folder_id)
        click.echo(f"Folder '{removed.name}' deleted successfully.")


@folder.command(name="list")
@click.option("-x", "--exclude", "exclude_id", help="Folder id to leave out, with its subfolders.")
@click.option("--root", "include_root", is_flag=True, help="Include the top-level option.")
@click.option("-j", "--json", "json_output", is_flag=True, help="Output in JSON format.")
@click.pass_context
def list_folders(ctx, exclude_id: Optional[str], include_root: bool, json_output: bool):
    """List folders as breadcrumb paths."""
    with vault_errors():
        core = get_core(ctx)
        options = core.folder_options(exclude_id=exclude_id, include_root=include_root)

        if json_output:
            click.echo(json.dumps([{"id": o.id, "label": o.label} for o in options], indent=2))
            return
        if not options:
            click.echo("No folders.")
            return
        for option in options:
            click.echo(f"{option.id}  {option.label}")
