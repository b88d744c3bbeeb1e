"""
Prompt commands for promptvault.

Editing content creates a new version; renaming, moving and favoriting do not.
"""
import json
from pathlib import Path
from typing import Optional

import click

from promptvault.commands import get_core, vault_errors
from promptvault.exceptions import ValidationError


@click.group()
def prompt():
    """Manage prompts and their version history."""
    pass


def _read_content(content: Optional[str], content_file: Optional[Path]) -> Optional[str]:
    if content is not None and content_file is not None:
        raise ValidationError("Use either -c/--content or -f/--file, not both.")
    if content_file is not None:
        try:
            return content_file.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            raise ValidationError(f"{content_file.name} is not valid UTF-8 text.")
    return content


def _display_prompt(item) -> None:
    """Display prompt details in human-readable format."""
    click.echo(f"Name: {item.name}")
    click.echo(f"Id: {item.id}")
    click.echo(f"Folder: {item.parent_id or '(top level)'}")
    click.echo(f"Version: {item.version_number}")
    click.echo(f"Favorite: {'yes' if item.is_favorite else 'no'}")
    click.echo(f"Updated: {item.updated_at:%Y-%m-%d %H:%M}")
    click.echo("")
    click.echo(item.content)


@prompt.command(name="add")
@click.argument("name")
@click.option("-c", "--content", help="Prompt text.")
@click.option("-f", "--file", "content_file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Read prompt text from a file.")
@click.option("-p", "--folder", "folder_id", help="Folder id (default: top level).")
@click.option("--favorite", is_flag=True, help="Mark as favorite.")
@click.pass_context
def add(ctx, name: str, content: Optional[str], content_file: Optional[Path],
        folder_id: Optional[str], favorite: bool):
    """Create a prompt called NAME."""
    with vault_errors():
        text = _read_content(content, content_file)
        if not text:
            raise ValidationError("Prompt content is required. Use -c/--content or -f/--file.")
        core = get_core(ctx)
        created = core.create_prompt(name, text, folder_id, is_favorite=favorite)
        click.echo(f"Prompt '{created.name}' created successfully. ({created.id})")


@prompt.command(name="show")
@click.argument("prompt_id")
@click.option("-j", "--json", "json_output", is_flag=True, help="Output in JSON format.")
@click.pass_context
def show(ctx, prompt_id: str, json_output: bool):
    """Show a prompt's current content."""
    with vault_errors():
        item = get_core(ctx).get_prompt(prompt_id)
        if json_output:
            click.echo(json.dumps(item.model_dump(mode="json", exclude={"history"}), indent=2))
        else:
            _display_prompt(item)


@prompt.command(name="edit")
@click.argument("prompt_id")
@click.option("-n", "--name", help="New name.")
@click.option("-c", "--content", help="New prompt text.")
@click.option("-f", "--file", "content_file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Read new prompt text from a file.")
@click.pass_context
def edit(ctx, prompt_id: str, name: Optional[str], content: Optional[str],
         content_file: Optional[Path]):
    """Edit a prompt.

    Changed content archives the previous text as a version.
    Saving identical content leaves the version unchanged.
    """
    with vault_errors():
        text = _read_content(content, content_file)
        core = get_core(ctx)
        before = core.get_prompt(prompt_id)
        updated = core.update_prompt(prompt_id, name=name, content=text)
        if updated.version_number != before.version_number:
            click.echo(f"Prompt '{updated.name}' saved as version {updated.version_number}.")
        else:
            click.echo(f"Prompt '{updated.name}' updated successfully.")


@prompt.command(name="delete")
@click.argument("prompt_id")
@click.confirmation_option(prompt="Are you sure you want to delete this prompt and its history?")
@click.pass_context
def delete(ctx, prompt_id: str):
    """Delete a prompt and its version history."""
    with vault_errors():
        core = get_core(ctx)
        core.get_prompt(prompt_id)
        removed = core.delete_item(prompt_id)
        click.echo(f"Prompt '{removed.name}' deleted successfully.")


@prompt.command(name="branch")
@click.argument("prompt_id")
@click.pass_context
def branch(ctx, prompt_id: str):
    """Copy a prompt's current content into a new prompt at version 1."""
    with vault_errors():
        created = get_core(ctx).branch_prompt(prompt_id)
        click.echo(f"Prompt '{created.name}' created successfully. ({created.id})")


@prompt.command(name="versions")
@click.argument("prompt_id")
@click.option("-j", "--json", "json_output", is_flag=True, help="Output in JSON format.")
@click.pass_context
def versions(ctx, prompt_id: str, json_output: bool):
    """Show a prompt's version history, newest first."""
    with vault_errors():
        records = get_core(ctx).list_versions(prompt_id)
        if json_output:
            click.echo(json.dumps([r.model_dump(mode="json") for r in records], indent=2))
            return
        for record in records:
            marker = " (Current)" if record.is_current else ""
            click.echo(f"Version {record.version_number}{marker} - {record.timestamp:%Y-%m-%d %H:%M}")
            click.echo(f"  {record.content}")


@prompt.command(name="favorite")
@click.argument("prompt_id")
@click.option("--off", is_flag=True, help="Remove the favorite flag.")
@click.pass_context
def favorite(ctx, prompt_id: str, off: bool):
    """Mark a prompt as favorite."""
    with vault_errors():
        updated = get_core(ctx).update_prompt(prompt_id, is_favorite=not off)
        state = "marked as favorite" if updated.is_favorite else "no longer a favorite"
        click.echo(f"Prompt '{updated.name}' {state}.")


@prompt.command(name="move")
@click.argument("prompt_id")
@click.argument("folder_id")
@click.pass_context
def move(ctx, prompt_id: str, folder_id: str):
    """Move a prompt into FOLDER_ID ('root' for top level)."""
    with vault_errors():
        updated = get_core(ctx).update_prompt(prompt_id, folder_id=folder_id)
        click.echo(f"Prompt '{updated.name}' moved successfully.")
