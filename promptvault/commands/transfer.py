"""
Import and export commands for promptvault.
"""
from pathlib import Path
from typing import Optional

import click

from promptvault.commands import get_core, vault_errors
from promptvault.constants import EXPORT_FORMATS


@click.group()
def transfer():
    """Import or export prompts in bulk (JSON or CSV)."""
    pass


@transfer.command(name="import")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def import_prompts(ctx, file: Path):
    """Import prompts from FILE (.json or .csv).

    Every row becomes a new prompt at version 1.
    """
    with vault_errors():
        created = get_core(ctx).import_prompts(file)
        click.echo(f"Imported {len(created)} prompt(s).")


@transfer.command(name="export")
@click.option("-F", "--format", "fmt", type=click.Choice(EXPORT_FORMATS),
              help="Output format (default from config).")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path),
              help="Write to a file instead of stdout.")
@click.pass_context
def export_prompts(ctx, fmt: Optional[str], output: Optional[Path]):
    """Export all prompts, most recently updated first."""
    with vault_errors():
        data = get_core(ctx).export_prompts(fmt)
        if output:
            output.write_text(data, encoding="utf-8")
            click.echo(f"Exported prompts to {output}.")
        else:
            click.echo(data)
