"""
cli.catalog:
    Catalog inspection commands for promptsync
"""

import click

from promptsync.cli.sync import catalog_option, load_catalog, project_option, resolve_project
from promptsync.kinds import get_target
from promptsync.layout import console


@click.group(name='catalog')
def catalog():
    """
    Inspect the project's asset catalog.
    """
    pass


@catalog.command(name='ls')
@project_option
@catalog_option
def list_entries(project_path: str | None, catalog_file: str | None):
    """
    List catalog entries and where each one installs.
    """
    project_root = resolve_project(project_path)
    loaded = load_catalog(project_root, catalog_file)

    if not len(loaded):
        console.print("[yellow]No entries in catalog[/yellow]")
        return

    console.print(f"[bold]Catalog entries ({len(loaded)}):[/bold]")
    console.print()

    for entry in loaded:
        target = get_target(entry.kind)
        console.print(f"[cyan]{entry.id}[/cyan] ({entry.kind.value})")
        if entry.display_name != entry.id:
            console.print(f"  {entry.display_name}")
        console.print(f"  Source: {entry.source_path}")
        console.print(f"  Installs to: {target.destination.as_posix()}")
        if not entry.source_path.exists():
            console.print("  [red]source not found[/red]")
        console.print()
