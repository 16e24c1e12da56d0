"""
cli.sync:
    Install, validate and status commands for promptsync
"""

from pathlib import Path

import click
import yaml
from rich.markup import escape

from promptsync.config import CATALOG_FILE, default_jobs
from promptsync.exceptions import PromptSyncError
from promptsync.layout import console, print_sync_report, print_validation
from promptsync.models import AssetKind, Catalog, HookTool, LockRegistry
from promptsync.sync import gating_failures, sync
from promptsync.utils import checksum_files, get_catalog_path, get_lock_path, get_project_root
from promptsync.validator import validate_project

project_option = click.option(
    '-p', '--project',
    'project_path',
    default=None,
    help='Target project directory (default: current directory)'
)

catalog_option = click.option(
    '-c', '--catalog',
    'catalog_file',
    default=None,
    help=f'Catalog file (default: <project>/{CATALOG_FILE})'
)


def load_catalog(project_root: Path, catalog_file: str | None) -> Catalog:
    """Load the catalog or exit with an error message."""
    try:
        return Catalog.from_file(get_catalog_path(project_root, catalog_file))
    except PromptSyncError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise SystemExit(1)


def resolve_project(project_path: str | None) -> Path:
    try:
        return get_project_root(project_path)
    except PromptSyncError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise SystemExit(1)


@click.command(name='init')
@project_option
def init_catalog(project_path: str | None):
    """
    Create a starter promptsync.yml in the project.
    """
    project_root = resolve_project(project_path)
    catalog_path = project_root / CATALOG_FILE

    if catalog_path.exists():
        console.print(f"[red]{CATALOG_FILE} already exists[/red]")
        raise SystemExit(1)

    data = {
        'entries': [
            {
                'id': 'team-rules',
                'kind': AssetKind.CURSOR_RULES.value,
                'source': './assets/rules',
                'name': 'Team rules',
            },
        ],
    }
    project_root.mkdir(parents=True, exist_ok=True)
    catalog_path.write_text(yaml.dump(data, default_flow_style=False, sort_keys=False))

    console.print(f"[green]Created {catalog_path}[/green]")
    console.print()
    console.print("[bold]Supported kinds:[/bold]")
    for kind in AssetKind:
        console.print(f"  {kind.value}")
    console.print()
    console.print("Next steps:")
    console.print("  1. Point each entry's source at a file or directory")
    console.print("  2. promptsync sync")


@click.command(name='sync')
@click.argument('entry_ids', nargs=-1)
@project_option
@catalog_option
@click.option(
    '-j', '--jobs',
    type=click.IntRange(min=1),
    default=None,
    help='Maximum parallel installs (default: PROMPTSYNC_JOBS or CPU count, max 8)'
)
@click.option('--no-validate', is_flag=True, help='Skip hook manifest validation')
@click.option('--strict', is_flag=True, help="Also fail when an installed tool's hook manifest is missing")
@click.option('--no-lock', is_flag=True, help='Do not update the lock file')
@click.option('-l', '--list-files', 'show_files', is_flag=True, help='List every installed file')
def sync_cmd(
    entry_ids: tuple[str, ...],
    project_path: str | None,
    catalog_file: str | None,
    jobs: int | None,
    no_validate: bool,
    strict: bool,
    no_lock: bool,
    show_files: bool,
):
    """
    Install catalog entries into the project.

    \b
    Examples:
        promptsync sync                      # Install every entry
        promptsync sync team-rules hooks     # Install selected entries
        promptsync sync --strict             # Require hook manifests
    """
    project_root = resolve_project(project_path)
    catalog = load_catalog(project_root, catalog_file)

    if not len(catalog):
        console.print("[yellow]Catalog has no entries[/yellow]")
        return

    try:
        report = sync(
            catalog,
            project_root,
            entry_ids=entry_ids,
            jobs=jobs or default_jobs(),
            validate=not no_validate,
            gating=strict,
            write_lock=not no_lock,
        )
    except PromptSyncError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise SystemExit(1)

    print_sync_report(report, verbose=show_files)
    if report.exit_code:
        raise SystemExit(report.exit_code)


@click.command(name='validate')
@project_option
@click.option(
    '-t', '--tool',
    'tools',
    multiple=True,
    type=click.Choice([t.value for t in HookTool]),
    help='Tool manifest to check (repeatable, default: all)'
)
@click.option('--strict', is_flag=True, help='Also fail when a --tool manifest is missing')
def validate_cmd(project_path: str | None, tools: tuple[str, ...], strict: bool):
    """
    Check that hook manifests reference executable scripts.

    Malformed manifests and broken scripts exit non-zero. With --tool and
    --strict, a missing manifest for that tool fails as well.
    """
    project_root = resolve_project(project_path)
    selected = [HookTool(t) for t in tools] if tools else list(HookTool)

    reports = validate_project(project_root, selected)

    console.print("[bold]Hook validation:[/bold]")
    for report in reports:
        print_validation(report, project_root)

    failures = gating_failures(reports, selected if tools and strict else ())
    if failures:
        console.print()
        console.print(f"[red]{len(failures)} hook manifest(s) failed validation[/red]")
        raise SystemExit(1)


@click.command(name='status')
@project_option
def status(project_path: str | None):
    """
    Show installed entries and whether their files changed since install.
    """
    project_root = resolve_project(project_path)
    try:
        entries = LockRegistry(get_lock_path(project_root)).all()
    except PromptSyncError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise SystemExit(1)

    if not entries:
        console.print("[yellow]Nothing installed yet[/yellow]")
        console.print("Run 'promptsync sync' to install catalog entries.")
        return

    console.print(f"[bold]Installed entries ({len(entries)}):[/bold]")
    console.print()
    for entry in entries:
        files = [project_root / f for f in entry.files]
        missing = [f for f in files if not f.exists()]
        if missing:
            state = f"[red]{len(missing)} file(s) missing[/red]"
        elif entry.checksum and checksum_files(project_root, files) != entry.checksum:
            state = "[yellow]modified[/yellow]"
        else:
            state = "[green]up to date[/green]"

        console.print(f"[cyan]{entry.id}[/cyan] ({entry.kind}) {state}")
        console.print(f"  Destination: {entry.destination}")
        if entry.installed_at:
            console.print(f"  Installed: {entry.installed_at}")
