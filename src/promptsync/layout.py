"""
layout:
    Console output and logging setup for promptsync
"""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from promptsync.sync import AssetReport, AssetStatus, SyncReport
from promptsync.validator import ScriptStatus, ValidationReport, ValidationState

console = Console()


def configure_logging(verbose: bool = False) -> None:
    """Route promptsync's loggers through rich on stderr."""
    logger = logging.getLogger("promptsync")
    logger.handlers.clear()
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        show_time=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


def _display(path: Path, project_root: Path) -> str:
    try:
        return path.relative_to(project_root).as_posix()
    except ValueError:
        return str(path)


def print_asset(asset: AssetReport, project_root: Path, verbose: bool = False) -> None:
    """Print one asset line plus its warnings or error."""
    name = asset.entry.display_name
    kind = asset.entry.kind.value

    if asset.status == AssetStatus.FAILED:
        console.print(f"  [red]{name}[/red] [dim]({kind})[/dim]")
        console.print(f"    [red]{escape(asset.error or '')}[/red]")
        return

    dest = _display(asset.destination, project_root) if asset.destination else ""
    count = len(asset.files)
    color = "yellow" if asset.status == AssetStatus.INSTALLED_WITH_WARNINGS else "green"
    console.print(
        f"  [{color}]{name}[/{color}] [dim]({kind} -> {dest}, "
        f"{count} file{'s' if count != 1 else ''})[/dim]"
    )

    if verbose:
        for f in asset.files:
            console.print(f"    [dim]{_display(f, project_root)}[/dim]")
    for warning in asset.warnings:
        console.print(f"    [yellow]warning:[/yellow] {escape(warning)}")


def print_validation(report: ValidationReport, project_root: Path) -> None:
    """Print a validation report, enumerating every failing script."""
    manifest = _display(report.manifest_path, project_root)
    tool = report.tool.value

    if report.state == ValidationState.MANIFEST_MISSING:
        console.print(f"  [dim]{tool}: no manifest at {manifest}[/dim]")
        return
    if report.state == ValidationState.MANIFEST_MALFORMED:
        console.print(f"  [red]{tool}: malformed manifest {manifest}[/red]")
        console.print(f"    {escape(report.error or '')}")
        return

    total = len(report.checks)
    if report.passed:
        console.print(
            f"  [green]{tool}: {total} hook script{'s' if total != 1 else ''} OK[/green] "
            f"[dim]({manifest})[/dim]"
        )
        return

    failures = report.failures
    console.print(
        f"  [red]{tool}: {len(failures)} of {total} hook scripts broken[/red] [dim]({manifest})[/dim]"
    )
    for check in failures:
        reason = "missing" if check.status == ScriptStatus.MISSING_SCRIPT else "not executable"
        console.print(f"    [red]{_display(check.entry_checked, project_root)}[/red] [dim]({reason})[/dim]")


def print_sync_report(report: SyncReport, verbose: bool = False) -> None:
    """Print the full result of a sync run."""
    if report.assets:
        console.print("[bold]Assets:[/bold]")
        for asset in report.assets:
            print_asset(asset, report.project_root, verbose)

    if report.validations:
        console.print()
        console.print("[bold]Hook validation:[/bold]")
        for validation in report.validations:
            print_validation(validation, report.project_root)

    console.print()
    failed = len(report.failed_assets)
    installed = len(report.assets) - failed
    if report.ok:
        console.print(f"[green]Synced {installed} asset(s)[/green]")
    else:
        if failed:
            console.print(f"[red]{failed} asset(s) failed to install[/red]")
        if report.failed_validations:
            console.print(f"[red]{len(report.failed_validations)} hook manifest(s) failed validation[/red]")
