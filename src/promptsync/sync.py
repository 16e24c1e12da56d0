"""
sync:
    Installation orchestration for promptsync.

Plans every requested catalog entry, installs them (in parallel where their
destinations do not overlap), applies post-install transforms, records the
lock file and finally validates hook manifests.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional

from promptsync.exceptions import PromptSyncError
from promptsync.installer import install
from promptsync.kinds import get_target, plan_install
from promptsync.models import Catalog, CatalogEntry, HookTool, InstallPlan, LockEntry, LockRegistry
from promptsync.transforms import apply_post_install
from promptsync.utils import checksum_files, get_lock_path
from promptsync.validator import ValidationReport, ValidationState, validate_hooks

logger = logging.getLogger(__name__)


class AssetStatus(str, Enum):
    INSTALLED = "installed"
    INSTALLED_WITH_WARNINGS = "installed_with_warnings"
    FAILED = "failed"


@dataclass
class AssetReport:
    """Outcome of installing one catalog entry."""
    entry: CatalogEntry
    status: AssetStatus
    destination: Optional[Path] = None
    files: list[Path] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status != AssetStatus.FAILED


def gating_failures(
    reports: Iterable[ValidationReport],
    required_tools: Iterable[HookTool] = (),
) -> list[ValidationReport]:
    """
    Validation reports that fail the run.

    Malformed manifests and broken script entries always fail. A missing
    manifest only fails when that tool's hooks were required to be there.
    """
    required = set(required_tools)
    return [
        report for report in reports
        if report.is_failure
        or (report.state == ValidationState.MANIFEST_MISSING and report.tool in required)
    ]


@dataclass
class SyncReport:
    """Structured result handed back to the CLI."""
    project_root: Path
    assets: list[AssetReport] = field(default_factory=list)
    validations: list[ValidationReport] = field(default_factory=list)
    gating: bool = False

    @property
    def failed_assets(self) -> list[AssetReport]:
        return [a for a in self.assets if a.status == AssetStatus.FAILED]

    @property
    def hook_tools_installed(self) -> set[HookTool]:
        tools = set()
        for asset in self.assets:
            tool = get_target(asset.entry.kind).hook_tool
            if asset.succeeded and tool is not None:
                tools.add(tool)
        return tools

    @property
    def failed_validations(self) -> list[ValidationReport]:
        required = self.hook_tools_installed if self.gating else ()
        return gating_failures(self.validations, required)

    @property
    def ok(self) -> bool:
        return not self.failed_assets and not self.failed_validations

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1


# =============================================================================
# Per-asset work
# =============================================================================


def install_entry(plan: InstallPlan) -> AssetReport:
    """Install one plan and run its transform. Never raises PromptSyncError."""
    entry = plan.entry
    try:
        files = install(plan)
    except PromptSyncError as e:
        logger.error("Install of '%s' failed: %s", entry.id, e)
        return AssetReport(
            entry=entry,
            status=AssetStatus.FAILED,
            destination=plan.destination,
            error=str(e),
        )

    transform = apply_post_install(plan)
    warnings = [str(err) for err in transform.errors]
    status = AssetStatus.INSTALLED_WITH_WARNINGS if warnings else AssetStatus.INSTALLED

    return AssetReport(
        entry=entry,
        status=status,
        destination=plan.destination,
        files=files,
        warnings=warnings,
    )


def _overlaps(a: Path, b: Path) -> bool:
    return a == b or a in b.parents or b in a.parents


def partition_lanes(plans: list[InstallPlan]) -> list[list[InstallPlan]]:
    """
    Group plans into lanes that may run concurrently.

    Plans whose destinations are equal or nested share a lane and keep their
    relative order; distinct lanes touch disjoint subtrees.
    """
    lanes: list[list[int]] = []
    for index, plan in enumerate(plans):
        merged = [index]
        remaining = []
        for lane in lanes:
            if any(_overlaps(plan.destination, plans[i].destination) for i in lane):
                merged.extend(lane)
            else:
                remaining.append(lane)
        lanes = remaining + [sorted(merged)]

    lanes.sort(key=lambda lane: lane[0])
    return [[plans[i] for i in lane] for lane in lanes]


def _run_lane(lane: list[InstallPlan]) -> list[AssetReport]:
    return [install_entry(plan) for plan in lane]


def _plan_or_report(entry: CatalogEntry, project_root: Path) -> InstallPlan | AssetReport:
    try:
        return plan_install(entry, project_root)
    except PromptSyncError as e:
        return AssetReport(entry=entry, status=AssetStatus.FAILED, error=str(e))


# =============================================================================
# Orchestration
# =============================================================================


def run_installs(plans: list[InstallPlan], jobs: int = 1) -> list[AssetReport]:
    """Install plans across a bounded worker pool, one lane per worker."""
    if not plans:
        return []

    lanes = partition_lanes(plans)
    workers = max(1, min(jobs, len(lanes)))
    logger.debug("Installing %d asset(s) in %d lane(s) with %d worker(s)", len(plans), len(lanes), workers)

    reports: list[AssetReport] = []
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(_run_lane, lane) for lane in lanes]
        try:
            for future in as_completed(futures):
                reports.extend(future.result())
        except KeyboardInterrupt:
            for future in futures:
                future.cancel()
            raise

    order = {plan.entry.id: i for i, plan in enumerate(plans)}
    return sorted(reports, key=lambda r: order[r.entry.id])


def record_lock(project_root: Path, reports: list[AssetReport]) -> None:
    """Write successful installs to the project's lock file."""
    registry = LockRegistry(get_lock_path(project_root))
    installed_at = datetime.now(timezone.utc).isoformat(timespec="seconds")

    for report in reports:
        if not report.succeeded or report.destination is None:
            continue
        registry.add(
            LockEntry(
                id=report.entry.id,
                kind=report.entry.kind.value,
                destination=report.destination.relative_to(project_root).as_posix(),
                files=[f.relative_to(project_root).as_posix() for f in report.files],
                checksum=checksum_files(project_root, report.files),
                installed_at=installed_at,
            )
        )


def sync(
    catalog: Catalog,
    project_root: Path,
    entry_ids: Optional[Iterable[str]] = None,
    jobs: int = 1,
    validate: bool = True,
    gating: bool = False,
    write_lock: bool = True,
) -> SyncReport:
    """
    Install catalog entries into a project and validate the result.

    Args:
        catalog: Loaded catalog
        project_root: Target project directory
        entry_ids: Ids to install (all entries when empty)
        jobs: Maximum concurrent install lanes
        validate: Validate hook manifests of tools whose hooks were installed
        gating: Whether a missing manifest for an installed tool fails the report
        write_lock: Record successful installs in promptsync.lock.yml

    Raises:
        CatalogError: If an entry id is not in the catalog.
    """
    entries = catalog.select(entry_ids)
    report = SyncReport(project_root=project_root, gating=gating)

    plans: list[InstallPlan] = []
    for entry in entries:
        planned = _plan_or_report(entry, project_root)
        if isinstance(planned, AssetReport):
            report.assets.append(planned)
        else:
            plans.append(planned)

    report.assets.extend(run_installs(plans, jobs=jobs))
    order = {entry.id: i for i, entry in enumerate(entries)}
    report.assets.sort(key=lambda a: order[a.entry.id])

    if write_lock:
        record_lock(project_root, report.assets)

    if validate:
        for tool in HookTool:
            if tool in report.hook_tools_installed:
                report.validations.append(validate_hooks(project_root, tool))

    return report
