"""
installer:
    Materializes install plans on disk
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path

from promptsync.exceptions import InstallIOError, SourceNotFoundError, UnsupportedKindError
from promptsync.models import InstallPlan, InstallStrategy
from promptsync.utils import is_within

logger = logging.getLogger(__name__)

TEMP_SUFFIX = ".promptsync-tmp"


def install(plan: InstallPlan) -> list[Path]:
    """
    Copy a plan's source content to its destination.

    Directory sources are merged into the destination: files the asset ships
    are overwritten, anything else already there is left alone.

    Returns:
        Absolute paths of every file written

    Raises:
        SourceNotFoundError: If the source path no longer exists.
        InstallIOError: On permission/I/O failures or an escaping destination.
    """
    source = plan.entry.source_path
    root = plan.destination_root

    if not source.exists():
        raise SourceNotFoundError(source)

    if not is_within(plan.destination, root):
        raise InstallIOError(
            f"Destination {plan.destination} is outside project root {root}",
            path=plan.destination,
        )

    logger.info("Installing %s (%s) -> %s", plan.entry.id, plan.entry.kind.value, plan.destination)

    try:
        if plan.strategy == InstallStrategy.COPY_FILE:
            if not source.is_file():
                raise InstallIOError(f"Expected a file for '{plan.entry.id}': {source}", path=source)
            _copy_file(source, plan.destination)
            return [plan.destination]
        if plan.strategy == InstallStrategy.COPY_DIRECTORY:
            if not source.is_dir():
                raise InstallIOError(
                    f"Expected a directory for '{plan.entry.id}': {source}", path=source
                )
            return _copy_tree(source, plan.destination, root)
    except OSError as e:
        failed = Path(e.filename) if e.filename else plan.destination
        raise InstallIOError(f"Failed to install '{plan.entry.id}': {e}", path=failed)

    raise UnsupportedKindError(plan.entry.kind)


def _copy_file(source: Path, dest: Path) -> None:
    """Copy one file through a temporary sibling so dest is never half written."""
    if dest.is_dir():
        raise InstallIOError(f"Cannot overwrite directory with a file: {dest}", path=dest)
    dest.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(dir=dest.parent, prefix=f".{dest.name}.", suffix=TEMP_SUFFIX)
    os.close(fd)
    tmp_path = Path(tmp_name)
    try:
        shutil.copy2(source, tmp_path)
        os.replace(tmp_path, dest)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    logger.debug("Copied %s -> %s", source, dest)


def _copy_tree(source: Path, dest: Path, root: Path) -> list[Path]:
    """Recursively copy source into dest, preserving relative structure."""
    written: list[Path] = []
    dest.mkdir(parents=True, exist_ok=True)

    for item in sorted(source.rglob("*")):
        rel = item.relative_to(source)
        target = dest / rel

        if item.is_symlink() and not is_within(item, source):
            raise InstallIOError(f"Symlink escapes the asset source: {item}", path=item)
        if not is_within(target, root):
            raise InstallIOError(f"Refusing to write outside {root}: {target}", path=target)

        if item.is_dir():
            target.mkdir(parents=True, exist_ok=True)
        elif item.is_file():
            _copy_file(item, target)
            written.append(target)
        else:
            logger.debug("Skipping special file %s", item)

    return written
