"""
transforms:
    Post-install adjustments applied per asset kind
"""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from promptsync.exceptions import PermissionChangeError
from promptsync.kinds import get_target
from promptsync.models import InstallPlan

logger = logging.getLogger(__name__)

EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


@dataclass
class TransformResult:
    """Scripts whose mode was changed plus any rejected mode changes."""
    changed: list[Path] = field(default_factory=list)
    errors: list[PermissionChangeError] = field(default_factory=list)


def apply_post_install(plan: InstallPlan) -> TransformResult:
    """Run the kind-specific transform for a plan that finished installing."""
    target = get_target(plan.entry.kind)
    if not target.is_hook_kind:
        return TransformResult()
    return mark_scripts_executable(plan.destination, target.script_extensions)


def _script_candidates(root: Path, extensions: tuple[str, ...]) -> Iterator[Path]:
    """Regular, non-symlink files under root whose suffix is a script extension."""
    paths = [root] if root.is_file() else sorted(root.rglob("*"))
    for path in paths:
        if path.is_symlink() or not path.is_file():
            continue
        if path.suffix.lower() in extensions:
            yield path


def mark_scripts_executable(root: Path, extensions: tuple[str, ...]) -> TransformResult:
    """
    Add the executable bits to every script under root.

    Files whose suffix is not in extensions are left untouched. A failed
    stat or chmod is collected rather than raised so the rest of the tree
    is still processed.
    """
    result = TransformResult()
    if not root.exists():
        return result

    for path in _script_candidates(root, extensions):
        try:
            mode = path.stat().st_mode
            if mode & EXEC_BITS == EXEC_BITS:
                continue
            os.chmod(path, mode | EXEC_BITS)
        except OSError as e:
            logger.warning("Could not mark %s executable: %s", path, e)
            result.errors.append(PermissionChangeError(path, e.strerror or str(e)))
            continue

        logger.debug("Marked executable: %s", path)
        result.changed.append(path)

    return result
