"""
utils:
    Utility functions for promptsync
"""

import hashlib
from pathlib import Path
from typing import Optional

from promptsync.config import CATALOG_FILE, LOCK_FILE
from promptsync.exceptions import ConfigurationError


def get_project_root(project_path: Optional[str]) -> Path:
    """
    Resolve and check the target project directory.

    Args:
        project_path: Project path from the command line (defaults to cwd)

    Returns:
        Absolute path to the project root

    Raises:
        ConfigurationError: If the path exists but is not a directory.
    """
    root = Path(project_path).expanduser() if project_path else Path.cwd()
    root = root.resolve()
    if root.exists() and not root.is_dir():
        raise ConfigurationError(f"Project path is not a directory: {root}")
    return root


def get_catalog_path(project_root: Path, catalog: Optional[str] = None) -> Path:
    """Path to the catalog file, defaulting to <project>/promptsync.yml."""
    if catalog:
        return Path(catalog).expanduser().resolve()
    return project_root / CATALOG_FILE


def get_lock_path(project_root: Path) -> Path:
    return project_root / LOCK_FILE


def is_within(path: Path, root: Path) -> bool:
    """True if path resolves to root or somewhere beneath it."""
    try:
        path.resolve().relative_to(root.resolve())
    except ValueError:
        return False
    return True


def checksum_files(root: Path, files: list[Path]) -> str:
    """sha256 over the relative names and contents of files under root."""
    digest = hashlib.sha256()
    for path in sorted(files):
        digest.update(path.relative_to(root).as_posix().encode())
        digest.update(b"\0")
        digest.update(path.read_bytes())
    return f"sha256:{digest.hexdigest()}"
