"""
models:
    Data models for promptsync catalogs, install plans and the lock file
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator, Optional

import yaml

from promptsync.exceptions import CatalogError, ConfigurationError

logger = logging.getLogger(__name__)


class AssetKind(str, Enum):
    """Closed set of installable asset categories."""

    AGENTS_MD = "agents_md"
    CURSOR_RULES = "cursor_rules"
    CURSOR_SKILLS_ROOT = "cursor_skills_root"
    CLAUDE_SKILLS_ROOT = "claude_skills_root"
    CURSOR_HOOKS = "cursor_hooks"
    CLAUDE_HOOKS = "claude_hooks"


class InstallStrategy(str, Enum):
    """How an asset's source is materialized at its destination."""

    COPY_FILE = "copy_file"
    COPY_DIRECTORY = "copy_directory"


class HookTool(str, Enum):
    """Consuming tools whose hook manifests promptsync can validate."""

    CURSOR = "cursor"
    CLAUDE = "claude"


@dataclass(frozen=True)
class CatalogEntry:
    """A single installable asset."""
    id: str
    kind: AssetKind
    source_path: Path
    display_name: str

    @classmethod
    def from_dict(cls, data: dict, base_dir: Path) -> 'CatalogEntry':
        """
        Build an entry from one item of the catalog's ``entries`` list.

        Relative source paths are resolved against ``base_dir`` (the
        directory holding the catalog file).
        """
        if not isinstance(data, dict):
            raise CatalogError(f"Catalog entry must be a mapping, got: {data!r}")

        entry_id = data.get('id')
        if not entry_id or not isinstance(entry_id, str):
            raise CatalogError(f"Catalog entry is missing an 'id': {data!r}")

        raw_kind = data.get('kind')
        try:
            kind = AssetKind(raw_kind)
        except ValueError:
            supported = ", ".join(k.value for k in AssetKind)
            raise CatalogError(
                f"Entry '{entry_id}' has unknown kind {raw_kind!r}. Supported: {supported}"
            )

        source = data.get('source')
        if not source or not isinstance(source, str):
            raise CatalogError(f"Entry '{entry_id}' is missing a 'source' path")

        source_path = Path(source).expanduser()
        if not source_path.is_absolute():
            source_path = base_dir / source_path

        return cls(
            id=entry_id,
            kind=kind,
            source_path=source_path,
            display_name=data.get('name') or entry_id,
        )


@dataclass(frozen=True)
class Catalog:
    """Read-only collection of the assets available to a project."""
    entries: tuple[CatalogEntry, ...] = ()
    path: Optional[Path] = None

    def __post_init__(self):
        seen = set()
        for entry in self.entries:
            if entry.id in seen:
                raise CatalogError(f"Duplicate catalog entry id: '{entry.id}'")
            seen.add(entry.id)

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @classmethod
    def from_file(cls, catalog_path: Path) -> 'Catalog':
        """
        Load a catalog from a promptsync.yml file.

        Raises:
            CatalogError: If the file is missing or its content is invalid.
        """
        if not catalog_path.exists():
            raise CatalogError(f"Catalog file not found: {catalog_path}")

        try:
            with open(catalog_path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise CatalogError(f"Invalid YAML in {catalog_path}: {e}")

        if not isinstance(data, dict):
            raise CatalogError(f"Catalog {catalog_path} must be a mapping")

        raw_entries = data.get('entries') or []
        if not isinstance(raw_entries, list):
            raise CatalogError(f"'entries' in {catalog_path} must be a list")

        base_dir = catalog_path.parent
        entries = tuple(CatalogEntry.from_dict(item, base_dir) for item in raw_entries)
        logger.debug("Loaded %d catalog entries from %s", len(entries), catalog_path)
        return cls(entries=entries, path=catalog_path)

    def get(self, entry_id: str) -> CatalogEntry:
        """Look up an entry by id."""
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        raise CatalogError(f"No catalog entry with id '{entry_id}'")

    def select(self, entry_ids: Optional[Iterable[str]] = None) -> list[CatalogEntry]:
        """Return the requested entries in catalog order, or all of them."""
        if not entry_ids:
            return list(self.entries)
        wanted = list(entry_ids)
        for entry_id in wanted:
            self.get(entry_id)
        return [entry for entry in self.entries if entry.id in wanted]


@dataclass(frozen=True)
class InstallPlan:
    """A resolved installation request for one catalog entry."""
    entry: CatalogEntry
    destination_root: Path
    strategy: InstallStrategy
    destination: Path


@dataclass
class LockEntry:
    """Represents an installed catalog entry."""
    id: str
    kind: str
    destination: str
    files: list[str] = field(default_factory=list)
    checksum: Optional[str] = None
    installed_at: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for YAML serialization."""
        result = {
            'id': self.id,
            'kind': self.kind,
            'destination': self.destination,
            'files': self.files,
        }
        if self.checksum:
            result['checksum'] = self.checksum
        if self.installed_at:
            result['installed_at'] = self.installed_at
        return result

    @classmethod
    def from_dict(cls, data: dict) -> 'LockEntry':
        """Create from dictionary."""
        return cls(
            id=data.get('id', ''),
            kind=data.get('kind', ''),
            destination=data.get('destination', ''),
            files=data.get('files', []),
            checksum=data.get('checksum'),
            installed_at=data.get('installed_at'),
        )


class LockRegistry:
    """Manages the promptsync.lock.yml file."""

    def __init__(self, lock_path: Path):
        self.path = lock_path
        self._entries: list[LockEntry] = []
        self._load()

    def _load(self):
        """
        Load entries from file.

        Raises:
            ConfigurationError: If the lock file is not valid YAML or does
                not have the expected structure.
        """
        if not self.path.exists():
            self._entries = []
            return

        try:
            with open(self.path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in lock file {self.path}: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError(f"Lock file {self.path} must be a mapping")

        raw_entries = data.get('entries') or []
        if not isinstance(raw_entries, list) or not all(isinstance(i, dict) for i in raw_entries):
            raise ConfigurationError(f"'entries' in lock file {self.path} must be a list of mappings")

        self._entries = [LockEntry.from_dict(item) for item in raw_entries]

    def _save(self):
        """Save entries to file."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            'version': '1.0',
            'entries': [entry.to_dict() for entry in self._entries]
        }

        with open(self.path, 'w') as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    def add(self, entry: LockEntry):
        """Add or replace the record for an entry id."""
        self._entries = [e for e in self._entries if e.id != entry.id]
        self._entries.append(entry)
        self._save()

    def find(self, entry_id: str) -> Optional[LockEntry]:
        """Find the record for an entry id."""
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def all(self) -> list[LockEntry]:
        """Get all records."""
        return self._entries.copy()
