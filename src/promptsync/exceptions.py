"""
exceptions:
    Error types raised by promptsync
"""

from pathlib import Path


class PromptSyncError(Exception):
    """Base class for all promptsync errors."""


class ConfigurationError(PromptSyncError):
    """Invalid command-line or project configuration."""


class CatalogError(PromptSyncError):
    """The catalog file is missing, unreadable or malformed."""


class UnsupportedKindError(PromptSyncError):
    """No resolver is registered for an asset kind."""

    def __init__(self, kind):
        self.kind = kind
        super().__init__(f"Unsupported asset kind: {kind!r}")


class SourceNotFoundError(PromptSyncError):
    """The catalog source path does not exist at install time."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Source path not found: {path}")


class InstallIOError(PromptSyncError):
    """Copying an asset failed on permissions or I/O."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        super().__init__(message)


class PermissionChangeError(PromptSyncError):
    """The filesystem rejected marking a script executable."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot mark {path} executable: {reason}")


class ManifestMalformedError(PromptSyncError):
    """A hook manifest could not be parsed into script declarations."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Malformed manifest {path}: {reason}")
