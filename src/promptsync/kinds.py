"""
kinds:
    Asset kind targets + resolution for promptsync.

This module provides:
- KindTarget protocol describing how one AssetKind is installed
- Concrete implementations for each supported kind
- TARGETS registry for looking up targets by kind
- Plan resolution (resolve, plan_install)
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from promptsync import config
from promptsync.exceptions import UnsupportedKindError
from promptsync.models import AssetKind, CatalogEntry, HookTool, InstallPlan, InstallStrategy


# =============================================================================
# KindTarget Protocol
# =============================================================================


class KindTarget(Protocol):
    """Protocol defining the interface for asset kind targets."""

    kind: AssetKind
    strategy: InstallStrategy
    destination: Path
    hook_tool: HookTool | None
    script_extensions: tuple[str, ...]

    @property
    def is_hook_kind(self) -> bool:
        """True when installs of this kind carry hook scripts."""
        ...

    def get_destination(self, project_root: Path) -> Path:
        """Get the absolute install destination under a project root."""
        ...


# =============================================================================
# BaseKindTarget - shared defaults
# =============================================================================


class BaseKindTarget:
    """Base class with shared default implementations."""

    kind: AssetKind
    strategy: InstallStrategy = InstallStrategy.COPY_DIRECTORY
    destination: Path = Path()
    hook_tool: HookTool | None = None
    script_extensions: tuple[str, ...] = ()

    @property
    def is_hook_kind(self) -> bool:
        return self.hook_tool is not None

    def get_destination(self, project_root: Path) -> Path:
        return project_root / self.destination


# =============================================================================
# Concrete Target Implementations
# =============================================================================


class AgentsMdTarget(BaseKindTarget):
    """Single AGENTS.md instructions file at the project root."""

    kind = AssetKind.AGENTS_MD
    strategy = InstallStrategy.COPY_FILE
    destination = Path("AGENTS.md")


class CursorRulesTarget(BaseKindTarget):
    """Cursor rule files (.mdc) under .cursor/rules."""

    kind = AssetKind.CURSOR_RULES
    destination = Path(".cursor") / "rules"


class CursorSkillsTarget(BaseKindTarget):
    """Skill directories for Cursor."""

    kind = AssetKind.CURSOR_SKILLS_ROOT
    destination = Path(".cursor") / "skills"


class ClaudeSkillsTarget(BaseKindTarget):
    """Skill directories for Claude Code."""

    kind = AssetKind.CLAUDE_SKILLS_ROOT
    destination = Path(".claude") / "skills"


class CursorHooksTarget(BaseKindTarget):
    """Cursor hooks: hooks.json plus its scripts, merged into .cursor/."""

    kind = AssetKind.CURSOR_HOOKS
    destination = Path(".cursor")
    hook_tool = HookTool.CURSOR
    script_extensions = config.SCRIPT_EXTENSIONS


class ClaudeHooksTarget(BaseKindTarget):
    """Claude Code hook scripts under .claude/hooks.

    The hooks themselves are declared in .claude/settings.json, which the
    project owns; promptsync only validates it.
    """

    kind = AssetKind.CLAUDE_HOOKS
    destination = Path(".claude") / "hooks"
    hook_tool = HookTool.CLAUDE
    script_extensions = config.SCRIPT_EXTENSIONS


# =============================================================================
# Target Registry
# =============================================================================

TARGETS: dict[AssetKind, KindTarget] = {
    AssetKind.AGENTS_MD: AgentsMdTarget(),
    AssetKind.CURSOR_RULES: CursorRulesTarget(),
    AssetKind.CURSOR_SKILLS_ROOT: CursorSkillsTarget(),
    AssetKind.CLAUDE_SKILLS_ROOT: ClaudeSkillsTarget(),
    AssetKind.CURSOR_HOOKS: CursorHooksTarget(),
    AssetKind.CLAUDE_HOOKS: ClaudeHooksTarget(),
}


def get_target(kind: AssetKind | str) -> KindTarget:
    """Get the target for a kind. Raises UnsupportedKindError if not found."""
    try:
        kind = AssetKind(kind)
    except ValueError:
        raise UnsupportedKindError(kind)
    if kind not in TARGETS:
        raise UnsupportedKindError(kind)
    return TARGETS[kind]


def resolve(kind: AssetKind | str) -> tuple[Path, InstallStrategy]:
    """Return the (destination template, strategy) pair for a kind."""
    target = get_target(kind)
    return target.destination, target.strategy


def plan_install(entry: CatalogEntry, project_root: Path) -> InstallPlan:
    """Resolve a catalog entry into an install plan for a project."""
    target = get_target(entry.kind)
    return InstallPlan(
        entry=entry,
        destination_root=project_root,
        strategy=target.strategy,
        destination=target.get_destination(project_root),
    )
