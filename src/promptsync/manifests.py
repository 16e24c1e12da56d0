"""
manifests:
    Parsing of the hook manifests owned by consuming tools.

Each tool declares its hooks in its own JSON file with its own shape. The
shapes are pydantic models; a ManifestParser per tool validates the file
against its model and turns it into the flat list of script paths the
validator checks.
"""

import shlex
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from promptsync import config
from promptsync.exceptions import ConfigurationError, ManifestMalformedError
from promptsync.models import HookTool


# =============================================================================
# Manifest schemas
# =============================================================================


class CursorHookEntry(BaseModel):
    """One hook in .cursor/hooks.json."""

    model_config = ConfigDict(frozen=True, extra="allow")

    command: str = Field(..., min_length=1)

    @field_validator("command")
    @classmethod
    def validate_command(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("command must be a non-empty string")
        return v


class CursorHooksFile(BaseModel):
    """Top-level .cursor/hooks.json structure."""

    model_config = ConfigDict(extra="allow")

    version: Optional[int] = None
    hooks: dict[str, list[CursorHookEntry]]


class ClaudeHookEntry(BaseModel):
    """One hook inside a Claude matcher group. Only "command" hooks run scripts."""

    model_config = ConfigDict(frozen=True, extra="allow")

    type: str = "command"
    command: Optional[str] = None

    @model_validator(mode="after")
    def validate_command(self) -> "ClaudeHookEntry":
        if self.type == "command" and (not self.command or not self.command.strip()):
            raise ValueError("command hooks need a non-empty 'command' string")
        return self


class ClaudeMatcherGroup(BaseModel):
    """Groups hooks under a matcher pattern."""

    model_config = ConfigDict(frozen=True, extra="allow")

    matcher: Optional[str] = None
    hooks: list[ClaudeHookEntry]


class ClaudeSettingsFile(BaseModel):
    """The part of .claude/settings.json that declares hooks.

    settings.json holds more than hooks, so unknown keys are allowed and a
    file without "hooks" declares nothing.
    """

    model_config = ConfigDict(extra="allow")

    hooks: Optional[dict[str, list[ClaudeMatcherGroup]]] = None


def describe_validation_error(error: ValidationError) -> str:
    """Flatten pydantic errors into 'hooks.stop.0.command: Field required' form."""
    parts = []
    for item in error.errors():
        loc = ".".join(str(p) for p in item["loc"])
        parts.append(f"{loc}: {item['msg']}" if loc else item["msg"])
    return "; ".join(parts)


# =============================================================================
# Parsers
# =============================================================================


@dataclass(frozen=True)
class DeclaredScript:
    """One script reference declared by a hook manifest.

    interpreter is set when the hook hands the script to an interpreter
    (``bash hooks/x.sh``) instead of executing it directly.
    """
    event: str
    command: str
    script_path: Path
    interpreter: Optional[str] = None


@dataclass(frozen=True)
class ManifestDeclaration:
    """Everything a manifest declares, in declaration order."""
    manifest_path: Path
    scripts: tuple[DeclaredScript, ...] = ()


class ManifestParser(ABC):
    """Base class for per-tool hook manifest parsers."""

    tool: HookTool
    manifest_file: Path
    schema: type[BaseModel]

    def manifest_path(self, project_root: Path) -> Path:
        return project_root / self.manifest_file

    def load(self, project_root: Path) -> ManifestDeclaration | None:
        """
        Read and parse the tool's manifest under project_root.

        Returns:
            The declaration, or None if the manifest file does not exist.

        Raises:
            ManifestMalformedError: If the file cannot be read or does not
                match the tool's schema.
        """
        path = self.manifest_path(project_root)
        if not path.is_file():
            if path.exists():
                raise ManifestMalformedError(path, "not a regular file")
            return None

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ManifestMalformedError(path, f"cannot read file: {e}")

        try:
            manifest = self.schema.model_validate_json(text)
        except ValidationError as e:
            raise ManifestMalformedError(path, describe_validation_error(e))

        scripts: list[DeclaredScript] = []
        for event, command in self.extract_commands(manifest):
            reference = self.script_reference(command, project_root, path)
            if reference is not None:
                script_path, interpreter = reference
                scripts.append(
                    DeclaredScript(
                        event=event,
                        command=command,
                        script_path=script_path,
                        interpreter=interpreter,
                    )
                )

        return ManifestDeclaration(manifest_path=path, scripts=tuple(scripts))

    @abstractmethod
    def extract_commands(self, manifest: BaseModel) -> list[tuple[str, str]]:  # pragma: no cover
        """Return (event, command) pairs in declaration order."""
        pass

    def expand_variables(self, command: str, project_root: Path) -> str:  # noqa: ARG002
        """Default: commands carry no tool-specific variables."""
        return command

    def script_reference(
        self,
        command: str,
        project_root: Path,
        path: Path,
    ) -> tuple[Path, Optional[str]] | None:
        """
        Resolve the script a hook command runs, relative to the manifest's
        directory, together with the interpreter running it (if any).
        Bare program names such as ``npx`` are not script references and
        yield None.
        """
        expanded = self.expand_variables(command, project_root)
        try:
            tokens = shlex.split(expanded)
        except ValueError as e:
            raise ManifestMalformedError(path, f"cannot parse command {command!r}: {e}")
        if not tokens:
            raise ManifestMalformedError(path, "empty hook command")

        target = _script_token(tokens)
        if target is None:
            return None

        token, interpreter = target
        script = Path(token)
        if not script.is_absolute():
            script = path.parent / script
        return script, interpreter


def _script_token(tokens: list[str]) -> tuple[str, Optional[str]] | None:
    """
    Pick the word of a hook command that names a script file.

    ``/usr/bin/env`` and its assignments are skipped. For a known interpreter
    the first non-option argument is the script, unless the interpreter
    is given inline code or a module instead.
    """
    if Path(tokens[0]).name == "env":
        tokens = tokens[1:]
        while tokens and (tokens[0].startswith("-") or "=" in tokens[0]):
            tokens = tokens[1:]
        if not tokens:
            return None

    program = tokens[0]
    name = Path(program).name
    if name in config.INTERPRETERS:
        for arg in tokens[1:]:
            if arg in config.INTERPRETERS[name]:
                return None
            if arg.startswith("-"):
                continue
            if "/" in arg or arg.lower().endswith(config.INTERPRETED_EXTENSIONS):
                return arg, name
            return None
        return None

    if "/" in program or program.lower().endswith(config.SCRIPT_EXTENSIONS):
        return program, None
    return None


class CursorHooksParser(ManifestParser):
    """Parser for Cursor's .cursor/hooks.json.

    Shape: {"version": 1, "hooks": {"<event>": [{"command": "..."}]}}
    """

    tool = HookTool.CURSOR
    manifest_file = config.CURSOR_HOOKS_MANIFEST
    schema = CursorHooksFile

    def extract_commands(self, manifest: CursorHooksFile) -> list[tuple[str, str]]:
        return [
            (event, entry.command)
            for event, entries in manifest.hooks.items()
            for entry in entries
        ]


class ClaudeHooksParser(ManifestParser):
    """Parser for Claude Code's .claude/settings.json.

    Shape: {"hooks": {"<Event>": [{"matcher": "...", "hooks": [
        {"type": "command", "command": "..."}]}]}}
    """

    tool = HookTool.CLAUDE
    manifest_file = config.CLAUDE_HOOKS_MANIFEST
    schema = ClaudeSettingsFile

    def extract_commands(self, manifest: ClaudeSettingsFile) -> list[tuple[str, str]]:
        commands: list[tuple[str, str]] = []
        for event, groups in (manifest.hooks or {}).items():
            for group in groups:
                for entry in group.hooks:
                    if entry.type == "command":
                        commands.append((event, entry.command))
        return commands

    def expand_variables(self, command: str, project_root: Path) -> str:
        var = config.CLAUDE_PROJECT_DIR_VAR
        root = str(project_root)
        return command.replace(f"${{{var}}}", root).replace(f"${var}", root)


PARSERS: dict[HookTool, ManifestParser] = {
    HookTool.CURSOR: CursorHooksParser(),
    HookTool.CLAUDE: ClaudeHooksParser(),
}


def get_parser(tool: HookTool | str) -> ManifestParser:
    """Get the manifest parser for a tool. Raises ConfigurationError if unknown."""
    try:
        tool = HookTool(tool)
    except ValueError:
        raise ConfigurationError(
            f"Unknown hook tool: {tool}. Supported: {[t.value for t in HookTool]}"
        )
    return PARSERS[tool]
