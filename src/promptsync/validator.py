"""
validator:
    Checks that installed hook manifests point at runnable scripts
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional

from promptsync.exceptions import ManifestMalformedError
from promptsync.manifests import get_parser
from promptsync.models import HookTool

logger = logging.getLogger(__name__)


class ValidationState(str, Enum):
    """Terminal states of a single manifest validation run."""

    MANIFEST_MISSING = "manifest_missing"
    MANIFEST_MALFORMED = "manifest_malformed"
    ALL_PASS = "all_pass"
    SOME_FAILED = "some_failed"


class ScriptStatus(str, Enum):
    OK = "ok"
    MISSING_SCRIPT = "missing_script"
    NOT_EXECUTABLE = "not_executable"


@dataclass(frozen=True)
class ScriptCheck:
    """Result of checking one declared script path."""
    entry_checked: Path
    exists: bool
    executable: bool
    event: str = ""
    command: str = ""
    interpreter: Optional[str] = None

    @property
    def status(self) -> ScriptStatus:
        if not self.exists:
            return ScriptStatus.MISSING_SCRIPT
        if not self.executable:
            return ScriptStatus.NOT_EXECUTABLE
        return ScriptStatus.OK


@dataclass
class ValidationReport:
    """Outcome of validating one tool's hook manifest."""
    tool: HookTool
    manifest_path: Path
    state: ValidationState
    checks: list[ScriptCheck] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.state == ValidationState.ALL_PASS

    @property
    def is_failure(self) -> bool:
        """True for states that should fail a gating validation.

        A missing manifest is not a failure.
        """
        return self.state in (ValidationState.MANIFEST_MALFORMED, ValidationState.SOME_FAILED)

    @property
    def failures(self) -> list[ScriptCheck]:
        return [check for check in self.checks if check.status != ScriptStatus.OK]


def check_script(
    script_path: Path,
    event: str = "",
    command: str = "",
    interpreter: Optional[str] = None,
) -> ScriptCheck:
    """
    Check that a script exists and can be run by the hook.

    A script handed to an interpreter only has to be a regular file; one
    executed directly must also be executable by the current user.
    """
    exists = script_path.exists()
    runnable = exists and script_path.is_file()
    if runnable and interpreter is None:
        runnable = os.access(script_path, os.X_OK)
    return ScriptCheck(
        entry_checked=script_path,
        exists=exists,
        executable=runnable,
        event=event,
        command=command,
        interpreter=interpreter,
    )


def validate_hooks(project_root: Path, tool: HookTool | str) -> ValidationReport:
    """
    Validate a tool's hook manifest under project_root.

    Every declared script is checked; problems are collected rather than
    raised so a single run reports all of them.

    Returns:
        A ValidationReport in one of the ValidationState terminal states
    """
    parser = get_parser(tool)
    manifest_path = parser.manifest_path(project_root)

    try:
        declaration = parser.load(project_root)
    except ManifestMalformedError as e:
        logger.warning("%s", e)
        return ValidationReport(
            tool=parser.tool,
            manifest_path=manifest_path,
            state=ValidationState.MANIFEST_MALFORMED,
            error=e.reason,
        )

    if declaration is None:
        logger.debug("No %s manifest at %s", parser.tool.value, manifest_path)
        return ValidationReport(
            tool=parser.tool,
            manifest_path=manifest_path,
            state=ValidationState.MANIFEST_MISSING,
        )

    checks = [
        check_script(
            script.script_path,
            event=script.event,
            command=script.command,
            interpreter=script.interpreter,
        )
        for script in declaration.scripts
    ]
    failed = any(check.status != ScriptStatus.OK for check in checks)
    state = ValidationState.SOME_FAILED if failed else ValidationState.ALL_PASS

    logger.info(
        "Validated %s manifest %s: %d script(s), %s",
        parser.tool.value, manifest_path, len(checks), state.value,
    )
    return ValidationReport(
        tool=parser.tool,
        manifest_path=manifest_path,
        state=state,
        checks=checks,
    )


def validate_project(
    project_root: Path,
    tools: Optional[Iterable[HookTool]] = None,
) -> list[ValidationReport]:
    """Validate every requested tool's manifest (all tools by default)."""
    selected = list(tools) if tools is not None else list(HookTool)
    return [validate_hooks(project_root, tool) for tool in selected]
