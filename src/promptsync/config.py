"""
config:
    Constants and defaults for promptsync
"""

import os
from pathlib import Path

# Files promptsync owns inside a project
CATALOG_FILE = "promptsync.yml"
LOCK_FILE = "promptsync.lock.yml"

# Hook manifests owned by the consuming tools (read-only for us)
CURSOR_HOOKS_MANIFEST = Path(".cursor") / "hooks.json"
CLAUDE_HOOKS_MANIFEST = Path(".claude") / "settings.json"

# Placeholder Claude expands to the project root inside hook commands
CLAUDE_PROJECT_DIR_VAR = "CLAUDE_PROJECT_DIR"

SCRIPT_EXTENSIONS = (".sh",)

# Interpreters that run a script given as an argument (no exec bit needed),
# mapped to their flags that take inline code or a module instead of a file
INTERPRETERS = {
    "sh": ("-c",),
    "bash": ("-c",),
    "zsh": ("-c",),
    "python": ("-c", "-m"),
    "python3": ("-c", "-m"),
    "node": ("-e", "--eval", "-p", "--print"),
}
INTERPRETED_EXTENSIONS = SCRIPT_EXTENSIONS + (".py", ".js", ".mjs", ".cjs")

JOBS_ENV_VAR = "PROMPTSYNC_JOBS"


def default_jobs() -> int:
    """Worker count for parallel installs, overridable via PROMPTSYNC_JOBS."""
    value = os.environ.get(JOBS_ENV_VAR)
    if value:
        try:
            jobs = int(value)
        except ValueError:
            jobs = 0
        if jobs > 0:
            return jobs
    return min(8, os.cpu_count() or 1)
