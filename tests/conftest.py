"""Shared pytest fixtures for promptsync tests."""

import json

import pytest
import yaml
from click.testing import CliRunner

from promptsync.models import AssetKind, CatalogEntry


@pytest.fixture
def cli_runner():
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def project_root(tmp_path):
    """Create an empty target project directory."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def assets_dir(tmp_path):
    """Create a directory of assets covering every kind.

    Structure:
        assets/
        ├── AGENTS.md
        ├── rules/
        │   ├── python.mdc
        │   └── nested/
        │       └── testing.mdc
        ├── skills/
        │   └── code-review/
        │       ├── SKILL.md
        │       └── scripts/
        │           └── lint.sh
        ├── cursor-hooks/
        │   ├── hooks.json
        │   ├── README.md
        │   └── scripts/
        │       └── deploy.sh
        └── claude-hooks/
            ├── format.sh
            └── notes.txt
    """
    assets = tmp_path / "assets"
    assets.mkdir()

    (assets / "AGENTS.md").write_text("# Agents\n\nFollow the team conventions.\n")

    rules = assets / "rules"
    (rules / "nested").mkdir(parents=True)
    (rules / "python.mdc").write_text("---\ndescription: Python style\n---\n\nUse type hints.\n")
    (rules / "nested" / "testing.mdc").write_text("---\ndescription: Testing\n---\n\nWrite tests.\n")

    skill = assets / "skills" / "code-review"
    (skill / "scripts").mkdir(parents=True)
    (skill / "SKILL.md").write_text("---\ndescription: Review code\n---\n\n# Code Review\n")
    (skill / "scripts" / "lint.sh").write_text("#!/bin/sh\necho lint\n")

    cursor_hooks = assets / "cursor-hooks"
    (cursor_hooks / "scripts").mkdir(parents=True)
    (cursor_hooks / "hooks.json").write_text(
        json.dumps(
            {
                "version": 1,
                "hooks": {"afterFileEdit": [{"command": "scripts/deploy.sh"}]},
            },
            indent=2,
        )
    )
    (cursor_hooks / "README.md").write_text("Cursor hooks\n")
    (cursor_hooks / "scripts" / "deploy.sh").write_text("#!/bin/sh\necho deploy\n")

    claude_hooks = assets / "claude-hooks"
    claude_hooks.mkdir()
    (claude_hooks / "format.sh").write_text("#!/bin/sh\necho format\n")
    (claude_hooks / "notes.txt").write_text("notes\n")

    for script in assets.rglob("*.sh"):
        script.chmod(0o644)

    return assets


@pytest.fixture
def make_entry(assets_dir):
    """Factory for catalog entries pointing into assets_dir."""

    def _make(kind: AssetKind, source: str, entry_id: str | None = None) -> CatalogEntry:
        entry_id = entry_id or kind.value
        return CatalogEntry(
            id=entry_id,
            kind=kind,
            source_path=assets_dir / source,
            display_name=entry_id,
        )

    return _make


@pytest.fixture
def catalog_file(project_root, assets_dir):
    """Write a promptsync.yml covering every kind into the project."""
    data = {
        "entries": [
            {"id": "agents", "kind": "agents_md", "source": str(assets_dir / "AGENTS.md")},
            {"id": "rules", "kind": "cursor_rules", "source": str(assets_dir / "rules"), "name": "Team rules"},
            {"id": "cursor-skills", "kind": "cursor_skills_root", "source": str(assets_dir / "skills")},
            {"id": "claude-skills", "kind": "claude_skills_root", "source": str(assets_dir / "skills")},
            {"id": "cursor-hooks", "kind": "cursor_hooks", "source": str(assets_dir / "cursor-hooks")},
        ]
    }
    path = project_root / "promptsync.yml"
    path.write_text(yaml.dump(data, sort_keys=False))
    return path


@pytest.fixture
def write_json(tmp_path):
    """Write a JSON document to a path, creating parents."""

    def _write(path, data):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2))
        return path

    return _write
