"""Tests for hook manifest parsing."""

from pathlib import Path

import pytest

from promptsync.exceptions import ConfigurationError, ManifestMalformedError
from promptsync.manifests import ClaudeHooksParser, CursorHooksParser, get_parser
from promptsync.models import HookTool


class TestCursorHooksParser:
    """Tests for CursorHooksParser"""

    def test_extracts_scripts_relative_to_manifest(self, project_root, write_json):
        """Scripts resolve against the .cursor/ directory."""
        write_json(
            project_root / ".cursor" / "hooks.json",
            {
                "version": 1,
                "hooks": {
                    "beforeShellExecution": [{"command": "./hooks/guard.sh --strict"}],
                    "afterFileEdit": [{"command": "hooks/format.sh"}],
                },
            },
        )

        declaration = CursorHooksParser().load(project_root)

        assert declaration is not None
        paths = [s.script_path for s in declaration.scripts]
        assert paths == [
            project_root / ".cursor" / "hooks" / "guard.sh",
            project_root / ".cursor" / "hooks" / "format.sh",
        ]
        assert declaration.scripts[0].event == "beforeShellExecution"

    def test_missing_manifest(self, project_root):
        """No hooks.json returns None."""
        assert CursorHooksParser().load(project_root) is None

    def test_bare_programs_are_not_scripts(self, project_root, write_json):
        """Commands like 'npx prettier' are skipped."""
        write_json(
            project_root / ".cursor" / "hooks.json",
            {"version": 1, "hooks": {"afterFileEdit": [{"command": "npx prettier --write ."}]}},
        )
        declaration = CursorHooksParser().load(project_root)
        assert declaration.scripts == ()

    def test_script_name_without_slash(self, project_root, write_json):
        """A bare name with a script extension is still a script."""
        write_json(
            project_root / ".cursor" / "hooks.json",
            {"version": 1, "hooks": {"stop": [{"command": "cleanup.sh"}]}},
        )
        declaration = CursorHooksParser().load(project_root)
        assert declaration.scripts[0].script_path == project_root / ".cursor" / "cleanup.sh"

    @pytest.mark.parametrize(
        "content, reason",
        [
            ('{"version": 1, "hooks": {', "Invalid JSON"),
            ('{"version": 1}', "hooks: Field required"),
            ('{"hooks": []}', "hooks: "),
            ('{"hooks": {"stop": {"command": "a.sh"}}}', "hooks.stop: "),
            ('{"hooks": {"stop": ["a.sh"]}}', "hooks.stop.0: "),
            ('{"hooks": {"stop": [{"cmd": "a.sh"}]}}', "hooks.stop.0.command: Field required"),
            ('{"hooks": {"stop": [{"command": "   "}]}}', "non-empty"),
            ('{"hooks": {"stop": [{"command": "\\"a.sh"}]}}', "cannot parse command"),
        ],
    )
    def test_malformed(self, project_root, content, reason):
        """Structural problems raise ManifestMalformedError naming the location."""
        manifest = project_root / ".cursor" / "hooks.json"
        manifest.parent.mkdir(parents=True)
        manifest.write_text(content)

        with pytest.raises(ManifestMalformedError) as exc_info:
            CursorHooksParser().load(project_root)
        assert reason in exc_info.value.reason
        assert exc_info.value.path == manifest

    def test_top_level_must_be_object(self, project_root):
        """A JSON array is not a hooks manifest."""
        manifest = project_root / ".cursor" / "hooks.json"
        manifest.parent.mkdir(parents=True)
        manifest.write_text("[]")

        with pytest.raises(ManifestMalformedError):
            CursorHooksParser().load(project_root)

    def test_unknown_keys_are_allowed(self, project_root, write_json):
        """Extra fields such as timeouts do not make a manifest malformed."""
        write_json(
            project_root / ".cursor" / "hooks.json",
            {"version": 1, "hooks": {"stop": [{"command": "a.sh", "timeout": 5}]}, "extra": True},
        )
        declaration = CursorHooksParser().load(project_root)
        assert [s.script_path.name for s in declaration.scripts] == ["a.sh"]


class TestInterpreterCommands:
    """Tests for hook commands that run a script through an interpreter."""

    def _load(self, project_root, write_json, command):
        write_json(
            project_root / ".cursor" / "hooks.json",
            {"version": 1, "hooks": {"stop": [{"command": command}]}},
        )
        return CursorHooksParser().load(project_root).scripts

    @pytest.mark.parametrize(
        "command, interpreter, script",
        [
            ("bash scripts/check.sh", "bash", "scripts/check.sh"),
            ("sh -e scripts/check.sh --fast", "sh", "scripts/check.sh"),
            ("python3 hooks/audit.py", "python3", "hooks/audit.py"),
            ("node lint.js", "node", "lint.js"),
            ("/bin/bash run.sh", "bash", "run.sh"),
            ("/usr/bin/env FOO=1 python3 hooks/audit.py", "python3", "hooks/audit.py"),
        ],
    )
    def test_script_argument_is_referenced(self, project_root, write_json, command, interpreter, script):
        """The interpreter's script argument is the declared script."""
        scripts = self._load(project_root, write_json, command)

        assert len(scripts) == 1
        assert scripts[0].interpreter == interpreter
        assert scripts[0].script_path == project_root / ".cursor" / script

    @pytest.mark.parametrize(
        "command",
        [
            "bash -c 'echo done'",
            "python3 -m black .",
            "node --eval 'console.log(1)'",
            "bash",
            "python3 manage",
        ],
    )
    def test_inline_code_is_not_a_script(self, project_root, write_json, command):
        """Inline code and module runs reference no file."""
        assert self._load(project_root, write_json, command) == ()

    def test_direct_scripts_have_no_interpreter(self, project_root, write_json):
        """A script executed directly records no interpreter."""
        scripts = self._load(project_root, write_json, "./hooks/run.sh")
        assert scripts[0].interpreter is None


class TestClaudeHooksParser:
    """Tests for ClaudeHooksParser"""

    def test_extracts_nested_commands(self, project_root, write_json):
        """Commands inside matcher groups are extracted."""
        write_json(
            project_root / ".claude" / "settings.json",
            {
                "permissions": {"allow": ["Bash(ls:*)"]},
                "hooks": {
                    "PostToolUse": [
                        {
                            "matcher": "Edit|Write",
                            "hooks": [
                                {"type": "command", "command": "hooks/format.sh"},
                                {"type": "prompt", "prompt": "Summarize"},
                            ],
                        }
                    ],
                    "Stop": [{"hooks": [{"type": "command", "command": "/usr/bin/true"}]}],
                },
            },
        )

        declaration = ClaudeHooksParser().load(project_root)

        paths = [s.script_path for s in declaration.scripts]
        assert paths == [
            project_root / ".claude" / "hooks" / "format.sh",
            Path("/usr/bin/true"),
        ]

    def test_expands_project_dir(self, project_root, write_json):
        """$CLAUDE_PROJECT_DIR points at the project root."""
        write_json(
            project_root / ".claude" / "settings.json",
            {
                "hooks": {
                    "PreToolUse": [
                        {
                            "matcher": "Bash",
                            "hooks": [
                                {"type": "command", "command": '"$CLAUDE_PROJECT_DIR"/.claude/hooks/a.sh'},
                                {"type": "command", "command": "${CLAUDE_PROJECT_DIR}/.claude/hooks/b.sh arg"},
                            ],
                        }
                    ]
                }
            },
        )

        declaration = ClaudeHooksParser().load(project_root)

        assert [s.script_path for s in declaration.scripts] == [
            project_root / ".claude" / "hooks" / "a.sh",
            project_root / ".claude" / "hooks" / "b.sh",
        ]
        assert declaration.scripts[0].command == '"$CLAUDE_PROJECT_DIR"/.claude/hooks/a.sh'

    def test_settings_without_hooks(self, project_root, write_json):
        """settings.json without hooks declares nothing."""
        write_json(project_root / ".claude" / "settings.json", {"permissions": {}})
        declaration = ClaudeHooksParser().load(project_root)
        assert declaration is not None
        assert declaration.scripts == ()

    def test_group_without_hooks_list(self, project_root, write_json):
        """A matcher group must carry a hooks array."""
        write_json(
            project_root / ".claude" / "settings.json",
            {"hooks": {"Stop": [{"matcher": ""}]}},
        )
        with pytest.raises(ManifestMalformedError, match=r"hooks\.Stop\.0\.hooks: Field required"):
            ClaudeHooksParser().load(project_root)


class TestGetParser:
    """Tests for get_parser()"""

    @pytest.mark.parametrize("tool", list(HookTool))
    def test_known_tools(self, tool):
        """Every tool has a parser for its own manifest."""
        parser = get_parser(tool)
        assert parser.tool == tool

    def test_lookup_by_value(self):
        """Tools may be given by value."""
        assert isinstance(get_parser("cursor"), CursorHooksParser)

    def test_unknown_tool(self):
        """Unknown tools raise ConfigurationError."""
        with pytest.raises(ConfigurationError, match="Unknown hook tool"):
            get_parser("vim")
