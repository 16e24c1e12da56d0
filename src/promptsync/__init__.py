"""promptsync: install rules, skills and hooks for AI assistants into projects."""

__version__ = "0.1.0"
