"""cc-auto-commit: AI-written commits for Claude Code sessions."""

__version__ = "0.1.0"
