"""Register cc-auto-commit as a Claude Code hook."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from cc_auto_commit.core.errors import SettingsError

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "settings.json"
DEFAULT_HOOK_COMMAND = "cc-auto-commit"
SESSION_START_TIMEOUT = 10
POST_TOOL_USE_TIMEOUT = 30
POST_TOOL_USE_MATCHER = "Write|Edit|MultiEdit"


def get_claude_config_dir() -> Path:
    """Get Claude configuration directory."""
    return Path.home() / ".claude"


def get_project_claude_dir(project_root: Path) -> Path:
    """Get project-specific Claude directory."""
    return project_root / ".claude"


def create_hook_entries(command: str) -> Dict[str, Dict[str, Any]]:
    """Hook matcher groups to add, keyed by event name."""
    return {
        "SessionStart": {
            "hooks": [
                {"type": "command", "command": command, "timeout": SESSION_START_TIMEOUT}
            ]
        },
        "PostToolUse": {
            "matcher": POST_TOOL_USE_MATCHER,
            "hooks": [
                {"type": "command", "command": command, "timeout": POST_TOOL_USE_TIMEOUT}
            ],
        },
    }


def _has_command(groups: List[Any], command: str) -> bool:
    for group in groups:
        if not isinstance(group, dict):
            continue
        for hook in group.get("hooks") or []:
            if isinstance(hook, dict) and hook.get("command") == command:
                return True
    return False


def merge_hook_entries(settings: Dict[str, Any], command: str) -> List[str]:
    """Append our hook groups to ``settings`` in place.

    Existing entries are never modified or removed; an event that already runs
    ``command`` is left alone.

    Returns:
        Names of the events that gained an entry
    """
    hooks = settings.setdefault("hooks", {})
    if not isinstance(hooks, dict):
        raise SettingsError("'hooks' in settings is not an object")

    added = []
    for event_name, entry in create_hook_entries(command).items():
        groups = hooks.setdefault(event_name, [])
        if not isinstance(groups, list):
            raise SettingsError(f"'hooks.{event_name}' in settings is not an array")
        if _has_command(groups, command):
            continue
        groups.append(entry)
        added.append(event_name)
    return added


def load_settings(settings_file: Path) -> Dict[str, Any]:
    if not settings_file.exists():
        return {}
    try:
        with open(settings_file, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise SettingsError(f"Could not read {settings_file}: {e}") from e
    if not isinstance(data, dict):
        raise SettingsError(f"{settings_file} does not contain a JSON object")
    return data


def install_hooks(settings_file: Path, command: str = DEFAULT_HOOK_COMMAND) -> List[str]:
    """Add the auto-commit hooks to a settings file, creating it if needed."""
    settings = load_settings(settings_file)
    added = merge_hook_entries(settings, command)
    if not added:
        logger.info("Hooks already present in %s", settings_file)
        return added

    try:
        settings_file.parent.mkdir(parents=True, exist_ok=True)
        with open(settings_file, "w", encoding="utf-8") as f:
            json.dump(settings, f, indent=2)
            f.write("\n")
    except OSError as e:
        raise SettingsError(f"Could not write {settings_file}: {e}") from e

    logger.info("Added %s hooks to %s", ", ".join(added), settings_file)
    return added


def settings_path(project_root: Path, global_settings: bool) -> Path:
    if global_settings:
        return get_claude_config_dir() / SETTINGS_FILENAME
    return get_project_claude_dir(project_root) / SETTINGS_FILENAME
