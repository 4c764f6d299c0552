"""commit-config loading.

The configuration is a TOML file whose sections overlay the bundled defaults in
``assets/commit-config.toml``. A user file that does not parse or does not
validate is ignored with a warning; the bundled defaults always apply.
"""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError

from cc_auto_commit.core.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "commit-config.toml"
CONFIG_ENV_VAR = "CC_AUTO_COMMIT_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "assets" / CONFIG_FILENAME


class StyleConfig(BaseModel):
    """Conventional-commit style rules fed into the prompt."""

    types: Dict[str, str] = Field(min_length=1)
    scope_hints: List[str] = []
    max_subject_length: int = Field(default=72, gt=0)
    language_hints: Dict[str, str] = {}

    model_config = {"frozen": True}

    def hint_for(self, language: str) -> str:
        """Phrasing hint for ``language``, matched case-insensitively."""
        for name, hint in self.language_hints.items():
            if name.lower() == language.lower():
                return hint
        return ""


class GeneratorConfig(BaseModel):
    """External command used to generate messages."""

    command: str = Field(min_length=1)
    args: List[str] = []
    timeout: float = Field(default=25.0, gt=0)
    # Session boundaries run under the shorter SessionStart hook budget.
    session_timeout: float = Field(default=8.0, gt=0)
    max_diff_chars: int = Field(default=5000, gt=0)
    default_commit_message: str = Field(min_length=1)

    model_config = {"frozen": True}


class PromptConfig(BaseModel):
    template: str = Field(min_length=1)

    model_config = {"frozen": True}


class AutoCommitConfig(BaseModel):
    """Complete, immutable configuration for one invocation."""

    language: str = "Japanese"
    style: StyleConfig
    generator: GeneratorConfig
    prompt: PromptConfig

    model_config = {"frozen": True}


def _read_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Could not read {path}: {e}") from e


def _overlay(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge ``override`` into ``base`` one table deep.

    Keys inside a section replace the default wholesale, so a user-supplied
    ``[style.types]`` table is the complete type list rather than an addition.
    """
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            section = dict(merged[key])
            section.update(value)
            merged[key] = section
        else:
            merged[key] = value
    return merged


def parse_config(data: Dict[str, Any], source: str = "<memory>") -> AutoCommitConfig:
    """Validate a raw configuration mapping."""
    try:
        return AutoCommitConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {source}: {e}") from e


def load_default_config() -> AutoCommitConfig:
    return parse_config(_read_toml(DEFAULT_CONFIG_PATH), str(DEFAULT_CONFIG_PATH))


def find_config_file(
    explicit: Optional[Path] = None, cwd: Optional[Path] = None
) -> Optional[Path]:
    """Locate the user's commit-config file.

    Search order: explicit path, ``$CC_AUTO_COMMIT_CONFIG``,
    ``<cwd>/.claude/commit-config.toml``, ``~/.claude/commit-config.toml``.
    """
    if explicit is not None:
        return Path(explicit)

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)

    cwd = Path(cwd) if cwd is not None else Path.cwd()
    for candidate in (
        cwd / ".claude" / CONFIG_FILENAME,
        Path.home() / ".claude" / CONFIG_FILENAME,
    ):
        if candidate.is_file():
            return candidate
    return None


def load_config(
    path: Optional[Path] = None, cwd: Optional[Path] = None
) -> AutoCommitConfig:
    """Load configuration, falling back to defaults on any user-file problem."""
    defaults_data = _read_toml(DEFAULT_CONFIG_PATH)
    defaults = parse_config(defaults_data, str(DEFAULT_CONFIG_PATH))

    config_path = find_config_file(path, cwd)
    if config_path is None:
        logger.debug("No commit-config found, using built-in defaults")
        return defaults

    try:
        user_data = _read_toml(config_path)
        config = parse_config(_overlay(defaults_data, user_data), str(config_path))
    except ConfigError as e:
        logger.warning("Ignoring commit-config: %s", e)
        return defaults

    logger.debug("Loaded commit-config from %s", config_path)
    return config
