"""Configuration management for podfeed.

Handles TOML configuration loading from local and global paths,
with environment variable precedence for the HTTP user agent.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from podfeed import __version__
from podfeed.core.errors import ConfigError
from podfeed.core.models import MAX_EPISODES

# Configuration file paths
LOCAL_CONFIG_PATH = Path(".podfeed/config")
GLOBAL_CONFIG_PATH = Path.home() / ".podfeed" / "config"

USER_AGENT_ENV_VAR = "PODFEED_USER_AGENT"

DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = f"podfeed/{__version__} (+https://github.com/podfeed/podfeed)"
DEFAULT_ENGINE = "pattern"

# Parser engines selectable through [parser].engine
VALID_ENGINES = {"pattern", "feedparser"}

# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = {
    "fetch": {
        "timeout": DEFAULT_TIMEOUT,
        "user_agent": DEFAULT_USER_AGENT,
    },
    "parser": {
        "engine": DEFAULT_ENGINE,
        "max_episodes": MAX_EPISODES,
    },
}

__all__ = [
    "Config",
    "ConfigError",
    "FetchConfig",
    "ParserConfig",
    "generate_default_config_toml",
    "load_config",
    "write_default_config",
]


@dataclass
class FetchConfig:
    """HTTP fetch settings."""

    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT


@dataclass
class ParserConfig:
    """Feed parser settings."""

    engine: str = DEFAULT_ENGINE
    max_episodes: int = MAX_EPISODES


@dataclass
class Config:
    """Main configuration container.

    Holds all configuration settings for podfeed, loaded from
    local and global config files with environment variable overrides.
    """

    fetch: FetchConfig = field(default_factory=FetchConfig)
    parser: ParserConfig = field(default_factory=ParserConfig)

    def get_user_agent(self) -> str:
        """Get the HTTP user agent with environment variable precedence.

        Returns:
            The value of PODFEED_USER_AGENT if set, otherwise the value
            from the config file.
        """
        env_agent = os.environ.get(USER_AGENT_ENV_VAR, "")
        if env_agent:
            return env_agent
        return self.fetch.user_agent


def generate_default_config_toml() -> str:
    """Generate default configuration as TOML string.

    Returns:
        TOML-formatted string with default configuration values.
    """
    return f"""# podfeed configuration file

[fetch]
# Seconds before a feed request is abandoned
timeout = {DEFAULT_TIMEOUT}
# Sent with every feed request
# Environment variable {USER_AGENT_ENV_VAR} takes precedence
user_agent = "{DEFAULT_USER_AGENT}"

[parser]
# Parsing engine: "pattern" (tag matching) or "feedparser" (structural)
engine = "{DEFAULT_ENGINE}"
# Episodes kept per feed, between 1 and {MAX_EPISODES}
max_episodes = {MAX_EPISODES}
"""


def write_default_config(path: Path | None = None, overwrite: bool = False) -> Path:
    """Write the default configuration file.

    Args:
        path: Destination, defaults to the local config path.
        overwrite: Replace an existing file.

    Returns:
        The path that was written.

    Raises:
        ConfigError: If the file exists and overwrite is False.
    """
    path = path or LOCAL_CONFIG_PATH
    if path.exists() and not overwrite:
        raise ConfigError(f"Config file already exists: {path}")

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(generate_default_config_toml())
    return path


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load and parse a TOML configuration file.

    Args:
        path: Path to the TOML file.

    Returns:
        Parsed configuration dictionary, empty if the file does not exist.

    Raises:
        ConfigError: If the file exists but cannot be parsed.
    """
    if not path.exists():
        return {}

    try:
        content = path.read_text()
        return tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in config file {path}: {e}") from e


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _validate_config(config_dict: dict[str, Any]) -> None:
    """Validate configuration values.

    Args:
        config_dict: Configuration dictionary to validate.

    Raises:
        ConfigError: If configuration values are invalid.
    """
    fetch_config = config_dict.get("fetch", {})

    timeout = fetch_config.get("timeout")
    if isinstance(timeout, bool) or not isinstance(timeout, int | float):
        raise ConfigError(
            f"fetch.timeout must be a number, got {type(timeout).__name__}"
        )
    if timeout <= 0:
        raise ConfigError(f"fetch.timeout must be positive, got {timeout}")

    user_agent = fetch_config.get("user_agent")
    if not isinstance(user_agent, str):
        raise ConfigError(
            f"fetch.user_agent must be a string, got {type(user_agent).__name__}"
        )

    parser_config = config_dict.get("parser", {})

    engine = parser_config.get("engine")
    if engine not in VALID_ENGINES:
        raise ConfigError(
            f"Invalid parser engine '{engine}'. "
            f"Valid options: {', '.join(sorted(VALID_ENGINES))}"
        )

    max_episodes = parser_config.get("max_episodes")
    if isinstance(max_episodes, bool) or not isinstance(max_episodes, int):
        raise ConfigError(
            f"parser.max_episodes must be an integer, got {type(max_episodes).__name__}"
        )
    if not 1 <= max_episodes <= MAX_EPISODES:
        raise ConfigError(
            f"parser.max_episodes must be between 1 and {MAX_EPISODES}, got {max_episodes}"
        )


def _dict_to_config(config_dict: dict[str, Any]) -> Config:
    """Convert a validated configuration dictionary to a Config dataclass."""
    fetch_dict = config_dict["fetch"]
    parser_dict = config_dict["parser"]

    return Config(
        fetch=FetchConfig(
            timeout=float(fetch_dict["timeout"]),
            user_agent=fetch_dict["user_agent"],
        ),
        parser=ParserConfig(
            engine=parser_dict["engine"],
            max_episodes=parser_dict["max_episodes"],
        ),
    )


def load_config(
    config_path: Path | None = None,
    local_path: Path | None = None,
    global_path: Path | None = None,
) -> Config:
    """Load configuration from config files.

    Configuration priority (highest to lowest):
    1. Explicit config file passed as config_path
    2. Local config file (.podfeed/config in current directory)
    3. Global config file ($HOME/.podfeed/config)
    4. Default values

    Unlike the local and global files, an explicit config_path must exist.

    Args:
        config_path: Explicit config file, e.g. from ``--config``.
        local_path: Override path for local config file.
        global_path: Override path for global config file.

    Returns:
        Config object with merged configuration values.

    Raises:
        ConfigError: If a configuration file is missing or invalid.
    """
    local_path = local_path or LOCAL_CONFIG_PATH
    global_path = global_path or GLOBAL_CONFIG_PATH

    merged_config = {
        "fetch": DEFAULT_CONFIG["fetch"].copy(),
        "parser": DEFAULT_CONFIG["parser"].copy(),
    }

    for path in (global_path, local_path):
        file_config = _load_toml_file(path)
        if file_config:
            merged_config = _deep_merge(merged_config, file_config)

    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        merged_config = _deep_merge(merged_config, _load_toml_file(config_path))

    _validate_config(merged_config)

    return _dict_to_config(merged_config)
