"""
Configuration loader for iskill.

Loads and merges configuration from multiple sources:
1. Default values
2. Global config (~/.iskill/config.json)
3. Project config (./.iskillrc.json)
4. Environment variables (ISKILL_*)
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from iskill.config.merger import merge_configs
from iskill.config.schema import Config
from iskill.errors import ConfigurationError
from iskill.storage.paths import get_global_config_path, get_project_config_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "ISKILL_"
ENV_FIELDS = ("default_path", "paths", "install_method", "auto_update", "telemetry")


def load_json_file(path: Path) -> dict[str, Any]:
    """
    Load a JSON configuration file.

    Args:
        path: Path to the JSON file.

    Returns:
        Parsed configuration dictionary, empty if the file does not exist.

    Raises:
        ConfigurationError: If the file cannot be read or parsed.
    """
    try:
        with open(path, encoding="utf-8") as f:
            content = json.load(f)
    except FileNotFoundError:
        return {}
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigurationError(f"Config file {path} must contain a JSON object")
    return content


def save_json_file(path: Path, config: dict[str, Any]) -> None:
    """
    Save a configuration dictionary as pretty-printed JSON.

    Raises:
        ConfigurationError: If the file cannot be written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
            f.write("\n")
    except OSError as e:
        raise ConfigurationError(f"Cannot write {path}: {e}") from e


def _parse_env_value(field_name: str, value: str) -> Any:
    """Convert an environment string for the given config field."""
    if field_name == "paths":
        return [item.strip() for item in value.split(",") if item.strip()]
    if field_name in ("auto_update", "telemetry"):
        return value.lower() in ("true", "yes", "1", "on")
    return value


def apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """
    Apply ISKILL_<FIELD> environment overrides.

    ``ISKILL_INSTALL_METHOD=copy`` sets ``installMethod``;
    ``ISKILL_PATHS`` takes a comma-separated list.
    """
    aliases = Config.field_aliases()
    overrides: dict[str, Any] = {}

    for field_name in ENV_FIELDS:
        value = os.environ.get(f"{ENV_PREFIX}{field_name.upper()}")
        if value is not None:
            overrides[aliases[field_name]] = _parse_env_value(field_name, value)

    return merge_configs(config, overrides)


def load_config(
    cwd: Path | None = None,
    skip_project: bool = False,
    skip_env: bool = False,
) -> Config:
    """
    Load and merge configuration from all sources.

    Loading order (later overrides earlier):
    1. Default values from the Config model
    2. Global config (~/.iskill/config.json)
    3. Project config (<cwd>/.iskillrc.json)
    4. Environment variables (ISKILL_*)

    Args:
        cwd: Project directory. Defaults to the current directory.
        skip_project: Skip loading the project configuration.
        skip_env: Skip environment variable overrides.

    Returns:
        Merged and validated Config object.

    Raises:
        ConfigurationError: If a file is malformed or the result is invalid.
    """
    layers = [Config().to_file_dict()]

    global_path = get_global_config_path()
    if global_path.exists():
        layers.append(load_json_file(global_path))
    else:
        logger.debug("No global config found, using defaults")

    if not skip_project:
        project_path = get_project_config_path(cwd)
        if project_path.exists():
            layers.append(load_json_file(project_path))
        else:
            logger.debug("No project config found, using global or defaults")

    config_dict = merge_configs(*layers)

    if not skip_env:
        config_dict = apply_env_overrides(config_dict)

    try:
        return Config.model_validate(config_dict)
    except ValidationError as e:
        raise ConfigurationError(f"Configuration validation failed: {e}") from e


def get_config_sources(cwd: Path | None = None) -> dict[str, Path | None]:
    """
    Get paths to all configuration sources.

    Returns:
        Dictionary mapping source names to paths (None if not found).
    """
    global_path = get_global_config_path()
    project_path = get_project_config_path(cwd)

    return {
        "global": global_path if global_path.exists() else None,
        "project": project_path if project_path.exists() else None,
    }


def save_global_config(config: Config) -> Path:
    """Write the global config file. Errors propagate."""
    path = get_global_config_path()
    save_json_file(path, config.to_file_dict())
    logger.info(f"Global config saved to {path}")
    return path


def save_project_config(config: Config, cwd: Path | None = None) -> Path:
    """Write the project config file. Errors propagate."""
    path = get_project_config_path(cwd)
    save_json_file(path, config.to_file_dict())
    logger.info(f"Project config saved to {path}")
    return path


def init_global_config() -> Path | None:
    """Create the global config with defaults unless it exists.

    Returns:
        Path written, or None if a config was already there.
    """
    if get_global_config_path().exists():
        return None
    return save_global_config(Config())


def init_project_config(cwd: Path | None = None) -> Path | None:
    """Create the project config with defaults unless it exists.

    Returns:
        Path written, or None if a config was already there.
    """
    if get_project_config_path(cwd).exists():
        return None
    return save_project_config(Config(), cwd)

