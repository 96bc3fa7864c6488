"""Configuration for iskill."""

from iskill.config.loader import (
    apply_env_overrides,
    get_config_sources,
    init_global_config,
    init_project_config,
    load_config,
    load_json_file,
    save_global_config,
    save_json_file,
    save_project_config,
)
from iskill.config.merger import deep_merge, merge_configs
from iskill.config.schema import Config
from iskill.errors import ConfigurationError

__all__ = [
    "Config",
    "ConfigurationError",
    "apply_env_overrides",
    "deep_merge",
    "get_config_sources",
    "init_global_config",
    "init_project_config",
    "load_config",
    "load_json_file",
    "merge_configs",
    "save_global_config",
    "save_json_file",
    "save_project_config",
]
