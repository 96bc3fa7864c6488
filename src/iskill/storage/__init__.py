"""Storage utilities for iskill."""

from iskill.storage.files import (
    copy_directory,
    create_symlink,
    is_directory,
    is_symlink,
    path_exists,
    read_text,
    remove_path,
)
from iskill.storage.paths import (
    DEFAULT_SKILLS_PATH,
    PROJECT_CONFIG_FILE,
    ensure_directory,
    get_cache_dir,
    get_global_config_path,
    get_iskill_home,
    get_project_config_path,
    resolve_target_path,
)

__all__ = [
    "DEFAULT_SKILLS_PATH",
    "PROJECT_CONFIG_FILE",
    "copy_directory",
    "create_symlink",
    "ensure_directory",
    "get_cache_dir",
    "get_global_config_path",
    "get_iskill_home",
    "get_project_config_path",
    "is_directory",
    "is_symlink",
    "path_exists",
    "read_text",
    "remove_path",
    "resolve_target_path",
]
