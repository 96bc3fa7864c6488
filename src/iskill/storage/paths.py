"""
Path utilities for iskill.

Provides consistent path resolution for configuration and cache files,
and resolves user-supplied target paths against a working directory.
"""

import os
from pathlib import Path

PROJECT_CONFIG_FILE = ".iskillrc.json"
DEFAULT_SKILLS_PATH = "./skills"


def get_iskill_home() -> Path:
    """
    Get the iskill home directory.

    Resolution order:
    1. ISKILL_HOME environment variable
    2. Default: ~/.iskill

    Returns:
        Path to the iskill home directory.
    """
    env_home = os.environ.get("ISKILL_HOME")
    if env_home:
        return Path(env_home).expanduser().resolve()
    return Path.home() / ".iskill"


def get_global_config_path() -> Path:
    """
    Get the path to the global configuration file.

    Returns:
        Path to ~/.iskill/config.json
    """
    return get_iskill_home() / "config.json"


def get_cache_dir() -> Path:
    """
    Get the clone cache directory.

    Returns:
        Path to ~/.iskill/cache/
    """
    return get_iskill_home() / "cache"


def get_project_config_path(cwd: Path | None = None) -> Path:
    """
    Get the project configuration file path for a working directory.

    Unlike the global file, the project file is looked up only in the
    working directory itself.

    Args:
        cwd: Project directory. Defaults to the current directory.

    Returns:
        Path to <cwd>/.iskillrc.json
    """
    return (cwd or Path.cwd()) / PROJECT_CONFIG_FILE


def resolve_target_path(path: str | Path, cwd: Path | None = None) -> Path:
    """
    Resolve a target path against a working directory.

    Absolute paths are only normalized; relative paths are joined onto
    ``cwd``. Symlinks are not resolved, so an installed link keeps its
    own location.

    Args:
        path: User-supplied path.
        cwd: Base directory for relative paths. Defaults to the current directory.

    Returns:
        Absolute, normalized Path.
    """
    path = Path(os.path.expanduser(str(path)))
    if not path.is_absolute():
        path = (cwd or Path.cwd()) / path
    return Path(os.path.normpath(path))


def ensure_directory(path: Path, mode: int = 0o755) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path.
        mode: Permission mode for created directories.

    Returns:
        The path (for chaining).
    """
    path.mkdir(parents=True, exist_ok=True, mode=mode)
    return path
