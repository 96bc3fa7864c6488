"""
Filesystem operations used by the scanner, resolver and installer.

Existence checks here do not follow a final symlink: a dangling link at an
install destination still occupies that name.
"""

import os
import shutil
from pathlib import Path

from iskill.storage.paths import ensure_directory


def path_exists(path: str | Path) -> bool:
    """Return True if anything (file, directory or symlink) exists at path."""
    return os.path.lexists(path)


def is_directory(path: str | Path) -> bool:
    """Return True if path is a directory, following symlinks."""
    return Path(path).is_dir()


def is_symlink(path: str | Path) -> bool:
    """Return True if path itself is a symbolic link."""
    return Path(path).is_symlink()


def read_text(path: str | Path) -> str:
    """Read a UTF-8 text file."""
    return Path(path).read_text(encoding="utf-8")


def copy_directory(source: str | Path, target: str | Path) -> Path:
    """
    Recursively copy a directory tree.

    Files already present in ``target`` are overwritten; symlinks inside the
    tree are copied as links.

    Returns:
        The target path.
    """
    target = Path(target)
    ensure_directory(target.parent)
    shutil.copytree(source, target, symlinks=True, dirs_exist_ok=True)
    return target


def create_symlink(source: str | Path, link_path: str | Path) -> Path:
    """Create ``link_path`` as a directory symlink pointing at ``source``."""
    link_path = Path(link_path)
    ensure_directory(link_path.parent)
    link_path.symlink_to(source, target_is_directory=True)
    return link_path


def remove_path(path: str | Path) -> None:
    """
    Remove a file, symlink or directory tree.

    Removing a symlink removes only the link, never what it points to.
    Missing paths are ignored.
    """
    path = Path(path)
    if path.is_symlink() or path.is_file():
        path.unlink(missing_ok=True)
    elif path.is_dir():
        shutil.rmtree(path)
