"""
iskill - Skill installation tool

Installs SKILL.md skill directories from GitHub, GitLab, any Git remote,
or a local path into a directory of your choice, by symlink or copy.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("iskill")
except PackageNotFoundError:
    __version__ = "1.0.0"

__all__ = [
    "__version__",
]
