"""
Exceptions for iskill.

Not-found conditions are never raised; these cover failures of operations a
user explicitly asked for.
"""

from pathlib import Path


class ISkillError(Exception):
    """Base exception for iskill errors."""

    pass


class GitError(ISkillError):
    """A git clone, pull or fetch failed."""

    pass


class SourceCloneError(ISkillError):
    """Materializing a source into a directory failed."""

    def __init__(self, message: str, source: str | None = None):
        super().__init__(message)
        self.source = source


class SkillInstallError(ISkillError):
    """Installing a single skill failed."""

    def __init__(self, skill_name: str, destination: Path, reason: str):
        super().__init__(f"Failed to install {skill_name} to {destination}: {reason}")
        self.skill_name = skill_name
        self.destination = destination


class TargetPathError(ISkillError):
    """The install target directory cannot be created or used."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Cannot use {path} as a skills directory: {reason}")
        self.path = path


class SkillParseError(ISkillError):
    """Error parsing a skill manifest."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        super().__init__(f"{message}" + (f" (at {path})" if path else ""))


class ConfigurationError(ISkillError):
    """Raised when configuration loading or validation fails."""

    pass
