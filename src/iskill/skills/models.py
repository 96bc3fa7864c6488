"""
Skill models for iskill.

Defines discovered skills, classified sources, install options and the
per-skill outcome records returned by batch operations.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

SKILL_FILE = "SKILL.md"
ALL_SKILLS = "*"


class SourceType(str, Enum):
    """Kinds of skill source."""

    LOCAL = "local"
    GITHUB = "github"
    GITLAB = "gitlab"
    GIT = "git"


class InstallMethod(str, Enum):
    """How a skill is placed into the target directory."""

    SYMLINK = "symlink"
    COPY = "copy"


class Skill(BaseModel):
    """A discovered skill directory with a valid SKILL.md manifest.

    Skills are not persisted; they are re-derived by scanning.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Skill name from frontmatter")
    description: str = Field(..., min_length=1, description="Skill description from frontmatter")
    path: Path = Field(..., description="Directory containing SKILL.md")
    version: str | None = Field(default=None, description="Freeform version string")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Open mapping of extra manifest data",
    )
    source: str | None = Field(default=None, description="Source descriptor it came from")

    @field_validator("version", mode="before")
    @classmethod
    def _version_as_text(cls, value: Any) -> Any:
        # YAML reads `version: 1.0` as a float
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @property
    def manifest_path(self) -> Path:
        """Path to the skill's SKILL.md."""
        return self.path / SKILL_FILE


class ResolvedSource(BaseModel):
    """Classification of a source string."""

    model_config = ConfigDict(frozen=True)

    type: SourceType
    url: str = Field(..., description="Absolute path for local sources, else a fetchable URL")
    path: str | None = Field(default=None, description="Sub-path inside the source")
    branch: str | None = None
    skill: str | None = Field(
        default=None,
        description="Skill name selected with an owner/repo@skill suffix",
    )

    @model_validator(mode="after")
    def _local_path_matches_url(self) -> "ResolvedSource":
        if self.type == SourceType.LOCAL and self.path != self.url:
            raise ValueError("local sources must have path equal to url")
        return self

    @property
    def is_remote(self) -> bool:
        """Whether the source has to be cloned."""
        return self.type != SourceType.LOCAL


class InstallOptions(BaseModel):
    """Options for an install run."""

    skills: list[str] | None = Field(
        default=None,
        description="Skill names to install; empty, None or ['*'] means all",
    )
    method: InstallMethod = InstallMethod.SYMLINK
    list_only: bool = Field(default=False, description="Only list available skills")
    yes: bool = Field(default=False, description="Skip confirmation prompts")

    def wants_all(self) -> bool:
        """True when no filter is given or the wildcard is used."""
        return not self.skills or self.skills[0] == ALL_SKILLS

    def select(self, skills: list[Skill]) -> list[Skill]:
        """Apply the name filter. Unknown names are ignored."""
        if self.wants_all():
            return list(skills)
        wanted = set(self.skills or [])
        return [skill for skill in skills if skill.name in wanted]


class OutcomeStatus(str, Enum):
    """Result of an operation on one skill."""

    INSTALLED = "installed"
    SKIPPED = "skipped"
    UPDATED = "updated"
    REMOVED = "removed"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class SkillOutcome:
    name: str
    status: OutcomeStatus
    path: Path
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status in (
            OutcomeStatus.INSTALLED,
            OutcomeStatus.UPDATED,
            OutcomeStatus.REMOVED,
        )


@dataclass
class InstallReport:
    """What an install run found and did."""

    source: str
    target: Path
    available: list[Skill] = field(default_factory=list)
    outcomes: list[SkillOutcome] = field(default_factory=list)
    listed_only: bool = False

    @property
    def installed(self) -> list[SkillOutcome]:
        return [o for o in self.outcomes if o.status == OutcomeStatus.INSTALLED]

    @property
    def skipped(self) -> list[SkillOutcome]:
        return [o for o in self.outcomes if o.status == OutcomeStatus.SKIPPED]
