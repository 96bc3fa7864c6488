"""
SKILL.md parser for iskill.

A manifest starts with a line ``---``, a YAML mapping, and a closing ``---``
line. Everything after the closing delimiter is free-form documentation.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from iskill.errors import SkillParseError
from iskill.skills.models import SKILL_FILE, Skill
from iskill.storage.files import read_text

logger = logging.getLogger(__name__)

FRONTMATTER_DELIMITER = "---"


class ParseStatus(str, Enum):
    """Outcome of inspecting a candidate directory."""

    VALID = "valid"
    NO_MANIFEST = "no_manifest"
    NO_FRONTMATTER = "no_frontmatter"
    INVALID_YAML = "invalid_yaml"
    MISSING_FIELDS = "missing_fields"


@dataclass(frozen=True, slots=True)
class ParseResult:
    status: ParseStatus
    skill: Skill | None = None
    reason: str | None = None

    @property
    def is_skill(self) -> bool:
        return self.status == ParseStatus.VALID


def split_frontmatter(content: str) -> tuple[str, str] | None:
    """Split a manifest into its frontmatter text and the remaining body.

    Returns:
        (frontmatter text, body) or None if the content does not start with a
        delimited frontmatter block.
    """
    lines = content.lstrip("\ufeff").splitlines()
    if not lines or lines[0] != FRONTMATTER_DELIMITER:
        return None

    for index, line in enumerate(lines[1:], start=1):
        if line == FRONTMATTER_DELIMITER:
            return "\n".join(lines[1:index]), "\n".join(lines[index + 1 :]).strip()

    return None


def parse_yaml_frontmatter(content: str) -> tuple[dict[str, Any] | None, str]:
    """Parse YAML frontmatter from a markdown file.

    Args:
        content: The full markdown content.

    Returns:
        Tuple of (frontmatter dict or None, remaining content).

    Raises:
        SkillParseError: If the frontmatter block is not valid YAML.
    """
    parts = split_frontmatter(content)
    if parts is None:
        return None, content

    frontmatter_text, body = parts
    try:
        frontmatter = yaml.safe_load(frontmatter_text)
    except yaml.YAMLError as e:
        raise SkillParseError(f"Invalid YAML frontmatter: {e}") from e

    if not isinstance(frontmatter, dict):
        return None, content
    return frontmatter, body


def parse_skill_content(content: str, skill_dir: Path) -> ParseResult:
    """Build a skill from manifest text.

    Args:
        content: SKILL.md content.
        skill_dir: Directory the manifest was read from.

    Returns:
        ParseResult; ``skill`` is set only when status is VALID.
    """
    try:
        frontmatter, _ = parse_yaml_frontmatter(content)
    except SkillParseError as e:
        return ParseResult(ParseStatus.INVALID_YAML, reason=str(e))

    if frontmatter is None:
        return ParseResult(ParseStatus.NO_FRONTMATTER, reason=f"No frontmatter found in {skill_dir}")

    name = frontmatter.get("name")
    description = frontmatter.get("description")
    if not name or not description:
        return ParseResult(
            ParseStatus.MISSING_FIELDS,
            reason=f"Missing name or description in {skill_dir}",
        )

    metadata = frontmatter.get("metadata")
    try:
        skill = Skill(
            name=str(name),
            description=str(description),
            path=skill_dir,
            version=frontmatter.get("version") or None,
            metadata=metadata if isinstance(metadata, dict) else {},
        )
    except ValidationError as e:
        return ParseResult(ParseStatus.MISSING_FIELDS, reason=f"Invalid frontmatter in {skill_dir}: {e}")

    return ParseResult(ParseStatus.VALID, skill=skill)


def find_skill_file(skill_dir: str | Path) -> Path | None:
    """Return ``skill_dir/SKILL.md`` if it exists. Subdirectories are not searched."""
    skill_file = Path(skill_dir) / SKILL_FILE
    return skill_file if skill_file.is_file() else None


def inspect_skill_directory(skill_dir: str | Path) -> ParseResult:
    """Inspect a directory for a valid skill manifest.

    Raises:
        OSError: If the manifest exists but cannot be read.
        UnicodeDecodeError: If the manifest is not UTF-8.
    """
    skill_dir = Path(skill_dir)
    skill_file = find_skill_file(skill_dir)
    if skill_file is None:
        return ParseResult(ParseStatus.NO_MANIFEST)

    return parse_skill_content(read_text(skill_file), skill_dir)


def parse_skill(skill_dir: str | Path) -> Skill | None:
    """Parse a skill directory, returning None if it is not a valid skill.

    Validation failures are logged as warnings; read errors are logged as
    errors. Neither is raised.
    """
    try:
        result = inspect_skill_directory(skill_dir)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Error parsing skill in {skill_dir}: {e}")
        return None

    if result.is_skill:
        logger.debug(f"Parsed skill: {result.skill.name}")
        return result.skill

    if result.status != ParseStatus.NO_MANIFEST:
        logger.warning(result.reason)
    return None

