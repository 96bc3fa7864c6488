"""
Skill scanner for iskill.

Discovers skill directories under a root by convention. Agent tools keep
skills in well-known places (``skills/``, ``.claude/skills/``,
``.cursor/skills/`` ...); each of those is searched one level deep. When none
of them yields a skill, the root itself is searched the same way.
"""

import logging
import os
from pathlib import Path

from iskill.skills.models import SKILL_FILE, Skill
from iskill.skills.parser import find_skill_file, parse_skill

logger = logging.getLogger(__name__)

SKILL_DIRECTORIES: tuple[str, ...] = (
    "skills",
    "skills/.curated",
    "skills/.experimental",
    "skills/.system",
    ".agents/skills",
    ".agent/skills",
    ".claude/skills",
    ".cline/skills",
    ".codebuddy/skills",
    ".codex/skills",
    ".commandcode/skills",
    ".continue/skills",
    ".crush/skills",
    ".cursor/skills",
    ".factory/skills",
    ".gemini/skills",
    ".github/skills",
    ".goose/skills",
    ".junie/skills",
    ".iflow/skills",
    ".kilocode/skills",
    ".kiro/skills",
    ".kode/skills",
    ".mcpjam/skills",
    ".vibe/skills",
    ".mux/skills",
    ".opencode/skills",
    ".openhands/skills",
    ".pi/skills",
    ".qoder/skills",
    ".qwen/skills",
    ".roo/skills",
    ".trae/skills",
    ".windsurf/skills",
    ".zencoder/skills",
    ".neovate/skills",
    ".pochi/skills",
    ".adal/skills",
)


def discover_skills_in_directory(directory: Path) -> list[Path]:
    """Find skill directories exactly one level below ``directory``.

    An immediate subdirectory holding a SKILL.md is a skill directory. If
    ``directory`` itself holds a SKILL.md, it is one too. Results follow
    filesystem enumeration order.

    Args:
        directory: Directory to search.

    Returns:
        List of paths to skill directories.
    """
    skill_dirs: list[Path] = []

    try:
        entries = os.listdir(directory)
    except OSError as e:
        logger.debug(f"Error reading directory {directory}: {e}")
        return skill_dirs

    for entry in entries:
        entry_path = directory / entry
        if entry_path.is_dir():
            if (entry_path / SKILL_FILE).is_file():
                skill_dirs.append(entry_path)
        elif entry == SKILL_FILE:
            skill_dirs.append(directory)

    return skill_dirs


class Scanner:
    """Finds and parses skills below a root directory.

    Args:
        base_path: Directory relative scan paths are resolved against.
            Defaults to the current directory at scan time.
        skill_directories: Conventional sub-paths to search, in order.
    """

    def __init__(
        self,
        base_path: Path | None = None,
        skill_directories: tuple[str, ...] = SKILL_DIRECTORIES,
    ):
        self.base_path = base_path
        self.skill_directories = skill_directories

    def _absolute(self, target_path: str | Path) -> Path:
        target_path = Path(target_path)
        if target_path.is_absolute():
            return target_path
        return (self.base_path or Path.cwd()) / target_path

    def scan(self, target_path: str | Path) -> list[Skill]:
        """Discover and parse every skill under ``target_path``.

        Missing or non-directory roots give an empty list. Invalid manifests
        are skipped. Duplicate names across directories are kept.
        """
        root = self._absolute(target_path)

        if not root.exists():
            logger.warning(f"Path does not exist: {root}")
            return []
        if not root.is_dir():
            logger.warning(f"Path is not a directory: {root}")
            return []

        skills = []
        for skill_dir in self.find_skill_directories(root):
            skill = self.parse_skill(skill_dir)
            if skill:
                skills.append(skill)

        logger.debug(f"Found {len(skills)} skills in {root}")
        return skills

    def find_skill_directories(self, root: Path) -> list[Path]:
        """Candidate skill directories under ``root``, in discovery order."""
        skill_dirs: list[Path] = []

        for sub_path in self.skill_directories:
            convention_dir = root / sub_path
            if convention_dir.is_dir():
                skill_dirs.extend(discover_skills_in_directory(convention_dir))

        if not skill_dirs:
            skill_dirs.extend(discover_skills_in_directory(root))

        return skill_dirs

    def find_skill_file(self, skill_dir: str | Path) -> Path | None:
        """Path of ``skill_dir/SKILL.md`` if present."""
        return find_skill_file(skill_dir)

    def parse_skill(self, skill_dir: str | Path) -> Skill | None:
        """Parse one candidate directory, None if it is not a valid skill."""
        return parse_skill(skill_dir)

    def scan_multiple(self, paths: list[str | Path]) -> dict[str, list[Skill]]:
        """Scan several roots, keyed by the path as given."""
        return {str(path): self.scan(path) for path in paths}


def create_scanner(base_path: Path | None = None) -> Scanner:
    """Create a scanner."""
    return Scanner(base_path)
