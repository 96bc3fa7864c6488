"""
Skill template scaffolding for ``iskill init``.
"""

from pathlib import Path

from iskill.skills.models import SKILL_FILE

DEFAULT_SKILL_NAME = "my-skill"

SKILL_MD_TEMPLATE = """---
name: {name}
description: A brief description of what this skill does
---

# {name}

A detailed description of this skill.

## When to Use

Describe the scenarios where this skill should be used.

## Steps

1. First step
2. Second step
3. Third step

## Notes

Any additional notes or context for using this skill.
"""


def create_skill_template(name: str | None = None, base_dir: Path | None = None) -> Path:
    """Create a SKILL.md template.

    ``name`` may be a plain name (created under ``base_dir``) or a path, in
    which case its last component becomes the skill name.

    Args:
        name: Skill name or directory path. Defaults to "my-skill".
        base_dir: Directory plain names are created in. Defaults to cwd.

    Returns:
        Path to the written SKILL.md.

    Raises:
        FileExistsError: If the directory already has a SKILL.md.
    """
    name = name or DEFAULT_SKILL_NAME
    skill_dir = Path(name)
    if not skill_dir.is_absolute():
        skill_dir = (base_dir or Path.cwd()) / skill_dir

    skill_file = skill_dir / SKILL_FILE
    if skill_file.exists():
        raise FileExistsError(f"{SKILL_FILE} already exists at {skill_file}")

    skill_dir.mkdir(parents=True, exist_ok=True)
    skill_file.write_text(SKILL_MD_TEMPLATE.format(name=skill_dir.name), encoding="utf-8")
    return skill_file
