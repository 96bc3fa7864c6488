"""
iskill skills system.

A skill is a directory with a SKILL.md manifest whose YAML frontmatter names
and describes it. Skills are discovered by scanning, resolved from local or
remote sources, and installed into a target directory by symlink or copy.

Usage:
    from iskill.skills import Installer, InstallOptions

    installer = Installer()
    report = await installer.install("owner/repo", "./skills", InstallOptions())
"""

# Models
from iskill.skills.models import (
    ALL_SKILLS,
    SKILL_FILE,
    InstallMethod,
    InstallOptions,
    InstallReport,
    OutcomeStatus,
    ResolvedSource,
    Skill,
    SkillOutcome,
    SourceType,
)

# Parser
from iskill.skills.parser import (
    ParseResult,
    ParseStatus,
    find_skill_file,
    inspect_skill_directory,
    parse_skill,
    parse_skill_content,
    parse_yaml_frontmatter,
    split_frontmatter,
)

# Scanner
from iskill.skills.scanner import (
    SKILL_DIRECTORIES,
    Scanner,
    create_scanner,
    discover_skills_in_directory,
)

# Resolver
from iskill.skills.resolver import (
    Resolver,
    cache_key,
    create_resolver,
    normalize_github_url,
    split_skill_selector,
)

# Installer
from iskill.skills.installer import (
    Installer,
    create_installer,
)

# Scaffold
from iskill.skills.scaffold import create_skill_template

__all__ = [
    # Models
    "ALL_SKILLS",
    "SKILL_FILE",
    "InstallMethod",
    "InstallOptions",
    "InstallReport",
    "OutcomeStatus",
    "ResolvedSource",
    "Skill",
    "SkillOutcome",
    "SourceType",
    # Parser
    "ParseResult",
    "ParseStatus",
    "find_skill_file",
    "inspect_skill_directory",
    "parse_skill",
    "parse_skill_content",
    "parse_yaml_frontmatter",
    "split_frontmatter",
    # Scanner
    "SKILL_DIRECTORIES",
    "Scanner",
    "create_scanner",
    "discover_skills_in_directory",
    # Resolver
    "Resolver",
    "cache_key",
    "create_resolver",
    "normalize_github_url",
    "split_skill_selector",
    # Installer
    "Installer",
    "create_installer",
    # Scaffold
    "create_skill_template",
]
