"""
iskill init - Create a new skill from a template.

Usage:
    iskill init
    iskill init my-skill
    iskill init ./skills/my-skill
"""

from typing import Annotated

import typer

from iskill.cli.output import console, print_success, print_warning
from iskill.skills import create_skill_template


def init(
    name: Annotated[
        str | None,
        typer.Argument(
            help="Skill name or directory (defaults to my-skill).",
        ),
    ] = None,
) -> None:
    """Create a SKILL.md template."""
    try:
        skill_file = create_skill_template(name)
    except FileExistsError as e:
        print_warning(str(e))
        return

    print_success("Skill created successfully!")
    console.print(f"[dim]Location: {skill_file}[/dim]")
    console.print("\nNext steps:")
    console.print(f"  1. Edit [cyan]{skill_file}[/cyan] to describe your skill")
    console.print(f"  2. Install it: [cyan]iskill add {skill_file.parent}[/cyan]")
