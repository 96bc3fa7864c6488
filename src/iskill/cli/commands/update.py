"""
iskill check / update - Keep installed skills current.

Usage:
    iskill check -p ./skills
    iskill update
    iskill update my-skill -p ./skills
"""

import asyncio
from typing import Annotated

import typer

from iskill.cli.commands.install import PathOption
from iskill.cli.common import load_cli_config, target_path
from iskill.cli.output import console, print_error, print_info, print_success, print_warning
from iskill.skills import OutcomeStatus, SkillOutcome, create_installer


def _print_outcome(outcome: SkillOutcome) -> None:
    if outcome.status == OutcomeStatus.UPDATED:
        console.print(f"  [green]✓[/green] {outcome.name}")
    elif outcome.status == OutcomeStatus.NOT_FOUND:
        console.print(f"  [yellow]?[/yellow] {outcome.name}: not installed")
    else:
        console.print(f"  [red]✗[/red] {outcome.name}: {outcome.error}")


def check(path: PathOption = None) -> None:
    """Check installed skills for available updates."""
    config = load_cli_config()
    target = target_path(path, config)
    installer = create_installer()

    print_info(f"Checking for updates in {target}")
    updates = asyncio.run(installer.check_updates(target))

    if not updates:
        print_info(f"No skills found in {target}")
        return

    for skill_name, has_update in updates.items():
        if has_update:
            console.print(f"  • {skill_name}: [yellow]Update available[/yellow]")
        else:
            console.print(f"  • {skill_name}: [dim]Up to date[/dim]")

    behind = [name for name, has_update in updates.items() if has_update]
    if not behind:
        print_success("All skills are up to date")
        return

    print_info(f"Found {len(behind)} skill(s) with updates")

    if not config.auto_update:
        console.print('[dim]Run "iskill update" to install updates[/dim]')
        return

    async def _update_behind() -> list[SkillOutcome]:
        return [await installer.update(name, target) for name in behind]

    for outcome in asyncio.run(_update_behind()):
        _print_outcome(outcome)


def update(
    name: Annotated[
        str | None,
        typer.Argument(
            help="Skill name (updates all if not specified).",
        ),
    ] = None,
    path: PathOption = None,
) -> None:
    """Update skill(s) to the latest version."""
    config = load_cli_config()
    target = target_path(path, config)
    installer = create_installer()

    if name:
        outcome = asyncio.run(installer.update(name, target))
        _print_outcome(outcome)
        if outcome.status == OutcomeStatus.FAILED:
            print_error(f"Failed to update {name}")
            raise typer.Exit(1)
        if outcome.status == OutcomeStatus.UPDATED:
            print_success(f"Updated {name}")
        return

    outcomes = asyncio.run(installer.update_all(target))
    if not outcomes:
        print_info(f"No skills found in {target}")
        return

    for outcome in outcomes:
        _print_outcome(outcome)

    failed = [o for o in outcomes if o.status == OutcomeStatus.FAILED]
    if failed:
        print_warning(f"{len(failed)} of {len(outcomes)} skill(s) could not be updated")
    else:
        print_success(f"Updated {len(outcomes)} skill(s)")
