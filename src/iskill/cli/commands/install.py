"""
iskill add / list / remove - Install and manage skills in a target path.

Usage:
    iskill add vercel-labs/agent-skills -p ./skills
    iskill add owner/repo@skill-name
    iskill add ./local/skills --skill foo --method copy
    iskill list -p ./skills
    iskill remove foo -p ./skills
    iskill remove --all -y
"""

import asyncio
from typing import Annotated

import typer

from iskill.cli.common import load_cli_config, target_path
from iskill.cli.output import (
    console,
    print_error,
    print_info,
    print_success,
    print_table,
    print_warning,
)
from iskill.errors import ISkillError
from iskill.skills import (
    InstallMethod,
    InstallOptions,
    InstallReport,
    OutcomeStatus,
    create_installer,
    create_scanner,
)
from iskill.storage.paths import resolve_target_path

PathOption = Annotated[
    str | None,
    typer.Option(
        "--path",
        "-p",
        help="Target skills directory (defaults to defaultPath from config).",
    ),
]


def _truncate(text: str, width: int = 60) -> str:
    return text[: width - 3] + "..." if len(text) > width else text


def _print_available(report: InstallReport) -> None:
    if not report.available:
        return

    print_table(
        ["Name", "Description", "Version"],
        [[skill.name, _truncate(skill.description), skill.version or ""] for skill in report.available],
        title=f"Skills in {report.source}",
    )
    console.print(f"\n[dim]Install with: iskill add {report.source} --skill <name>[/dim]")


def add(
    source: Annotated[
        str,
        typer.Argument(
            help="Skill source (GitHub shorthand, Git URL, or local path).",
        ),
    ],
    path: PathOption = None,
    skill: Annotated[
        list[str] | None,
        typer.Option(
            "--skill",
            "-s",
            help="Install only this skill (repeatable, '*' for all).",
        ),
    ] = None,
    list_only: Annotated[
        bool,
        typer.Option(
            "--list",
            "-l",
            help="List available skills without installing.",
        ),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation prompts.",
        ),
    ] = False,
    method: Annotated[
        InstallMethod | None,
        typer.Option(
            "--method",
            "-m",
            help="Installation method: symlink or copy.",
            case_sensitive=False,
        ),
    ] = None,
    no_cache: Annotated[
        bool,
        typer.Option(
            "--no-cache",
            help="Copy from a fresh temporary clone instead of the shared cache.",
        ),
    ] = False,
) -> None:
    """Install skills from a source into a skills directory."""
    config = load_cli_config()
    target = target_path(path, config)
    options = InstallOptions(
        skills=skill or None,
        method=method or config.install_method,
        list_only=list_only,
        yes=yes,
    )
    installer = create_installer()

    if not list_only:
        print_info(f"Installing skills from {source} to {target}")

    try:
        if no_cache and not list_only:
            report = asyncio.run(installer.install_from_source(source, target, options))
        else:
            report = asyncio.run(installer.install(source, target, options))
    except ISkillError as e:
        print_error(f"Installation failed: {e}")
        raise typer.Exit(1)

    if report.listed_only:
        _print_available(report)
        return

    for outcome in report.installed:
        console.print(f"  [green]+[/green] {outcome.name} [dim]{outcome.path}[/dim]")

    if report.installed:
        print_success(f"Installed {len(report.installed)} skill(s)")
    elif report.skipped:
        print_warning("Nothing installed: selected skills already exist")


def list_skills(path: PathOption = None) -> None:
    """List installed skills.

    Without --path, the configured ``paths`` are listed after ``defaultPath``.
    """
    config = load_cli_config()
    targets = [target_path(path, config)]
    if not path:
        targets += [resolve_target_path(extra) for extra in config.paths if extra]

    found = create_scanner().scan_multiple(list(dict.fromkeys(targets)))
    total = 0

    for target, skills in found.items():
        if not skills:
            print_info(f"No skills found in {target}")
            continue

        total += len(skills)
        print_table(
            ["Name", "Description", "Version"],
            [[skill.name, _truncate(skill.description), skill.version or ""] for skill in skills],
            title=f"Skills in {target}",
        )

    if total:
        console.print(f"\n[dim]Total: {total} skill(s)[/dim]")


def remove(
    names: Annotated[
        list[str] | None,
        typer.Argument(
            help="Skills to remove.",
        ),
    ] = None,
    path: PathOption = None,
    skill: Annotated[
        list[str] | None,
        typer.Option(
            "--skill",
            "-s",
            help="Skill to remove (repeatable).",
        ),
    ] = None,
    remove_all: Annotated[
        bool,
        typer.Option(
            "--all",
            help="Remove every installed skill.",
        ),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation.",
        ),
    ] = False,
) -> None:
    """Remove installed skills."""
    config = load_cli_config()
    target = target_path(path, config)
    installer = create_installer()

    if remove_all:
        to_remove = [s.name for s in create_scanner().scan(target)]
        if not to_remove:
            print_info(f"No skills found in {target}")
            return
        if not yes:
            console.print(f"[yellow]This will remove {len(to_remove)} skill(s) from {target}[/yellow]")
            confirmed = typer.confirm("Are you sure?")
            if not confirmed:
                console.print("[dim]Cancelled.[/dim]")
                return
    else:
        to_remove = skill or names or []

    if not to_remove:
        print_error("No skills specified. Use --skill or provide skill names as arguments.")
        raise typer.Exit(1)

    async def _uninstall() -> list:
        return [await installer.uninstall(name, target) for name in to_remove]

    try:
        outcomes = asyncio.run(_uninstall())
    except OSError as e:
        print_error(f"Removal failed: {e}")
        raise typer.Exit(1)

    removed = [o for o in outcomes if o.status == OutcomeStatus.REMOVED]
    for outcome in removed:
        console.print(f"  [red]-[/red] {outcome.name}")
    print_success(f"Removed {len(removed)} skill(s)")
