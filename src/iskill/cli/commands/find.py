"""
iskill find - Search the skills directory.

Usage:
    iskill find react testing
    iskill find            (interactive)
"""

import asyncio
import sys
from typing import Annotated

import questionary
import typer
from questionary import Style

from iskill.cli.commands.install import PathOption
from iskill.cli.common import load_cli_config, target_path
from iskill.cli.output import console, print_error, print_info, print_success
from iskill.errors import ISkillError
from iskill.search import SearchResult, SkillSearchClient, get_api_url
from iskill.skills import InstallOptions, create_installer

MAX_LISTED_RESULTS = 6

custom_style = Style(
    [
        ("qmark", "fg:#5f87ff bold"),
        ("question", "bold"),
        ("answer", "fg:#00d787 bold"),
        ("pointer", "fg:#5f87ff bold"),
        ("highlighted", "fg:#5f87ff bold"),
        ("instruction", "fg:#6c6c6c"),
    ]
)

AGENT_TIP = (
    "[dim]Tip: if running in a coding agent, follow these steps:[/dim]\n"
    "[dim] 1) iskill find \\[query][/dim]\n"
    "[dim] 2) iskill add <owner/repo@skill>[/dim]"
)


def _skill_url(result: SearchResult) -> str:
    return f"{get_api_url().rstrip('/')}/{result.slug}"


async def _run_search_prompt(client: SkillSearchClient) -> SearchResult | None:
    """Ask for a query, then let the user pick one of the results."""
    query = await questionary.text("Search skills:", style=custom_style).ask_async()
    if not query or not query.strip():
        return None

    results = await client.search(query)
    if not results:
        console.print(f'[dim]No skills found for "{query}"[/dim]')
        return None

    return await questionary.select(
        "Select a skill to install:",
        choices=[
            questionary.Choice(
                title=f"{result.name} ({result.package})",
                value=result,
            )
            for result in results
        ],
        style=custom_style,
        use_indicator=True,
    ).ask_async()


def find(
    query: Annotated[
        list[str] | None,
        typer.Argument(
            help="Search keywords (omit for interactive mode).",
        ),
    ] = None,
    path: PathOption = None,
) -> None:
    """Search for skills by keyword or interactively."""
    client = SkillSearchClient()
    text = " ".join(query or []).strip()

    if text:
        results = asyncio.run(client.search(text))
        if not results:
            console.print(f'[dim]No skills found for "{text}"[/dim]')
            return

        console.print("[dim]Install with[/dim] iskill add <owner/repo@skill>\n")
        for result in results[:MAX_LISTED_RESULTS]:
            console.print(result.install_ref, markup=False, soft_wrap=True)
            console.print(f"[dim]└ {_skill_url(result)}[/dim]\n")
        return

    if not sys.stdin.isatty():
        console.print(AGENT_TIP)
        return

    selected = asyncio.run(_run_search_prompt(client))
    if selected is None:
        console.print("[dim]Search cancelled[/dim]")
        return

    config = load_cli_config()
    target = target_path(path, config)
    options = InstallOptions(skills=[selected.name], method=config.install_method)

    print_info(f"Installing [bold]{selected.name}[/bold] from {selected.package}")
    try:
        report = asyncio.run(create_installer().install(selected.package, target, options))
    except ISkillError as e:
        print_error(f"Installation failed: {e}")
        raise typer.Exit(1)

    if report.installed:
        print_success(f"Installed {selected.name} to {target}")
    console.print(f"[dim]View the skill at[/dim] {_skill_url(selected)}")
