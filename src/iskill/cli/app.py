"""
Main Typer application for iskill CLI.

This module defines the root CLI application and registers all commands.
"""

from typing import Annotated

import typer
from rich.markup import escape

from iskill import __version__
from iskill.cli.commands import cache, config, find, init, install, update
from iskill.cli.output import configure_logging, console, print_info

# Create the main Typer app
app = typer.Typer(
    name="iskill",
    help="A flexible skill installation tool with custom path support.",
    no_args_is_help=False,
    invoke_without_command=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=True,
    pretty_exceptions_show_locals=False,
)

BANNER_COMMANDS = [
    ("iskill add", "<package>", "Install a skill"),
    ("iskill list", "", "List installed skills"),
    ("iskill find", "[query]", "Search for skills"),
    ("iskill remove", "", "Remove installed skills"),
    ("iskill check", "", "Check for updates"),
    ("iskill update", "", "Update all skills"),
    ("iskill init", "[name]", "Create a new skill"),
]


def show_banner() -> None:
    """Print usage hints shown when no command is given."""
    console.print()
    console.print("[bold]iskill[/bold]")
    console.print("[dim]The flexible skill installation tool[/dim]")
    console.print()
    for command, args, description in BANNER_COMMANDS:
        suffix = f" [dim]{escape(args)}[/dim]" if args else ""
        console.print(f" [dim]$[/dim] {command}{suffix}  [dim]{description}[/dim]")
    console.print()
    console.print("[dim]try:[/dim] iskill add vercel-labs/agent-skills")
    console.print()
    console.print("Discover more skills at https://skills.sh/")
    console.print()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        print_info(f"iskill version [green]{__version__}[/green]")
        raise typer.Exit()


# noinspection PyUnusedLocal
@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show debug output.",
        ),
    ] = False,
) -> None:
    """
    [bold blue]iskill[/bold blue] - Skill installation tool

    Installs SKILL.md skills from GitHub, Git remotes, or local paths
    into any directory, by symlink or copy.
    """
    configure_logging(verbose)

    if ctx.invoked_subcommand is None:
        show_banner()


# Register commands
app.command("add")(install.add)
app.command("install", hidden=True)(install.add)
app.command("list")(install.list_skills)
app.command("ls", hidden=True)(install.list_skills)
app.command("remove")(install.remove)
app.command("rm", hidden=True)(install.remove)
app.command("check")(update.check)
app.command("update")(update.update)
app.command("find")(find.find)
app.command("search", hidden=True)(find.find)
app.command("init")(init.init)

# Register command groups
app.add_typer(config.app, name="config")
app.add_typer(cache.app, name="cache")


if __name__ == "__main__":
    app()
