"""
iskill config - Configuration management commands.

Usage:
    iskill config show
    iskill config init
    iskill config init --global
    iskill config path
"""

import json
from typing import Annotated

import typer
from rich.syntax import Syntax

from iskill.cli.common import load_cli_config
from iskill.cli.output import console, print_error, print_info, print_success, print_table
from iskill.config import ConfigurationError, get_config_sources, init_global_config, init_project_config
from iskill.storage.paths import get_global_config_path, get_project_config_path

app = typer.Typer(
    name="config",
    help="Configuration management.",
)


@app.command()
def show(
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """Show the merged configuration."""
    config = load_cli_config()
    data = config.to_file_dict()

    if json_output:
        console.print(json.dumps(data, indent=2), markup=False, soft_wrap=True)
        return

    console.print(Syntax(json.dumps(data, indent=2), "json", theme="monokai"))

    sources = get_config_sources()
    loaded = [f"{name}: {path}" for name, path in sources.items() if path]
    if loaded:
        console.print(f"\n[dim]Loaded from: {', '.join(loaded)}[/dim]")
    else:
        console.print("\n[dim]Using defaults (no config files found)[/dim]")


@app.command()
def init(
    global_config: Annotated[
        bool,
        typer.Option(
            "--global",
            "-g",
            help="Create the global config instead of the project config.",
        ),
    ] = False,
) -> None:
    """Create a config file with default values."""
    try:
        written = init_global_config() if global_config else init_project_config()
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if written is None:
        existing = get_global_config_path() if global_config else get_project_config_path()
        print_info(f"Config already exists: {existing}")
        return

    print_success(f"Created {written}")


@app.command()
def path() -> None:
    """Show configuration file locations."""
    sources = get_config_sources()
    print_table(
        ["Source", "Path", "Exists"],
        [
            ["global", get_global_config_path(), "yes" if sources["global"] else "no"],
            ["project", get_project_config_path(), "yes" if sources["project"] else "no"],
        ],
        title="Configuration Files",
    )
