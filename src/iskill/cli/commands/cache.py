"""
iskill cache - Manage the clone cache.

Usage:
    iskill cache dir
    iskill cache clear
"""

import asyncio

import typer

from iskill.cli.output import console, print_info, print_success
from iskill.skills import create_resolver
from iskill.storage.paths import get_cache_dir

app = typer.Typer(
    name="cache",
    help="Clone cache management.",
)


@app.command("dir")
def cache_dir() -> None:
    """Print the cache directory."""
    console.print(str(get_cache_dir()), markup=False, soft_wrap=True)


@app.command()
def clear() -> None:
    """Remove every cached clone."""
    if asyncio.run(create_resolver().clear_cache()):
        print_success(f"Cleared {get_cache_dir()}")
    else:
        print_info("Cache is already empty")
