"""
Helpers shared by CLI commands.
"""

from pathlib import Path

import typer

from iskill.cli.output import print_error
from iskill.config import Config, ConfigurationError, load_config
from iskill.storage.paths import resolve_target_path


def load_cli_config() -> Config:
    """Load the merged configuration, exiting with status 1 if it is invalid."""
    try:
        return load_config()
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(1)


def target_path(path: str | None, config: Config) -> Path:
    """Absolute install target: ``--path`` if given, else ``defaultPath``."""
    return resolve_target_path(path or config.default_path)
