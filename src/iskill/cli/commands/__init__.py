"""CLI command modules."""

from iskill.cli.commands import cache, config, find, init, install, update

__all__ = ["cache", "config", "find", "init", "install", "update"]
