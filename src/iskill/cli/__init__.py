"""Command-line interface for iskill."""
