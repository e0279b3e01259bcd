"""CLI module for promrouter."""

from promrouter.cli.main import app, main_cli

__all__ = [
    "app",
    "main_cli",
]
