"""
relbump CLI - Main application entry point.

Installed as both ``bump_version`` and ``relbump``.
"""

from relbump.cli.bump import app


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main"]
