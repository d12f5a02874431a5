"""CLI package for torbootstrap.

This package contains the Typer application.
"""

from torbootstrap.cli.main import app

__all__ = ["app"]
