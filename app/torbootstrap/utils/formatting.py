"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import sys

from rich.console import Console
from rich.markup import escape
from rich.status import Status

from torbootstrap.core.theme import get_theme


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def print_step(title: str) -> None:
    """Print a pipeline step header."""
    console.print(f"[step]== {title}[/]")


def print_detail(message: str) -> None:
    """Print an indented detail line below a step header."""
    console.print(f"  - {escape(message)}", highlight=False)


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {escape(message)}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")


def working(message: str) -> Status:
    """Show a spinner while a long-running command works.

    Commands run with captured output, so this is the only sign of life
    during a package upgrade or a transport build. Nothing is drawn when
    the console is not a terminal.

    Example:
        >>> with working("Upgrading installed packages"):
        ...     apt.dist_upgrade()
    """
    return console.status(f"[info]{escape(message)}[/]")
