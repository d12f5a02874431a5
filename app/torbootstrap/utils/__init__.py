"""Utility modules for torbootstrap.

This module exports commonly used utility functions.
"""

from torbootstrap.utils.formatting import (
    console,
    err_console,
    print_detail,
    print_error,
    print_info,
    print_step,
    print_success,
    print_warning,
)
from torbootstrap.utils.shell import CommandResult, command_exists, run_command

__all__ = [
    "CommandResult",
    "command_exists",
    "console",
    "err_console",
    "print_detail",
    "print_error",
    "print_info",
    "print_step",
    "print_success",
    "print_warning",
    "run_command",
]
