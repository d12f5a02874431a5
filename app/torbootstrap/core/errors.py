"""Exception hierarchy for torbootstrap.

Every error carries the process exit status the CLI should terminate with.
"""

# Exit statuses
EXIT_USAGE = 255
EXIT_PRIVILEGE = 1
EXIT_FAILURE = 1


class BootstrapError(Exception):
    """Base exception for all provisioning errors."""

    exit_code: int = EXIT_FAILURE


class UsageError(BootstrapError):
    """Raised when the command line does not select exactly one node mode."""

    exit_code = EXIT_USAGE


class SettingsError(UsageError):
    """Raised when the configuration file cannot be read or validated."""


class PrivilegeError(BootstrapError):
    """Raised when the tool is not running as root."""

    exit_code = EXIT_PRIVILEGE


class ApplyError(BootstrapError):
    """Raised when a managed file cannot be read, validated or written."""


class CommandFailure(BootstrapError):
    """Raised when an external command exits with a non-zero status.

    Attributes:
        args_list: The command that failed.
        returncode: Exit status of the command.
        stderr: Captured standard error, stripped.
    """

    def __init__(self, args_list: list[str], returncode: int, stderr: str = "") -> None:
        self.args_list = args_list
        self.returncode = returncode
        self.stderr = stderr.strip()
        detail = f": {self.stderr}" if self.stderr else ""
        super().__init__(f"Command failed ({returncode}): {' '.join(args_list)}{detail}")

    @property
    def exit_code(self) -> int:  # type: ignore[override]
        """Exit with the failing command's own status."""
        return self.returncode if self.returncode > 0 else EXIT_FAILURE
