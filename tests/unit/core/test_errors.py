"""Unit tests for the error hierarchy and exit statuses."""

from torbootstrap.core.errors import (
    EXIT_FAILURE,
    EXIT_PRIVILEGE,
    EXIT_USAGE,
    ApplyError,
    BootstrapError,
    CommandFailure,
    PrivilegeError,
    SettingsError,
    UsageError,
)


class TestExitCodes:
    """Tests for exit statuses carried by errors."""

    def test_usage_error(self) -> None:
        """Usage errors exit 255."""
        assert EXIT_USAGE == 255
        assert UsageError("no mode").exit_code == 255

    def test_privilege_and_apply_errors(self) -> None:
        """Privilege and apply errors exit 1."""
        assert PrivilegeError("not root").exit_code == EXIT_PRIVILEGE == 1
        assert ApplyError("write failed").exit_code == EXIT_FAILURE == 1

    def test_hierarchy(self) -> None:
        """All errors derive from BootstrapError."""
        assert issubclass(SettingsError, UsageError)
        for error in (UsageError, PrivilegeError, ApplyError, CommandFailure):
            assert issubclass(error, BootstrapError)


class TestCommandFailure:
    """Tests for CommandFailure."""

    def test_exit_code_is_command_status(self) -> None:
        """The run exits with the failing command's own status."""
        error = CommandFailure(["apt-get", "update"], 100, "E: Could not resolve host\n")

        assert error.exit_code == 100
        assert error.stderr == "E: Could not resolve host"
        assert str(error) == "Command failed (100): apt-get update: E: Could not resolve host"

    def test_signal_status_exits_one(self) -> None:
        """A command killed by a signal reports a negative status; exit 1."""
        error = CommandFailure(["go", "install"], -9)

        assert error.exit_code == 1
        assert str(error) == "Command failed (-9): go install"
