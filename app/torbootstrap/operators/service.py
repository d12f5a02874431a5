"""Service manager operator.

Drives SysV-compatible ``service`` invocations, which work on systemd and
non-systemd Debian hosts alike.
"""

from torbootstrap.operators.base import Operator
from torbootstrap.utils.shell import CommandResult


class ServiceOperator(Operator):
    """Stops, starts, restarts and reloads system services."""

    _DEFAULT_TIMEOUT: float = 120.0

    @property
    def executable(self) -> str:
        """Return service as the driven executable."""
        return "service"

    def _control(self, name: str, action: str) -> CommandResult:
        return self._run(["service", name, action])

    def stop(self, name: str) -> CommandResult:
        """Stop a service."""
        return self._control(name, "stop")

    def start(self, name: str) -> CommandResult:
        """Start a service."""
        return self._control(name, "start")

    def restart(self, name: str) -> CommandResult:
        """Restart a service."""
        return self._control(name, "restart")

    def reload(self, name: str) -> CommandResult:
        """Ask a service to reload its configuration."""
        return self._control(name, "reload")
