"""Abstract base class for system operators.

This module defines the Operator interface shared by every wrapper around
an external system tool (package manager, service manager, firewall
loader, toolchain).
"""

import logging
import subprocess
import time
from abc import ABC, abstractmethod

from torbootstrap.core.errors import CommandFailure
from torbootstrap.utils.shell import CommandResult, command_exists, run_command

logger = logging.getLogger(__name__)

# Conventional shell statuses for a missing executable and a timeout
_STATUS_NOT_FOUND = 127
_STATUS_TIMEOUT = 124


class Operator(ABC):
    """Abstract base class for all system operators.

    Operators run external commands and turn a non-zero exit status into a
    :class:`CommandFailure`, so a failing command aborts the run.

    Attributes:
        dry_run: If True, commands that change the host are logged, not run.
        timeout: Upper bound in seconds for a single command.

    Example:
        >>> apt = AptOperator(dry_run=True)
        >>> if apt.is_available():
        ...     apt.install(["tor", "nyx"])
    """

    # Default timeout for a single command (5 minutes)
    _DEFAULT_TIMEOUT: float = 300.0

    def __init__(self, dry_run: bool = False, timeout: float | None = None) -> None:
        """Initialize the operator.

        Args:
            dry_run: If True, only log commands that would change the host.
            timeout: Command timeout in seconds. None uses the operator default.
        """
        self._dry_run = dry_run
        self._timeout = timeout if timeout is not None else self._DEFAULT_TIMEOUT

    @property
    def dry_run(self) -> bool:
        """Check if operator is in dry-run mode."""
        return self._dry_run

    @property
    def timeout(self) -> float:
        """Command timeout in seconds."""
        return self._timeout

    @property
    @abstractmethod
    def executable(self) -> str:
        """Return the main executable this operator drives."""

    def is_available(self) -> bool:
        """Check if the operator's executable is on PATH."""
        return command_exists(self.executable)

    def _run(
        self,
        args: list[str],
        *,
        env: dict[str, str] | None = None,
        input_text: str | None = None,
        mutating: bool = True,
    ) -> CommandResult:
        """Run a command, raising CommandFailure unless it succeeds.

        Args:
            args: Command and arguments.
            env: Extra environment variables for the child process only.
            input_text: Text fed to standard input.
            mutating: Whether the command changes the host. Mutating commands
                are skipped in dry-run mode; queries always run.

        Returns:
            CommandResult of the successful command.

        Raises:
            CommandFailure: If the command is missing, times out, or exits non-zero.
        """
        command = " ".join(args)

        if self.dry_run and mutating:
            logger.info("Dry-run: would run %s", command)
            return CommandResult(stdout="", stderr="", returncode=0)

        logger.info("Running %s", command)
        started = time.monotonic()
        try:
            result = run_command(args, timeout=self.timeout, env=env, input_text=input_text)
        except FileNotFoundError as e:
            raise CommandFailure(args, _STATUS_NOT_FOUND, f"{args[0]}: command not found") from e
        except subprocess.TimeoutExpired as e:
            raise CommandFailure(args, _STATUS_TIMEOUT, f"timed out after {self.timeout:g}s") from e

        logger.info(
            "Finished %s in %.1fs (exit %d)", args[0], time.monotonic() - started, result.returncode
        )

        if not result.success:
            logger.debug("%s exited %d: %s", command, result.returncode, result.stderr.strip())
            raise CommandFailure(args, result.returncode, result.stderr)

        return result
