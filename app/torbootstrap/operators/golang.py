"""Go toolchain operator.

Builds a Go command from source inside a throwaway GOPATH. The workspace
is a temporary directory that is removed when the build finishes, whether
it succeeded or not. Only the child process sees the overridden GOPATH;
the caller's environment is never modified.
"""

import logging
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from torbootstrap.core.errors import ApplyError
from torbootstrap.operators.base import Operator
from torbootstrap.utils.shell import CommandResult

logger = logging.getLogger(__name__)

WORKSPACE_PREFIX = "torbootstrap-gopath-"


@contextmanager
def temporary_gopath() -> Iterator[Path]:
    """Create a temporary GOPATH and remove it on exit."""
    with tempfile.TemporaryDirectory(prefix=WORKSPACE_PREFIX) as workspace:
        logger.debug("Created build workspace %s", workspace)
        yield Path(workspace)
    logger.debug("Removed build workspace %s", workspace)


def build_env(gopath: Path) -> dict[str, str]:
    """Environment confining a build to the given GOPATH.

    The module cache is made writable so the workspace can be deleted, and
    the build cache lives in the workspace too.
    """
    return {
        "GOPATH": str(gopath),
        "GOBIN": str(gopath / "bin"),
        "GOCACHE": str(gopath / "cache"),
        "GOFLAGS": "-modcacherw",
    }


class GoOperator(Operator):
    """Builds Go commands and grants file capabilities to the result."""

    # Timeout for fetching and compiling (20 minutes)
    _DEFAULT_TIMEOUT: float = 1200.0

    @property
    def executable(self) -> str:
        """Return go as the driven executable."""
        return "go"

    def build(self, target: str, binary: str) -> bytes | None:
        """Fetch and compile a Go command in a temporary workspace.

        Args:
            target: ``go install`` argument, e.g. ``example.org/cmd@latest``.
            binary: Name of the executable the build produces.

        Returns:
            Content of the built executable, or None in dry-run mode.

        Raises:
            CommandFailure: If the build fails.
            ApplyError: If the build succeeded but produced no executable.
        """
        if self.dry_run:
            logger.info("Dry-run: would build %s", target)
            return None

        with temporary_gopath() as gopath:
            self._run(["go", "install", target], env=build_env(gopath))
            built = gopath / "bin" / binary
            try:
                return built.read_bytes()
            except OSError as e:
                raise ApplyError(f"Build of {target} produced no {binary}: {e}") from e

    def grant_capability(self, path: Path, capability: str) -> CommandResult:
        """Set a file capability on an executable, e.g. ``cap_net_bind_service``."""
        return self._run(["setcap", f"{capability}=+ep", str(path)])
