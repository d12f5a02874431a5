"""Result models for file applies and pipeline stages."""

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True, slots=True)
class ApplyResult:
    """Outcome of converging one managed file.

    Attributes:
        path: Destination path that was checked.
        changed: Whether content or permissions had to change.
        dry_run: Whether the change was only reported, not written.
        backup_path: Copy of the previous content, if one was kept.
    """

    path: str
    changed: bool
    dry_run: bool = False
    backup_path: str | None = None

    @property
    def message(self) -> str:
        """Short description for console output."""
        if not self.changed:
            return f"{self.path} already up to date"
        if self.dry_run:
            return f"{self.path} would be updated"
        return f"{self.path} updated"


class StageStatus(str, Enum):
    """Outcome of a pipeline stage.

    Attributes:
        CHANGED: The stage modified the host.
        UNCHANGED: The host already matched the desired state.
        SKIPPED: The stage did not apply and was not run.
        FAILED: The stage aborted; later stages were not run.
    """

    CHANGED = "changed"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class StageResult:
    """Outcome of a single pipeline stage.

    Attributes:
        stage: Name of the stage.
        status: Stage outcome.
        details: Human-readable notes on what was done.
        error: Error message if the stage failed.
        exit_code: Process exit status to use if the stage failed.
    """

    stage: str
    status: StageStatus
    details: tuple[str, ...] = field(default_factory=tuple)
    error: str | None = None
    exit_code: int = 0

    @property
    def failed(self) -> bool:
        """Check if the stage failed."""
        return self.status is StageStatus.FAILED

    @property
    def changed(self) -> bool:
        """Check if the stage modified the host."""
        return self.status is StageStatus.CHANGED
