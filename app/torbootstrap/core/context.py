"""Run context threaded through every pipeline stage."""

from dataclasses import dataclass, field
from pathlib import Path

from torbootstrap.core.paths import get_bundled_templates_dir
from torbootstrap.core.settings import Settings
from torbootstrap.models.mode import NodeMode
from torbootstrap.operators.apt import AptOperator
from torbootstrap.operators.firewall import FirewallOperator
from torbootstrap.operators.golang import GoOperator
from torbootstrap.operators.service import ServiceOperator
from torbootstrap.operators.system import SystemOperator


@dataclass(frozen=True, slots=True)
class BootstrapContext:
    """Immutable description of one provisioning run.

    Built once by the CLI from the parsed arguments and never modified.

    Attributes:
        mode: Selected node mode.
        settings: Effective settings.
        login: Login name of the session that started the run, or None if
            it could not be determined.
        dry_run: If True, report changes without making them.
    """

    mode: NodeMode
    settings: Settings = field(default_factory=Settings)
    login: str | None = None
    dry_run: bool = False

    @property
    def templates_dir(self) -> Path:
        """Template root: the configured directory or the bundled one."""
        return self.settings.paths.templates or get_bundled_templates_dir()

    def apt(self) -> AptOperator:
        """APT operator for this run."""
        return AptOperator(dry_run=self.dry_run, timeout=self.settings.command_timeout)

    def services(self) -> ServiceOperator:
        """Service manager operator for this run."""
        return ServiceOperator(dry_run=self.dry_run, timeout=self.settings.command_timeout)

    def firewall(self) -> FirewallOperator:
        """Firewall loader operator for this run."""
        return FirewallOperator(dry_run=self.dry_run, timeout=self.settings.command_timeout)

    def go(self) -> GoOperator:
        """Go toolchain operator for this run."""
        return GoOperator(dry_run=self.dry_run, timeout=self.settings.command_timeout)

    def system(self) -> SystemOperator:
        """Host inspection operator for this run."""
        return SystemOperator(dry_run=self.dry_run, timeout=self.settings.command_timeout)
