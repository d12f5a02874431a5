"""Unattended upgrades stage."""

from torbootstrap.core.apply import apply_file
from torbootstrap.core.context import BootstrapContext
from torbootstrap.core.pipeline import Stage
from torbootstrap.models.config_file import auto_upgrades_config
from torbootstrap.models.result import StageResult

UPGRADES_SERVICE = "unattended-upgrades"


class UpgradesStage(Stage):
    """Enables daily automatic upgrades, Tor Project packages included."""

    name = "upgrades"
    title = "Configuring unattended upgrades"

    def run(self, ctx: BootstrapContext) -> StageResult:
        config = auto_upgrades_config(ctx.templates_dir, ctx.settings.paths.auto_upgrades)
        applied = apply_file(config, dry_run=ctx.dry_run)
        ctx.services().restart(UPGRADES_SERVICE)
        return self.from_applies([applied])
