"""Tor daemon configuration stage."""

from torbootstrap.core.apply import apply_file
from torbootstrap.core.context import BootstrapContext
from torbootstrap.core.pipeline import Stage
from torbootstrap.models.config_file import tor_config
from torbootstrap.models.result import StageResult

TOR_SERVICE = "tor"


class TorStage(Stage):
    """Installs the mode's torrc and restarts Tor with it.

    The candidate configuration is checked with ``tor --verify-config``
    before it replaces the installed one.
    """

    name = "tor"
    title = "Configuring Tor"

    def run(self, ctx: BootstrapContext) -> StageResult:
        services = ctx.services()
        system = ctx.system()
        config = tor_config(ctx.mode, ctx.templates_dir, ctx.settings.paths.torrc)

        services.stop(TOR_SERVICE)
        applied = apply_file(config, dry_run=ctx.dry_run, validator=system.verify_tor_config)
        services.start(TOR_SERVICE)

        return self.from_applies([applied], f"Using the {ctx.mode.label} configuration")
