"""Firewall stage.

Installs the mode's IPv4 and IPv6 rule sets, readable by root only, and
loads them into the kernel. Both rule sets are parsed with ``--test``
before either file is installed or loaded, so a broken template cannot
leave the host with a half-applied firewall.

The templates accept Tor on 443 and 80 instead of the usual 9001/9030,
which gets through networks that only allow web traffic.
"""

import logging

from torbootstrap.core.apply import apply_file
from torbootstrap.core.context import BootstrapContext
from torbootstrap.core.pipeline import Stage
from torbootstrap.models.config_file import firewall_rules
from torbootstrap.models.result import StageResult
from torbootstrap.operators.firewall import family_for

logger = logging.getLogger(__name__)

# Make iptables-persistent save and restore both families across reboots
AUTOSAVE_SELECTIONS = (
    "iptables-persistent iptables-persistent/autosave_v6 boolean true",
    "iptables-persistent iptables-persistent/autosave_v4 boolean true",
)


class FirewallStage(Stage):
    """Applies, validates and loads the firewall rule sets."""

    name = "firewall"
    title = "Configuring firewall rules"

    def run(self, ctx: BootstrapContext) -> StageResult:
        firewall = ctx.firewall()
        rules = firewall_rules(ctx.mode, ctx.templates_dir, ctx.settings.paths.iptables_dir)

        ctx.apt().set_selections(AUTOSAVE_SELECTIONS)

        # In a dry run the restore tools may not be installed yet
        if not ctx.dry_run:
            for rule_file in rules:
                firewall.validate(rule_file.source, family_for(rule_file.destination))

        applied = [apply_file(rule_file, dry_run=ctx.dry_run) for rule_file in rules]

        for rule_file in rules:
            firewall.load(rule_file.destination, family_for(rule_file.destination))

        verb = "Would load" if ctx.dry_run else "Loaded"
        return self.from_applies(applied, f"{verb} IPv4 and IPv6 rule sets")
