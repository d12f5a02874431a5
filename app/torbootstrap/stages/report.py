"""Final instructions for the operator."""

from rich.panel import Panel

from torbootstrap.core.context import BootstrapContext
from torbootstrap.core.pipeline import Stage
from torbootstrap.models.mode import NodeMode
from torbootstrap.models.result import StageResult
from torbootstrap.utils.formatting import console

# Where Tor writes the bridge line once obfs4 is running
BRIDGE_LINE_PATH = "/var/lib/tor/pt_state/obfs4_bridgeline.txt"


def build_instructions(ctx: BootstrapContext) -> list[str]:
    """Manual follow-up steps for the operator, one paragraph each."""
    torrc = ctx.settings.paths.torrc
    transport = ctx.settings.paths.binary_dir / ctx.settings.build.binary
    sources_list = ctx.settings.paths.sources_list

    steps = [
        "Try SSHing into this server again in a new window, to confirm the "
        "firewall isn't broken",
        f"Edit {torrc}\n"
        "  - Set Address, Nickname, ContactInfo, and MyFamily for your Tor relay\n"
        "  - Optional: include a donation address in the 'ContactInfo' line",
    ]
    if ctx.mode is NodeMode.BRIDGE:
        steps.append(
            f"Once Tor is running, share the bridge line from {BRIDGE_LINE_PATH}\n"
            "  with the people who should use this bridge"
        )
        steps.append(
            f"Check that obfs4 started: tail the Tor log for errors about {transport}\n"
            "  - The system_tor AppArmor profile only allows /usr/bin/obfs4proxy\n"
            "  - The tor unit sets NoNewPrivileges, so the port 80 file capability is ignored\n"
            f"  - If it fails, copy {transport} to /usr/bin and update {torrc},\n"
            "    or move ServerTransportListenAddr above port 1024"
        )
    steps += [
        "Register your new Tor relay at Tor Weather (https://weather.torproject.org/)\n"
        "  to get automatic emails about its status",
        f"Consider having {sources_list} update over HTTPS and/or HTTPS+Tor\n"
        "  see https://guardianproject.info/2014/10/16/reducing-metadata-leakage-from-software-updates/\n"
        "  for more details",
        "REBOOT THIS SERVER",
    ]
    return steps


class ReportStage(Stage):
    """Prints the follow-up steps that cannot be automated."""

    name = "report"

    def run(self, ctx: BootstrapContext) -> StageResult:
        body = "\n\n".join(f"== {step}" for step in build_instructions(ctx))
        console.print(
            Panel(
                body,
                title="Next steps",
                title_align="left",
                border_style="border",
                style="step",
                highlight=False,
            )
        )
        return self.result(False)
