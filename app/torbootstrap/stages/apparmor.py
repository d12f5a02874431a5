"""AppArmor boot configuration stage.

Adds the AppArmor kernel parameters to GRUB_CMDLINE_LINUX and regenerates
the bootloader configuration. Takes effect on the next reboot.
"""

import logging
import re

from torbootstrap.core.apply import apply_text, read_text
from torbootstrap.core.context import BootstrapContext
from torbootstrap.core.pipeline import Stage
from torbootstrap.models.result import StageResult
from torbootstrap.utils.formatting import print_warning

logger = logging.getLogger(__name__)

APPARMOR_PARAMETERS = "apparmor=1 security=apparmor"

_CMDLINE = re.compile(r'^GRUB_CMDLINE_LINUX="(?P<args>.*)"[ \t]*$', re.MULTILINE)


def apparmor_enabled(grub_default: str) -> bool:
    """Check whether an active line already enables AppArmor."""
    return any(
        "apparmor=1" in line
        for line in grub_default.splitlines()
        if line.strip() and not line.lstrip().startswith("#")
    )


def enable_apparmor(grub_default: str) -> str:
    """Append the AppArmor parameters to GRUB_CMDLINE_LINUX.

    Adds the variable if the file does not set it.

    Args:
        grub_default: Content of /etc/default/grub.

    Returns:
        Updated content.
    """
    if not _CMDLINE.search(grub_default):
        separator = "" if not grub_default or grub_default.endswith("\n") else "\n"
        return f'{grub_default}{separator}GRUB_CMDLINE_LINUX="{APPARMOR_PARAMETERS}"\n'

    def _extend(match: re.Match[str]) -> str:
        args = f"{match.group('args')} {APPARMOR_PARAMETERS}".strip()
        return f'GRUB_CMDLINE_LINUX="{args}"'

    return _CMDLINE.sub(_extend, grub_default, count=1)


class AppArmorStage(Stage):
    """Turns AppArmor on at boot."""

    name = "apparmor"
    title = "Enabling AppArmor at boot"

    def run(self, ctx: BootstrapContext) -> StageResult:
        grub_default = ctx.settings.paths.grub_default
        current = read_text(grub_default)

        if current is None:
            print_warning(f"{grub_default} not found; enable AppArmor in your bootloader manually.")
            return self.skipped(f"{grub_default} not found")

        if apparmor_enabled(current):
            return self.result(False, ["AppArmor is already enabled at boot"])

        applied = apply_text(grub_default, enable_apparmor(current), backup=True, dry_run=ctx.dry_run)
        ctx.system().update_grub()
        return self.from_applies([applied], "AppArmor enabled from the next boot")
