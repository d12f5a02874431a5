"""Host inspection and configuration check operator.

Wraps the smaller tools the pipeline needs: distribution detection, the
Tor and sshd configuration checkers, the SSH journal and the bootloader
configuration regenerator.
"""

import logging
from pathlib import Path

from torbootstrap.operators.base import Operator
from torbootstrap.utils.shell import CommandResult, command_exists

logger = logging.getLogger(__name__)

OS_RELEASE = Path("/etc/os-release")

# Defaults the Debian tor service starts with (User, DataDirectory, ...)
TOR_SERVICE_DEFAULTS = Path("/usr/share/tor/tor-service-defaults-torrc")


def _parse_os_release(text: str) -> dict[str, str]:
    """Parse KEY=value lines of os-release, unquoting values."""
    values: dict[str, str] = {}
    for line in text.splitlines():
        key, sep, value = line.partition("=")
        if not sep or key.strip().startswith("#"):
            continue
        values[key.strip()] = value.strip().strip("\"'")
    return values


class SystemOperator(Operator):
    """Queries and checks against the host's own tools."""

    _DEFAULT_TIMEOUT: float = 120.0

    @property
    def executable(self) -> str:
        """Return lsb_release as the driven executable."""
        return "lsb_release"

    def distribution_codename(self, os_release: Path = OS_RELEASE) -> str:
        """Detect the distribution codename, e.g. ``bookworm``.

        Uses ``lsb_release -cs`` when installed, otherwise VERSION_CODENAME
        from os-release.

        Returns:
            Codename, or an empty string if it cannot be determined.
        """
        if command_exists("lsb_release"):
            result = self._run(["lsb_release", "-cs"], mutating=False)
            return result.stdout.strip()

        try:
            values = _parse_os_release(os_release.read_text(encoding="utf-8"))
        except OSError as e:
            logger.warning("Cannot read %s: %s", os_release, e)
            return ""
        return values.get("VERSION_CODENAME", "")

    def verify_tor_config(self, torrc: Path) -> CommandResult:
        """Check a Tor configuration file without starting Tor.

        The packaged service defaults are layered underneath, as they are
        when the tor service starts.
        """
        args = ["tor", "--verify-config"]
        if TOR_SERVICE_DEFAULTS.exists():
            args += ["--defaults-torrc", str(TOR_SERVICE_DEFAULTS)]
        return self._run([*args, "-f", str(torrc)], mutating=False)

    def check_sshd_config(self, sshd_config: Path) -> CommandResult:
        """Check an sshd configuration file in test mode."""
        return self._run(["sshd", "-t", "-f", str(sshd_config)], mutating=False)

    def ssh_journal(self) -> str:
        """Return the SSH daemon's journal, for hosts without an auth log.

        Returns:
            Journal text, or an empty string if journalctl is unavailable.
        """
        if not command_exists("journalctl"):
            return ""
        result = self._run(
            ["journalctl", "--unit", "ssh", "--no-pager", "--quiet", "--output", "cat"],
            mutating=False,
        )
        return result.stdout

    def update_grub(self) -> CommandResult:
        """Regenerate the bootloader configuration."""
        return self._run(["update-grub"])
