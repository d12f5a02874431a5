"""Managed configuration file models.

A ConfigFile pairs a bundled template with the host path it is copied to
and the permission bits the copy must carry.
"""

from dataclasses import dataclass
from pathlib import Path

from torbootstrap.models.mode import NodeMode

# Permission modes
MODE_PUBLIC = 0o644
MODE_PRIVATE = 0o600

# Template subdirectory for files shared by all modes
COMMON_TEMPLATES = "common"


@dataclass(frozen=True, slots=True)
class ConfigFile:
    """A template copied verbatim to a host path.

    Attributes:
        source: Template file to copy.
        destination: Host path receiving the template content.
        mode: Permission bits the destination must end up with.
    """

    source: Path
    destination: Path
    mode: int = MODE_PUBLIC

    def __post_init__(self) -> None:
        """Validate permission bits after initialization."""
        if not 0 <= self.mode <= 0o7777:
            msg = f"Invalid permission mode {self.mode:o} for {self.destination}"
            raise ValueError(msg)

    @property
    def mode_text(self) -> str:
        """Permission bits in chmod notation, e.g. ``0600``."""
        return f"{self.mode:04o}"


def tor_config(mode: NodeMode, templates: Path, torrc: Path) -> ConfigFile:
    """Tor daemon configuration for a node mode.

    Args:
        mode: Selected node mode.
        templates: Template root directory.
        torrc: Destination of the Tor configuration.

    Returns:
        ConfigFile for the mode's torrc.
    """
    return ConfigFile(source=templates / mode.value / "torrc", destination=torrc)


def firewall_rules(mode: NodeMode, templates: Path, iptables_dir: Path) -> tuple[ConfigFile, ...]:
    """IPv4 and IPv6 firewall rule sets for a node mode.

    Rule files are readable by root only.

    Args:
        mode: Selected node mode.
        templates: Template root directory.
        iptables_dir: Directory the rule sets are installed to.

    Returns:
        ConfigFiles for rules.v4 and rules.v6, in that order.
    """
    return tuple(
        ConfigFile(
            source=templates / mode.value / name,
            destination=iptables_dir / name,
            mode=MODE_PRIVATE,
        )
        for name in ("rules.v4", "rules.v6")
    )


def auto_upgrades_config(templates: Path, destination: Path) -> ConfigFile:
    """Unattended upgrades policy, shared by all modes."""
    return ConfigFile(source=templates / COMMON_TEMPLATES / destination.name, destination=destination)
