"""Package set models.

Defines the packages every node gets and the extras a bridge needs to
build its pluggable transport.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from torbootstrap.models.mode import NodeMode

# Packages installed for every node mode
COMMON_PACKAGES: tuple[str, ...] = (
    "deb.torproject.org-keyring",
    "tor",
    "nyx",
    "tor-geoipdb",
    "fail2ban",
    "apparmor",
    "apparmor-profiles",
    "apparmor-utils",
    "unattended-upgrades",
    "apt-listchanges",
    "debconf-utils",
    "iptables",
    "iptables-persistent",
)

# Toolchain for building obfs4proxy from source
BRIDGE_PACKAGES: tuple[str, ...] = (
    "git",
    "golang",
    "libcap2-bin",
)


@dataclass(frozen=True, slots=True)
class PackageSet:
    """Ordered, duplicate-free set of package names.

    Order only affects how the install command reads in logs.

    Attributes:
        names: Package names in install order.
    """

    names: tuple[str, ...]

    def __post_init__(self) -> None:
        """Validate package names after initialization."""
        if any(not name or name != name.strip() for name in self.names):
            msg = "Package names must be non-empty and contain no surrounding whitespace"
            raise ValueError(msg)
        if len(set(self.names)) != len(self.names):
            msg = "Package set contains duplicates"
            raise ValueError(msg)

    @classmethod
    def of(cls, *groups: Iterable[str]) -> "PackageSet":
        """Build a package set from groups, keeping first occurrences."""
        seen: dict[str, None] = {}
        for group in groups:
            for name in group:
                seen.setdefault(name, None)
        return cls(names=tuple(seen))

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def __len__(self) -> int:
        return len(self.names)

    def __contains__(self, name: object) -> bool:
        return name in self.names


def resolve_packages(mode: NodeMode, extra: Iterable[str] = ()) -> PackageSet:
    """Resolve the package set for a node mode.

    Args:
        mode: Selected node mode.
        extra: Operator-configured packages appended after the built-in lists.

    Returns:
        PackageSet with common packages, bridge tooling for bridges, then extras.
    """
    mode_packages = BRIDGE_PACKAGES if mode.is_bridge else ()
    return PackageSet.of(COMMON_PACKAGES, mode_packages, extra)
