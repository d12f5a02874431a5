"""Unit tests for package set models."""

import pytest
from torbootstrap.models.mode import NodeMode
from torbootstrap.models.package import (
    BRIDGE_PACKAGES,
    COMMON_PACKAGES,
    PackageSet,
    resolve_packages,
)


class TestPackageSet:
    """Tests for PackageSet model."""

    def test_of_keeps_first_occurrence(self) -> None:
        """Duplicates across groups are dropped, keeping order."""
        packages = PackageSet.of(["tor", "nyx"], ["nyx", "git"])

        assert list(packages) == ["tor", "nyx", "git"]
        assert len(packages) == 3
        assert "git" in packages

    def test_rejects_duplicates(self) -> None:
        """A set built directly cannot hold duplicates."""
        with pytest.raises(ValueError, match="duplicates"):
            PackageSet(names=("tor", "tor"))

    @pytest.mark.parametrize("name", ["", " tor", "tor\n"])
    def test_rejects_bad_names(self, name: str) -> None:
        """Empty names and surrounding whitespace are rejected."""
        with pytest.raises(ValueError, match="non-empty"):
            PackageSet(names=(name,))


class TestResolvePackages:
    """Tests for resolve_packages function."""

    def test_relay_gets_common_packages(self) -> None:
        """Relays get exactly the common list."""
        packages = resolve_packages(NodeMode.RELAY)

        assert packages.names == COMMON_PACKAGES
        assert "golang" not in packages

    def test_bridge_adds_build_tooling(self) -> None:
        """Bridges also get the transport build toolchain."""
        packages = resolve_packages(NodeMode.BRIDGE)

        assert packages.names == COMMON_PACKAGES + BRIDGE_PACKAGES
        assert "libcap2-bin" in packages

    def test_common_list_installs_tor_stack(self) -> None:
        """Tor, its monitor and the hardening packages are always installed."""
        packages = resolve_packages(NodeMode.EXIT)

        for name in ("tor", "nyx", "deb.torproject.org-keyring", "iptables-persistent", "apparmor"):
            assert name in packages

    def test_extra_packages_appended(self) -> None:
        """Configured extras come last and are not duplicated."""
        packages = resolve_packages(NodeMode.EXIT, ["vnstat", "tor"])

        assert packages.names[-1] == "vnstat"
        assert packages.names.count("tor") == 1
