"""APT package operator implementation.

Refreshes indices, upgrades, installs packages and manages repository
signing keys and debconf answers.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from torbootstrap.operators.base import Operator
from torbootstrap.utils.shell import CommandResult

logger = logging.getLogger(__name__)

# Never stop for a debconf question or a conffile prompt
_APT_ENV = {"DEBIAN_FRONTEND": "noninteractive"}
_DPKG_OPTIONS = [
    "-o",
    "Dpkg::Options::=--force-confdef",
    "-o",
    "Dpkg::Options::=--force-confold",
]


class AptOperator(Operator):
    """Operator for APT/dpkg.

    Uses apt-get for index refreshes, upgrades and installs. Must run as
    root; no sudo is prepended.
    """

    # Timeout for apt operations (30 minutes, upgrades can be slow)
    _DEFAULT_TIMEOUT: float = 1800.0

    @property
    def executable(self) -> str:
        """Return apt-get as the driven executable."""
        return "apt-get"

    def update(self) -> CommandResult:
        """Refresh the package indices."""
        return self._run(["apt-get", "--quiet", "update"], env=_APT_ENV)

    def dist_upgrade(self) -> CommandResult:
        """Upgrade all installed packages, keeping locally changed conffiles."""
        return self._run(
            ["apt-get", "--quiet", "--yes", *_DPKG_OPTIONS, "dist-upgrade"],
            env=_APT_ENV,
        )

    def install(self, packages: Iterable[str]) -> CommandResult | None:
        """Install packages in one transaction.

        Args:
            packages: Package names to install.

        Returns:
            CommandResult, or None if there was nothing to install.
        """
        names = list(packages)
        if not names:
            return None

        logger.info("Installing packages: %s", ", ".join(names))
        return self._run(
            ["apt-get", "--quiet", "--yes", *_DPKG_OPTIONS, "install", *names],
            env=_APT_ENV,
        )

    def set_selections(self, selections: Iterable[str]) -> CommandResult:
        """Preseed debconf answers.

        Args:
            selections: Lines in ``debconf-set-selections`` format.
        """
        text = "".join(f"{line}\n" for line in selections)
        return self._run(["debconf-set-selections"], input_text=text)

    def add_signing_key(self, key_url: str, keyring: Path) -> None:
        """Download an armored repository key and store it as a binary keyring.

        Args:
            key_url: URL of the ASCII-armored public key.
            keyring: Keyring file referenced by ``signed-by``.
        """
        fetched = self._run(["curl", "--fail", "--silent", "--show-error", "--location", key_url])
        self._run(
            ["gpg", "--batch", "--yes", "--dearmor", "--output", str(keyring)],
            input_text=fetched.stdout,
        )
