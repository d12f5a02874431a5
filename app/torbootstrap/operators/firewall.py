"""Firewall rule loader operator.

Loads complete iptables rule sets with ``iptables-restore`` and
``ip6tables-restore``. A restore replaces every table named in the file in
one commit, so the kernel either gets the whole rule set or keeps its
current one.
"""

from pathlib import Path
from typing import Literal

from torbootstrap.operators.base import Operator
from torbootstrap.utils.shell import CommandResult

AddressFamily = Literal["ipv4", "ipv6"]

_RESTORE_COMMANDS: dict[AddressFamily, str] = {
    "ipv4": "iptables-restore",
    "ipv6": "ip6tables-restore",
}


def family_for(path: Path) -> AddressFamily:
    """Address family of a rule file named ``rules.v4`` or ``rules.v6``."""
    return "ipv6" if path.name.endswith(".v6") else "ipv4"


class FirewallOperator(Operator):
    """Validates and loads iptables rule sets."""

    _DEFAULT_TIMEOUT: float = 60.0

    @property
    def executable(self) -> str:
        """Return iptables-restore as the driven executable."""
        return _RESTORE_COMMANDS["ipv4"]

    def validate(self, rules: Path, family: AddressFamily) -> CommandResult:
        """Parse a rule set without committing it.

        A query: it does not touch the live tables.

        Args:
            rules: Rule file in iptables-save format.
            family: Address family the rules are for.
        """
        return self._run([_RESTORE_COMMANDS[family], "--test", str(rules)], mutating=False)

    def load(self, rules: Path, family: AddressFamily) -> CommandResult:
        """Replace the live tables with a rule set.

        Args:
            rules: Rule file in iptables-save format.
            family: Address family the rules are for.
        """
        return self._run([_RESTORE_COMMANDS[family], str(rules)])
