"""Node mode model.

The node mode is selected once on the command line and decides which
package list and which configuration templates a run uses.
"""

from enum import Enum


class NodeMode(str, Enum):
    """Role this host plays in the Tor network.

    Attributes:
        BRIDGE: Unlisted relay with an obfs4 pluggable transport.
        RELAY: Non-exit relay forwarding traffic between other relays.
        EXIT: Relay forwarding traffic to the public internet.
    """

    BRIDGE = "bridge"
    RELAY = "relay"
    EXIT = "exit"

    @property
    def label(self) -> str:
        """Human-readable description of the mode."""
        return _LABELS[self]

    @property
    def is_bridge(self) -> bool:
        """Check if this mode needs the pluggable transport."""
        return self is NodeMode.BRIDGE


_LABELS: dict[NodeMode, str] = {
    NodeMode.BRIDGE: "obfs4 Tor bridge",
    NodeMode.RELAY: "(non-exit) Tor relay",
    NodeMode.EXIT: "Tor exit relay",
}
