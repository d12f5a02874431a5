"""torbootstrap - provision a Debian host as a Tor bridge, relay or exit node."""

__version__ = "0.1.0"
