"""Path resolution for torbootstrap.

Locates the optional configuration file and the bundled configuration
templates. Host paths that the tool manages live in the settings model.
"""

import os
from importlib import resources
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "torbootstrap"

# Environment variable overriding the configuration file location
CONFIG_ENV_VAR = "TORBOOTSTRAP_CONFIG"

# System-wide configuration file, read when present
DEFAULT_CONFIG_PATH = Path("/etc") / APP_NAME / "config.toml"

# Optional colour overrides for the console output
THEME_OVERRIDE_PATH = Path("/etc") / APP_NAME / "theme.toml"


def get_config_path() -> Path:
    """Get the configuration file path.

    Returns:
        Path from TORBOOTSTRAP_CONFIG if set, otherwise /etc/torbootstrap/config.toml.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return DEFAULT_CONFIG_PATH


def get_bundled_templates_dir() -> Path:
    """Get the directory holding the bundled configuration templates.

    The directory contains one subdirectory per node mode (torrc, rules.v4,
    rules.v6) and a ``common`` subdirectory for mode-independent files.

    Returns:
        Path to the bundled data/templates directory.
    """
    return Path(str(resources.files("torbootstrap.data").joinpath("templates")))
