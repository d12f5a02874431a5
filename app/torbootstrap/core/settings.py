"""Settings model and configuration file I/O.

Every value has a default matching a stock Debian host, so the
configuration file is optional. Operators override individual values in
/etc/torbootstrap/config.toml, for example::

    [paths]
    templates = "/root/my-templates"

    [packages]
    extra = ["vnstat"]
"""

import logging
import tomllib
from pathlib import Path
from typing import Annotated, Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from torbootstrap.core.errors import SettingsError
from torbootstrap.core.paths import DEFAULT_CONFIG_PATH, get_config_path

logger = logging.getLogger(__name__)


class RepositorySettings(BaseModel):
    """Where the Tor Project packages and their signing key come from.

    Attributes:
        host: Repository host name.
        path: Repository path below the host.
        component: Archive component.
        key_url: URL of the ASCII-armored archive signing key.
        keyring: Dearmored keyring referenced by the source line.
        cache_proxy_port: Port of a transparent apt caching proxy that
            cannot fetch over HTTPS (apt-cacher-ng).
    """

    model_config = ConfigDict(extra="forbid")

    host: str = "deb.torproject.org"
    path: str = "torproject.org"
    component: str = "main"
    key_url: str = (
        "https://deb.torproject.org/torproject.org/"
        "A3C4F0F979CAA22CDBA8F512EE8CBC9E886DDD89.asc"
    )
    keyring: Path = Path("/usr/share/keyrings/tor-archive-keyring.gpg")
    cache_proxy_port: Annotated[int, Field(ge=1, le=65535)] = 3142


class PathSettings(BaseModel):
    """Host files and directories managed by torbootstrap.

    Attributes:
        templates: Directory of configuration templates. None uses the
            templates bundled with the package.
    """

    model_config = ConfigDict(extra="forbid")

    sources_list: Path = Path("/etc/apt/sources.list")
    sources_dir: Path = Path("/etc/apt/sources.list.d")
    apt_conf_dir: Path = Path("/etc/apt")
    auto_upgrades: Path = Path("/etc/apt/apt.conf.d/20auto-upgrades")
    torrc: Path = Path("/etc/tor/torrc")
    iptables_dir: Path = Path("/etc/iptables")
    grub_default: Path = Path("/etc/default/grub")
    sshd_config: Path = Path("/etc/ssh/sshd_config")
    auth_log: Path = Path("/var/log/auth.log")
    binary_dir: Path = Path("/usr/local/bin")
    templates: Path | None = None


class BuildSettings(BaseModel):
    """Pluggable transport build for bridges.

    Attributes:
        module: Go package path of the transport command.
        version: Module version passed to ``go install``.
        binary: Name of the built executable.
    """

    model_config = ConfigDict(extra="forbid")

    module: str = "gitlab.com/yawning/obfs4.git/obfs4proxy"
    version: str = "latest"
    binary: str = "obfs4proxy"

    @property
    def target(self) -> str:
        """Argument for ``go install``."""
        return f"{self.module}@{self.version}"


class PackageSettings(BaseModel):
    """Additional packages installed after the built-in lists."""

    model_config = ConfigDict(extra="forbid")

    extra: list[str] = Field(default_factory=list)


class Settings(BaseModel):
    """Complete torbootstrap configuration.

    Attributes:
        command_timeout: Upper bound in seconds for any single external
            command. None uses each operator's own default.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    repository: RepositorySettings = Field(default_factory=RepositorySettings)
    paths: PathSettings = Field(default_factory=PathSettings)
    build: BuildSettings = Field(default_factory=BuildSettings)
    packages: PackageSettings = Field(default_factory=PackageSettings)
    command_timeout: Annotated[float | None, Field(gt=0)] = None


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from a TOML file.

    A missing file at the default location yields the built-in defaults;
    a missing file that was asked for explicitly is an error.

    Args:
        path: Explicit configuration file. If None, uses the default location.

    Returns:
        Validated Settings object.

    Raises:
        SettingsError: If the file is missing (explicit path only), unreadable,
            not valid TOML, or does not match the schema.
    """
    explicit = path is not None
    config_path = path or get_config_path()

    if not config_path.exists():
        if explicit or config_path != DEFAULT_CONFIG_PATH:
            raise SettingsError(f"Configuration file not found: {config_path}")
        logger.debug("No configuration file at %s, using defaults", config_path)
        return Settings()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SettingsError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read {config_path}: {e}") from e

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise SettingsError(f"Invalid configuration in {config_path}: {e}") from e

    logger.debug("Loaded settings from %s", config_path)
    return settings


def dump_settings(settings: Settings) -> str:
    """Serialize settings to TOML text.

    Unset optional values are omitted, as TOML has no null.

    Args:
        settings: Settings to serialize.

    Returns:
        TOML document.
    """
    data: dict[str, Any] = settings.model_dump(mode="json", exclude_none=True)
    return tomli_w.dumps(data)

