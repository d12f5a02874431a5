"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules. Host files are
redirected below ``tmp_path`` and external commands are replaced by mocks,
so no test touches the real system.
"""

from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from torbootstrap.core.context import BootstrapContext
from torbootstrap.core.settings import PathSettings, Settings
from torbootstrap.models.mode import NodeMode
from torbootstrap.utils.shell import CommandResult

ContextFactory = Callable[..., BootstrapContext]


@pytest.fixture
def host_paths(tmp_path: Path) -> PathSettings:
    """Managed host paths rooted in a temporary directory."""
    etc = tmp_path / "etc"
    return PathSettings(
        sources_list=etc / "apt" / "sources.list",
        sources_dir=etc / "apt" / "sources.list.d",
        apt_conf_dir=etc / "apt",
        auto_upgrades=etc / "apt" / "apt.conf.d" / "20auto-upgrades",
        torrc=etc / "tor" / "torrc",
        iptables_dir=etc / "iptables",
        grub_default=etc / "default" / "grub",
        sshd_config=etc / "ssh" / "sshd_config",
        auth_log=tmp_path / "var" / "log" / "auth.log",
        binary_dir=tmp_path / "usr" / "local" / "bin",
    )


@pytest.fixture
def settings(host_paths: PathSettings) -> Settings:
    """Default settings with host paths redirected to tmp_path."""
    return Settings(paths=host_paths)


@pytest.fixture
def make_context(settings: Settings) -> ContextFactory:
    """Factory building a BootstrapContext on the temporary host."""

    def _make(mode: NodeMode = NodeMode.RELAY, **kwargs: Any) -> BootstrapContext:
        kwargs.setdefault("settings", settings)
        return BootstrapContext(mode=mode, **kwargs)

    return _make


@pytest.fixture
def mock_run() -> Iterator[MagicMock]:
    """Replace command execution for every operator with a succeeding mock."""
    with patch("torbootstrap.operators.base.run_command") as mock:
        mock.return_value = CommandResult(stdout="", stderr="", returncode=0)
        yield mock


@pytest.fixture
def no_tor_defaults(tmp_path: Path) -> Iterator[Path]:
    """Pretend the packaged tor service defaults file is not installed."""
    missing = tmp_path / "tor-service-defaults-torrc"
    with patch("torbootstrap.operators.system.TOR_SERVICE_DEFAULTS", missing):
        yield missing
