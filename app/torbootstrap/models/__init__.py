"""Domain models for torbootstrap."""

from torbootstrap.models.config_file import ConfigFile
from torbootstrap.models.mode import NodeMode
from torbootstrap.models.package import PackageSet, resolve_packages
from torbootstrap.models.repository import RepositorySource
from torbootstrap.models.result import ApplyResult, StageResult, StageStatus
from torbootstrap.models.ssh import SSHPolicy, SSHState

__all__ = [
    "ApplyResult",
    "ConfigFile",
    "NodeMode",
    "PackageSet",
    "RepositorySource",
    "SSHPolicy",
    "SSHState",
    "StageResult",
    "StageStatus",
    "resolve_packages",
]
