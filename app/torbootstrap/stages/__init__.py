"""Pipeline stages, in the order a run executes them."""

from torbootstrap.core.pipeline import Stage
from torbootstrap.stages.apparmor import AppArmorStage
from torbootstrap.stages.firewall import FirewallStage
from torbootstrap.stages.packages import InstallStage, TransportStage, UpdateStage
from torbootstrap.stages.repository import RepositoryStage
from torbootstrap.stages.report import ReportStage
from torbootstrap.stages.ssh import SSHStage
from torbootstrap.stages.tor import TorStage
from torbootstrap.stages.upgrades import UpgradesStage


def default_stages() -> list[Stage]:
    """Stages of a full provisioning run, in execution order."""
    return [
        UpdateStage(),
        RepositoryStage(),
        InstallStage(),
        TransportStage(),
        TorStage(),
        FirewallStage(),
        UpgradesStage(),
        AppArmorStage(),
        SSHStage(),
        ReportStage(),
    ]


__all__ = [
    "AppArmorStage",
    "FirewallStage",
    "InstallStage",
    "RepositoryStage",
    "ReportStage",
    "SSHStage",
    "TorStage",
    "TransportStage",
    "UpdateStage",
    "UpgradesStage",
    "default_stages",
]
