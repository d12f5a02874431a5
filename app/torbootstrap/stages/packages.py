"""Package stages: system upgrade, package install and the bridge transport build."""

import logging

from torbootstrap.core.apply import converge
from torbootstrap.core.context import BootstrapContext
from torbootstrap.core.pipeline import Stage
from torbootstrap.models.package import resolve_packages
from torbootstrap.models.result import StageResult
from torbootstrap.utils.formatting import working

logger = logging.getLogger(__name__)

# Executable permissions for the installed transport
MODE_EXECUTABLE = 0o755

# Lets the transport listen on port 80 without running as root
BIND_CAPABILITY = "cap_net_bind_service"


class UpdateStage(Stage):
    """Refreshes package indices and upgrades everything installed."""

    name = "update"
    title = "Updating software"

    def run(self, ctx: BootstrapContext) -> StageResult:
        apt = ctx.apt()
        with working("Refreshing package indices"):
            apt.update()
        with working("Upgrading installed packages"):
            apt.dist_upgrade()
        if ctx.dry_run:
            return self.result(True, ["Would refresh package indices and upgrade packages"])
        return self.result(True, ["Package indices refreshed", "Installed packages upgraded"])


class InstallStage(Stage):
    """Installs Tor and the support packages for the selected mode."""

    name = "install"
    title = "Installing Tor and related packages"

    def run(self, ctx: BootstrapContext) -> StageResult:
        packages = resolve_packages(ctx.mode, ctx.settings.packages.extra)
        with working(f"Installing {len(packages)} packages"):
            ctx.apt().install(packages)
        verb = "Would install" if ctx.dry_run else "Installed"
        return self.result(True, [f"{verb} {len(packages)} packages: {' '.join(packages)}"])


class TransportStage(Stage):
    """Builds the obfs4 pluggable transport from source for bridges.

    The build runs in a temporary GOPATH that is removed afterwards; the
    resulting binary is installed into the binary directory.
    """

    name = "transport"
    title = "Building the obfs4 pluggable transport"

    def applies_to(self, ctx: BootstrapContext) -> bool:
        return ctx.mode.is_bridge

    def run(self, ctx: BootstrapContext) -> StageResult:
        build = ctx.settings.build
        destination = ctx.settings.paths.binary_dir / build.binary
        go = ctx.go()

        with working(f"Building {build.target}"):
            content = go.build(build.target, build.binary)
        if content is None:
            return self.result(True, [f"Would build {build.target} into {destination}"])

        installed = converge(destination, content, mode=MODE_EXECUTABLE)
        go.grant_capability(destination, BIND_CAPABILITY)
        return self.from_applies([installed], f"Granted {BIND_CAPABILITY} to {destination}")
