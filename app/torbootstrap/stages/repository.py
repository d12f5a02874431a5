"""Tor Project package repository stage.

Adds the repository's signing key and one source line, unless an active
source line for the repository already exists in any source list.
"""

import logging
import re
from pathlib import Path

from torbootstrap.core.apply import append_line
from torbootstrap.core.context import BootstrapContext
from torbootstrap.core.errors import ApplyError
from torbootstrap.core.pipeline import Stage
from torbootstrap.core.settings import PathSettings
from torbootstrap.models.repository import (
    Protocol,
    RepositorySource,
    references_repository,
    repository_pattern,
)
from torbootstrap.models.result import StageResult
from torbootstrap.utils.formatting import print_warning

logger = logging.getLogger(__name__)

# Always needed to add the repository
PREREQUISITES = ("lsb-release", "curl", "gnupg")

# Lets apt fetch over HTTPS on older releases
HTTPS_TRANSPORT = "apt-transport-https"


def _read_quietly(path: Path) -> str:
    """Read a file, treating unreadable files as empty."""
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug("Skipping unreadable %s: %s", path, e)
        return ""


def _files_under(paths: list[Path]) -> list[Path]:
    """Expand directories into the regular files below them."""
    files: list[Path] = []
    for path in paths:
        if path.is_dir():
            files.extend(sorted(p for p in path.rglob("*") if p.is_file()))
        elif path.is_file():
            files.append(path)
    return files


def uses_caching_proxy(apt_conf_dir: Path, port: int) -> bool:
    """Detect an apt caching proxy that cannot fetch HTTPS repositories.

    apt-cacher-ng proxies are configured as ``Acquire::http::Proxy
    "http://host:3142";``, so any apt.conf* file mentioning the port right
    before a closing quote counts.

    Args:
        apt_conf_dir: Directory holding apt.conf and apt.conf.d.
        port: Port the caching proxy listens on.

    Returns:
        True if a proxy configuration was found.
    """
    pattern = re.compile(rf":{port}/?\"")
    for path in _files_under(sorted(apt_conf_dir.glob("apt.conf*"))):
        if pattern.search(_read_quietly(path)):
            logger.debug("Caching proxy configured in %s", path)
            return True
    return False


def repository_configured(paths: PathSettings, host: str, repo_path: str) -> bool:
    """Check whether any source list already references the repository."""
    pattern = repository_pattern(host, repo_path)
    for path in _files_under([paths.sources_list, paths.sources_dir]):
        if references_repository(_read_quietly(path), pattern):
            logger.debug("Repository already referenced in %s", path)
            return True
    return False


class RepositoryStage(Stage):
    """Adds the official Tor Project repository and its signing key."""

    name = "repository"
    title = "Adding the official Tor repository"

    def run(self, ctx: BootstrapContext) -> StageResult:
        repo = ctx.settings.repository
        paths = ctx.settings.paths
        apt = ctx.apt()

        protocol: Protocol = "https"
        if uses_caching_proxy(paths.apt_conf_dir, repo.cache_proxy_port):
            protocol = "http"

        prerequisites = list(PREREQUISITES)
        if protocol == "https":
            prerequisites.append(HTTPS_TRANSPORT)
        apt.install(prerequisites)

        if repository_configured(paths, repo.host, repo.path):
            return self.result(False, [f"{repo.host} is already in the package sources"])

        if protocol != "https":
            print_warning("Not using HTTPS for the Tor repository (apt caching proxy detected)")

        codename = ctx.system().distribution_codename()
        if not codename:
            raise ApplyError("Cannot determine the distribution codename")

        source = RepositorySource(
            protocol=protocol,
            host=repo.host,
            path=repo.path,
            suite=codename,
            component=repo.component,
            keyring=repo.keyring,
        )

        apt.add_signing_key(repo.key_url, repo.keyring)
        added = append_line(paths.sources_list, source.line, dry_run=ctx.dry_run)
        apt.update()

        return self.from_applies(
            [added],
            f"Added: {source.line}",
            f"Signing key stored in {repo.keyring}",
        )
