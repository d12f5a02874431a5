"""Package repository source model."""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

Protocol = Literal["https", "http"]


@dataclass(frozen=True, slots=True)
class RepositorySource:
    """A single apt source line for a third-party repository.

    Attributes:
        protocol: Transport used to fetch from the repository.
        host: Repository host name.
        path: Repository path below the host.
        suite: Distribution codename, e.g. ``bookworm``.
        component: Archive component.
        keyring: Keyring the repository is signed with, or None for the
            globally trusted keys.
    """

    protocol: Protocol
    host: str
    path: str
    suite: str
    component: str = "main"
    keyring: Path | None = None

    def __post_init__(self) -> None:
        """Validate the source after initialization."""
        if not self.suite:
            msg = "Distribution codename cannot be empty"
            raise ValueError(msg)

    @property
    def url(self) -> str:
        """Base URL of the repository."""
        return f"{self.protocol}://{self.host}/{self.path}"

    @property
    def line(self) -> str:
        """One-line-style apt source entry."""
        options = f" [signed-by={self.keyring}]" if self.keyring else ""
        return f"deb{options} {self.url} {self.suite} {self.component}"


def repository_pattern(host: str, path: str) -> re.Pattern[str]:
    """Pattern matching a reference to the repository over either protocol."""
    return re.compile(rf"https?://{re.escape(host)}/{re.escape(path)}(?:/|\s|$)")


def references_repository(text: str, pattern: re.Pattern[str]) -> bool:
    """Check whether any non-comment line of a source list matches.

    Args:
        text: Content of a one-line-style or deb822 source file.
        pattern: Pattern from :func:`repository_pattern`.

    Returns:
        True if an active line references the repository.
    """
    for line in text.splitlines():
        stripped = line.strip()
        if stripped.startswith("#"):
            continue
        if pattern.search(stripped):
            return True
    return False
