"""Idempotent file apply primitive.

Every file torbootstrap manages goes through :func:`converge`: the desired
content and permission bits are compared with what is on disk, and the
file is only touched on a mismatch. Writes go to a temporary file in the
destination directory which is renamed over the destination, so a file is
either fully replaced or left as it was. Applying the same arguments twice
leaves the same state as applying them once.
"""

import logging
import os
import shutil
import stat
from collections.abc import Callable
from pathlib import Path
from tempfile import NamedTemporaryFile

from torbootstrap.core.errors import ApplyError
from torbootstrap.models.config_file import MODE_PUBLIC, ConfigFile
from torbootstrap.models.result import ApplyResult

logger = logging.getLogger(__name__)

# Called with the candidate file before it replaces the destination.
# Raises to reject the candidate.
Validator = Callable[[Path], object]

BACKUP_SUFFIX = ".bak"


def read_text(path: Path) -> str | None:
    """Read a managed file.

    Args:
        path: File to read.

    Returns:
        File content, or None if the file does not exist.

    Raises:
        ApplyError: If the file exists but cannot be read.
    """
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as e:
        raise ApplyError(f"Failed to read {path}: {e}") from e


def _current_state(path: Path) -> tuple[bytes | None, int | None]:
    """Return the current content and permission bits of a file."""
    try:
        mode = stat.S_IMODE(path.stat().st_mode)
        return path.read_bytes(), mode
    except FileNotFoundError:
        return None, None
    except OSError as e:
        raise ApplyError(f"Failed to inspect {path}: {e}") from e


def _backup(path: Path) -> Path:
    """Copy a file next to itself with the backup suffix."""
    backup_path = path.with_name(path.name + BACKUP_SUFFIX)
    try:
        shutil.copy2(path, backup_path)
    except OSError as e:
        raise ApplyError(f"Failed to back up {path}: {e}") from e
    logger.info("Backed up %s to %s", path, backup_path)
    return backup_path


def _atomic_write(
    destination: Path,
    content: bytes,
    mode: int,
    validator: Validator | None,
) -> None:
    """Write content to a temporary file, validate it, and rename it into place."""
    tmp_path: Path | None = None
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=destination.parent,
            prefix=f".{destination.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_path = Path(f.name)
            os.fchmod(f.fileno(), mode)
            f.write(content)
            f.flush()
            os.fsync(f.fileno())

        if validator is not None:
            validator(tmp_path)

        os.replace(tmp_path, destination)
        tmp_path = None
    except OSError as e:
        raise ApplyError(f"Failed to write {destination}: {e}") from e
    finally:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()


def converge(
    destination: Path,
    content: bytes,
    *,
    mode: int | None = None,
    backup: bool = False,
    dry_run: bool = False,
    validator: Validator | None = None,
) -> ApplyResult:
    """Make a file hold exactly the given content and permission bits.

    Args:
        destination: File to converge.
        content: Full desired content.
        mode: Desired permission bits. None keeps the current bits of an
            existing file and uses 0644 for a new one.
        backup: Keep a ``.bak`` copy of the previous content when it changes.
        dry_run: Report what would change without writing.
        validator: Check run against the candidate file before it replaces
            the destination. Skipped when the content is unchanged.

    Returns:
        ApplyResult describing whether anything changed.

    Raises:
        ApplyError: If the destination cannot be inspected or written.
        BootstrapError: Whatever the validator raises to reject the candidate.
    """
    current_content, current_mode = _current_state(destination)
    if mode is not None:
        target_mode = mode
    elif current_mode is not None:
        target_mode = current_mode
    else:
        target_mode = MODE_PUBLIC

    if current_content == content and current_mode == target_mode:
        logger.debug("%s already up to date", destination)
        return ApplyResult(path=str(destination), changed=False)

    if dry_run:
        logger.info("Dry-run: would update %s (mode %04o)", destination, target_mode)
        return ApplyResult(path=str(destination), changed=True, dry_run=True)

    if current_content == content:
        logger.info("Setting mode %04o on %s", target_mode, destination)
        try:
            os.chmod(destination, target_mode)
        except OSError as e:
            raise ApplyError(f"Failed to set permissions on {destination}: {e}") from e
        return ApplyResult(path=str(destination), changed=True)

    backup_path: Path | None = None
    if backup and current_content is not None:
        backup_path = _backup(destination)

    logger.info("Writing %s (mode %04o)", destination, target_mode)
    _atomic_write(destination, content, target_mode, validator)
    return ApplyResult(
        path=str(destination),
        changed=True,
        backup_path=str(backup_path) if backup_path else None,
    )


def apply_file(
    config: ConfigFile,
    *,
    dry_run: bool = False,
    validator: Validator | None = None,
) -> ApplyResult:
    """Copy a template over its destination and set its permission bits.

    Args:
        config: Template, destination and mode to apply.
        dry_run: Report what would change without writing.
        validator: Check run against the candidate before it is installed.

    Returns:
        ApplyResult for the destination.

    Raises:
        ApplyError: If the template cannot be read or the destination written.
    """
    try:
        content = config.source.read_bytes()
    except OSError as e:
        raise ApplyError(f"Failed to read template {config.source}: {e}") from e

    return converge(
        config.destination,
        content,
        mode=config.mode,
        dry_run=dry_run,
        validator=validator,
    )


def apply_text(
    destination: Path,
    text: str,
    *,
    mode: int | None = None,
    backup: bool = False,
    dry_run: bool = False,
    validator: Validator | None = None,
) -> ApplyResult:
    """Converge a file to generated text. See :func:`converge`."""
    return converge(
        destination,
        text.encode("utf-8"),
        mode=mode,
        backup=backup,
        dry_run=dry_run,
        validator=validator,
    )


def append_line(destination: Path, line: str, *, dry_run: bool = False) -> ApplyResult:
    """Append a line to a file, keeping its current permission bits.

    The caller decides whether the line is already present; this always
    produces the current content followed by the line.

    Args:
        destination: File to extend. Created if missing.
        line: Line to append, without a trailing newline.
        dry_run: Report what would change without writing.

    Returns:
        ApplyResult for the destination.
    """
    current = read_text(destination) or ""
    if current and not current.endswith("\n"):
        current += "\n"
    return apply_text(destination, f"{current}{line}\n", dry_run=dry_run)
