"""Preflight checks run before anything touches the host."""

import logging
import os

from torbootstrap.core.errors import PrivilegeError

logger = logging.getLogger(__name__)


def require_root() -> None:
    """Ensure the effective user is root.

    Raises:
        PrivilegeError: If the effective uid is not 0.
    """
    euid = os.geteuid()
    if euid != 0:
        logger.debug("Effective uid is %d", euid)
        raise PrivilegeError("This tool must be run as root")


def invoking_login() -> str | None:
    """Login name of the session that started the run.

    This is the user who logged in, not the effective user: a run under
    sudo or su still reports the original account.

    Returns:
        Login name, or None if the process has no controlling terminal
        or the login record is missing.
    """
    try:
        login = os.getlogin()
    except OSError as e:
        logger.debug("Cannot determine login name: %s", e)
        return None
    return login or None
