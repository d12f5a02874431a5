"""SSH hardening stage.

Restricts SSH logins to the user who started the run and, when that user
has already logged in with a public key, turns off password logins.
"""

import logging
import re
from pathlib import Path

from torbootstrap.core.apply import apply_text, read_text
from torbootstrap.core.context import BootstrapContext
from torbootstrap.core.directives import insert_directive, remove_directive, set_directive
from torbootstrap.core.errors import ApplyError
from torbootstrap.core.pipeline import Stage
from torbootstrap.models.result import StageResult
from torbootstrap.models.ssh import SSHPolicy, SSHState
from torbootstrap.utils.formatting import print_warning

logger = logging.getLogger(__name__)

SSH_SERVICE = "ssh"


def read_log(path: Path) -> str | None:
    """Read a log file written by many programs, replacing undecodable bytes.

    Returns:
        Log text, or None if the file is missing or unreadable.
    """
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        return None
    except OSError as e:
        logger.warning("Cannot read %s: %s", path, e)
        return None


def key_login_seen(log_text: str, user: str) -> bool:
    """Check an sshd log for a successful public-key login of a user."""
    pattern = re.compile(rf"Accepted publickey for {re.escape(user)} from ")
    return pattern.search(log_text) is not None


def render_sshd_config(current: str, policy: SSHPolicy) -> str:
    """Apply an SSH policy to sshd_config content.

    Existing AllowUsers lines are replaced by a single one for the policy
    user; the policy's other directives are set in place.

    Args:
        current: Current sshd_config content.
        policy: Policy to apply.

    Returns:
        New sshd_config content.
    """
    lines = remove_directive(current.splitlines(), "AllowUsers")
    for key, value in policy.directives().items():
        lines = set_directive(lines, key, value)
    lines = insert_directive(lines, "AllowUsers", policy.user)
    return "\n".join(lines) + "\n"


class SSHStage(Stage):
    """Hardens the SSH daemon for the invoking user."""

    name = "ssh"
    title = "Configuring sshd"

    def detect_state(self, ctx: BootstrapContext, user: str) -> SSHState:
        """Resolve whether the user has logged in with a key before.

        Reads the auth log, or the ssh unit's journal on hosts that do not
        keep one.
        """
        log_text = read_log(ctx.settings.paths.auth_log)
        if log_text is None:
            logger.debug("%s not readable, reading the ssh journal", ctx.settings.paths.auth_log)
            log_text = ctx.system().ssh_journal()

        if key_login_seen(log_text, user):
            return SSHState.KEY_AUTH_CONFIRMED
        return SSHState.PASSWORD_ONLY

    def run(self, ctx: BootstrapContext) -> StageResult:
        user = ctx.login
        if not user:
            print_warning("Could not configure sshd automatically. You will need to do this manually.")
            return self.skipped("Invoking user could not be determined")

        sshd_config = ctx.settings.paths.sshd_config
        current = read_text(sshd_config)
        if current is None:
            raise ApplyError(f"{sshd_config} not found")

        policy = SSHPolicy.for_state(user, self.detect_state(ctx, user))
        details = [f"SSH login restricted to user: {user}"]
        if policy.password_auth_disabled:
            details.append("SSH password authentication disabled")
        else:
            print_warning(
                "You do not appear to be using SSH key authentication. "
                "You should set this up manually now."
            )
        if policy.root_login_permitted:
            details.append("Remote root login kept enabled for key logins")

        applied = apply_text(
            sshd_config,
            render_sshd_config(current, policy),
            backup=True,
            dry_run=ctx.dry_run,
            validator=ctx.system().check_sshd_config,
        )
        ctx.services().reload(SSH_SERVICE)

        return self.from_applies([applied], *details)
