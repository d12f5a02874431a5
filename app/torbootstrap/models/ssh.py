"""SSH login policy model.

The hardener moves through three states: it starts Unknown, looks for a
public-key login of the invoking user, and lands in KeyAuthConfirmed or
PasswordOnly. The policy derived from the final state decides which
sshd directives are written.
"""

from dataclasses import dataclass
from enum import Enum

ROOT_USER = "root"


class SSHState(str, Enum):
    """Progress of the SSH hardener.

    Attributes:
        UNKNOWN: Authentication method of the invoking user not inspected yet.
        KEY_AUTH_CONFIRMED: The user has logged in with a public key before.
        PASSWORD_ONLY: No public-key login found for the user.
    """

    UNKNOWN = "unknown"
    KEY_AUTH_CONFIRMED = "key_auth_confirmed"
    PASSWORD_ONLY = "password_only"


@dataclass(frozen=True, slots=True)
class SSHPolicy:
    """SSH daemon settings for the invoking user.

    Attributes:
        user: Login name that stays allowed to connect.
        password_auth_disabled: Whether password authentication is turned off.
        root_login_permitted: Whether remote root login is explicitly enabled.
    """

    user: str
    password_auth_disabled: bool
    root_login_permitted: bool

    def __post_init__(self) -> None:
        """Validate the policy after initialization."""
        if not self.user or any(c.isspace() for c in self.user):
            msg = f"Invalid login name: {self.user!r}"
            raise ValueError(msg)

    @classmethod
    def for_state(cls, user: str, state: SSHState) -> "SSHPolicy":
        """Derive the policy for a resolved hardener state.

        Root logging in with a key keeps remote root login enabled, since
        turning off passwords could otherwise lock out the only account.

        Raises:
            ValueError: If the state is still UNKNOWN.
        """
        if state is SSHState.UNKNOWN:
            msg = "Cannot derive an SSH policy before the login method is known"
            raise ValueError(msg)
        key_auth = state is SSHState.KEY_AUTH_CONFIRMED
        return cls(
            user=user,
            password_auth_disabled=key_auth,
            root_login_permitted=key_auth and user == ROOT_USER,
        )

    @property
    def state(self) -> SSHState:
        """Hardener state this policy was derived from."""
        if self.password_auth_disabled:
            return SSHState.KEY_AUTH_CONFIRMED
        return SSHState.PASSWORD_ONLY

    def directives(self) -> dict[str, str]:
        """sshd_config directives to set, besides the allow-list."""
        settings: dict[str, str] = {}
        if self.password_auth_disabled:
            settings["PasswordAuthentication"] = "no"
        if self.root_login_permitted:
            settings["PermitRootLogin"] = "yes"
        return settings
