"""Shared-access gate: password in, signed capability token out."""

import hashlib
import hmac
import secrets
import time
from datetime import timedelta

from dirot.errors import AuthError
from dirot.session import AUTH_TOKEN, LocalSessionState


class AccessAuthority:
    """
    Issues and verifies capability tokens for the two users sharing the tracker.

    This is lightweight shared-access control, not adversarial security: anyone
    holding the password can obtain a token.
    """

    def __init__(self, password: str, secret: str | None = None, ttl: timedelta | None = None):
        """
        Initialize the authority.

        Args:
            password: Shared password
            secret: Signing secret; derived from the password when not given
            ttl: Token lifetime
        """
        self._password = password
        self._secret = (secret or self._derive_secret(password)).encode()
        self.ttl = ttl or timedelta(hours=12)

    @staticmethod
    def _derive_secret(password: str) -> str:
        return hashlib.sha256(f"dirot-token:{password}".encode()).hexdigest()

    def _sign(self, payload: str) -> str:
        return hmac.new(self._secret, payload.encode(), hashlib.sha256).hexdigest()

    def issue(self, password: str) -> str:
        """
        Exchange the shared password for a token.

        Raises:
            AuthError: If the password is wrong
        """
        if not hmac.compare_digest(password.encode(), self._password.encode()):
            raise AuthError("Wrong password")

        expires = int(time.time() + self.ttl.total_seconds())
        payload = f"{expires}.{secrets.token_hex(8)}"
        return f"{payload}.{self._sign(payload)}"

    def verify(self, token: str | None) -> None:
        """
        Check a token presented with a mutating call.

        Raises:
            AuthError: If the token is missing, forged or expired
        """
        if not token:
            raise AuthError("Editing requires the shared password")

        payload, _, signature = token.rpartition(".")
        expected = self._sign(payload).encode()
        if not payload or not hmac.compare_digest(signature.encode(), expected):
            raise AuthError("Invalid access token")

        expires, _, _ = payload.partition(".")
        if not expires.isdigit() or int(expires) < time.time():
            raise AuthError("Access token expired")

    def is_valid(self, token: str | None) -> bool:
        """Non-raising variant of `verify`."""
        try:
            self.verify(token)
        except AuthError:
            return False
        return True


class AccessSession:
    """Holds the capability token for this session in the local session state."""

    def __init__(self, state: LocalSessionState, authority: AccessAuthority | None = None):
        self.state = state
        self.authority = authority

    @property
    def token(self) -> str | None:
        """Token to attach to mutating calls."""
        token = self.state.get(AUTH_TOKEN)
        return str(token) if token else None

    @property
    def is_authenticated(self) -> bool:
        """Whether mutating calls will be accepted."""
        if self.authority is None:
            return True
        return self.authority.is_valid(self.token)

    def login(self, password: str) -> bool:
        """Present the password; keep the token on success."""
        if self.authority is None:
            return True
        try:
            token = self.authority.issue(password)
        except AuthError:
            return False
        self.state.set(AUTH_TOKEN, token)
        return True

    def logout(self) -> None:
        """Drop the held token."""
        self.state.reset(AUTH_TOKEN)


__all__ = ["AccessAuthority", "AccessSession"]
