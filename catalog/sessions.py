"""
Session issuance and bearer token resolution.
"""

import secrets
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

import structlog

from catalog.models import ErrorKind, Result, Session
from catalog.users import UserDirectory

logger = structlog.get_logger(__name__)

DEFAULT_SESSION_TTL = timedelta(hours=1)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _mask(token: str) -> str:
    return token[:10] + "..."


class SessionAuthority:
    """
    Issues tokens on login and resolves them back to usernames.

    Passwords are checked only at login; every later call is identified
    by the username ``resolve`` returns.
    """

    def __init__(
        self,
        users: UserDirectory,
        ttl: timedelta = DEFAULT_SESSION_TTL,
        clock: Callable[[], datetime] = utc_now
    ):
        """
        Initialize the session authority.

        Args:
            users: Directory used to verify credentials
            ttl: Validity window of an issued token
            clock: Source of the current time
        """
        self.users = users
        self.ttl = ttl
        self.clock = clock
        self._lock = threading.RLock()
        self._sessions: Dict[str, Session] = {}
        self.logger = logger.bind(component="session_authority")

    @staticmethod
    def generate_token() -> str:
        """Generate a new opaque bearer token."""
        return f"bk_{secrets.token_urlsafe(32)}"

    def authenticate(self, username: Optional[str], password: Optional[str]) -> bool:
        """True iff a user exists with exactly this username and password."""
        if not username or not password:
            return False
        user = self.users.get_user(username)
        return user is not None and user.password == password

    def login(self, username: Optional[str], password: Optional[str]) -> Result[Session]:
        """
        Verify credentials and open a session.

        Returns:
            Result carrying the new Session, or an invalid_input or
            unauthorized failure
        """
        if not username or not password:
            return Result.failure(
                ErrorKind.INVALID_INPUT,
                "Username and password are required for login"
            )

        if not self.authenticate(username, password):
            self.logger.warning("Login rejected", username=username)
            return Result.failure(ErrorKind.UNAUTHORIZED, "Invalid username or password")

        issued_at = self.clock()
        session = Session(
            username=username,
            token=self.generate_token(),
            issued_at=issued_at,
            expires_at=issued_at + self.ttl
        )
        with self._lock:
            self._sessions[session.token] = session

        self.logger.info(
            "Session issued",
            username=username,
            token=_mask(session.token),
            expires_at=session.expires_at.isoformat()
        )
        return Result.success(session)

    def resolve(self, token: Optional[str]) -> Result[str]:
        """
        Resolve a presented bearer token to its username.

        Fails unauthenticated when no token is presented, the token was
        never issued, or it has expired. Expired sessions are discarded.
        """
        if not token:
            return Result.failure(ErrorKind.UNAUTHENTICATED, "Please login first")

        with self._lock:
            session = self._sessions.get(token)
            if session is None:
                return Result.failure(ErrorKind.UNAUTHENTICATED, "Invalid or unknown session token")

            if session.is_expired(self.clock()):
                del self._sessions[token]
                self.logger.info("Session expired", username=session.username, token=_mask(token))
                return Result.failure(ErrorKind.UNAUTHENTICATED, "Session has expired, please login again")

        return Result.success(session.username)

    def purge_expired(self) -> int:
        """Drop every expired session and return how many were removed."""
        now = self.clock()
        with self._lock:
            expired = [token for token, session in self._sessions.items() if session.is_expired(now)]
            for token in expired:
                del self._sessions[token]

        if expired:
            self.logger.info("Expired sessions purged", count=len(expired))
        return len(expired)

    def active_sessions(self) -> int:
        with self._lock:
            return len(self._sessions)
