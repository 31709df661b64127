"""
Registered user directory.
"""

import threading
from typing import Dict, Optional

import structlog

from catalog.models import ErrorKind, Result, User

logger = structlog.get_logger(__name__)

DEFAULT_MIN_PASSWORD_LENGTH = 6


class UserDirectory:
    """Append-only set of users with unique usernames."""

    def __init__(self, min_password_length: int = DEFAULT_MIN_PASSWORD_LENGTH):
        self.min_password_length = min_password_length
        self._lock = threading.RLock()
        self._users: Dict[str, User] = {}
        self.logger = logger.bind(component="user_directory")

    def count(self) -> int:
        return len(self._users)

    def is_username_available(self, username: Optional[str]) -> bool:
        """True when ``username`` is non-empty and not yet registered."""
        if not username:
            return False
        with self._lock:
            return username not in self._users

    def get_user(self, username: str) -> Optional[User]:
        with self._lock:
            return self._users.get(username)

    def register(self, username: Optional[str], password: Optional[str]) -> Result[str]:
        """
        Register a new user.

        Args:
            username: Requested username
            password: Plaintext password, at least ``min_password_length`` long

        Returns:
            Result carrying the registered username, or an invalid_input or
            conflict failure
        """
        if not username or not password:
            return Result.failure(
                ErrorKind.INVALID_INPUT,
                "Username and password are required for registration"
            )

        if len(password) < self.min_password_length:
            return Result.failure(
                ErrorKind.INVALID_INPUT,
                f"Password must be at least {self.min_password_length} characters long"
            )

        # availability check and append must not interleave
        with self._lock:
            if not self.is_username_available(username):
                self.logger.info("Registration rejected, username taken", username=username)
                return Result.failure(
                    ErrorKind.CONFLICT,
                    "This username is already taken. Please choose another one."
                )
            self._users[username] = User(username=username, password=password)

        self.logger.info("User registered", username=username)
        return Result.success(username)
