"""Load service configuration from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

DEFAULT_SECRET_KEY = "todo-service-dev-secret-change-in-production"
DEFAULT_ISSUER = "todo-service"
DEFAULT_TOKEN_EXPIRE_MINUTES = 5
DEFAULT_USERS = {
    "user1": "password1",
    "user2": "password2",
}


def parse_users(raw: str) -> dict[str, str]:
    """Parse a ``name:secret,name:secret`` list into a mapping.

    Args:
        raw: Comma separated ``username:password`` pairs.

    Returns:
        Mapping of username to password.

    Raises:
        ValueError: If an entry has no ``:`` separator or an empty username.
    """
    users: dict[str, str] = {}
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        username, sep, password = entry.partition(":")
        if not sep or not username.strip():
            raise ValueError(f"Invalid user entry {entry!r}, expected 'username:password'")
        users[username.strip()] = password
    return users


@dataclass
class ServiceConfig:
    """Runtime configuration for the todo service."""

    secret_key: str = DEFAULT_SECRET_KEY
    algorithm: str = "HS256"
    token_expire_minutes: int = DEFAULT_TOKEN_EXPIRE_MINUTES
    issuer: str = DEFAULT_ISSUER
    users: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_USERS))
    log_file: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServiceConfig":
        """Build a config from ``TODO_*`` environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``).

        Returns:
            Populated config; unset variables fall back to defaults.
        """
        env = os.environ if environ is None else environ

        raw_expire = env.get("TODO_TOKEN_EXPIRE_MINUTES", str(DEFAULT_TOKEN_EXPIRE_MINUTES))
        try:
            expire_minutes = int(raw_expire)
        except ValueError:
            raise ValueError(f"TODO_TOKEN_EXPIRE_MINUTES must be an integer, got {raw_expire!r}") from None

        raw_users = env.get("TODO_USERS")
        users = parse_users(raw_users) if raw_users else dict(DEFAULT_USERS)

        return cls(
            secret_key=env.get("TODO_SECRET_KEY", DEFAULT_SECRET_KEY),
            token_expire_minutes=expire_minutes,
            issuer=env.get("TODO_TOKEN_ISSUER", DEFAULT_ISSUER),
            users=users,
            log_file=env.get("TODO_LOG_FILE") or None,
            log_level=env.get("TODO_LOG_LEVEL", "INFO"),
        )
