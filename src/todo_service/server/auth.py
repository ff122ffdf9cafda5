"""Token issuance, credential checks and the bearer-token guard."""

from __future__ import annotations

import hmac
from datetime import datetime, timedelta, timezone
from typing import Callable, Mapping, Optional

import jwt
from fastapi import HTTPException, Request
from loguru import logger

BEARER_PREFIX = "Bearer "


class TokenError(Exception):
    """Base class for token verification failures."""


class MalformedTokenError(TokenError):
    """The token could not be parsed or is missing required claims."""


class InvalidSignatureError(TokenError):
    """The token signature does not match the service key."""


class TokenExpiredError(TokenError):
    """The token's ``exp`` claim is in the past."""


class TokenSigningError(Exception):
    """The token could not be signed."""


class TokenService:
    """Issue and verify HS256 bearer tokens."""

    def __init__(
        self,
        secret_key: str,
        *,
        algorithm: str = "HS256",
        expires_delta: timedelta = timedelta(minutes=5),
        issuer: Optional[str] = None,
    ) -> None:
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = expires_delta
        self.issuer = issuer

    def issue(self, username: str, now: Optional[datetime] = None) -> str:
        """Create a signed token for *username*.

        Args:
            username: Identity written to the ``sub`` claim.
            now: Issue time (defaults to the current UTC time).

        Returns:
            Encoded JWT.

        Raises:
            TokenSigningError: If PyJWT cannot sign the claims.
        """
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "sub": username,
            "iat": issued_at,
            "exp": issued_at + self.expires_delta,
        }
        if self.issuer:
            claims["iss"] = self.issuer
        try:
            return jwt.encode(claims, self._secret_key, algorithm=self.algorithm)
        except (jwt.PyJWTError, NotImplementedError, TypeError, ValueError) as exc:
            raise TokenSigningError(str(exc)) from exc

    def verify(self, token: str) -> str:
        """Verify *token* and return the identity it was issued to.

        Raises:
            TokenExpiredError: ``exp`` has passed.
            InvalidSignatureError: Signature does not match.
            MalformedTokenError: Anything else that makes the token unusable.
        """
        options = {"require": ["exp", "sub"]}
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options=options,
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError(str(exc)) from exc
        except jwt.InvalidSignatureError as exc:
            raise InvalidSignatureError(str(exc)) from exc
        except jwt.InvalidTokenError as exc:
            raise MalformedTokenError(str(exc)) from exc

        username = payload.get("sub")
        if not isinstance(username, str) or not username:
            raise MalformedTokenError("Token subject is missing")
        return username


class CredentialStore:
    """Fixed username to password mapping consulted at login."""

    def __init__(self, users: Mapping[str, str]) -> None:
        self._users = dict(users)

    def authenticate(self, username: str, password: str) -> bool:
        stored = self._users.get(username)
        if stored is None:
            return False
        return hmac.compare_digest(stored.encode("utf-8"), password.encode("utf-8"))


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def create_auth_guard(get_tokens: Callable[[], TokenService]) -> Callable[[Request], str]:
    """Build the dependency that gates protected routes.

    The returned callable reads the ``Authorization`` header, verifies the
    bearer token and stores the identity on ``request.state.username``.
    """

    def require_user(request: Request) -> str:
        header = request.headers.get("Authorization")
        if not header:
            raise _unauthorized("Authorization header is missing")
        if not header.startswith(BEARER_PREFIX) or not header[len(BEARER_PREFIX):].strip():
            raise _unauthorized("Invalid authorization header")

        token = header[len(BEARER_PREFIX):].strip()
        try:
            username = get_tokens().verify(token)
        except TokenError as exc:
            logger.debug("Rejected token on {} {}: {}: {}", request.method, request.url.path, type(exc).__name__, exc)
            raise _unauthorized("Invalid or expired token")

        request.state.username = username
        return username

    return require_user
