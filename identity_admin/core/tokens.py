"""Admin bearer token issuance and validation.

Tokens are HS256-signed JWTs carrying ``sub``, ``iat`` and ``exp``. There is
no server-side session record and no revocation list: a token is valid until
its ``exp`` claim passes.
"""
from __future__ import annotations
import hashlib
import hmac
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError as JWTInvalidTokenError

logger = logging.getLogger(__name__)

ADMIN_SUBJECT = "admin"
TOKEN_ALGORITHM = "HS256"
DEFAULT_TOKEN_TTL = timedelta(hours=24)


class AuthenticationError(Exception):
    """Base class for failures that map to 401."""
    pass


class InvalidCredentialsError(AuthenticationError):
    """Login password does not match the configured admin password."""
    pass


class TokenValidationError(AuthenticationError):
    """Bearer token rejected."""
    pass


class InvalidTokenError(TokenValidationError):
    """Bad signature, malformed token or missing claims."""
    pass


class TokenExpiredError(TokenValidationError):
    """The ``exp`` claim is in the past."""
    pass


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expires_at: datetime

    @property
    def expires_at_unix(self) -> int:
        return int(self.expires_at.timestamp())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def token_fingerprint(token: str) -> str:
    """Short SHA-256 prefix safe to put in logs."""
    return hashlib.sha256(token.encode()).hexdigest()[:12]


class TokenService:
    """Issue and validate tokens for the single admin principal.

    Args:
        admin_password: Password the login endpoint accepts
        secret: HMAC signing key
        ttl: Token lifetime (24 hours by default)
        clock: Callable returning the current aware datetime
    """

    def __init__(self, admin_password: str, secret: str, ttl: timedelta = DEFAULT_TOKEN_TTL,
                 clock: Optional[Callable[[], datetime]] = None):
        self._admin_password = admin_password
        self._secret = secret
        self.ttl = ttl
        self._clock = clock or _utcnow

    @classmethod
    def from_config(cls, cfg) -> "TokenService":
        return cls(cfg.admin_password, cfg.jwt_secret, ttl=timedelta(hours=cfg.token_ttl_hours))

    def issue(self, password: str) -> IssuedToken:
        """Exchange the admin password for a signed token.

        Raises:
            InvalidCredentialsError: If the password does not match
        """
        if not isinstance(password, str) or not hmac.compare_digest(
            password.encode(), self._admin_password.encode()
        ):
            logger.warning("Admin login rejected: invalid password")
            raise InvalidCredentialsError("Invalid password")

        now = self._clock()
        expires_at = now + self.ttl
        payload = {
            "sub": ADMIN_SUBJECT,
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(payload, self._secret, algorithm=TOKEN_ALGORITHM)
        logger.info("Admin token issued (token_hash=%s, expires_at=%s)", token_fingerprint(token), expires_at.isoformat())
        return IssuedToken(token=token, expires_at=expires_at)

    def validate(self, token: str) -> str:
        """Verify signature and expiry; return the subject claim.

        Raises:
            TokenExpiredError: If the token is past its ``exp``
            InvalidTokenError: For any other verification failure
        """
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[TOKEN_ALGORITHM],
                options={
                    "verify_signature": True,
                    "verify_exp": True,
                    "require": ["exp", "iat", "sub"],
                },
            )
        except ExpiredSignatureError:
            raise TokenExpiredError("Token expired")
        except JWTInvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}")

        subject = claims.get("sub")
        if subject != ADMIN_SUBJECT:
            raise InvalidTokenError("Invalid token: unknown subject")
        return subject
