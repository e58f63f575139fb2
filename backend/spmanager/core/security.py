# spmanager/core/security.py
"""
Security module for authentication.
Handles password hashing and signing/validation of session tokens (JWT).
"""
import datetime as dt
import logging
from dataclasses import dataclass
from functools import lru_cache

import jwt  # PyJWT
from passlib.context import CryptContext

from spmanager.config import settings

logger = logging.getLogger(__name__)

# Password hashing context
# Argon2 is a modern, salted and deliberately slow password hashing algorithm
pwd_context = CryptContext(
    schemes=["argon2"],  # Use Argon2 for password hashing
    deprecated="auto",   # Automatically handle deprecated schemes
)

JWT_ALG = "HS256"  # JWT signing algorithm (HMAC SHA-256)


def hash_password(plain: str) -> str:
    """
    Hash a plain text password using Argon2.

    Args:
        plain: Plain text password to hash

    Returns:
        Hashed password string (safe to store in database)

    Note: CPU heavy. Async callers run it in a thread pool executor.
    """
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """
    Verify a plain text password against a hashed password.

    Args:
        plain: Plain text password to verify
        hashed: Hashed password from database

    Returns:
        True if password matches, False otherwise (including unreadable hashes)
    """
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        logger.warning("[security] stored password hash could not be parsed")
        return False


@lru_cache(maxsize=1)
def dummy_password_hash() -> str:
    """Hash used to spend the same verification time when a username is unknown."""
    return hash_password("spmanager-dummy-password")


@dataclass(frozen=True)
class TokenIdentity:
    """Identity asserted by a valid session token."""
    id: int
    username: str


class CredentialStore:
    """
    Issues and validates signed session tokens.

    The signing secret is injected at construction and never read from the
    environment here, so tests can build stores with their own secrets.
    """

    def __init__(self, secret: str, expire_minutes: int = 60 * 24 * 7):
        if not secret:
            raise ValueError("token signing secret must not be empty")
        self._secret = secret
        self.expire_minutes = expire_minutes

    def issue_token(self, identity: TokenIdentity) -> str:
        """
        Create a JWT access token for the given identity.

        Token payload includes:
            - sub: Subject (user ID, as string)
            - username: Login name of the user
            - iat: Issued at timestamp
            - exp: Expiration timestamp
        """
        now = dt.datetime.now(dt.timezone.utc)
        payload = {
            "sub": str(identity.id),
            "username": identity.username,
            "iat": now,
            "exp": now + dt.timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(payload, self._secret, algorithm=JWT_ALG)

    def validate_token(self, token: str) -> TokenIdentity | None:
        """
        Verify signature, expiry and claims of a token.

        Returns:
            TokenIdentity on success, None for any invalid, tampered or expired token
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALG],
                options={"require": ["sub", "exp", "iat"]},
            )
            return TokenIdentity(id=int(payload["sub"]), username=str(payload["username"]))
        except jwt.ExpiredSignatureError:
            logger.info("[security] rejected expired token")
            return None
        except (jwt.InvalidTokenError, KeyError, ValueError, TypeError):
            logger.info("[security] rejected invalid token")
            return None


@lru_cache(maxsize=1)
def get_credential_store() -> CredentialStore:
    """FastAPI dependency: process-wide credential store built from settings."""
    return CredentialStore(settings.jwt_secret, settings.access_token_expire_minutes)
