# spmanager/services/auth_service.py
"""
Registration and login workflows.

Registration runs as a single transaction across users, device_registrations
and progress: either all three rows are committed or none are. Login never
reveals whether it was the username or the password that did not match.
"""
import asyncio
import logging
from dataclasses import dataclass

from tortoise.transactions import in_transaction

from spmanager.core.db import storage_call
from spmanager.core.errors import ConflictError, ForbiddenError, UnauthorizedError, ValidationError
from spmanager.core.security import (
    CredentialStore,
    TokenIdentity,
    dummy_password_hash,
    hash_password,
    verify_password,
)
from spmanager.repositories.device_repository import (
    DEVICE_ALREADY_REGISTERED,
    DEVICE_ALREADY_REGISTERED_MESSAGE,
    DeviceRepository,
)
from spmanager.repositories.progress_repository import ProgressRepository
from spmanager.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

USERNAME_MAX_LENGTH = 50
DEVICE_ID_MAX_LENGTH = 255


def _invalid_credentials() -> UnauthorizedError:
    return UnauthorizedError("AUTH_INVALID_CREDENTIALS", "Incorrect username or password")


@dataclass
class LoginResult:
    token: str
    identity: TokenIdentity


def _validate_registration(username: str | None, password: str | None, device_id: str | None) -> None:
    if not username or not username.strip() or not password or not device_id or not device_id.strip():
        raise ValidationError("BAD_REQUEST", "username, password and deviceId are required")
    if len(username) > USERNAME_MAX_LENGTH:
        raise ValidationError("BAD_REQUEST", f"username must be at most {USERNAME_MAX_LENGTH} characters")
    if len(device_id) > DEVICE_ID_MAX_LENGTH:
        raise ValidationError("BAD_REQUEST", f"deviceId must be at most {DEVICE_ID_MAX_LENGTH} characters")


async def _run_in_executor(func, *args):
    # Argon2 is CPU bound; keep it off the event loop
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func, *args)


async def _create_account(username: str, password_hash: str, device_id: str) -> TokenIdentity:
    async with in_transaction() as conn:
        devices = DeviceRepository(conn)
        if await devices.is_registered(device_id):
            raise ForbiddenError(DEVICE_ALREADY_REGISTERED, DEVICE_ALREADY_REGISTERED_MESSAGE)
        user = await UserRepository(conn).create(username, password_hash)
        await devices.register(device_id, user.id)
        await ProgressRepository(conn).init_default(user.id)
    return TokenIdentity(id=user.id, username=user.username)


async def register_user(username: str | None, password: str | None, device_id: str | None) -> TokenIdentity:
    """
    Create an account bound to the registering device.

    Steps (one transaction):
        1. refuse a device that already has a registration
        2. create the user (unique username)
        3. record the device registration
        4. store the default progress document

    Raises:
        ValidationError: Missing field
        ForbiddenError: Device already used (DEVICE_ALREADY_REGISTERED)
        ConflictError: Username taken (USERNAME_TAKEN)
        UnavailableError: Storage failure or timeout
    """
    _validate_registration(username, password, device_id)
    password_hash = await _run_in_executor(hash_password, password)
    try:
        identity = await storage_call(_create_account(username, password_hash, device_id), name="register")
    except (ConflictError, ForbiddenError) as e:
        logger.info("[auth] registration refused for username=%s: %s", username, e.code)
        raise
    logger.info("[auth] registered user id=%s username=%s", identity.id, identity.username)
    return identity


async def login_user(username: str | None, password: str | None, credentials: CredentialStore) -> LoginResult:
    """
    Check credentials and issue a session token.

    Unknown usernames still pay for one hash verification so response timing
    does not reveal which accounts exist.

    Raises:
        UnauthorizedError: AUTH_INVALID_CREDENTIALS for any mismatch
        UnavailableError: Storage failure or timeout
    """
    if not username or not password:
        raise _invalid_credentials()
    user = await storage_call(UserRepository().find_by_username(username), name="login")
    stored_hash = user.password_hash if user else dummy_password_hash()
    matches = await _run_in_executor(verify_password, password, stored_hash)
    if not user or not matches:
        logger.info("[auth] failed login for username=%s", username)
        raise _invalid_credentials()
    identity = TokenIdentity(id=user.id, username=user.username)
    return LoginResult(token=credentials.issue_token(identity), identity=identity)
