# spmanager/api/v1/routers/auth.py
from fastapi import APIRouter, Depends, Response, status

from spmanager.api.v1.deps import get_current_identity
from spmanager.config import settings
from spmanager.core.db import storage_call
from spmanager.core.errors import UnauthorizedError
from spmanager.core.rate_limit import login_rate_limit, register_rate_limit
from spmanager.core.security import CredentialStore, TokenIdentity, get_credential_store
from spmanager.repositories.user_repository import UserRepository
from spmanager.schemas.auth import LoginRequest, LoginResponse, RegisterRequest, UserOut
from spmanager.services.auth_service import login_user, register_user

router = APIRouter(tags=["auth"])


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=UserOut,
    dependencies=[Depends(register_rate_limit)],
)
async def register(body: RegisterRequest):
    """
    Register a new account bound to the calling device.

    Creates the user, the device registration and the default progress
    document in one transaction. Rate limited per client IP.

    Args:
        body: Request body containing:
            - username: str (must be unique)
            - password: str (will be hashed before storage)
            - deviceId: str (one registration per device, ever)

    Returns:
        UserOut: id and username of the new account (201)

    Error codes:
        - BAD_REQUEST (400): Missing username, password or deviceId
        - DEVICE_ALREADY_REGISTERED (403): An account was already created from this device
        - USERNAME_TAKEN (409): Username already exists
        - RATE_LIMITED (429): Too many registrations from this IP
    """
    identity = await register_user(body.username, body.password, body.deviceId)
    return UserOut(id=identity.id, username=identity.username)


@router.post("/login", response_model=LoginResponse, dependencies=[Depends(login_rate_limit)])
async def login(
    payload: LoginRequest,
    response: Response,
    credentials: CredentialStore = Depends(get_credential_store),
):
    """
    Authenticate user and create access token.

    The token is returned in the response body and also set as an HttpOnly
    cookie for browser-based clients.

    Raises:
        UnauthorizedError (401): AUTH_INVALID_CREDENTIALS, identical for unknown
            usernames and wrong passwords
    """
    result = await login_user(payload.username, payload.password, credentials)
    response.set_cookie(
        settings.cookie_name,
        result.token,
        max_age=credentials.expire_minutes * 60,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    return LoginResponse(
        accessToken=result.token,
        user=UserOut(id=result.identity.id, username=result.identity.username),
    )


@router.post("/logout")
async def logout(response: Response, identity: TokenIdentity = Depends(get_current_identity)):
    """
    Log out by clearing the access token cookie.

    Note:
        Tokens are stateless; the token itself stays valid until it expires.
    """
    response.delete_cookie(settings.cookie_name, httponly=True, secure=settings.cookie_secure, samesite="lax")
    return {"success": True}


@router.get("/auth/me", response_model=UserOut)
async def me(identity: TokenIdentity = Depends(get_current_identity)):
    """
    Get current authenticated user information.

    Raises:
        UnauthorizedError (401): AUTH_USER_NOT_FOUND if the account no longer exists
    """
    user = await storage_call(UserRepository().get_by_id(identity.id), name="me")
    if not user:
        raise UnauthorizedError("AUTH_USER_NOT_FOUND", "User not found")
    return UserOut(id=user.id, username=user.username)
