# spmanager/api/v1/deps.py
from fastapi import Depends, Header, Request

from spmanager.config import settings
from spmanager.core.errors import ForbiddenError, UnauthorizedError
from spmanager.core.security import CredentialStore, TokenIdentity, get_credential_store


def extract_token(request: Request, authorization: str | None) -> str | None:
    token = None
    # 1) Prioritize Authorization: Bearer xxx
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
    # 2) Secondly HttpOnly Cookie: accessToken
    if not token:
        token = request.cookies.get(settings.cookie_name)
    return token or None


async def get_current_identity(
    request: Request,
    authorization: str | None = Header(default=None),
    credentials: CredentialStore = Depends(get_credential_store),
) -> TokenIdentity:
    """
    FastAPI dependency guarding protected routes.

    Extracts the session token from either:
    1. Authorization header (Bearer token) - preferred method
    2. HttpOnly cookie (accessToken) - browser sessions

    Returns:
        TokenIdentity: id and username asserted by the token

    Raises:
        UnauthorizedError (401): No token provided (AUTH_REQUIRED)
        ForbiddenError (403): Token invalid, tampered or expired (AUTH_INVALID_TOKEN)

    Usage:
        @router.get("/protected")
        async def protected_route(identity: TokenIdentity = Depends(get_current_identity)):
            return {"user_id": identity.id}
    """
    token = extract_token(request, authorization)
    if not token:
        raise UnauthorizedError("AUTH_REQUIRED", "Authentication required")

    identity = credentials.validate_token(token)
    if identity is None:
        raise ForbiddenError("AUTH_INVALID_TOKEN", "Session is invalid or has expired")
    return identity
