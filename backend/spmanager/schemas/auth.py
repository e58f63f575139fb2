# spmanager/schemas/auth.py
"""
Pydantic schemas for authentication endpoints.
Fields are optional on purpose: missing values are reported as 400 by the
registration workflow instead of a framework validation error.
"""
from pydantic import BaseModel


class RegisterRequest(BaseModel):
    """
    Request model for the registration endpoint.
    """
    username: str | None = None  # Desired login name (unique)
    password: str | None = None  # Plain text, hashed server-side
    deviceId: str | None = None  # Client-generated identifier stored on the device


class LoginRequest(BaseModel):
    """
    Request model for user login endpoint.
    Contains credentials for authentication.
    """
    username: str | None = None  # User login name
    password: str | None = None  # User password (plain text)


class UserOut(BaseModel):
    """
    User information returned by auth endpoints (no sensitive fields).
    """
    id: int  # User unique identifier
    username: str  # User login name


class LoginResponse(BaseModel):
    """
    Response model for successful login.
    The token is also set as an HttpOnly cookie.
    """
    accessToken: str  # JWT access token for API authentication
    user: UserOut  # User information object
