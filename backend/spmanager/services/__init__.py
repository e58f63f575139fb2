"""
Services Module

Workflows composed on top of the repositories:
- auth_service: device-bound registration and login
- cms_client: read-only passthrough to the content service
"""
from .auth_service import LoginResult, login_user, register_user
from .cms_client import CMSClient, get_cms_client

__all__ = [
    "LoginResult",
    "login_user",
    "register_user",
    "CMSClient",
    "get_cms_client",
]
