# spmanager/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- db: Database configuration, connection management and bounded storage calls
- errors: Client-facing error taxonomy
- rate_limit: Per-IP request throttling for the auth endpoints
- security: Password hashing and session token signing
"""
