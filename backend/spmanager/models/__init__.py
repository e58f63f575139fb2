# spmanager/models/__init__.py
"""
Database models module initialization.
Exports all database models for convenient imports throughout the application.

Models exported:
- User: User account and authentication model
- DeviceRegistration: Device an account was registered from
- Progress: Per-user study progress document
"""
from .user import User
from .device_registration import DeviceRegistration
from .progress import Progress, DEFAULT_PROGRESS, default_progress
