# spmanager/models/user.py
"""
Database model for users.
Represents an account created through device-bound registration.
"""
from tortoise import fields, models


class User(models.Model):
    """
    User database model.

    Relationships:
    - Has one DeviceRegistration (the device it was registered from, via related_name="device_registration")
    - Has one Progress document (via related_name="progress")

    Security:
    - Password is stored as a hash (never store plain text passwords)
    - Username must be unique across all users (exact match, case-sensitive)
    """
    id = fields.IntField(primary_key=True)  # Primary key: auto-increment user identifier
    username = fields.CharField(
        max_length=50,
        unique=True,
        index=True
    )  # User login name (must be unique, indexed for fast lookups)
    password_hash = fields.CharField(max_length=255)  # Argon2 hash, never plain text
    created_at = fields.DatetimeField(auto_now_add=True)  # Timestamp when account was created

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"  # Database table name

    def __str__(self) -> str:
        return self.username
