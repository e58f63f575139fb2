# spmanager/models/progress.py
"""
Database model for study progress.
Each user owns exactly one progress document: an arbitrary JSON value that the
client replaces wholesale on every save.
"""
import copy

from tortoise import fields, models

# Document written at registration, or lazily on first read when missing
DEFAULT_PROGRESS = {"settings": {"theme": "light"}, "lectures": {}}


def default_progress() -> dict:
    """Fresh copy of the default document (callers may mutate it)."""
    return copy.deepcopy(DEFAULT_PROGRESS)


class Progress(models.Model):
    """
    Progress database model.

    Relationships:
    - Belongs to exactly one User (one-to-one, unique on user_id)
    """
    id = fields.IntField(primary_key=True)
    user: fields.OneToOneRelation["User"] = fields.OneToOneField(
        "models.User",
        related_name="progress",
        on_delete=fields.CASCADE,
    )  # One document per user; cascade delete with the user
    data = fields.JSONField()  # Conventionally {"settings": {...}, "lectures": {...}}
    updated_at = fields.DatetimeField(auto_now=True)  # Refreshed on every save

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "progress"
