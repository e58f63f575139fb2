# spmanager/repositories/user_repository.py
"""
User Directory
Creates and looks up users by their unique username.
"""
import logging
from typing import Optional

from tortoise.backends.base.client import BaseDBAsyncClient
from tortoise.exceptions import IntegrityError

from spmanager.core.errors import ConflictError
from spmanager.models.user import User

logger = logging.getLogger(__name__)


class UserRepository:
    """
    Data access object for the users table.
    """

    def __init__(self, connection: Optional[BaseDBAsyncClient] = None):
        """
        Args:
            connection: Transaction or connection to run on (default connection if None)
        """
        self.connection = connection

    async def create(self, username: str, password_hash: str) -> User:
        """
        Insert a new user.

        Uniqueness is enforced by the database constraint, not by a prior read,
        so two concurrent creates with the same username cannot both succeed.

        Raises:
            ConflictError: Username already taken
        """
        try:
            return await User.create(username=username, password_hash=password_hash, using_db=self.connection)
        except IntegrityError:
            logger.info("[users] username already taken: %s", username)
            raise ConflictError("USERNAME_TAKEN", "This username already exists")

    async def find_by_username(self, username: str) -> Optional[User]:
        """Exact-match lookup; returns None when no such user exists."""
        return await User.filter(username=username).using_db(self.connection).first()

    async def get_by_id(self, user_id: int) -> Optional[User]:
        return await User.filter(id=user_id).using_db(self.connection).first()
