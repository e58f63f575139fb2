# spmanager/repositories/progress_repository.py
"""
Progress Store
Persists one JSON progress document per user.
"""
import logging
from typing import Any, Optional

from tortoise.backends.base.client import BaseDBAsyncClient

from spmanager.models.progress import Progress, default_progress

logger = logging.getLogger(__name__)


class ProgressRepository:
    """
    Data access object for the progress table.

    Note the read path writes: get_or_init creates the default document when
    the user has none yet, so callers must not treat it as side-effect free.
    """

    def __init__(self, connection: Optional[BaseDBAsyncClient] = None):
        self.connection = connection

    async def init_default(self, user_id: int) -> Progress:
        """Insert the default document for a newly created user."""
        return await Progress.create(user_id=user_id, data=default_progress(), using_db=self.connection)

    async def get_or_init(self, user_id: int) -> tuple[Progress, bool]:
        """
        Fetch the user's document, creating the default one if it is missing.

        Returns:
            (progress, created) where created is True only when this call initialized the row
        """
        progress, created = await Progress.get_or_create(
            defaults={"data": default_progress()},
            using_db=self.connection,
            user_id=user_id,
        )
        if created:
            logger.info("[progress] initialized missing document for user_id=%s", user_id)
        return progress, created

    async def put(self, user_id: int, data: Any) -> Progress:
        """
        Upsert the user's document: insert if absent, otherwise replace data
        wholesale and refresh updated_at. Last write wins.
        """
        progress, _ = await Progress.update_or_create(
            defaults={"data": data},
            using_db=self.connection,
            user_id=user_id,
        )
        return progress
