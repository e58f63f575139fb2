# spmanager/repositories/device_repository.py
"""
Device Registry
Caps registration at one account per client device.
"""
import logging
from typing import Optional

from tortoise.backends.base.client import BaseDBAsyncClient
from tortoise.exceptions import IntegrityError

from spmanager.core.errors import ForbiddenError
from spmanager.models.device_registration import DeviceRegistration

logger = logging.getLogger(__name__)

DEVICE_ALREADY_REGISTERED = "DEVICE_ALREADY_REGISTERED"
DEVICE_ALREADY_REGISTERED_MESSAGE = "An account has already been registered from this device"


class DeviceRepository:

    def __init__(self, connection: Optional[BaseDBAsyncClient] = None):
        self.connection = connection

    async def is_registered(self, device_id: str) -> bool:
        return await DeviceRegistration.filter(device_id=device_id).using_db(self.connection).exists()

    async def register(self, device_id: str, user_id: int) -> DeviceRegistration:
        """
        Bind a device to the account created from it.

        Raises:
            ForbiddenError: The device already has a registration (unique constraint)
        """
        try:
            return await DeviceRegistration.create(device_id=device_id, user_id=user_id, using_db=self.connection)
        except IntegrityError:
            logger.info("[devices] device already registered: %s", device_id)
            raise ForbiddenError(DEVICE_ALREADY_REGISTERED, DEVICE_ALREADY_REGISTERED_MESSAGE)
