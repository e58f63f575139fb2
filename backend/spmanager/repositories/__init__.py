# spmanager/repositories/__init__.py
"""
Data access layer.
Each repository wraps one table and accepts an optional connection so several
repositories can share a single transaction:

    async with in_transaction() as conn:
        user = await UserRepository(conn).create(...)
        await DeviceRepository(conn).register(...)
"""
from .user_repository import UserRepository
from .device_repository import DeviceRepository
from .progress_repository import ProgressRepository
