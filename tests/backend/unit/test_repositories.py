"""
Repository tests against a fresh in-memory database.
Cover the User Directory, Device Registry and Progress Store contracts.
"""
import pytest
from tortoise.transactions import in_transaction

from spmanager.core.errors import ConflictError, ForbiddenError
from spmanager.models import DEFAULT_PROGRESS, Progress, User
from spmanager.repositories import DeviceRepository, ProgressRepository, UserRepository


pytestmark = pytest.mark.asyncio


class TestUserRepository:

    async def test_create_and_find_by_username(self, db):
        repo = UserRepository()
        user = await repo.create("hanako", "hash")
        assert user.id is not None

        found = await repo.find_by_username("hanako")
        assert found is not None
        assert found.id == user.id
        assert (await repo.get_by_id(user.id)).username == "hanako"

    async def test_lookup_is_exact_match(self, db):
        repo = UserRepository()
        await repo.create("Hanako", "hash")
        assert await repo.find_by_username("hanako") is None
        assert await repo.find_by_username("missing") is None

    async def test_duplicate_username_is_conflict(self, db):
        repo = UserRepository()
        await repo.create("taro", "hash")
        with pytest.raises(ConflictError) as exc_info:
            await repo.create("taro", "other")
        assert exc_info.value.code == "USERNAME_TAKEN"
        assert await User.filter(username="taro").count() == 1


class TestDeviceRepository:

    async def test_register_marks_device(self, db):
        user = await UserRepository().create("jiro", "hash")
        devices = DeviceRepository()
        assert await devices.is_registered("device-1") is False
        await devices.register("device-1", user.id)
        assert await devices.is_registered("device-1") is True

    async def test_second_registration_of_device_is_refused(self, db):
        first = await UserRepository().create("a", "hash")
        second = await UserRepository().create("b", "hash")
        devices = DeviceRepository()
        await devices.register("device-1", first.id)
        with pytest.raises(ForbiddenError) as exc_info:
            await devices.register("device-1", second.id)
        assert exc_info.value.code == "DEVICE_ALREADY_REGISTERED"


class TestProgressRepository:

    async def test_get_or_init_creates_default_once(self, db):
        user = await UserRepository().create("saburo", "hash")
        repo = ProgressRepository()

        progress, created = await repo.get_or_init(user.id)
        assert created is True
        assert progress.data == DEFAULT_PROGRESS

        again, created_again = await repo.get_or_init(user.id)
        assert created_again is False
        assert again.id == progress.id
        assert await Progress.filter(user_id=user.id).count() == 1

    async def test_default_document_is_not_shared(self, db):
        user = await UserRepository().create("shiro", "hash")
        progress, _ = await ProgressRepository().get_or_init(user.id)
        progress.data["settings"]["theme"] = "dark"
        assert DEFAULT_PROGRESS["settings"]["theme"] == "light"

    async def test_put_inserts_then_replaces(self, db):
        user = await UserRepository().create("goro", "hash")
        repo = ProgressRepository()

        await repo.put(user.id, {"settings": {"theme": "dark"}, "lectures": {"1": True}})
        first = await Progress.get(user_id=user.id)
        assert first.data["lectures"] == {"1": True}

        await repo.put(user.id, {"settings": {"theme": "light"}})
        second = await Progress.get(user_id=user.id)
        # Full replace, not a merge
        assert second.data == {"settings": {"theme": "light"}}
        assert second.updated_at >= first.updated_at
        assert await Progress.filter(user_id=user.id).count() == 1

    async def test_put_is_idempotent(self, db):
        user = await UserRepository().create("rokuro", "hash")
        repo = ProgressRepository()
        doc = {"settings": {"theme": "dark", "currentWeekIndex": 3}, "lectures": {"math": [1, 2]}}
        await repo.put(user.id, doc)
        await repo.put(user.id, doc)
        stored = await Progress.filter(user_id=user.id)
        assert len(stored) == 1
        assert stored[0].data == doc

    async def test_repositories_share_a_transaction(self, db):
        """A failure late in a transaction rolls back earlier writes."""
        with pytest.raises(ConflictError):
            async with in_transaction() as conn:
                user = await UserRepository(conn).create("nanako", "hash")
                await ProgressRepository(conn).init_default(user.id)
                await UserRepository(conn).create("nanako", "hash")
        assert await User.filter(username="nanako").exists() is False
        assert await Progress.all().count() == 0
