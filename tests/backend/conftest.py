import os
import uuid

TEST_DB_URL = "sqlite://:memory:"
os.environ["DATABASE_URL"] = TEST_DB_URL
os.environ.setdefault("JWT_SECRET", "test-secret-" + uuid.uuid4().hex)

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from spmanager.core import db as db_module
from spmanager.core.rate_limit import SlidingWindowRateLimiter, get_login_limiter, get_register_limiter
from spmanager.core.security import CredentialStore, get_credential_store, hash_password
from spmanager.main import app
from spmanager.models.user import User

db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL

TEST_SECRET = "unit-test-signing-secret-0123456789abcdef"


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=db_module.TORTOISE_ORM)
    await Tortoise.generate_schemas()


@pytest_asyncio.fixture
async def db():
    """
    Fresh database without an HTTP client, for repository-level tests.
    """
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest.fixture
def credentials() -> CredentialStore:
    return CredentialStore(TEST_SECRET, expire_minutes=60)


@pytest.fixture
def limiters():
    """
    Generous per-test limiters so suites can register many accounts from one IP.
    Tests that exercise throttling replace them with tighter ones.
    """
    register = SlidingWindowRateLimiter(1000, 3600)
    login = SlidingWindowRateLimiter(1000, 900)
    app.dependency_overrides[get_register_limiter] = lambda: register
    app.dependency_overrides[get_login_limiter] = lambda: login
    return {"register": register, "login": login}


@pytest_asyncio.fixture
async def client(credentials, limiters):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB.
    """
    await _init_test_db()
    app.dependency_overrides[get_credential_store] = lambda: credentials
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client
    app.dependency_overrides.clear()
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def create_user():
    """
    Factory fixture to create users directly via ORM, bypassing registration
    (no device row and no progress document).
    """

    async def _create_user(password: str = "UserPass!23") -> tuple[User, str]:
        user = await User.create(
            username=f"user_{uuid.uuid4().hex[:6]}",
            password_hash=hash_password(password),
        )
        return user, password

    return _create_user


@pytest_asyncio.fixture
async def auth_header_factory(client):
    """
    Helper fixture to obtain Authorization headers via the login endpoint.
    """

    async def _get_headers(username: str, password: str) -> dict[str, str]:
        resp = await client.post(
            "/api/login",
            json={"username": username, "password": password},
        )
        assert resp.status_code == 200, resp.text
        token = resp.json()["accessToken"]
        return {"Authorization": f"Bearer {token}"}

    return _get_headers


@pytest.fixture
def token_secret() -> str:
    return TEST_SECRET
