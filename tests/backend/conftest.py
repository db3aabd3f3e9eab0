import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from app.core import db as db_module
from app.core.security import create_access_token, hash_password
from app.main import app
from app.models.user import User


TEST_DB_URL = "sqlite://:memory:"


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await db_module.init_db(TEST_DB_URL, generate_schemas=True)


@pytest_asyncio.fixture
async def db():
    """
    Fresh database for service-level tests that don't need the HTTP client.
    """
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def client(db):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


@pytest_asyncio.fixture
async def create_user(db):
    """
    Factory fixture to create users directly via ORM.
    """

    async def _create_user(
        password: str = "UserPass!23",
        first_name: str = "Test",
        **fields,
    ) -> tuple[User, str]:
        user = await User.create(
            first_name=first_name,
            last_name="User",
            email=f"{uuid.uuid4().hex[:10]}@example.com",
            password_hash=hash_password(password),
            **fields,
        )
        return user, password

    return _create_user


@pytest.fixture
def auth_headers():
    """
    Helper fixture returning Authorization headers for a user, without a login round-trip.
    """

    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(str(user.id))}"}

    return _headers
