"""Service test fixtures — per-test SQLite database, FastAPI test client, account factories.

Invariants:
    - Every test gets a fresh SQLite database file under tmp_path, so
      concurrent sessions use separate connections like production
    - db_manager patched to the test database (the ledger and get_db both use it)
    - Passwords hashed with bcrypt cost 4 to keep tests fast

Design Decisions:
    - A file database rather than :memory: because the subscription ledger
      opens its own sessions and must see the same data
"""

import pytest
from httpx import ASGITransport, AsyncClient

from shopnear.api.dependencies import get_token_codec
from shopnear.core.domain_types import PrincipalKind
from shopnear.db.base import Base
from shopnear.infrastructure.database import get_db, DatabaseSessionManager
import shopnear.infrastructure.database as db_module
import shopnear.models  # noqa: F401
from shopnear.main import app
from shopnear.services.directory import ShopDirectory, UserDirectory

TEST_ROUNDS = 4
PASSWORD = "secret-pass"


@pytest.fixture
async def manager(tmp_path):
    manager = DatabaseSessionManager(f"sqlite+aiosqlite:///{tmp_path / 'shopnear.db'}")
    async with manager.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    original_manager = db_module.db_manager
    db_module.db_manager = manager
    yield manager
    db_module.db_manager = original_manager
    await manager.dispose()


@pytest.fixture
async def test_db(manager):
    async with manager.session() as session:
        yield session


@pytest.fixture
async def client(manager):
    """FastAPI test client with DB dependency bound to the test database."""
    async def override_get_db():
        async with manager.session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def codec():
    return get_token_codec()


@pytest.fixture
def make_shop(test_db):
    """Register a shop through the directory. Keyword overrides allowed."""
    counter = {"n": 0}

    async def _make(**overrides):
        counter["n"] += 1
        n = counter["n"]
        fields = {
            "name": f"Shop {n}",
            "owner_name": f"Owner {n}",
            "email": f"shop{n}@example.com",
            "mobile": "9876543210",
            "type": "grocery",
            "password": PASSWORD,
            "address": f"{n} Anna Salai, Chennai",
            "latitude": 13.0827,
            "longitude": 80.2707,
        }
        fields.update(overrides)
        return await ShopDirectory(test_db, TEST_ROUNDS).create_shop(**fields)

    return _make


@pytest.fixture
def make_user(test_db):
    """Register a user through the directory. Keyword overrides allowed."""
    counter = {"n": 0}

    async def _make(is_admin: bool = False, **overrides):
        counter["n"] += 1
        n = counter["n"]
        fields = {
            "name": f"User {n}",
            "email": f"user{n}@example.com",
            "password": PASSWORD,
        }
        fields.update(overrides)
        user = await UserDirectory(test_db, TEST_ROUNDS).create_user(**fields)
        if is_admin:
            user.is_admin = True
            await test_db.commit()
        return user

    return _make


@pytest.fixture
def auth(codec):
    """Build a Cookie header carrying a token for (account id, kind)."""
    def _auth(account_id: int, kind: PrincipalKind = PrincipalKind.USER) -> dict:
        token = codec.issue(account_id, kind)
        return {"Cookie": f"Authorization={token}"}

    return _auth
