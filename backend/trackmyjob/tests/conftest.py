import os
import shutil
import tempfile

# Must be set before trackmyjob.config is imported
_TEST_ROOT = tempfile.mkdtemp(prefix="trackmyjob-tests-")
os.environ.setdefault("DATABASE_URL_OVERRIDE", f"sqlite+aiosqlite:///{_TEST_ROOT}/default.db")
os.environ.setdefault("STORAGE_PATH", os.path.join(_TEST_ROOT, "storage"))
os.environ.setdefault("AUTH_MODE", "remote")

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from trackmyjob.api.dependencies import get_auth_client
from trackmyjob.config import Settings
from trackmyjob.database import Base, build_engine, get_db, init_db
from trackmyjob.main import app
from trackmyjob.services.auth import AuthClient
from trackmyjob.services.storage import LocalStorage, get_storage
from trackmyjob.tests.factories import ALICE, AUTH_USERS


def auth_service_handler(request: httpx.Request) -> httpx.Response:
    """Stands in for the managed auth service's /auth/v1/user endpoint."""
    if request.url.path != "/auth/v1/user":
        return httpx.Response(404)
    token = request.headers.get("Authorization", "").removeprefix("Bearer ").strip()
    user = AUTH_USERS.get(token)
    if user is None:
        return httpx.Response(401, json={"msg": "invalid JWT"})
    return httpx.Response(200, json=user)


@pytest.fixture
def auth_settings():
    return Settings(
        auth_mode="remote",
        auth_url="http://auth.test",
        auth_api_key="anon-key",
    )


@pytest.fixture
def auth_client(auth_settings):
    return AuthClient(auth_settings, transport=httpx.MockTransport(auth_service_handler))


@pytest.fixture
def temp_storage_dir():
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def storage(temp_storage_dir):
    return LocalStorage(root=temp_storage_dir, public_url="/storage")


@pytest.fixture
async def session_maker(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path}/test.db")
    await init_db(engine)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def client(session_maker, storage, auth_client):
    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_auth_client] = lambda: auth_client

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def alice_profile(client):
    response = await client.post("/api/profile", json={}, headers=ALICE)
    assert response.status_code == 201
    return response.json()
