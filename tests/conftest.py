import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from typing import AsyncGenerator

from stringdesk.main import app
from stringdesk.database import get_db, Base
from stringdesk.auth.models import User, UserRole
from stringdesk.auth.security import create_access_token, get_password_hash
from stringdesk.catalog.models import StringBrand, StringModel, RacquetBrand, RacquetModel
from stringdesk.catalog.service import clear_catalog_cache

# Register every table on Base.metadata before create_all
import stringdesk.clients.models  # noqa: F401
import stringdesk.racquets.models  # noqa: F401
import stringdesk.jobs.models  # noqa: F401
import stringdesk.inventory.models  # noqa: F401

# In-memory SQLite shared across connections so every request sees the same data
TEST_DATABASE_URL = "sqlite+aiosqlite://"

TEST_PASSWORD = "password123"

STRING_CATALOG = {
    (1, "Babolat"): [(101, "RPM Blast"), (102, "Xcel"), (103, "VS Touch")],
    (2, "Luxilon"): [(201, "ALU Power"), (202, "4G")],
    (3, "Solinco"): [(301, "Hyper-G"), (302, "Tour Bite")],
}

RACQUET_CATALOG = {
    (1, "Babolat"): [(11, "Pure Aero"), (12, "Pure Drive")],
    (2, "Wilson"): [(21, "Pro Staff 97"), (22, "Blade 98")],
}


def _seed_catalog(session: AsyncSession, brand_cls, model_cls, catalog: dict) -> None:
    for (brand_id, brand_name), models in catalog.items():
        session.add(brand_cls(id=brand_id, name=brand_name))
        for model_id, model_name in models:
            session.add(model_cls(id=model_id, name=model_name, brand_id=brand_id))


@pytest.fixture(autouse=True)
def fresh_catalog_cache():
    clear_catalog_cache()
    yield
    clear_catalog_cache()


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh in-memory database with the catalog seeded, one per test."""
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    TestingSessionLocal = sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with TestingSessionLocal() as session:
        _seed_catalog(session, StringBrand, StringModel, STRING_CATALOG)
        _seed_catalog(session, RacquetBrand, RacquetModel, RACQUET_CATALOG)
        await session.commit()
        yield session

    await test_engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Client for testing API endpoints."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


async def create_user(db: AsyncSession, email: str, role: UserRole = UserRole.STRINGER) -> User:
    user = User(
        email=email,
        hashed_password=get_password_hash(TEST_PASSWORD),
        full_name=email.split("@")[0].title(),
        role=role,
        is_active=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


def auth_headers(user: User) -> dict:
    token = create_access_token(data={"sub": user.email, "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def stringer(db_session: AsyncSession) -> User:
    return await create_user(db_session, "stringer@stringdesk.io")


@pytest_asyncio.fixture
async def other_stringer(db_session: AsyncSession) -> User:
    return await create_user(db_session, "rival@stringdesk.io")


@pytest_asyncio.fixture
async def customer(db_session: AsyncSession) -> User:
    return await create_user(db_session, "player@stringdesk.io", UserRole.CUSTOMER)


@pytest.fixture
def stringer_headers(stringer: User) -> dict:
    return auth_headers(stringer)


@pytest.fixture
def other_stringer_headers(other_stringer: User) -> dict:
    return auth_headers(other_stringer)


@pytest.fixture
def customer_headers(customer: User) -> dict:
    return auth_headers(customer)


@pytest_asyncio.fixture
async def client_record(async_client: AsyncClient, stringer_headers: dict) -> dict:
    """A client with a main-side preference only."""
    response = await async_client.post(
        "/v1/clients",
        json={
            "full_name": "Ana Ivanovic",
            "email": "ana@ivanovic.io",
            "default_tension_main": 52,
            "preferred_main_brand_id": 1,
            "preferred_main_model_id": 101,
        },
        headers=stringer_headers,
    )
    assert response.status_code == 200, response.text
    return response.json()


@pytest_asyncio.fixture
async def racquet_record(async_client: AsyncClient, stringer_headers: dict, client_record: dict) -> dict:
    response = await async_client.post(
        "/v1/racquets",
        json={
            "client_id": client_record["id"],
            "brand_id": 1,
            "model_id": 11,
            "head_size": 100,
            "string_pattern": "16x19",
        },
        headers=stringer_headers,
    )
    assert response.status_code == 200, response.text
    return response.json()
