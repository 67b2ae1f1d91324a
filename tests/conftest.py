import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

ENV_TEST_PATH = Path(__file__).parents[1] / ".env.test"


def _load_env_file(path: Path) -> None:
    if not path.exists():
        return
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        os.environ.setdefault(key, value)


_load_env_file(ENV_TEST_PATH)

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

# The app's own engine is built at import time from DATABASE_URL.
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)
os.environ.setdefault("CREATE_TABLES_ON_STARTUP", "false")

from sales_dashboard.api.deps import get_seed_source  # noqa: E402
from sales_dashboard.db.session import get_db  # noqa: E402
from sales_dashboard.main import app  # noqa: E402
from sales_dashboard.models.transaction import Transaction  # noqa: E402
from sales_dashboard.services.seed_source import SeedSourceClient  # noqa: E402

if TEST_DATABASE_URL.startswith("sqlite"):
    # One shared connection keeps the in-memory database alive.
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    test_engine = create_async_engine(TEST_DATABASE_URL, echo=False)

TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

SEED_URL = "http://seed.test/product_transaction.json"


@pytest.fixture(scope="function")
async def setup_database():
    """Create tables for tests that need the database, and drop them after.

    Not autouse, so pure unit tests run without a database.
    """
    from sales_dashboard.models.base import Base

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await test_engine.dispose()


@pytest.fixture
async def db_session(setup_database):
    """Provide test database session with fresh connection per test."""
    async with TestSessionLocal() as session:
        yield session
        await session.rollback()


def make_record(
    product_id: str,
    *,
    price: float = 100.0,
    date_of_sale: str = "2022-03-05T10:00:00Z",
    sold: bool = False,
    category: str = "electronics",
    title: str | None = None,
    description: str | None = None,
) -> dict[str, Any]:
    """Build one seed record in the feed's camelCase shape."""
    return {
        "productId": product_id,
        "title": title if title is not None else f"Product {product_id}",
        "description": description if description is not None else f"Description of {product_id}",
        "price": price,
        "category": category,
        "dateOfSale": date_of_sale,
        "sold": sold,
    }


def make_transaction(product_id: str, **kwargs: Any) -> Transaction:
    """Build an ORM Transaction from the same defaults as make_record."""
    record = make_record(product_id, **kwargs)
    return Transaction(
        product_id=record["productId"],
        title=record["title"],
        description=record["description"],
        price=record["price"],
        category=record["category"],
        date_of_sale=datetime.fromisoformat(record["dateOfSale"].replace("Z", "")),
        sold=record["sold"],
    )


@pytest.fixture
def sample_records() -> list[dict[str, Any]]:
    """Feed covering three months, several price ranges and categories."""
    return [
        make_record("1", price=50, date_of_sale="2022-03-01T08:00:00Z", sold=True,
                    category="electronics", title="USB Cable", description="Braided 1m cable"),
        make_record("2", price=150, date_of_sale="2021-03-15T08:00:00Z", sold=False,
                    category="electronics", title="Wireless Mouse", description="Ergonomic mouse"),
        make_record("3", price=250.5, date_of_sale="2022-03-20T08:00:00Z", sold=True,
                    category="men's clothing", title="Cotton Shirt", description="Slim fit, size 150"),
        make_record("4", price=999, date_of_sale="2022-03-28T08:00:00Z", sold=False,
                    category="jewelery", title="Gold Ring", description="18k gold"),
        make_record("5", price=101, date_of_sale="2022-04-02T08:00:00Z", sold=True,
                    category="jewelery", title="Silver Chain", description="Sterling silver"),
        make_record("6", price=0, date_of_sale="2022-04-10T08:00:00Z", sold=False,
                    category="electronics", title="Sample Sticker", description="Free promotional sticker"),
        make_record("7", price=700, date_of_sale="2022-11-11T08:00:00Z", sold=True,
                    category="women's clothing", title="Winter Coat", description="Wool blend"),
    ]


@pytest.fixture
def make_seed_source() -> Callable[..., SeedSourceClient]:
    """Factory for seed source clients backed by httpx.MockTransport."""

    def _factory(payload: Any = None, *, status_code: int = 200, handler=None) -> SeedSourceClient:
        def _default_handler(request: httpx.Request) -> httpx.Response:
            body = payload if isinstance(payload, (str, bytes)) else json.dumps(payload)
            return httpx.Response(status_code, content=body)

        return SeedSourceClient(
            url=SEED_URL,
            timeout=1.0,
            retry_attempts=3,
            retry_wait_seconds=0,
            transport=httpx.MockTransport(handler or _default_handler),
        )

    return _factory


@pytest.fixture
async def client(db_session: AsyncSession):
    """Provide test client with database override."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def use_seed_source():
    """Route the init endpoint to a given seed source client."""

    def _install(source: SeedSourceClient) -> None:
        async def override_get_seed_source():
            return source

        app.dependency_overrides[get_seed_source] = override_get_seed_source

    return _install


@pytest.fixture
async def seeded_client(client: AsyncClient, use_seed_source, make_seed_source, sample_records):
    """Client whose database was initialized through the init endpoint."""
    use_seed_source(make_seed_source(sample_records))
    response = await client.post("/api/transactions/init")
    assert response.status_code == 200
    return client


@pytest.fixture
def record_factory() -> Callable[..., dict[str, Any]]:
    return make_record


@pytest.fixture
def transaction_factory() -> Callable[..., Transaction]:
    return make_transaction
