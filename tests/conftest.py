from collections import Counter
from datetime import datetime, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from main import create_app
from src.api.products.repository import ProductRepository
from src.config.cache_config import CacheAutomationPolicy, CacheViewPolicy
from src.config.constants import CacheView
from src.database.connection import create_session_factory, init_models
from src.dependencies.catalog import build_catalog
from src.shared.core_cache import CoreCacheClient


class FakeClock:
    """Monotonic clock the tests advance by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class CountingRepository(ProductRepository):
    """Repository that counts store reads and can simulate an outage."""

    def __init__(self, session_factory):
        super().__init__(session_factory)
        self.calls = Counter()
        self.unavailable = False

    def _check_available(self):
        if self.unavailable:
            raise OperationalError(
                "SELECT products", {}, ConnectionRefusedError("connection refused")
            )

    async def read_all(self):
        self.calls["read_all"] += 1
        self._check_available()
        return await super().read_all()

    async def read_one(self, product_id):
        self.calls["read_one"] += 1
        self._check_available()
        return await super().read_one(product_id)

    def reset_calls(self):
        self.calls.clear()


SCENARIO_PRODUCTS = [
    ("Rippled Screen Protector", 8.29, 4),
    ("Wrap it and Hope Cover", 5.78, 45),
]


@pytest.fixture
def policy():
    return CacheAutomationPolicy(
        views=[
            CacheViewPolicy(name=CacheView.ALL_PRODUCTS, ttl=60),
            CacheViewPolicy(name=CacheView.PRODUCT, ttl=60),
        ]
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def repository(engine):
    return CountingRepository(create_session_factory(engine))


@pytest.fixture
def cache(clock):
    return CoreCacheClient(max_entries=100, clock=clock)


@pytest.fixture
def catalog(repository, policy, cache):
    return build_catalog(repository, policy, cache=cache)


@pytest_asyncio.fixture
async def seeded_products(repository):
    """Scenario catalog: products 1 and 2, each with its initial price entry."""
    products = []
    async with repository.unit_of_work() as session:
        for name, price, quantity in SCENARIO_PRODUCTS:
            product = await repository.create(
                session,
                {
                    "name": name,
                    "description": f"{name} description",
                    "price": price,
                    "quantity": quantity,
                },
            )
            await repository.append_history(
                session, product.id, product.price, datetime.now(timezone.utc)
            )
            products.append(product)
    repository.reset_calls()
    return products


@pytest_asyncio.fixture
async def client(engine, policy):
    """HTTP client against the app with its lifespan (and cache warm) running."""
    app = create_app(engine=engine, policy=policy)
    async with app.router.lifespan_context(app):
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test", timeout=20
        ) as client:
            yield client


@pytest_asyncio.fixture
async def seeded_client(seeded_products, engine, policy):
    app = create_app(engine=engine, policy=policy)
    async with app.router.lifespan_context(app):
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test", timeout=20
        ) as client:
            yield client
