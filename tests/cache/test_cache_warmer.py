import asyncio
from datetime import datetime, timezone

import pytest

from src.api.products.cache import ProductsCache
from src.config.cache_config import CacheAutomationPolicy, CacheViewPolicy
from src.config.constants import CacheView
from src.shared.cache_warmer import CacheWarmer
from src.shared.core_cache import CacheKey


async def _insert_product(repository, name, price):
    """Write straight to the store, bypassing cache invalidation."""
    async with repository.unit_of_work() as session:
        product = await repository.create(
            session,
            {"name": name, "description": f"{name} description", "price": price, "quantity": 1},
        )
        await repository.append_history(
            session, product.id, price, datetime.now(timezone.utc)
        )
    return product


class TestCacheWarmer:
    @pytest.mark.asyncio
    async def test_start_warms_every_configured_view(self, catalog, seeded_products):
        summary = await catalog.cache_warmer.start()
        try:
            assert summary["warmed"] == ["all-products", "product"]
            assert summary["failed"] == []
            catalog.repository.reset_calls()

            products = await catalog.product_service.get_all_products()
            product = await catalog.product_service.get_product(2)

            assert [p.id for p in products] == [1, 2]
            assert product.price == 5.78
            assert catalog.repository.calls["read_all"] == 0
            assert catalog.repository.calls["read_one"] == 0
        finally:
            await catalog.cache_warmer.stop()

    @pytest.mark.asyncio
    async def test_store_outage_during_warm_is_not_fatal(
        self, catalog, seeded_products
    ):
        catalog.repository.unavailable = True

        summary = await catalog.cache_warmer.start()
        await catalog.cache_warmer.stop()

        assert summary["warmed"] == []
        assert summary["failed"] == ["all-products", "product"]
        assert catalog.cache.get_cache_stats()["total_keys"] == 0

        # Reads populate lazily once the store is back
        catalog.repository.unavailable = False
        products = await catalog.product_service.get_all_products()
        assert len(products) == 2

    @pytest.mark.asyncio
    async def test_failed_refresh_keeps_previous_entry(self, catalog, seeded_products):
        warmer = catalog.cache_warmer
        assert await warmer.refresh_view(CacheView.ALL_PRODUCTS) == "warmed"

        catalog.repository.unavailable = True
        assert await warmer.refresh_view(CacheView.ALL_PRODUCTS) == "failed"

        cached, found = catalog.cache.get(CacheKey.all_products())
        assert found is True
        assert [item["id"] for item in cached] == [1, 2]

    @pytest.mark.asyncio
    async def test_refresh_skipped_while_same_view_is_refreshing(
        self, catalog, seeded_products
    ):
        warmer = catalog.cache_warmer
        async with warmer._refresh_locks[CacheView.ALL_PRODUCTS]:
            assert await warmer.refresh_view(CacheView.ALL_PRODUCTS) == "skipped"
            # Other views refresh independently
            assert await warmer.refresh_view(CacheView.PRODUCT) == "warmed"

        assert catalog.repository.calls["read_all"] == 1

    @pytest.mark.asyncio
    async def test_periodic_refresh_picks_up_store_changes(
        self, repository, cache, seeded_products
    ):
        policy = CacheAutomationPolicy(
            views=[
                CacheViewPolicy(
                    name=CacheView.ALL_PRODUCTS, ttl=600, refresh_interval=0.05
                )
            ]
        )
        products_cache = ProductsCache(cache, policy)
        warmer = CacheWarmer(repository, products_cache, policy)

        await warmer.start()
        try:
            assert len(products_cache.get_products()) == 2
            await _insert_product(repository, "Chocolate Cover", 11.82)

            for _ in range(50):
                await asyncio.sleep(0.02)
                if len(products_cache.get_products()) == 3:
                    break

            assert [p.name for p in products_cache.get_products()][-1] == "Chocolate Cover"
            assert warmer.get_status()["refresh_loops"] == 1
        finally:
            await warmer.stop()

        assert warmer.get_status()["stopped"] is True
        assert warmer.get_status()["refresh_loops"] == 0

    @pytest.mark.asyncio
    async def test_overlapping_tick_is_skipped(
        self, repository, cache, seeded_products, monkeypatch
    ):
        policy = CacheAutomationPolicy(
            views=[
                CacheViewPolicy(
                    name=CacheView.ALL_PRODUCTS, ttl=600, refresh_interval=0.02
                )
            ]
        )
        warmer = CacheWarmer(repository, ProductsCache(cache, policy), policy)
        await warmer.start()

        release = asyncio.Event()
        attempts = []
        original_read_all = repository.read_all

        async def slow_read_all():
            attempts.append(1)
            await release.wait()
            return await original_read_all()

        monkeypatch.setattr(repository, "read_all", slow_read_all)
        try:
            # Several ticks elapse while the first refresh is blocked
            await asyncio.sleep(0.15)
            assert warmer.get_status()["views"][0]["refreshing"] is True
            # Later ticks were skipped rather than queued behind it
            assert len(attempts) == 1
        finally:
            release.set()
            await warmer.stop()

    @pytest.mark.asyncio
    async def test_warm_once_views_start_no_loops(self, catalog, seeded_products):
        await catalog.cache_warmer.start()
        try:
            assert catalog.cache_warmer.get_status()["refresh_loops"] == 0
        finally:
            await catalog.cache_warmer.stop()
