"""
Startup pre-warming and periodic refresh of the catalog read cache
"""

import asyncio
from typing import Any, Dict, List

from src.api.products.cache import ProductsCache
from src.api.products.repository import ProductRepository
from src.config.cache_config import CacheAutomationPolicy, CacheViewPolicy
from src.config.constants import BULK_VIEWS, CacheView
from src.shared.utils import get_logger

logger = get_logger(__name__)


class CacheWarmer:
    """
    Populates the configured cache views from the catalog store.

    ``start()`` warms every view once, then launches one refresh loop per view
    with a non-zero refresh interval. All loops share a stop event set by
    ``stop()``.
    """

    def __init__(
        self,
        repository: ProductRepository,
        products_cache: ProductsCache,
        policy: CacheAutomationPolicy,
    ):
        self.repository = repository
        self.products_cache = products_cache
        self.policy = policy

        self._stop_event = asyncio.Event()
        self._refresh_locks: Dict[CacheView, asyncio.Lock] = {
            view_policy.name: asyncio.Lock() for view_policy in policy.views
        }
        self._loop_tasks: List[asyncio.Task] = []
        self._refresh_tasks: Dict[CacheView, asyncio.Task] = {}

    async def start(self) -> Dict[str, Any]:
        """Warm all configured views and start their refresh loops"""
        self._stop_event.clear()
        summary = await self.warm_all()

        for view_policy in self.policy.views:
            if view_policy.refresh_interval > 0:
                self._loop_tasks.append(
                    asyncio.create_task(
                        self._refresh_loop(view_policy),
                        name=f"cache-refresh-{view_policy.name.value}",
                    )
                )

        logger.info(
            f"Cache warmer started: warmed={summary['warmed']}, "
            f"failed={summary['failed']}, refresh_loops={len(self._loop_tasks)}"
        )
        return summary

    async def stop(self):
        """Signal the refresh loops to exit and wait for them"""
        self._stop_event.set()
        tasks = self._loop_tasks + list(self._refresh_tasks.values())
        for task in tasks:
            task.cancel()
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass

        self._loop_tasks.clear()
        self._refresh_tasks.clear()
        logger.info("Cache warmer stopped")

    async def warm_all(self) -> Dict[str, Any]:
        """Warm every configured view once; failures are reported, not raised"""
        summary: Dict[str, Any] = {"warmed": [], "skipped": [], "failed": []}
        for view_policy in self.policy.views:
            outcome = await self.refresh_view(view_policy.name)
            summary[outcome].append(view_policy.name.value)
        return summary

    async def refresh_view(self, view: CacheView) -> str:
        """
        Reload one view from the store.

        Returns "warmed", "failed", or "skipped" when a refresh of the same
        view is already running. A failed refresh leaves the previous entry in
        place.
        """
        lock = self._refresh_locks.setdefault(view, asyncio.Lock())
        if lock.locked():
            logger.info(f"Refresh of cache view {view.value} already running, skipping")
            return "skipped"

        async with lock:
            try:
                count = await self._load_view(view)
            except Exception as e:
                logger.error(
                    f"Failed to warm cache view {view.value}, "
                    f"it will be populated on first read: {e}"
                )
                return "failed"

        logger.info(f"Warmed cache view {view.value} with {count} products")
        return "warmed"

    async def _load_view(self, view: CacheView) -> int:
        generation = self.products_cache.generation()
        products = await self.repository.read_all()

        # Entries invalidated during the read are left for the next fill
        if view in BULK_VIEWS:
            self.products_cache.set_products(products, generation)
        elif view == CacheView.PRODUCT:
            for product in products:
                self.products_cache.set_product(product, generation)

        return len(products)

    async def _refresh_loop(self, view_policy: CacheViewPolicy):
        view = view_policy.name
        while not self._stop_event.is_set():
            try:
                await asyncio.wait_for(
                    self._stop_event.wait(), timeout=view_policy.refresh_interval
                )
                break
            except asyncio.TimeoutError:
                pass

            running = self._refresh_tasks.get(view)
            if running and not running.done():
                logger.warning(
                    f"Refresh of cache view {view.value} still running "
                    f"after {view_policy.refresh_interval}s, skipping tick"
                )
                continue

            # Runs detached from the loop so a slow refresh does not shift the cadence
            self._refresh_tasks[view] = asyncio.create_task(self.refresh_view(view))

    def get_status(self) -> Dict[str, Any]:
        return {
            "views": [
                {
                    "name": view_policy.name.value,
                    "ttl": view_policy.ttl,
                    "refresh_interval": view_policy.refresh_interval,
                    "refreshing": self._refresh_locks[view_policy.name].locked(),
                }
                for view_policy in self.policy.views
            ],
            "refresh_loops": len(self._loop_tasks),
            "stopped": self._stop_event.is_set(),
        }
