from .core_service import ProductCoreService
from .inventory_service import ProductInventoryService
from .query_service import ProductQueryService

__all__ = [
    "ProductCoreService",
    "ProductQueryService",
    "ProductInventoryService",
]
