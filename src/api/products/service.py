from typing import List

from src.api.products.models import (
    CreateProductSchema,
    ProductSchema,
    UpdateProductSchema,
)
from src.api.products.services import (
    ProductCoreService,
    ProductInventoryService,
    ProductQueryService,
)


class ProductService:
    """Main product service that orchestrates specialized services"""

    def __init__(
        self,
        query_service: ProductQueryService,
        core_service: ProductCoreService,
        inventory_service: ProductInventoryService,
    ):
        self.query_service = query_service
        self.core_service = core_service
        self.inventory_service = inventory_service

    # Reads, served through the cache
    async def get_all_products(self) -> List[ProductSchema]:
        return await self.query_service.get_all_products()

    async def get_product(self, product_id: int) -> ProductSchema:
        return await self.query_service.get_product_by_id(product_id)

    # Writes
    async def create_product(self, product_data: CreateProductSchema) -> ProductSchema:
        """Create a new product and return it with its assigned ID"""
        return await self.core_service.create_product(product_data)

    async def update_product(
        self, product_id: int, product_data: UpdateProductSchema
    ) -> ProductSchema:
        return await self.core_service.update_product(product_id, product_data)

    async def delete_product(self, product_id: int) -> ProductSchema:
        return await self.core_service.delete_product(product_id)

    async def add_stock(self, product_id: int, quantity: int) -> ProductSchema:
        return await self.inventory_service.add_stock(product_id, quantity)
