"""
Catalog store: durable product records and the price ledger
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.future import select

from src.api.pricing.models import ProductPriceSchema
from src.api.products.models import ProductSchema
from src.database.models.product import Product, ProductPrice


class ProductRepository:
    """
    Product and price-history persistence.

    Reads open their own session. Mutations run inside ``unit_of_work()`` so a
    product change and its ledger entry commit together or not at all.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @asynccontextmanager
    async def unit_of_work(self) -> AsyncIterator[AsyncSession]:
        """Transaction committed on clean exit and rolled back otherwise"""
        async with self._session_factory() as session:
            async with session.begin():
                yield session

    # Reads
    async def read_all(self) -> List[ProductSchema]:
        async with self._session_factory() as session:
            result = await session.execute(select(Product).order_by(Product.id))
            return [ProductSchema.model_validate(p) for p in result.scalars().all()]

    async def read_one(self, product_id: int) -> Optional[ProductSchema]:
        async with self._session_factory() as session:
            product = await session.get(Product, product_id)
            return ProductSchema.model_validate(product) if product else None

    async def read_history(self, product_id: int) -> List[ProductPriceSchema]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(ProductPrice)
                .filter(ProductPrice.product_id == product_id)
                .order_by(ProductPrice.changed_at, ProductPrice.id)
            )
            return [
                ProductPriceSchema.model_validate(p) for p in result.scalars().all()
            ]

    async def read_all_history(self) -> List[ProductPriceSchema]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(ProductPrice).order_by(
                    ProductPrice.product_id, ProductPrice.changed_at, ProductPrice.id
                )
            )
            return [
                ProductPriceSchema.model_validate(p) for p in result.scalars().all()
            ]

    # Mutations, all scoped to the caller's unit of work
    async def create(self, session: AsyncSession, fields: Dict) -> ProductSchema:
        product = Product(**fields)
        session.add(product)
        # Flush to obtain the store-assigned identity before the ledger append
        await session.flush()
        return ProductSchema.model_validate(product)

    async def get_for_update(
        self, session: AsyncSession, product_id: int
    ) -> Optional[Product]:
        result = await session.execute(
            select(Product).filter(Product.id == product_id).with_for_update()
        )
        return result.scalars().first()

    async def update(
        self, session: AsyncSession, product: Product, patch: Dict
    ) -> ProductSchema:
        for field, value in patch.items():
            setattr(product, field, value)
        await session.flush()
        return ProductSchema.model_validate(product)

    async def delete(
        self, session: AsyncSession, product_id: int
    ) -> Optional[ProductSchema]:
        product = await self.get_for_update(session, product_id)
        if not product:
            return None

        deleted = ProductSchema.model_validate(product)
        await session.delete(product)
        await session.flush()
        return deleted

    async def adjust_quantity(
        self, session: AsyncSession, product: Product, delta: int
    ) -> ProductSchema:
        product.quantity += delta
        await session.flush()
        return ProductSchema.model_validate(product)

    async def append_history(
        self,
        session: AsyncSession,
        product_id: int,
        price: float,
        changed_at: datetime,
    ) -> ProductPriceSchema:
        entry = ProductPrice(product_id=product_id, price=price, changed_at=changed_at)
        session.add(entry)
        await session.flush()
        return ProductPriceSchema.model_validate(entry)
