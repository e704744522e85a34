import asyncio
import os
import sys
from datetime import datetime, timezone

# Add project root to python path
sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from sqlalchemy import func, select

from src.api.products.repository import ProductRepository
from src.config.constants import SEED_PRODUCTS
from src.database.connection import create_engine, create_session_factory, init_models
from src.database.models.product import Product


async def seed_data():
    """Seed the starter catalog, each product with its initial price entry."""
    print("Starting database seeding...")

    engine = create_engine()
    try:
        await init_models(engine)
        repository = ProductRepository(create_session_factory(engine))

        async with repository.unit_of_work() as session:
            existing = await session.scalar(select(func.count()).select_from(Product))
            if existing:
                print(f"Catalog already holds {existing} products, skipping seed.")
                return

            for fields in SEED_PRODUCTS:
                product = await repository.create(session, fields)
                await repository.append_history(
                    session, product.id, product.price, datetime.now(timezone.utc)
                )
                print(f"Seeded product {product.id}: {product.name}")

        print("Database seeding completed successfully.")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed_data())
