import argparse
import asyncio
import os
import sys

# Add the project root to the Python path
sys.path.append(
    os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
)

from src.database.connection import create_engine, init_models


async def init_db(drop_tables: bool = False):
    engine = create_engine()
    try:
        print("Creating tables...")
        await init_models(engine, drop_tables=drop_tables)
        print("Tables created.")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Initialize the catalog database.")
    parser.add_argument(
        "--drop", action="store_true", help="Drop all tables before creating them."
    )
    args = parser.parse_args()
    asyncio.run(init_db(drop_tables=args.drop))
