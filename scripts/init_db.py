"""
Database initialization script

Run once to create the subscriptions collection index:
    python scripts/init_db.py
"""

import asyncio
import sys
from pathlib import Path
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load environment variables before settings are built
load_dotenv()

from app.core.logging import setup_logging, get_logger
from app.db.mongo import connect_to_mongo, close_mongo_connection, get_subscriptions_collection
from app.db.indexes import create_indexes

logger = get_logger("scripts.init_db")


async def main():
    setup_logging()
    await connect_to_mongo()

    try:
        await create_indexes()
        indexes = await get_subscriptions_collection().index_information()
        for name, info in indexes.items():
            logger.info(f"  {name}: {info['key']}{' (unique)' if info.get('unique') else ''}")
        logger.info("Database initialized")
    finally:
        await close_mongo_connection()


if __name__ == "__main__":
    asyncio.run(main())
