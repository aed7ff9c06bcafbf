"""
app/db/indexes.py

Purpose: Database index management

- Unique index on subscriptions.user_id (at most one record per user)
"""

from app.db.mongo import get_subscriptions_collection
from app.core.logging import get_logger

logger = get_logger(__name__)


async def create_indexes(collection=None):
    """
    Creates all necessary database indexes.
    This function is idempotent - safe to run multiple times.
    """
    subscriptions = collection if collection is not None else get_subscriptions_collection()

    try:
        await subscriptions.create_index("user_id", unique=True, name="user_id_unique")
        logger.debug("Created unique index on subscriptions.user_id")
    except Exception as e:
        logger.error(f"Error creating indexes: {str(e)}", exc_info=True)
        raise
