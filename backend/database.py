from motor.motor_asyncio import AsyncIOMotorClient
from config import MONGO_URL, DB_NAME, ORDERS_COLLECTION
import logging

logger = logging.getLogger(__name__)

client = AsyncIOMotorClient(MONGO_URL)
db = client[DB_NAME]


def orders_collection():
    """The collection backing the order store"""
    return db[ORDERS_COLLECTION]


async def create_indexes():
    """Create database indexes for order lookups and listing"""
    try:
        orders = orders_collection()
        await orders.create_index("id", unique=True)
        await orders.create_index("status")
        await orders.create_index("created_at")
        logger.info("[Database] Indexes created successfully")
    except Exception as e:
        logger.warning(f"[Database] Index creation error (may already exist): {e}")
