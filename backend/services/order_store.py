"""
Order persistence on top of a Motor collection
Every driver failure is converted to StoreError so callers never see PyMongo types
"""
import logging
import re
from typing import List, Optional

from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from services.errors import StoreError

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ("customer_name", "customer_phone", "customer_address")


def build_order_query(search: Optional[str] = None, status: Optional[str] = None) -> dict:
    """Mongo filter for the order list: substring search plus exact status"""
    query = {}
    if status:
        query["status"] = status
    if search and search.strip():
        pattern = re.escape(search.strip())
        query["$or"] = [{field: {"$regex": pattern, "$options": "i"}} for field in SEARCH_FIELDS]
    return query


class OrderStore:
    """CRUD over the orders collection, keyed by the order's own `id`"""

    def __init__(self, collection):
        self._collection = collection

    async def insert(self, doc: dict) -> dict:
        try:
            # insert_one adds _id to the dict it is given
            await self._collection.insert_one(dict(doc))
        except PyMongoError as e:
            logger.error(f"Order insert failed for {doc.get('id')}: {e}")
            raise StoreError()
        return doc

    async def get(self, order_id: str) -> Optional[dict]:
        try:
            return await self._collection.find_one({"id": order_id}, {"_id": 0})
        except PyMongoError as e:
            logger.error(f"Order lookup failed for {order_id}: {e}")
            raise StoreError()

    async def update(self, order_id: str, fields: dict) -> Optional[dict]:
        """Set fields on one order; returns the updated document or None"""
        try:
            return await self._collection.find_one_and_update(
                {"id": order_id},
                {"$set": fields},
                projection={"_id": 0},
                return_document=ReturnDocument.AFTER
            )
        except PyMongoError as e:
            logger.error(f"Order update failed for {order_id}: {e}")
            raise StoreError()

    async def delete(self, order_id: str) -> bool:
        try:
            result = await self._collection.delete_one({"id": order_id})
        except PyMongoError as e:
            logger.error(f"Order delete failed for {order_id}: {e}")
            raise StoreError()
        return result.deleted_count > 0

    async def find(self, search: Optional[str] = None, status: Optional[str] = None) -> List[dict]:
        query = build_order_query(search, status)
        try:
            return await self._collection.find(query, {"_id": 0}).sort("created_at", -1).to_list(None)
        except PyMongoError as e:
            logger.error(f"Order list failed for {query}: {e}")
            raise StoreError()
