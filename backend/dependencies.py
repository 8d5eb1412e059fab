from database import orders_collection
from services.order_service import OrderService
from services.order_store import OrderStore


def get_order_service() -> OrderService:
    """Order service bound to the configured MongoDB collection"""
    return OrderService(OrderStore(orders_collection()))
