from models.order import Order, OrderCreate, OrderStatus, OrderStatusUpdate, STATUS_LABELS
from models.analytics import OrderAnalytics, DailyOrders, StatusShare

__all__ = [
    "Order", "OrderCreate", "OrderStatus", "OrderStatusUpdate", "STATUS_LABELS",
    "OrderAnalytics", "DailyOrders", "StatusShare"
]
