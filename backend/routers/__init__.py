from routers.orders import router as orders_router
from routers.analytics import router as analytics_router
from routers.exports import router as exports_router

__all__ = [
    "orders_router",
    "analytics_router",
    "exports_router"
]
