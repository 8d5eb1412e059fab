from fastapi import APIRouter, Depends

from dependencies import get_order_service
from routers.envelope import success
from services.order_service import OrderService

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/orders")
async def get_order_analytics(service: OrderService = Depends(get_order_service)):
    """Order analytics: status counts, time windows, revenue, rates and a 30 day breakdown"""
    analytics = await service.compute_analytics()
    return success(analytics)
