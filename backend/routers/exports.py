from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from typing import Optional
from datetime import datetime

from models.order import OrderStatus
from dependencies import get_order_service
from services.analytics import local_timezone
from services.order_service import OrderService

router = APIRouter(prefix="/export", tags=["export"])


@router.get("/orders")
async def export_orders_csv(
    search: Optional[str] = None,
    status: Optional[OrderStatus] = None,
    service: OrderService = Depends(get_order_service)
):
    """Export the (optionally filtered) orders to CSV"""
    content = await service.export_csv(search=search, status=status)

    # BOM so spreadsheet apps detect UTF-8 for the Arabic headers
    return StreamingResponse(
        iter(["\ufeff" + content]),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename=orders_{datetime.now(local_timezone()).strftime('%Y-%m-%d')}.csv"}
    )
