from fastapi import APIRouter, Depends
from typing import Optional

from models.order import OrderCreate, OrderStatus, OrderStatusUpdate
from dependencies import get_order_service
from routers.envelope import success
from services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("")
async def get_orders(
    search: Optional[str] = None,
    status: Optional[OrderStatus] = None,
    service: OrderService = Depends(get_order_service)
):
    """List orders

    - search: case-insensitive match on name, phone or address
    - status: exact status (NEW, PROCESSING, DELIVERED, CANCELLED)
    """
    orders = await service.list(search=search, status=status)
    return success(orders)


@router.post("")
async def create_order(order_data: OrderCreate, service: OrderService = Depends(get_order_service)):
    """Create a new order from the customer form"""
    order = await service.create(order_data)
    return success(order, status_code=201)


@router.get("/{order_id}")
async def get_order(order_id: str, service: OrderService = Depends(get_order_service)):
    """Get single order"""
    order = await service.get(order_id)
    return success(order)


@router.put("/{order_id}")
async def update_order_status(
    order_id: str,
    update: OrderStatusUpdate,
    service: OrderService = Depends(get_order_service)
):
    """Update the status of an order"""
    order = await service.update(order_id, update.status)
    return success(order)


@router.delete("/{order_id}")
async def delete_order(order_id: str, service: OrderService = Depends(get_order_service)):
    """Permanently delete an order"""
    await service.delete(order_id)
    return success()
