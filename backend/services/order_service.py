import csv
import io
import logging
from datetime import datetime, timezone
from typing import List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from models.analytics import OrderAnalytics
from models.order import Order, OrderCreate, OrderStatus, validation_message
from services.analytics import compute_order_analytics, local_timezone, as_aware
from services.errors import ValidationError, NotFoundError
from services.order_store import OrderStore

logger = logging.getLogger(__name__)

EXPORT_HEADER = ["رقم الطلب", "الاسم", "الهاتف", "العنوان", "الحالة", "التاريخ", "الملاحظات"]


def parse_status(value: Union[str, OrderStatus, None]) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValidationError("حالة الطلب غير صحيحة")


class OrderService:
    """Order lifecycle (create / status update / delete / list) and analytics"""

    def __init__(self, store: OrderStore, unit_price: Optional[int] = None, tz=None):
        self._store = store
        self._unit_price = unit_price
        self._tz = tz

    async def create(self, data: Union[OrderCreate, dict]) -> Order:
        """Validate customer input and persist a NEW order"""
        if not isinstance(data, OrderCreate):
            try:
                data = OrderCreate.model_validate(data or {})
            except PydanticValidationError as e:
                raise ValidationError(validation_message(e.errors()))

        order = Order(**data.model_dump())
        await self._store.insert(order.to_document())
        logger.info(f"Order created: {order.id}")
        return order

    async def get(self, order_id: str) -> Order:
        doc = await self._store.get(order_id)
        if not doc:
            raise NotFoundError()
        return Order(**doc)

    async def update(self, order_id: str, status: Union[str, OrderStatus]) -> Order:
        """Change the status of an order; no other field is writable"""
        new_status = parse_status(status)
        doc = await self._store.update(order_id, {
            "status": new_status.value,
            "updated_at": datetime.now(timezone.utc).isoformat()
        })
        if not doc:
            raise NotFoundError()
        logger.info(f"Order {order_id} status -> {new_status.value}")
        return Order(**doc)

    async def delete(self, order_id: str) -> None:
        """Permanently remove an order; deleting a missing order is an error"""
        deleted = await self._store.delete(order_id)
        if not deleted:
            raise NotFoundError()
        logger.info(f"Order deleted: {order_id}")

    async def list(self, search: Optional[str] = None, status: Union[str, OrderStatus, None] = None) -> List[Order]:
        status_value = parse_status(status).value if status else None
        docs = await self._store.find(search=search, status=status_value)
        return [Order(**doc) for doc in docs]

    async def compute_analytics(self, now: Optional[datetime] = None) -> OrderAnalytics:
        docs = await self._store.find()
        kwargs = {}
        if self._unit_price is not None:
            kwargs["unit_price"] = self._unit_price
        return compute_order_analytics(docs, now=now, tz=self._tz, **kwargs)

    async def export_csv(self, search: Optional[str] = None, status: Union[str, OrderStatus, None] = None) -> str:
        """CSV of the filtered orders, one row per order"""
        orders = await self.list(search=search, status=status)
        tz = self._tz or local_timezone()

        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(EXPORT_HEADER)
        for order in orders:
            writer.writerow([
                order.id,
                order.customer_name,
                order.customer_phone,
                order.customer_address,
                order.status.label,
                as_aware(order.created_at).astimezone(tz).date().isoformat(),
                order.customer_notes or ""
            ])
        return output.getvalue()
