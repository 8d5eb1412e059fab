"""
Client side data layer for the order API.

OrderClient wraps the HTTP calls and keeps a local read-through cache:
- list views are cached per (search, status) filter and go stale after 2 minutes
- analytics go stale after 5 minutes
- create inserts into matching list views, update patches in place,
  delete removes; none of them refetch

Every mutation reports success or failure through a notifier callback.
Nothing is retried automatically.
"""
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, List, Optional, Tuple

import httpx

from models.analytics import OrderAnalytics
from models.order import Order, OrderStatus
from services.whatsapp import build_whatsapp_url

logger = logging.getLogger(__name__)

ORDERS_STALE_SECONDS = 2 * 60
ANALYTICS_STALE_SECONDS = 5 * 60

Notifier = Callable[[str, str], None]


def log_notifier(level: str, message: str) -> None:
    if level == "error":
        logger.error(message)
    else:
        logger.info(message)


class OrderClientError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def list_key(search: Optional[str] = None, status: Optional[str] = None) -> Tuple:
    return ("orders", "list", search or None, status or None)


def detail_key(order_id: str) -> Tuple:
    return ("orders", "detail", order_id)


ANALYTICS_KEY = ("analytics", "stats")


@dataclass
class CacheEntry:
    data: Any
    fetched_at: float


class QueryCache:
    """Keyed cache with per-read staleness and explicit write rules"""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[Hashable, CacheEntry] = {}

    def get(self, key: Hashable, stale_after: Optional[float] = None):
        """Cached data for `key`, or None when absent or older than `stale_after` seconds"""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if stale_after is not None and self._clock() - entry.fetched_at >= stale_after:
            return None
        return entry.data

    def peek(self, key: Hashable):
        entry = self._entries.get(key)
        return entry.data if entry else None

    def set(self, key: Hashable, data) -> None:
        self._entries[key] = CacheEntry(data=data, fetched_at=self._clock())

    def write(self, key: Hashable, data) -> None:
        """Replace data without touching its fetch time"""
        entry = self._entries.get(key)
        if entry is None:
            self.set(key, data)
        else:
            entry.data = data

    def remove(self, key: Hashable) -> None:
        self._entries.pop(key, None)

    def list_keys(self) -> List[Tuple]:
        return [key for key in self._entries if isinstance(key, tuple) and key[:2] == ("orders", "list")]

    def clear(self) -> None:
        self._entries.clear()


def _status_value(status) -> Optional[str]:
    return status.value if isinstance(status, OrderStatus) else status


def _matches(order: Order, search: Optional[str], status: Optional[str]) -> bool:
    if status and order.status.value != status:
        return False
    if search:
        needle = search.strip().lower()
        haystack = (order.customer_name, order.customer_phone, order.customer_address)
        return any(needle in value.lower() for value in haystack)
    return True


@dataclass
class BulkDeleteResult:
    deleted: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)


class OrderClient:
    def __init__(
        self,
        http: httpx.Client,
        api_prefix: str = "/api",
        cache: Optional[QueryCache] = None,
        notifier: Notifier = log_notifier
    ):
        self.http = http
        self.api_prefix = api_prefix.rstrip("/")
        self.cache = cache or QueryCache()
        self.notify = notifier

    def _request(self, method: str, path: str, default_error: str, **kwargs):
        try:
            response = self.http.request(method, f"{self.api_prefix}{path}", **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise OrderClientError(default_error)

        try:
            result = response.json()
        except ValueError:
            raise OrderClientError(default_error, response.status_code)

        if not result.get("success"):
            raise OrderClientError(result.get("error") or default_error, response.status_code)
        return result.get("data")

    # ---------- queries ----------

    def list_orders(self, search: Optional[str] = None, status=None) -> List[Order]:
        status = _status_value(status)
        key = list_key(search, status)
        cached = self.cache.get(key, stale_after=ORDERS_STALE_SECONDS)
        if cached is not None:
            return cached

        params = {k: v for k, v in (("search", search), ("status", status)) if v}
        data = self._request("GET", "/orders", "فشل في جلب الطلبات", params=params)
        orders = [Order(**o) for o in data or []]
        self.cache.set(key, orders)
        return orders

    def get_order(self, order_id: str) -> Order:
        key = detail_key(order_id)
        cached = self.cache.get(key, stale_after=ORDERS_STALE_SECONDS)
        if cached is not None:
            return cached

        data = self._request("GET", f"/orders/{order_id}", "فشل في جلب الطلب")
        order = Order(**data)
        self.cache.set(key, order)
        return order

    def analytics(self) -> OrderAnalytics:
        cached = self.cache.get(ANALYTICS_KEY, stale_after=ANALYTICS_STALE_SECONDS)
        if cached is not None:
            return cached

        data = self._request("GET", "/analytics/orders", "فشل في جلب الإحصائيات")
        snapshot = OrderAnalytics.model_validate(data)
        self.cache.set(ANALYTICS_KEY, snapshot)
        return snapshot

    # ---------- mutations ----------

    def create_order(self, order_data: dict) -> Order:
        try:
            data = self._request("POST", "/orders", "فشل في إنشاء الطلب", json=order_data)
        except OrderClientError as e:
            self.notify("error", e.message or "حدث خطأ في إنشاء الطلب")
            raise

        order = Order(**data)
        for key in self.cache.list_keys():
            _, _, search, status = key
            orders = self.cache.peek(key)
            if orders is not None and _matches(order, search, status):
                self.cache.write(key, [order] + orders)
        self.cache.set(detail_key(order.id), order)

        self.notify("success", "تم إنشاء الطلب بنجاح! 🎉")
        return order

    def update_status(self, order_id: str, status) -> Order:
        status_value = _status_value(status)
        try:
            data = self._request("PUT", f"/orders/{order_id}", "فشل في تحديث الطلب", json={"status": status_value})
        except OrderClientError as e:
            self.notify("error", e.message or "حدث خطأ في تحديث الطلب")
            raise

        updated = Order(**data)
        self.cache.write(detail_key(updated.id), updated)
        for key in self.cache.list_keys():
            orders = self.cache.peek(key)
            if orders is not None:
                self.cache.write(key, [updated if o.id == updated.id else o for o in orders])

        self.notify("success", "تم تحديث حالة الطلب بنجاح")
        return updated

    def delete_order(self, order_id: str) -> None:
        try:
            self._request("DELETE", f"/orders/{order_id}", "فشل في حذف الطلب")
        except OrderClientError as e:
            self.notify("error", e.message or "حدث خطأ في حذف الطلب")
            raise

        for key in self.cache.list_keys():
            orders = self.cache.peek(key)
            if orders is not None:
                self.cache.write(key, [o for o in orders if o.id != order_id])
        self.cache.remove(detail_key(order_id))

        self.notify("success", "تم حذف الطلب بنجاح")

    def delete_orders(self, order_ids: List[str]) -> BulkDeleteResult:
        """Delete orders one by one; earlier deletions stay when a later one fails"""
        result = BulkDeleteResult()
        for order_id in order_ids:
            try:
                self.delete_order(order_id)
                result.deleted.append(order_id)
            except OrderClientError as e:
                result.failed[order_id] = e.message
        return result

    def whatsapp_url(self, order: Order, number: Optional[str] = None) -> str:
        return build_whatsapp_url(order, number=number)
