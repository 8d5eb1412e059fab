"""
Order analytics
Derived figures over the full order set, recomputed on every call.

Time windows are deliberately not uniform:
- today: since local midnight
- week: rolling 7 x 24h ending now
- month: since local midnight on the 1st of the current month
"""
from collections import Counter
from datetime import datetime, timezone, timedelta, date, tzinfo
from typing import Iterable, Optional, Union
from zoneinfo import ZoneInfo

from config import TIMEZONE, UNIT_PRICE
from models.analytics import OrderAnalytics, DailyOrders, StatusShare
from models.order import Order, OrderStatus

DAILY_BREAKDOWN_DAYS = 30


def local_timezone() -> tzinfo:
    return ZoneInfo(TIMEZONE)


def as_aware(value: Union[str, datetime]) -> datetime:
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _field(order, name):
    if isinstance(order, Order):
        return getattr(order, name)
    return order.get(name)


def _status(order) -> Optional[OrderStatus]:
    try:
        return OrderStatus(_field(order, "status"))
    except ValueError:
        return None


def _rate(part: int, total: int) -> float:
    if total == 0:
        return 0
    return round(part / total * 100, 1)


def compute_order_analytics(
    orders: Iterable,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
    unit_price: int = UNIT_PRICE,
    days: int = DAILY_BREAKDOWN_DAYS
) -> OrderAnalytics:
    """Build the analytics snapshot for `orders` (Order models or stored dicts)"""
    tz = tz or local_timezone()
    now = as_aware(now) if now else datetime.now(timezone.utc)
    local_now = now.astimezone(tz)

    today_start = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    month_start = today_start.replace(day=1)
    week_start = now - timedelta(days=7)

    rows = [(_status(o), as_aware(_field(o, "created_at"))) for o in orders]
    total = len(rows)

    status_counts = Counter(status for status, _ in rows if status is not None)
    delivered = status_counts[OrderStatus.DELIVERED]
    cancelled = status_counts[OrderStatus.CANCELLED]

    def count(since: datetime, only: Optional[OrderStatus] = None) -> int:
        return sum(
            1 for status, created in rows
            if created >= since and (only is None or status == only)
        )

    # Daily buckets keyed by local calendar date
    per_day = {}
    for status, created in rows:
        day = created.astimezone(tz).date()
        bucket = per_day.setdefault(day, [0, 0])
        bucket[0] += 1
        if status == OrderStatus.DELIVERED:
            bucket[1] += 1

    today: date = local_now.date()
    daily = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        day_orders, day_delivered = per_day.get(day, (0, 0))
        daily.append(DailyOrders(
            date=day.isoformat(),
            orders=day_orders,
            delivered=day_delivered,
            revenue=day_delivered * unit_price
        ))

    return OrderAnalytics(
        total=total,
        new=status_counts[OrderStatus.NEW],
        processing=status_counts[OrderStatus.PROCESSING],
        delivered=delivered,
        cancelled=cancelled,
        today_orders=count(today_start),
        week_orders=count(week_start),
        month_orders=count(month_start),
        total_revenue=delivered * unit_price,
        today_revenue=count(today_start, OrderStatus.DELIVERED) * unit_price,
        week_revenue=count(week_start, OrderStatus.DELIVERED) * unit_price,
        month_revenue=count(month_start, OrderStatus.DELIVERED) * unit_price,
        conversion_rate=_rate(delivered, total),
        cancellation_rate=_rate(cancelled, total),
        daily_orders=daily,
        status_distribution=[
            StatusShare(status=s.value, name=s.label, value=status_counts[s])
            for s in OrderStatus
        ]
    )
