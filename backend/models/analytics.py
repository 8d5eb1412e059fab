from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DailyOrders(_CamelModel):
    date: str  # YYYY-MM-DD, local calendar date
    orders: int = 0
    delivered: int = 0
    revenue: int = 0


class StatusShare(_CamelModel):
    status: str
    name: str  # display label
    value: int = 0


class OrderAnalytics(_CamelModel):
    """Snapshot computed on demand from the full order set; never persisted"""
    total: int = 0
    new: int = 0
    processing: int = 0
    delivered: int = 0
    cancelled: int = 0

    today_orders: int = 0
    week_orders: int = 0
    month_orders: int = 0

    total_revenue: int = 0
    today_revenue: int = 0
    week_revenue: int = 0
    month_revenue: int = 0

    conversion_rate: float = 0
    cancellation_rate: float = 0

    daily_orders: List[DailyOrders] = []
    status_distribution: List[StatusShare] = []
