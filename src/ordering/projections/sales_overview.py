"""Sales overview for the admin dashboard.

Summarizes the orders placed during a trailing window of days. Revenue is the
sum of every order's total, whatever its status.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from ordering.order.lifecycle import OrderStatus, as_utc

DEFAULT_WINDOW_DAYS = 7


@dataclass(frozen=True)
class SalesOverview:
    days: int
    total_orders: int = 0
    revenue: int = 0
    average_order_value: int = 0
    status_counts: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "days": self.days,
            "total_orders": self.total_orders,
            "revenue": self.revenue,
            "average_order_value": self.average_order_value,
            "status_counts": dict(self.status_counts),
        }


def summarize_orders(summaries, now: datetime, days: int = DEFAULT_WINDOW_DAYS) -> SalesOverview:
    """Overview of ``summaries`` created within ``days`` before ``now``."""
    since = as_utc(now) - timedelta(days=days)
    recent = [s for s in summaries if s.created_at is not None and as_utc(s.created_at) >= since]

    counts = {status.value: 0 for status in OrderStatus}
    for summary in recent:
        counts[summary.status] = counts.get(summary.status, 0) + 1

    revenue = sum(summary.total_amount or 0 for summary in recent)
    return SalesOverview(
        days=days,
        total_orders=len(recent),
        revenue=revenue,
        average_order_value=round(revenue / len(recent)) if recent else 0,
        status_counts=counts,
    )
