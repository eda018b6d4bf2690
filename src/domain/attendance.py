"""Attendance Aggregator

Builds the kitchen's daily delivery roster and the monthly order list from
already fetched order projections.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List

from src.domain.customer_order import CustomerOrderDetails
from src.domain.recurrence import Recurrence
from src.domain.schedule import delivers_on, overlaps_month


@dataclass(frozen=True)
class RosterEntry:
    order_id: int
    customer_id: int
    customer_name: str
    quantity: int
    meal_plan_name: str


@dataclass
class DailyRoster:
    date: date
    entries: List[RosterEntry] = field(default_factory=list)
    total_count: int = 0


@dataclass(frozen=True)
class ScheduledOrder:
    """Order overlapping a month together with its parsed recurrence"""
    order: CustomerOrderDetails
    recurrence: Recurrence


def daily_roster(target_date: date, active_orders: Iterable[CustomerOrderDetails]) -> DailyRoster:
    """
    Orders delivering on ``target_date``

    ``active_orders`` is expected to be pre-filtered on the date range; the
    recurrence is still evaluated for every order so a range-only upstream
    filter cannot leak off-day orders into the roster.
    """
    roster = DailyRoster(date=target_date)
    for order in active_orders:
        if not delivers_on(order.recurrence(), target_date):
            continue
        roster.entries.append(
            RosterEntry(
                order_id=order.order_id,
                customer_id=order.customer_id,
                customer_name=order.customer_name,
                quantity=order.quantity,
                meal_plan_name=order.meal_plan_name,
            )
        )
        roster.total_count += order.quantity
    return roster


def monthly_roster(billing_month: str, candidate_orders: Iterable[CustomerOrderDetails]) -> List[ScheduledOrder]:
    scheduled = []
    for order in candidate_orders:
        recurrence = order.recurrence()
        if overlaps_month(recurrence, billing_month):
            scheduled.append(ScheduledOrder(order=order, recurrence=recurrence))
    return scheduled
