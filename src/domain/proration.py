"""Monthly charge proration

amount = price x quantity x billed_occurrences / nominal_occurrences

``nominal_occurrences`` is the number of deliveries the order price pays
for, which depends on the meal plan frequency:

- Monthly: deliveries of the weekday pattern over the whole calendar month
- Weekly:  deliveries of the weekday pattern in one week
- Daily:   one delivery
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from src.domain.meal_plan import MealFrequency
from src.domain.recurrence import Recurrence
from src.domain.schedule import billable_window, count_deliveries, month_bounds

CENT = Decimal("0.01")


@dataclass(frozen=True)
class ChargeBreakdown:
    billed_occurrences: int
    nominal_occurrences: int
    amount: Decimal


def nominal_occurrences(
    recurrence: Recurrence,
    frequency: Optional[MealFrequency],
    billing_month: str,
) -> int:
    if frequency == MealFrequency.DAILY:
        return 1
    if frequency == MealFrequency.WEEKLY:
        return recurrence.days_per_week

    first, last = month_bounds(billing_month)
    full_month = Recurrence(first, last, recurrence.selected_days)
    return count_deliveries(full_month, first, last)


def billed_occurrences(recurrence: Recurrence, billing_month: str) -> int:
    first, last = billable_window(recurrence, billing_month)
    if first > last:
        return 0
    return count_deliveries(recurrence, first, last)


def compute_charge(
    recurrence: Recurrence,
    frequency: Optional[MealFrequency],
    price: Decimal,
    quantity: int,
    billing_month: str,
) -> ChargeBreakdown:
    """
    Prorate an order price over the deliveries that fall inside a month

    The result is deterministic for identical inputs and rounded half-up
    to cents.
    """
    billed = billed_occurrences(recurrence, billing_month)
    nominal = nominal_occurrences(recurrence, frequency, billing_month)

    if nominal == 0:
        amount = Decimal("0.00")
    else:
        amount = (Decimal(price) * quantity * billed / nominal).quantize(CENT, rounding=ROUND_HALF_UP)

    return ChargeBreakdown(
        billed_occurrences=billed,
        nominal_occurrences=nominal,
        amount=amount,
    )
