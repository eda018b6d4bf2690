"""Schedule Evaluator

Pure functions answering "does this recurrence deliver on day X?" and
"does it touch billing month M?". Billing months are ``YYYY-MM`` keys.
"""

import re
from calendar import monthrange
from datetime import date, timedelta
from typing import Iterator, Tuple

from src.domain.errors import InvalidBillingMonthError
from src.domain.recurrence import Recurrence, WEEKDAY_NAMES

BILLING_MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def weekday_name(day: date) -> str:
    """Locale independent English weekday name (``Monday`` .. ``Sunday``)"""
    return WEEKDAY_NAMES[day.weekday()]


def month_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def parse_billing_month(billing_month: str) -> Tuple[int, int]:
    """
    Split a ``YYYY-MM`` key into (year, month)

    Raises:
        InvalidBillingMonthError: key is not a zero padded YYYY-MM string
    """
    if not isinstance(billing_month, str) or not BILLING_MONTH_PATTERN.match(billing_month):
        raise InvalidBillingMonthError(
            f"Invalid billing_month {billing_month!r} - must be YYYY-MM"
        )
    year, month = billing_month.split("-")
    return int(year), int(month)


def month_bounds(billing_month: str) -> Tuple[date, date]:
    """First and last calendar date of a billing month"""
    year, month = parse_billing_month(billing_month)
    _, last_day = monthrange(year, month)
    return date(year, month, 1), date(year, month, last_day)


def iter_dates(first: date, last: date) -> Iterator[date]:
    current = first
    while current <= last:
        yield current
        current += timedelta(days=1)


def delivers_on(recurrence: Recurrence, day: date) -> bool:
    if day < recurrence.start_date or day > recurrence.end_date:
        return False
    if recurrence.every_day:
        return True
    return weekday_name(day) in recurrence.selected_days


def overlaps_month(recurrence: Recurrence, billing_month: str) -> bool:
    """
    Coarse monthly membership test on month keys

    Zero padded ``YYYY-MM`` strings compare correctly as plain strings. This
    is range based only: an order whose weekday pattern never hits a date
    inside the month still overlaps it.
    """
    parse_billing_month(billing_month)
    return month_key(recurrence.start_date) <= billing_month <= month_key(recurrence.end_date)


def billable_window(recurrence: Recurrence, billing_month: str) -> Tuple[date, date]:
    """Intersection of the billing month with the recurrence range

    The window is empty (first > last) when the two do not intersect.
    """
    first, last = month_bounds(billing_month)
    return max(first, recurrence.start_date), min(last, recurrence.end_date)


def count_deliveries(recurrence: Recurrence, first: date, last: date) -> int:
    """Number of dates in [first, last] on which the recurrence delivers"""
    return sum(1 for day in iter_dates(first, last) if delivers_on(recurrence, day))
