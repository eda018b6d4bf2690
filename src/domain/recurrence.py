"""Recurrence Value Object

Describes which calendar dates an order delivers on: an inclusive date range
plus an optional set of weekday names (empty set = every day).

Raw ``selected_days`` values from the order directory come in several shapes
(JSON array, JSON string, delimited string, Python list). They are normalized
here, once, into a canonical frozenset so the schedule evaluator never has to
branch on representation.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, FrozenSet, Iterable, List

from src.domain.errors import InvalidRecurrenceError

logger = logging.getLogger(__name__)

# Index matches date.weekday(): Monday == 0
WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

WEEKDAY_ABBREVIATIONS = {name[:3]: name for name in WEEKDAY_NAMES}

DAY_DELIMITER = ","


def _recognize(token: str):
    if token in WEEKDAY_NAMES:
        return token
    return WEEKDAY_ABBREVIATIONS.get(token)


def _tokenize(raw: Any) -> List[str]:
    if isinstance(raw, (list, tuple, set, frozenset)):
        return [str(item) for item in raw if item is not None]

    text = str(raw).strip()
    if not text:
        return []

    try:
        decoded = json.loads(text)
    except ValueError:
        decoded = None

    if isinstance(decoded, list):
        return [str(item) for item in decoded if item is not None]
    if isinstance(decoded, str):
        text = decoded

    return text.split(DAY_DELIMITER)


def normalize_selected_days(raw: Any) -> FrozenSet[str]:
    """
    Normalize a raw ``selected_days`` field into canonical weekday names

    Rules:
    - None, an empty collection or a blank string means every day
    - Tokens are trimmed and empty tokens discarded
    - Full names (``Monday``) and catalog abbreviations (``Mon``) are
      recognized, case-sensitively; anything else is dropped
    - A non-empty raw value with no recognizable day falls back to every day
      so ambiguous legacy rows never suppress a billed customer

    Never raises.

    Args:
        raw: Value as stored on the order (list, JSON text or delimited text)

    Returns:
        frozenset of weekday names; empty frozenset means every day
    """
    if raw is None:
        return frozenset()

    tokens = [token.strip() for token in _tokenize(raw)]
    tokens = [token for token in tokens if token]
    if not tokens:
        return frozenset()

    days = set()
    for token in tokens:
        name = _recognize(token)
        if name is None:
            logger.warning(f"Ignoring unrecognized weekday token {token!r} in selected_days")
            continue
        days.add(name)

    if not days:
        logger.warning(
            f"selected_days {raw!r} contains no recognizable weekday, treating as every day"
        )
        return frozenset()

    return frozenset(days)


def sort_days(days: Iterable[str]) -> List[str]:
    """Order weekday names Monday first"""
    return sorted(days, key=WEEKDAY_NAMES.index)


@dataclass(frozen=True)
class Recurrence:
    """
    Delivery schedule of an order

    Invariants:
    - start_date <= end_date (both inclusive)
    - selected_days is empty (every day) or a subset of WEEKDAY_NAMES
    """

    start_date: date
    end_date: date
    selected_days: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        if self.end_date < self.start_date:
            raise InvalidRecurrenceError(
                f"end_date {self.end_date} is before start_date {self.start_date}"
            )

        days = frozenset(self.selected_days)
        unknown = days.difference(WEEKDAY_NAMES)
        if unknown:
            raise InvalidRecurrenceError(
                f"Unknown weekday names: {', '.join(sorted(unknown))}"
            )
        object.__setattr__(self, "selected_days", days)

    @classmethod
    def from_raw(cls, start_date: date, end_date: date, raw_selected_days: Any) -> "Recurrence":
        """Build a recurrence from an order row, normalizing the day field first"""
        return cls(
            start_date=start_date,
            end_date=end_date,
            selected_days=normalize_selected_days(raw_selected_days),
        )

    @property
    def every_day(self) -> bool:
        return not self.selected_days

    @property
    def days_per_week(self) -> int:
        return 7 if self.every_day else len(self.selected_days)

    def ordered_days(self) -> List[str]:
        return sort_days(self.selected_days)
