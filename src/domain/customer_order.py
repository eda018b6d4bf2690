"""Customer Order Domain Entity

Subscription order: a customer receives ``quantity`` tiffins of a meal plan
on every date of its recurrence. Renewals point at the order they renew via
``parent_order_id``; only root orders take part in invoice aggregation.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, CheckConstraint, Date, DateTime, ForeignKey, Integer, Numeric, Text
from src.domain.base import BaseModel, BigIntId, utc_now
from src.domain.meal_plan import MealFrequency
from src.domain.recurrence import Recurrence


def is_root_order(parent_order_id: Optional[int]) -> bool:
    """NULL and 0 both mark an order that is not a renewal"""
    return not parent_order_id


class CustomerOrder(BaseModel, table=True):
    """
    Customer Order - recurring tiffin subscription

    Domain Rules:
    - quantity > 0
    - end_date >= start_date (inclusive range)
    - selected_days holds the raw stored day list; use recurrence() to read it
    - parent_order_id NULL or 0 marks a root order
    """

    __tablename__ = "customer_orders"
    __table_args__ = (
        CheckConstraint('quantity > 0', name='quantity_positive'),
        CheckConstraint('end_date >= start_date', name='order_range_valid'),
        Index('ix_customer_orders_customer_range', 'customer_id', 'start_date', 'end_date'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntId, primary_key=True, autoincrement=True),
        description="Unique order identifier (auto-increment)"
    )

    customer_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to Customer"
    )

    meal_plan_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("meal_plans.id"), nullable=False),
        description="Foreign key to MealPlan"
    )

    quantity: int = Field(
        sa_column=Column(Integer, nullable=False, default=1),
        description="Tiffins delivered per occurrence"
    )

    selected_days: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Delivery weekdays as stored (JSON array or delimited text, empty = every day)"
    )

    price: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Price for one full billing period of the plan frequency"
    )

    start_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="First delivery date (inclusive)"
    )

    end_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Last delivery date (inclusive)"
    )

    parent_order_id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigInteger, nullable=True),
        description="Order this one renews (NULL or 0 for a root order)"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )

    @property
    def is_root(self) -> bool:
        return is_root_order(self.parent_order_id)

    def recurrence(self) -> Recurrence:
        return Recurrence.from_raw(self.start_date, self.end_date, self.selected_days)


@dataclass
class CustomerOrderDetails:
    """Read projection of an order joined with its customer and meal plan"""

    order_id: int
    customer_id: int
    customer_name: str
    meal_plan_id: int
    meal_plan_name: str
    meal_plan_frequency: MealFrequency
    quantity: int
    price: Decimal
    start_date: date
    end_date: date
    selected_days: Any = None
    parent_order_id: Optional[int] = None
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None

    @property
    def is_root(self) -> bool:
        return is_root_order(self.parent_order_id)

    def recurrence(self) -> Recurrence:
        return Recurrence.from_raw(self.start_date, self.end_date, self.selected_days)
