"""Meal Plan Domain Entity

Catalog of tiffin plans. The plan frequency decides what an order's price
covers (one delivery, one week or one full month).
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import DateTime, Numeric, String, Text
from src.domain.base import BaseModel, BigIntId, enum_column_type, utc_now


class MealFrequency(str, Enum):
    """Billing basis of a meal plan price"""
    DAILY = "Daily"      # price per delivery
    WEEKLY = "Weekly"    # price per week
    MONTHLY = "Monthly"  # price per full calendar month


class MealDays(str, Enum):
    MON_FRI = "Mon-Fri"
    MON_SAT = "Mon-Sat"
    SINGLE = "Single"


class MealPlan(BaseModel, table=True):
    __tablename__ = "meal_plans"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntId, primary_key=True, autoincrement=True),
        description="Unique meal plan identifier (auto-increment)"
    )

    meal_name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Display name of the plan"
    )

    description: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    frequency: MealFrequency = Field(
        default=MealFrequency.MONTHLY,
        sa_column=Column(
            enum_column_type(MealFrequency, "meal_frequency"),
            nullable=False,
            default=MealFrequency.MONTHLY,
        ),
        description="Billing basis of the plan price (Daily, Weekly, Monthly)"
    )

    days: MealDays = Field(
        default=MealDays.MON_FRI,
        sa_column=Column(
            enum_column_type(MealDays, "meal_days"),
            nullable=False,
            default=MealDays.MON_FRI,
        ),
        description="Default delivery days of the plan"
    )

    price: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Catalog price for one billing period of the plan"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
