"""Data Transfer Objects for Tiffin Report Use Cases"""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field


class RosterEntryDTO(BaseModel):
    order_id: int
    customer_id: int
    customer_name: str
    quantity: int
    meal_plan_name: str


class DailyTiffinCountDTO(BaseModel):
    """
    Response DTO for the daily delivery roster

    Returned by GetDailyTiffinCount use case.
    """

    date: str = Field(..., description="Delivery date (YYYY-MM-DD)")
    orders: List[RosterEntryDTO] = Field(default_factory=list)
    total_count: int = Field(..., description="Sum of quantities delivered on the date")

    class Config:
        json_schema_extra = {
            "example": {
                "date": "2024-06-10",
                "orders": [
                    {
                        "order_id": 42,
                        "customer_id": 7,
                        "customer_name": "Asha Patel",
                        "quantity": 2,
                        "meal_plan_name": "Veg Lunch"
                    }
                ],
                "total_count": 2
            }
        }


class MonthlyOrderDTO(BaseModel):
    order_id: int
    customer_id: int
    customer_name: str
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    meal_plan_id: int
    meal_plan_name: str
    meal_plan_frequency: str
    quantity: int
    price: Decimal
    start_date: date
    end_date: date
    selected_days: List[str] = Field(
        default_factory=list,
        description="Normalized weekday names, Monday first (empty = every day)"
    )
    every_day: bool
    parent_order_id: Optional[int] = None


class MonthlyTiffinListDTO(BaseModel):
    """
    Response DTO for orders overlapping a month

    Returned by GetMonthlyTiffinList use case.
    """

    month: str = Field(..., description="Month key (YYYY-MM)")
    orders: List[MonthlyOrderDTO] = Field(default_factory=list)
    total_orders: int
