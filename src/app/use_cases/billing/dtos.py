"""Data Transfer Objects for Billing Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

from src.domain.base import as_utc
from src.domain.customer_order import CustomerOrderDetails
from src.domain.order_billing import BillingStatus, OrderBilling


class CalculateBillingCommandDTO(BaseModel):
    """
    Command DTO for calculating one order's billing for a month

    Used as input to CalculateOrderBilling use case.
    """

    order_id: int = Field(
        ...,
        gt=0,
        description="Order identifier"
    )

    billing_month: str = Field(
        ...,
        description="Billing month key (YYYY-MM)"
    )


class FinalizeBillingCommandDTO(BaseModel):
    """
    Command DTO for finalizing one order's billing for a month

    Used as input to FinalizeOrderBilling use case.
    """

    order_id: int = Field(
        ...,
        gt=0,
        description="Order identifier"
    )

    billing_month: str = Field(
        ...,
        description="Billing month key (YYYY-MM)"
    )

    finalized_by: Optional[str] = Field(
        default=None,
        description="Identity finalizing the billing (defaults to the configured identity)"
    )


class OrderBillingDTO(BaseModel):
    """
    Response DTO for one order billing row

    Order, customer and meal plan fields are filled when the order is known.
    """

    id: int = Field(..., description="Order billing ID")
    order_id: int = Field(..., description="Order identifier")
    customer_id: int = Field(..., description="Customer identifier")
    billing_month: str = Field(..., description="Billing month key (YYYY-MM)")
    status: str = Field(..., description="Billing status (calculating, finalized)")
    total_delivered: int = Field(..., description="Billed occurrences in the month")
    total_plan_days: int = Field(..., description="Nominal occurrences the price covers")
    amount: Decimal = Field(..., description="Prorated charge")
    finalized_at: Optional[datetime] = Field(default=None)
    finalized_by: Optional[str] = Field(default=None)
    created_at: datetime = Field(...)
    updated_at: datetime = Field(...)
    customer_name: Optional[str] = Field(default=None)
    meal_plan_name: Optional[str] = Field(default=None)
    order_price: Optional[Decimal] = Field(default=None)
    quantity: Optional[int] = Field(default=None)

    class Config:
        json_schema_extra = {
            "example": {
                "id": 1,
                "order_id": 42,
                "customer_id": 7,
                "billing_month": "2024-06",
                "status": "calculating",
                "total_delivered": 7,
                "total_plan_days": 12,
                "amount": "350.00",
                "finalized_at": None,
                "finalized_by": None,
                "created_at": "2024-06-30T10:00:00Z",
                "updated_at": "2024-06-30T10:00:00Z",
                "customer_name": "Asha Patel",
                "meal_plan_name": "Veg Lunch",
                "order_price": "300.00",
                "quantity": 2
            }
        }

    @classmethod
    def from_entity(
        cls, billing: OrderBilling, order: Optional[CustomerOrderDetails] = None
    ) -> "OrderBillingDTO":
        return cls(
            id=billing.id,
            order_id=billing.order_id,
            customer_id=billing.customer_id,
            billing_month=billing.billing_month,
            status=BillingStatus(billing.status).value,
            total_delivered=billing.total_delivered,
            total_plan_days=billing.total_plan_days,
            amount=billing.amount,
            finalized_at=as_utc(billing.finalized_at),
            finalized_by=billing.finalized_by,
            created_at=as_utc(billing.created_at),
            updated_at=as_utc(billing.updated_at),
            customer_name=order.customer_name if order else None,
            meal_plan_name=order.meal_plan_name if order else None,
            order_price=order.price if order else None,
            quantity=order.quantity if order else None,
        )


class ListOrderBillingsResponseDTO(BaseModel):
    billings: List[OrderBillingDTO] = Field(default_factory=list)
    total: int = Field(..., description="Number of billing rows returned")


class CustomerFinalizationStatusDTO(BaseModel):
    """
    Customer level finalization summary for one billing month

    all_finalized is vacuously True when the customer has no root orders in
    the month; use total_orders to tell the two cases apart.
    """

    customer_id: int = Field(..., description="Customer identifier")
    billing_month: str = Field(..., description="Billing month key (YYYY-MM)")
    total_orders: int = Field(..., description="Root orders overlapping the month")
    finalized_orders: int = Field(..., description="Root orders with a finalized billing")
    all_finalized: bool = Field(..., description="Every root order is finalized")


class FinalizeBillingResponseDTO(BaseModel):
    """
    Response DTO for finalize operation

    Returned by FinalizeOrderBilling use case.
    """

    order_billing: OrderBillingDTO
    already_finalized: bool = Field(
        ...,
        description="True when the billing was finalized before this call (no-op)"
    )
    all_orders_finalized: bool = Field(..., description="Every root order of the customer is finalized")
    total_orders: int = Field(..., description="Root orders of the customer overlapping the month")
    finalized_orders: int = Field(..., description="Finalized root orders of the customer")

    class Config:
        json_schema_extra = {
            "example": {
                "order_billing": {"order_id": 42, "billing_month": "2024-07", "status": "finalized"},
                "already_finalized": False,
                "all_orders_finalized": False,
                "total_orders": 2,
                "finalized_orders": 1
            }
        }


class CombinedInvoiceDTO(BaseModel):
    """
    Combined invoice projection of a customer's month

    Always returned, finalized or not; callers issue the invoice only when
    all_finalized is True.
    """

    customer_id: int
    customer_name: str
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    billing_month: str
    orders: List[OrderBillingDTO] = Field(default_factory=list)
    total_orders: int
    finalized_orders: int
    all_finalized: bool
    grand_total: Decimal
    grand_total_delivered: int


class MonthlyBillingResultDTO(BaseModel):
    """
    Result DTO for the monthly billing worker run
    """

    billing_month: str
    total_orders: int = Field(..., description="Root orders overlapping the month")
    calculated: int = Field(..., description="Rows created or recomputed")
    already_finalized: int = Field(..., description="Rows left untouched because finalized")
    failed: int = Field(..., description="Orders whose calculation failed")
    execution_time_ms: int
