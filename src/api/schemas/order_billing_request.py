"""Request schemas for Order Billing API

Pydantic models for validating incoming HTTP requests.
"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator

BILLING_MONTH_REGEX = r"^\d{4}-(0[1-9]|1[0-2])$"


class CalculateBillingRequestSchema(BaseModel):
    """
    Request schema for calculating an order billing

    Used for POST /order-billing endpoint.
    """

    order_id: int = Field(
        ...,
        gt=0,
        description="Order identifier (must be > 0)"
    )

    billing_month: str = Field(
        ...,
        pattern=BILLING_MONTH_REGEX,
        description="Billing month (YYYY-MM)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "order_id": 42,
                "billing_month": "2024-06"
            }
        }


class FinalizeBillingRequestSchema(BaseModel):
    """
    Request schema for finalizing an order billing

    Used for POST /order-billing/finalize endpoint.
    """

    order_id: int = Field(
        ...,
        gt=0,
        description="Order identifier (must be > 0)"
    )

    billing_month: str = Field(
        ...,
        pattern=BILLING_MONTH_REGEX,
        description="Billing month (YYYY-MM)"
    )

    finalized_by: Optional[str] = Field(
        default=None,
        max_length=255,
        description="Identity finalizing the billing (defaults to 'admin')"
    )

    @field_validator('finalized_by')
    @classmethod
    def blank_to_default(cls, v):
        """Treat a blank identity as omitted"""
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v

    class Config:
        json_schema_extra = {
            "example": {
                "order_id": 42,
                "billing_month": "2024-07",
                "finalized_by": "accounts@tiffin.example"
            }
        }
