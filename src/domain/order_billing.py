"""Order Billing Domain Entity

One row per (order_id, billing_month) holding the prorated charge of an
order for that month and its finalization state.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional, Set
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, CheckConstraint, DateTime, ForeignKey, Integer, Numeric, String, UniqueConstraint
from src.domain.base import BaseModel, BigIntId, enum_column_type, utc_now
from src.domain.errors import InvalidStatusTransitionError


class BillingStatus(str, Enum):
    """Order billing lifecycle states"""
    CALCULATING = "calculating"  # amount computed, may still be recomputed
    FINALIZED = "finalized"      # locked, terminal


ALLOWED_TRANSITIONS: Dict[BillingStatus, Set[BillingStatus]] = {
    BillingStatus.CALCULATING: {BillingStatus.FINALIZED},
    BillingStatus.FINALIZED: set(),
}


def can_transition(source: BillingStatus, target: BillingStatus) -> bool:
    return target in ALLOWED_TRANSITIONS.get(source, set())


class OrderBilling(BaseModel, table=True):
    """
    Order Billing - monthly charge of one order

    Domain Rules:
    - (order_id, billing_month) is unique
    - Status transitions: calculating -> finalized, never backwards
    - amount, total_delivered and total_plan_days may only change while calculating
    - finalized_at / finalized_by are set exactly once, on finalization
    """

    __tablename__ = "order_billing"
    __table_args__ = (
        UniqueConstraint('order_id', 'billing_month', name='uq_order_billing_order_month'),
        CheckConstraint('amount >= 0', name='order_billing_amount_non_negative'),
        Index('ix_order_billing_customer_month', 'customer_id', 'billing_month'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntId, primary_key=True, autoincrement=True),
        description="Unique order billing identifier (auto-increment)"
    )

    order_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("customer_orders.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to CustomerOrder"
    )

    customer_id: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Customer owning the order (denormalized for invoice queries)"
    )

    billing_month: str = Field(
        sa_column=Column(String(7), nullable=False),
        description="Billing month key (YYYY-MM)"
    )

    status: BillingStatus = Field(
        default=BillingStatus.CALCULATING,
        sa_column=Column(
            enum_column_type(BillingStatus, "billing_status"),
            nullable=False,
            default=BillingStatus.CALCULATING,
        ),
        description="Billing status (calculating, finalized)"
    )

    total_delivered: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Billed occurrences inside the month and the order range"
    )

    total_plan_days: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Nominal occurrences the price is based on"
    )

    amount: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Prorated charge for the month (precision: 18,2)"
    )

    finalized_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True),
        description="Timestamp when the billing was finalized"
    )

    finalized_by: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Identity that finalized the billing"
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
    def is_finalized(self) -> bool:
        return self.status == BillingStatus.FINALIZED

    def apply_calculation(self, amount: Decimal, total_delivered: int, total_plan_days: int) -> bool:
        """
        Overwrite the computed figures while still calculating

        Returns:
            True if figures were written, False if the row is finalized and
            was left untouched
        """
        if self.is_finalized:
            return False
        self.amount = amount
        self.total_delivered = total_delivered
        self.total_plan_days = total_plan_days
        self.updated_at = utc_now()
        return True

    def transition_to(self, target: BillingStatus) -> None:
        current = BillingStatus(self.status)
        if not can_transition(current, target):
            raise InvalidStatusTransitionError(
                f"Order billing {self.order_id}/{self.billing_month} cannot move "
                f"from {current.value} to {target.value}"
            )
        self.status = target
        self.updated_at = utc_now()

    def finalize(self, finalized_by: str, finalized_at: Optional[datetime] = None) -> bool:
        """
        Lock the billing

        Returns:
            True if the row transitioned, False if it was already finalized
        """
        if self.is_finalized:
            return False
        self.transition_to(BillingStatus.FINALIZED)
        self.finalized_at = finalized_at or utc_now()
        self.finalized_by = finalized_by
        return True
