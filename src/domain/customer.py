"""Customer Domain Entity

Customer directory used to label rosters and invoices.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import DateTime, String
from src.domain.base import BaseModel, BigIntId, utc_now


class Customer(BaseModel, table=True):
    __tablename__ = "customers"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntId, primary_key=True, autoincrement=True),
        description="Unique customer identifier (auto-increment)"
    )

    name: str = Field(
        sa_column=Column(String(255), nullable=False, index=True),
        description="Customer display name"
    )

    phone: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
    )

    address: Optional[str] = Field(
        default=None,
        sa_column=Column(String(500), nullable=True),
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
