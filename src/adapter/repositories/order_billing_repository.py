"""SQLAlchemy implementation of OrderBillingRepository

Provides persistence for OrderBilling rows with pessimistic locking on the
(order_id, billing_month) key. Lock timeouts, deadlocks and duplicate key
inserts are reported as ConcurrencyConflictError so callers can retry.
"""

from typing import List, Optional
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.order_billing_repository import OrderBillingRepository
from src.domain.base import utc_now
from src.domain.errors import ConcurrencyConflictError
from src.domain.order_billing import OrderBilling


class SqlAlchemyOrderBillingRepository(OrderBillingRepository):
    """
    SQLAlchemy implementation of OrderBillingRepository

    Features:
    - Row-level locking via SELECT FOR UPDATE
    - UNIQUE(order_id, billing_month) guards concurrent first inserts
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(
        self, order_id: int, billing_month: str, for_update: bool = False
    ) -> Optional[OrderBilling]:
        stmt = (
            select(OrderBilling)
            .where(OrderBilling.order_id == order_id)
            .where(OrderBilling.billing_month == billing_month)
        )

        if for_update:
            stmt = stmt.with_for_update()

        try:
            result = await self.session.execute(stmt)
        except OperationalError as e:
            raise ConcurrencyConflictError(
                f"Could not lock order billing {order_id}/{billing_month}",
                reason=str(e),
            ) from e
        return result.scalar_one_or_none()

    async def create(self, billing: OrderBilling) -> OrderBilling:
        self.session.add(billing)
        try:
            await self.session.flush()
        except (IntegrityError, OperationalError) as e:
            raise ConcurrencyConflictError(
                f"Order billing {billing.order_id}/{billing.billing_month} was written concurrently",
                reason=str(e),
            ) from e
        await self.session.refresh(billing)
        return billing

    async def update(self, billing: OrderBilling) -> OrderBilling:
        billing.updated_at = utc_now()
        self.session.add(billing)
        try:
            await self.session.flush()
        except OperationalError as e:
            raise ConcurrencyConflictError(
                f"Could not update order billing {billing.order_id}/{billing.billing_month}",
                reason=str(e),
            ) from e
        await self.session.refresh(billing)
        return billing

    async def list_for_orders(self, order_ids: List[int], billing_month: str) -> List[OrderBilling]:
        if not order_ids:
            return []
        stmt = (
            select(OrderBilling)
            .where(OrderBilling.order_id.in_(order_ids))
            .where(OrderBilling.billing_month == billing_month)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def search(
        self,
        customer_id: Optional[int] = None,
        billing_month: Optional[str] = None,
        order_id: Optional[int] = None,
    ) -> List[OrderBilling]:
        stmt = select(OrderBilling)

        if order_id is not None:
            stmt = stmt.where(OrderBilling.order_id == order_id)
        if customer_id is not None:
            stmt = stmt.where(OrderBilling.customer_id == customer_id)
        if billing_month is not None:
            stmt = stmt.where(OrderBilling.billing_month == billing_month)

        stmt = stmt.order_by(OrderBilling.billing_month.desc(), OrderBilling.order_id.asc())

        result = await self.session.execute(stmt)
        return list(result.scalars().all())
