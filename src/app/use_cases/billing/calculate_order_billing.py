"""CalculateOrderBilling Use Case

Computes the prorated monthly charge of one order and upserts its
OrderBilling row. Safe to call repeatedly: a calculating row is recomputed
from the current order terms, a finalized row is returned untouched.
"""

import logging
from functools import partial
from typing import Tuple

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.customer_order_repository import CustomerOrderRepository
from src.app.repositories.order_billing_repository import OrderBillingRepository
from src.domain.customer_order import CustomerOrderDetails
from src.domain.errors import BillingDomainError, NotApplicableError, OrderNotFoundError
from src.domain.order_billing import BillingStatus, OrderBilling
from src.domain.proration import compute_charge
from src.domain.schedule import overlaps_month, parse_billing_month
from .dtos import CalculateBillingCommandDTO, OrderBillingDTO

logger = logging.getLogger(__name__)


class CalculateOrderBilling:
    """
    Use Case: Calculate an order's billing for one month

    Business Rules:
    1. The order's date range must overlap the billing month
    2. Charge = price x quantity x billed / nominal occurrences
    3. Absent row -> inserted with status=calculating
    4. Calculating row -> figures overwritten (idempotent recompute)
    5. Finalized row -> left untouched, returned as is
    6. Row is locked (SELECT FOR UPDATE) for the whole read-compute-write

    Flow:
    1. Load order with its meal plan
    2. Check month overlap
    3. Compute charge
    4. Lock and upsert billing row
    5. Commit (retrying on lock contention)
    6. Return response
    """

    def __init__(
        self,
        uow: UnitOfWork,
        order_repo: CustomerOrderRepository,
        billing_repo: OrderBillingRepository,
        max_attempts: int = 1,
        backoff_seconds: float = 0.0,
    ):
        self.uow = uow
        self.order_repo = order_repo
        self.billing_repo = billing_repo
        self.max_attempts = max_attempts
        self.backoff_seconds = backoff_seconds

    async def materialize(
        self, order_id: int, billing_month: str
    ) -> Tuple[OrderBilling, CustomerOrderDetails]:
        """
        Compute and upsert the billing row inside the caller's transaction

        Does not commit. Raises domain errors instead of returning Results so
        FinalizeOrderBilling and BuildCombinedInvoice can compose it.
        """
        parse_billing_month(billing_month)

        order = await self.order_repo.get_details(order_id)
        if order is None:
            raise OrderNotFoundError(f"Order {order_id} not found")

        recurrence = order.recurrence()
        if not overlaps_month(recurrence, billing_month):
            raise NotApplicableError(
                f"Order {order_id} ({order.start_date} to {order.end_date}) "
                f"does not overlap billing month {billing_month}",
                reason="Order date range outside billing month",
            )

        charge = compute_charge(
            recurrence=recurrence,
            frequency=order.meal_plan_frequency,
            price=order.price,
            quantity=order.quantity,
            billing_month=billing_month,
        )

        billing = await self.billing_repo.get(order_id, billing_month, for_update=True)

        if billing is None:
            billing = await self.billing_repo.create(
                OrderBilling(
                    order_id=order_id,
                    customer_id=order.customer_id,
                    billing_month=billing_month,
                    status=BillingStatus.CALCULATING,
                    amount=charge.amount,
                    total_delivered=charge.billed_occurrences,
                    total_plan_days=charge.nominal_occurrences,
                )
            )
            logger.info(
                f"Created billing for order {order_id} {billing_month}: "
                f"{charge.billed_occurrences}/{charge.nominal_occurrences} occurrences, amount {charge.amount}"
            )
        elif billing.apply_calculation(
            charge.amount, charge.billed_occurrences, charge.nominal_occurrences
        ):
            billing = await self.billing_repo.update(billing)
            logger.info(f"Recalculated billing for order {order_id} {billing_month}: amount {charge.amount}")
        else:
            logger.debug(f"Billing for order {order_id} {billing_month} is finalized, left unchanged")

        return billing, order

    async def execute(self, command: CalculateBillingCommandDTO) -> Result[OrderBillingDTO]:
        """
        Execute billing calculation

        Args:
            command: CalculateBillingCommandDTO with order_id and billing_month

        Returns:
            Result[OrderBillingDTO]: Success with billing row or error
        """
        try:
            billing, order = await self.uow.run(
                partial(self.materialize, command.order_id, command.billing_month),
                max_attempts=self.max_attempts,
                backoff_seconds=self.backoff_seconds,
            )
            return Return.ok(OrderBillingDTO.from_entity(billing, order))

        except BillingDomainError as e:
            return Return.err(Error(code=e.code, message=e.message, reason=e.reason))

        except Exception as e:
            logger.error(f"Billing calculation failed for order {command.order_id} {command.billing_month}: {e}")
            return Return.err(
                Error(
                    code="CALCULATE_ORDER_BILLING_FAILED",
                    message="Failed to calculate order billing",
                    reason=str(e),
                )
            )
