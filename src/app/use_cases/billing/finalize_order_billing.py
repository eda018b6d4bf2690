"""FinalizeOrderBilling Use Case

Locks one order's billing for a month (calculating -> finalized) after
bringing it up to date with the current order terms.
"""

import logging

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.customer_order_repository import CustomerOrderRepository
from src.app.repositories.order_billing_repository import OrderBillingRepository
from src.domain.errors import BillingDomainError, OrderBillingNotFoundError
from src.domain.base import utc_now
from .calculate_order_billing import CalculateOrderBilling
from .get_finalization_status import GetCustomerFinalizationStatus
from .dtos import FinalizeBillingCommandDTO, FinalizeBillingResponseDTO, OrderBillingDTO

logger = logging.getLogger(__name__)


class FinalizeOrderBilling:
    """
    Use Case: Finalize an order's billing for one month

    Business Rules:
    1. Billing is recalculated first, in the same transaction and under the
       same row lock as the transition
    2. Only calculating -> finalized is allowed
    3. Finalizing a finalized row is a no-op (already_finalized=True)
    4. finalized_by defaults to the configured identity

    Flow:
    1. Calculate (creates or refreshes the row, takes the row lock)
    2. Re-read the locked row
    3. Transition status, stamp finalized_at / finalized_by
    4. Commit
    5. Evaluate customer level finalization
    """

    def __init__(
        self,
        uow: UnitOfWork,
        order_repo: CustomerOrderRepository,
        billing_repo: OrderBillingRepository,
        default_finalized_by: str = "admin",
        max_attempts: int = 1,
        backoff_seconds: float = 0.0,
    ):
        self.uow = uow
        self.order_repo = order_repo
        self.billing_repo = billing_repo
        self.default_finalized_by = default_finalized_by
        self.max_attempts = max_attempts
        self.backoff_seconds = backoff_seconds
        self.calculator = CalculateOrderBilling(uow, order_repo, billing_repo)

    async def execute(self, command: FinalizeBillingCommandDTO) -> Result[FinalizeBillingResponseDTO]:
        """
        Execute finalization

        Args:
            command: FinalizeBillingCommandDTO with order_id, billing_month, finalized_by

        Returns:
            Result[FinalizeBillingResponseDTO]: Success with billing row and customer summary
        """
        finalized_by = (command.finalized_by or "").strip() or self.default_finalized_by

        async def finalize_locked():
            _, order = await self.calculator.materialize(command.order_id, command.billing_month)

            billing = await self.billing_repo.get(command.order_id, command.billing_month, for_update=True)
            if billing is None:
                raise OrderBillingNotFoundError(
                    f"Order billing not found for order {command.order_id} {command.billing_month}",
                    reason="Row missing after calculation",
                )

            transitioned = billing.finalize(finalized_by, utc_now())
            if transitioned:
                billing = await self.billing_repo.update(billing)
            return billing, order, transitioned

        try:
            billing, order, transitioned = await self.uow.run(
                finalize_locked,
                max_attempts=self.max_attempts,
                backoff_seconds=self.backoff_seconds,
            )

            if transitioned:
                logger.info(
                    f"Finalized billing for order {command.order_id} {command.billing_month} by {finalized_by}"
                )
            else:
                logger.info(
                    f"Billing for order {command.order_id} {command.billing_month} already finalized "
                    f"at {billing.finalized_at}"
                )

            status = await GetCustomerFinalizationStatus(self.order_repo, self.billing_repo).evaluate(
                order.customer_id, command.billing_month
            )
            logger.info(
                f"{status.finalized_orders}/{status.total_orders} orders finalized for customer "
                f"{order.customer_id} {command.billing_month}"
            )

            return Return.ok(
                FinalizeBillingResponseDTO(
                    order_billing=OrderBillingDTO.from_entity(billing, order),
                    already_finalized=not transitioned,
                    all_orders_finalized=status.all_finalized,
                    total_orders=status.total_orders,
                    finalized_orders=status.finalized_orders,
                )
            )

        except BillingDomainError as e:
            return Return.err(Error(code=e.code, message=e.message, reason=e.reason))

        except Exception as e:
            logger.error(f"Finalization failed for order {command.order_id} {command.billing_month}: {e}")
            return Return.err(
                Error(
                    code="FINALIZE_ORDER_BILLING_FAILED",
                    message="Failed to finalize order billing",
                    reason=str(e),
                )
            )
