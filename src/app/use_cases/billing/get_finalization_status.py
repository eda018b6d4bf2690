"""GetCustomerFinalizationStatus Use Case

Answers whether every root order of a customer has a finalized billing for
a month, which gates issuing the combined invoice.
"""

import logging

from libs.result import Result, Return, Error
from src.app.repositories.customer_order_repository import CustomerOrderRepository
from src.app.repositories.order_billing_repository import OrderBillingRepository
from src.domain.errors import BillingDomainError
from src.domain.schedule import parse_billing_month
from .dtos import CustomerFinalizationStatusDTO

logger = logging.getLogger(__name__)


class GetCustomerFinalizationStatus:
    """
    Use Case: Customer level finalization check

    Business Rules:
    1. Only root orders count; renewals (parent_order_id set) are excluded
    2. An order without a billing row counts as not finalized
    3. No root orders in the month -> all_finalized is vacuously True
    """

    def __init__(
        self,
        order_repo: CustomerOrderRepository,
        billing_repo: OrderBillingRepository,
    ):
        self.order_repo = order_repo
        self.billing_repo = billing_repo

    async def evaluate(self, customer_id: int, billing_month: str) -> CustomerFinalizationStatusDTO:
        parse_billing_month(billing_month)

        orders = await self.order_repo.list_root_orders_for_customer(customer_id, billing_month)
        order_ids = [order.order_id for order in orders]

        billings = await self.billing_repo.list_for_orders(order_ids, billing_month)
        finalized_ids = {billing.order_id for billing in billings if billing.is_finalized}
        finalized_orders = sum(1 for order_id in order_ids if order_id in finalized_ids)

        return CustomerFinalizationStatusDTO(
            customer_id=customer_id,
            billing_month=billing_month,
            total_orders=len(order_ids),
            finalized_orders=finalized_orders,
            all_finalized=finalized_orders == len(order_ids),
        )

    async def execute(self, customer_id: int, billing_month: str) -> Result[CustomerFinalizationStatusDTO]:
        try:
            return Return.ok(await self.evaluate(customer_id, billing_month))

        except BillingDomainError as e:
            return Return.err(Error(code=e.code, message=e.message, reason=e.reason))

        except Exception as e:
            logger.error(f"Finalization status failed for customer {customer_id} {billing_month}: {e}")
            return Return.err(
                Error(
                    code="FINALIZATION_STATUS_FAILED",
                    message="Failed to evaluate customer finalization status",
                    reason=str(e),
                )
            )
