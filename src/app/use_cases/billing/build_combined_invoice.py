"""BuildCombinedInvoice Use Case

Projects all of a customer's root-order billings for a month into one
invoice view. Never gates: the view is returned whether or not every order
is finalized, and all_finalized tells the caller if it may be issued.
"""

import logging
from decimal import Decimal
from functools import partial

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.customer_order_repository import CustomerOrderRepository
from src.app.repositories.order_billing_repository import OrderBillingRepository
from src.domain.errors import BillingDomainError, CustomerNotFoundError
from src.domain.schedule import parse_billing_month
from .calculate_order_billing import CalculateOrderBilling
from .get_finalization_status import GetCustomerFinalizationStatus
from .dtos import CombinedInvoiceDTO, OrderBillingDTO

logger = logging.getLogger(__name__)


class BuildCombinedInvoice:
    """
    Use Case: Combined invoice of a customer for one month

    Business Rules:
    1. Only root orders overlapping the month are included
    2. Each order's billing is materialized (calculated) before reading
    3. grand_total is the sum of the included amounts
    4. all_finalized mirrors the customer level finalization check
    """

    def __init__(
        self,
        uow: UnitOfWork,
        customer_repo: CustomerRepository,
        order_repo: CustomerOrderRepository,
        billing_repo: OrderBillingRepository,
        max_attempts: int = 1,
        backoff_seconds: float = 0.0,
    ):
        self.uow = uow
        self.customer_repo = customer_repo
        self.order_repo = order_repo
        self.billing_repo = billing_repo
        self.max_attempts = max_attempts
        self.backoff_seconds = backoff_seconds
        self.calculator = CalculateOrderBilling(uow, order_repo, billing_repo)

    async def execute(self, customer_id: int, billing_month: str) -> Result[CombinedInvoiceDTO]:
        """
        Execute invoice aggregation

        Args:
            customer_id: Customer identifier
            billing_month: Billing month key (YYYY-MM)

        Returns:
            Result[CombinedInvoiceDTO]: Invoice projection or error
        """
        try:
            parse_billing_month(billing_month)

            customer = await self.customer_repo.get_by_id(customer_id)
            if customer is None:
                raise CustomerNotFoundError(f"Customer {customer_id} not found")

            orders = await self.order_repo.list_root_orders_for_customer(customer_id, billing_month)

            lines = []
            for order in orders:
                billing, _ = await self.uow.run(
                    partial(self.calculator.materialize, order.order_id, billing_month),
                    max_attempts=self.max_attempts,
                    backoff_seconds=self.backoff_seconds,
                )
                lines.append(OrderBillingDTO.from_entity(billing, order))

            status = await GetCustomerFinalizationStatus(self.order_repo, self.billing_repo).evaluate(
                customer_id, billing_month
            )

            invoice = CombinedInvoiceDTO(
                customer_id=customer.id,
                customer_name=customer.name,
                customer_phone=customer.phone,
                customer_address=customer.address,
                billing_month=billing_month,
                orders=lines,
                total_orders=status.total_orders,
                finalized_orders=status.finalized_orders,
                all_finalized=status.all_finalized,
                grand_total=sum((line.amount for line in lines), Decimal("0.00")),
                grand_total_delivered=sum(line.total_delivered for line in lines),
            )

            logger.info(
                f"Combined invoice for customer {customer_id} {billing_month}: "
                f"{len(lines)} orders, total {invoice.grand_total}, all_finalized={invoice.all_finalized}"
            )
            return Return.ok(invoice)

        except BillingDomainError as e:
            return Return.err(Error(code=e.code, message=e.message, reason=e.reason))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Combined invoice failed for customer {customer_id} {billing_month}: {e}")
            return Return.err(
                Error(
                    code="COMBINED_INVOICE_FAILED",
                    message="Failed to build combined invoice",
                    reason=str(e),
                )
            )
