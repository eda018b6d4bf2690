"""ListOrderBillings Use Case

Read-only listing of billing rows with customer and meal plan names.
"""

from typing import Optional

from libs.result import Result, Return, Error
from src.app.repositories.customer_order_repository import CustomerOrderRepository
from src.app.repositories.order_billing_repository import OrderBillingRepository
from src.domain.errors import BillingDomainError
from src.domain.schedule import parse_billing_month
from .dtos import ListOrderBillingsResponseDTO, OrderBillingDTO


class ListOrderBillings:
    def __init__(
        self,
        order_repo: CustomerOrderRepository,
        billing_repo: OrderBillingRepository,
    ):
        self.order_repo = order_repo
        self.billing_repo = billing_repo

    async def execute(
        self,
        customer_id: Optional[int] = None,
        billing_month: Optional[str] = None,
        order_id: Optional[int] = None,
    ) -> Result[ListOrderBillingsResponseDTO]:
        try:
            if billing_month is not None:
                parse_billing_month(billing_month)

            billings = await self.billing_repo.search(
                customer_id=customer_id,
                billing_month=billing_month,
                order_id=order_id,
            )

            order_ids = sorted({billing.order_id for billing in billings})
            orders = {order.order_id: order for order in await self.order_repo.list_details(order_ids)}

            items = [OrderBillingDTO.from_entity(billing, orders.get(billing.order_id)) for billing in billings]
            items.sort(key=lambda item: (item.customer_name or "", item.meal_plan_name or ""))

            return Return.ok(ListOrderBillingsResponseDTO(billings=items, total=len(items)))

        except BillingDomainError as e:
            return Return.err(Error(code=e.code, message=e.message, reason=e.reason))

        except Exception as e:
            return Return.err(
                Error(
                    code="LIST_ORDER_BILLINGS_FAILED",
                    message="Failed to list order billings",
                    reason=str(e),
                )
            )
