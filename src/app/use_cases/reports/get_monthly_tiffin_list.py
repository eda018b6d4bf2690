"""GetMonthlyTiffinList Use Case

Orders whose date range touches a month, with their weekday pattern parsed.
"""

from libs.result import Result, Return, Error
from src.app.repositories.customer_order_repository import CustomerOrderRepository
from src.domain.attendance import monthly_roster
from src.domain.errors import BillingDomainError
from src.domain.meal_plan import MealFrequency
from src.domain.schedule import parse_billing_month
from .dtos import MonthlyOrderDTO, MonthlyTiffinListDTO


class GetMonthlyTiffinList:
    def __init__(self, order_repo: CustomerOrderRepository):
        self.order_repo = order_repo

    async def execute(self, month: str) -> Result[MonthlyTiffinListDTO]:
        try:
            parse_billing_month(month)

            candidates = await self.order_repo.list_overlapping_month(month)
            scheduled = monthly_roster(month, candidates)

            orders = [
                MonthlyOrderDTO(
                    order_id=item.order.order_id,
                    customer_id=item.order.customer_id,
                    customer_name=item.order.customer_name,
                    customer_phone=item.order.customer_phone,
                    customer_address=item.order.customer_address,
                    meal_plan_id=item.order.meal_plan_id,
                    meal_plan_name=item.order.meal_plan_name,
                    meal_plan_frequency=MealFrequency(item.order.meal_plan_frequency).value,
                    quantity=item.order.quantity,
                    price=item.order.price,
                    start_date=item.recurrence.start_date,
                    end_date=item.recurrence.end_date,
                    selected_days=item.recurrence.ordered_days(),
                    every_day=item.recurrence.every_day,
                    parent_order_id=item.order.parent_order_id,
                )
                for item in scheduled
            ]

            return Return.ok(MonthlyTiffinListDTO(month=month, orders=orders, total_orders=len(orders)))

        except BillingDomainError as e:
            return Return.err(Error(code=e.code, message=e.message, reason=e.reason))

        except Exception as e:
            return Return.err(
                Error(
                    code="MONTHLY_TIFFIN_LIST_FAILED",
                    message="Failed to fetch monthly tiffin list",
                    reason=str(e),
                )
            )
