"""GetDailyTiffinCount Use Case

Daily kitchen roster: who receives how many tiffins on a given date.
"""

import logging
from datetime import date

from libs.result import Result, Return, Error
from src.app.repositories.customer_order_repository import CustomerOrderRepository
from src.domain.attendance import daily_roster
from src.domain.errors import BillingDomainError
from .dtos import DailyTiffinCountDTO, RosterEntryDTO

logger = logging.getLogger(__name__)


class GetDailyTiffinCount:
    """
    Use Case: Daily tiffin count

    Flow:
    1. Fetch orders whose range contains the date
    2. Keep orders whose weekday pattern delivers on the date
    3. Sum quantities
    """

    def __init__(self, order_repo: CustomerOrderRepository):
        self.order_repo = order_repo

    async def execute(self, target_date: date) -> Result[DailyTiffinCountDTO]:
        try:
            active_orders = await self.order_repo.list_active_on(target_date)
            roster = daily_roster(target_date, active_orders)

            logger.info(
                f"Daily roster {target_date.isoformat()}: {len(roster.entries)}/{len(active_orders)} "
                f"orders deliver, {roster.total_count} tiffins"
            )

            return Return.ok(
                DailyTiffinCountDTO(
                    date=target_date.isoformat(),
                    orders=[
                        RosterEntryDTO(
                            order_id=entry.order_id,
                            customer_id=entry.customer_id,
                            customer_name=entry.customer_name,
                            quantity=entry.quantity,
                            meal_plan_name=entry.meal_plan_name,
                        )
                        for entry in roster.entries
                    ],
                    total_count=roster.total_count,
                )
            )

        except BillingDomainError as e:
            return Return.err(Error(code=e.code, message=e.message, reason=e.reason))

        except Exception as e:
            logger.error(f"Daily tiffin count failed for {target_date}: {e}")
            return Return.err(
                Error(
                    code="DAILY_TIFFIN_COUNT_FAILED",
                    message="Failed to fetch daily tiffin count",
                    reason=str(e),
                )
            )
