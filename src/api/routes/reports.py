"""Tiffin Report API Routes

FastAPI routes for the daily delivery roster and the monthly order list.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.customer_order_repository import SqlAlchemyCustomerOrderRepository
from src.api.error import ClientError
from src.api.schemas.order_billing_request import BILLING_MONTH_REGEX
from src.app.use_cases.reports import (
    DailyTiffinCountDTO,
    GetDailyTiffinCount,
    GetMonthlyTiffinList,
    MonthlyTiffinListDTO,
)
from src.depends import get_session

router = APIRouter(prefix="/tiffin-reports", tags=["Tiffin Reports"])


@router.get(
    "/daily-count",
    response_model=DailyTiffinCountDTO,
    status_code=status.HTTP_200_OK,
)
async def get_daily_count(
    target_date: Optional[date] = Query(default=None, alias="date", description="Delivery date (YYYY-MM-DD), default today"),
    session: AsyncSession = Depends(get_session),
):
    """
    Get the tiffin roster for one date.

    Orders are included when the date lies inside their range and their
    weekday pattern delivers on that weekday (empty pattern = every day).

    **Query parameters:**
    - `date` (optional): YYYY-MM-DD, defaults to today

    **Returns:**
    - 200: Roster with per-order quantities and `total_count`
    - 422: Malformed date
    """
    use_case = GetDailyTiffinCount(SqlAlchemyCustomerOrderRepository(session))
    result = await use_case.execute(target_date or date.today())

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/monthly-list",
    response_model=MonthlyTiffinListDTO,
    status_code=status.HTTP_200_OK,
)
async def get_monthly_list(
    month: Optional[str] = Query(default=None, pattern=BILLING_MONTH_REGEX, description="Month (YYYY-MM), default current month"),
    session: AsyncSession = Depends(get_session),
):
    """
    List every order whose date range touches a month, with parsed weekdays.

    **Query parameters:**
    - `month` (optional): YYYY-MM, defaults to the current month

    **Returns:**
    - 200: Orders overlapping the month
    - 422: Malformed month
    """
    target_month = month or date.today().strftime("%Y-%m")

    use_case = GetMonthlyTiffinList(SqlAlchemyCustomerOrderRepository(session))
    result = await use_case.execute(target_month)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
