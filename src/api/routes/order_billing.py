"""Order Billing API Routes

FastAPI routes for monthly order billing: calculation, finalization,
customer finalization status and the combined invoice view.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.customer_order_repository import SqlAlchemyCustomerOrderRepository
from src.adapter.repositories.customer_repository import SqlAlchemyCustomerRepository
from src.adapter.repositories.order_billing_repository import SqlAlchemyOrderBillingRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.api.schemas.order_billing_request import (
    BILLING_MONTH_REGEX,
    CalculateBillingRequestSchema,
    FinalizeBillingRequestSchema,
)
from src.app.use_cases.billing import (
    BuildCombinedInvoice,
    CalculateBillingCommandDTO,
    CalculateOrderBilling,
    CombinedInvoiceDTO,
    CustomerFinalizationStatusDTO,
    FinalizeBillingCommandDTO,
    FinalizeBillingResponseDTO,
    FinalizeOrderBilling,
    GetCustomerFinalizationStatus,
    ListOrderBillings,
    ListOrderBillingsResponseDTO,
    OrderBillingDTO,
)
from src.depends import get_session

router = APIRouter(prefix="/order-billing", tags=["Order Billing"])

NOT_FOUND_RESPONSE = {
    "description": "Order or customer not found",
    "content": {
        "application/json": {
            "example": {
                "error": {
                    "code": "ORDER_NOT_FOUND",
                    "message": "Order 42 not found"
                }
            }
        }
    }
}

NOT_APPLICABLE_RESPONSE = {
    "description": "Order does not overlap the billing month",
    "content": {
        "application/json": {
            "example": {
                "error": {
                    "code": "BILLING_NOT_APPLICABLE",
                    "message": "Order 42 (2024-06-10 to 2024-06-25) does not overlap billing month 2024-08"
                }
            }
        }
    }
}


@router.get(
    "",
    response_model=ListOrderBillingsResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_order_billings(
    customer_id: Optional[int] = Query(default=None, gt=0),
    billing_month: Optional[str] = Query(default=None, pattern=BILLING_MONTH_REGEX),
    order_id: Optional[int] = Query(default=None, gt=0),
    session: AsyncSession = Depends(get_session),
):
    """
    List stored order billings, filtered by customer, month and/or order.

    Read-only: rows are returned as stored, nothing is recalculated.
    """
    use_case = ListOrderBillings(
        SqlAlchemyCustomerOrderRepository(session),
        SqlAlchemyOrderBillingRepository(session),
    )
    result = await use_case.execute(
        customer_id=customer_id,
        billing_month=billing_month,
        order_id=order_id,
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "",
    response_model=OrderBillingDTO,
    status_code=status.HTTP_200_OK,
    responses={404: NOT_FOUND_RESPONSE, 422: NOT_APPLICABLE_RESPONSE},
)
async def calculate_order_billing(
    request: CalculateBillingRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """
    Calculate (or recalculate) an order's billing for a month.

    **Request body:**
    - `order_id` (required): Order identifier
    - `billing_month` (required): YYYY-MM

    A calculating row is recomputed from the current order terms; a
    finalized row is returned unchanged.

    **Returns:**
    - 200: Billing row
    - 404: Order not found
    - 422: Order does not overlap the month
    """
    use_case = CalculateOrderBilling(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCustomerOrderRepository(session),
        SqlAlchemyOrderBillingRepository(session),
        max_attempts=ApplicationConfig.BILLING_MAX_RETRIES,
        backoff_seconds=ApplicationConfig.BILLING_RETRY_BACKOFF_SECONDS,
    )
    result = await use_case.execute(
        CalculateBillingCommandDTO(order_id=request.order_id, billing_month=request.billing_month)
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/finalize",
    response_model=FinalizeBillingResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: NOT_FOUND_RESPONSE, 422: NOT_APPLICABLE_RESPONSE},
)
async def finalize_order_billing(
    request: FinalizeBillingRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """
    Finalize an order's billing for a month.

    The billing is recalculated first, then locked (`calculating` ->
    `finalized`). Finalizing an already finalized billing is a no-op and
    reports `already_finalized: true`.

    **Request body:**
    - `order_id` (required): Order identifier
    - `billing_month` (required): YYYY-MM
    - `finalized_by` (optional): Identity, defaults to `admin`

    **Returns:**
    - 200: Billing row plus customer level `all_orders_finalized`,
      `total_orders` and `finalized_orders`
    - 404: Order not found
    - 422: Order does not overlap the month
    """
    use_case = FinalizeOrderBilling(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCustomerOrderRepository(session),
        SqlAlchemyOrderBillingRepository(session),
        default_finalized_by=ApplicationConfig.DEFAULT_FINALIZED_BY,
        max_attempts=ApplicationConfig.BILLING_MAX_RETRIES,
        backoff_seconds=ApplicationConfig.BILLING_RETRY_BACKOFF_SECONDS,
    )
    result = await use_case.execute(
        FinalizeBillingCommandDTO(
            order_id=request.order_id,
            billing_month=request.billing_month,
            finalized_by=request.finalized_by,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/finalization-status",
    response_model=CustomerFinalizationStatusDTO,
    status_code=status.HTTP_200_OK,
)
async def get_finalization_status(
    customer_id: int = Query(..., gt=0),
    billing_month: str = Query(..., pattern=BILLING_MONTH_REGEX),
    session: AsyncSession = Depends(get_session),
):
    """
    Check whether every root order of a customer is finalized for a month.

    `all_finalized` is true when the customer has no root orders in the
    month; `total_orders` distinguishes that case.
    """
    use_case = GetCustomerFinalizationStatus(
        SqlAlchemyCustomerOrderRepository(session),
        SqlAlchemyOrderBillingRepository(session),
    )
    result = await use_case.execute(customer_id, billing_month)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/combined-invoice",
    response_model=CombinedInvoiceDTO,
    status_code=status.HTTP_200_OK,
    responses={404: NOT_FOUND_RESPONSE},
)
async def get_combined_invoice(
    customer_id: int = Query(..., gt=0),
    billing_month: str = Query(..., pattern=BILLING_MONTH_REGEX),
    session: AsyncSession = Depends(get_session),
):
    """
    Combined invoice of a customer for a month.

    Every root order overlapping the month is calculated before reading.
    The projection is always returned; issue it only when `all_finalized`.

    **Returns:**
    - 200: Invoice projection with `grand_total`
    - 404: Customer not found
    """
    use_case = BuildCombinedInvoice(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCustomerRepository(session),
        SqlAlchemyCustomerOrderRepository(session),
        SqlAlchemyOrderBillingRepository(session),
        max_attempts=ApplicationConfig.BILLING_MAX_RETRIES,
        backoff_seconds=ApplicationConfig.BILLING_RETRY_BACKOFF_SECONDS,
    )
    result = await use_case.execute(customer_id, billing_month)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
