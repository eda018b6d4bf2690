"""Monthly Order Billing Background Worker

Calculates the billing of every root order overlapping a month, so the
combined invoices of that month are ready for review and finalization.
Runs on demand (cron or by hand); finalized billings are never touched.
"""

import asyncio
import logging
import time
from datetime import date
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.customer_order_repository import SqlAlchemyCustomerOrderRepository
from src.adapter.repositories.order_billing_repository import SqlAlchemyOrderBillingRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.billing import (
    CalculateOrderBilling,
    CalculateBillingCommandDTO,
    MonthlyBillingResultDTO,
)
from src.domain.order_billing import BillingStatus
from src.domain.schedule import month_key, parse_billing_month

logger = logging.getLogger(__name__)


class MonthlyBillingWorker:
    """
    Background worker for monthly order billing

    Features:
    - Calculates every root order overlapping the billing month
    - Each order runs in its own session and transaction
    - Idempotent: re-running recomputes calculating rows only
    - Defaults to the previous month (typical cron usage)

    Usage:
        worker = MonthlyBillingWorker()
        result = await worker.run_once("2024-06")
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("MonthlyBillingWorker initialized")

    def _get_billing_month(
        self, billing_month: Optional[str] = None, today: Optional[date] = None
    ) -> str:
        """
        Resolve the billing month to process

        If billing_month is not provided, uses the month before ``today``.

        Args:
            billing_month: Month key YYYY-MM (optional)
            today: Reference date (optional, defaults to date.today())

        Returns:
            Validated month key
        """
        if billing_month is not None:
            parse_billing_month(billing_month)
            return billing_month

        today = today or date.today()
        if today.month == 1:
            return month_key(date(today.year - 1, 12, 1))
        return month_key(date(today.year, today.month - 1, 1))

    async def run_once(self, billing_month: Optional[str] = None) -> MonthlyBillingResultDTO:
        """
        Run billing calculation once for a month

        Args:
            billing_month: Month key YYYY-MM (optional, defaults to previous month)

        Returns:
            MonthlyBillingResultDTO with summary
        """
        start_time = time.time()
        billing_month = self._get_billing_month(billing_month)

        logger.info(f"Starting monthly billing for {billing_month}")

        calculated = 0
        already_finalized = 0
        failed = 0

        async with self.async_session_factory() as session:
            order_repo = SqlAlchemyCustomerOrderRepository(session)
            orders = [
                order for order in await order_repo.list_overlapping_month(billing_month)
                if order.is_root
            ]

        total_orders = len(orders)
        logger.info(f"Found {total_orders} root orders overlapping {billing_month}")

        for order in orders:
            try:
                async with self.async_session_factory() as order_session:
                    use_case = CalculateOrderBilling(
                        uow=SqlAlchemyUnitOfWork(order_session),
                        order_repo=SqlAlchemyCustomerOrderRepository(order_session),
                        billing_repo=SqlAlchemyOrderBillingRepository(order_session),
                        max_attempts=ApplicationConfig.BILLING_MAX_RETRIES,
                        backoff_seconds=ApplicationConfig.BILLING_RETRY_BACKOFF_SECONDS,
                    )
                    result = await use_case.execute(
                        CalculateBillingCommandDTO(order_id=order.order_id, billing_month=billing_month)
                    )

                if result.is_err():
                    logger.error(
                        f"Failed to calculate billing for order {order.order_id}: {result.error.message}"
                    )
                    failed += 1
                elif result.value.status == BillingStatus.FINALIZED.value:
                    already_finalized += 1
                else:
                    calculated += 1

            except Exception as e:
                logger.error(f"Unexpected error processing order {order.order_id}: {e}")
                failed += 1

        execution_time_ms = int((time.time() - start_time) * 1000)

        result = MonthlyBillingResultDTO(
            billing_month=billing_month,
            total_orders=total_orders,
            calculated=calculated,
            already_finalized=already_finalized,
            failed=failed,
            execution_time_ms=execution_time_ms,
        )

        logger.info(
            f"Monthly billing complete for {billing_month}: "
            f"{calculated} calculated, {already_finalized} finalized, {failed} failed, "
            f"{execution_time_ms}ms"
        )

        return result

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("MonthlyBillingWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Run for previous month
        python -m src.worker.monthly_billing

        # Run for specific month
        python -m src.worker.monthly_billing --month 2024-06
    """
    import argparse

    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Monthly Order Billing Worker")
    parser.add_argument("--month", type=str, help="Billing month (YYYY-MM)")
    args = parser.parse_args()

    if not ApplicationConfig.MONTHLY_BILLING_ENABLED:
        logger.info("Monthly billing is disabled (MONTHLY_BILLING_ENABLED=false)")
        return

    worker = MonthlyBillingWorker()

    try:
        result = await worker.run_once(billing_month=args.month)
        print(f"Billing complete for {result.billing_month}:")
        print(f"  Root orders: {result.total_orders}")
        print(f"  Calculated: {result.calculated}")
        print(f"  Already finalized: {result.already_finalized}")
        print(f"  Failed: {result.failed}")
        print(f"  Execution time: {result.execution_time_ms}ms")
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
