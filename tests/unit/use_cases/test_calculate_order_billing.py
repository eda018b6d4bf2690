"""Unit tests for CalculateOrderBilling use case

Tests cover:
- First calculation inserts a calculating row
- Recalculation overwrites a calculating row
- Finalized rows are returned untouched
- Order not found / month not applicable / malformed month
- Retry on concurrency conflicts
"""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.billing.calculate_order_billing import CalculateOrderBilling
from src.app.use_cases.billing.dtos import CalculateBillingCommandDTO
from src.domain.errors import ConcurrencyConflictError
from src.domain.order_billing import BillingStatus
from tests.factories import make_billing, make_order


async def _persist(billing):
    billing.id = 1
    return billing


async def _echo(billing):
    return billing


@pytest.fixture
def mock_order_repo(sample_order):
    repo = MagicMock()
    repo.get_details = AsyncMock(return_value=sample_order)
    return repo


@pytest.fixture
def mock_billing_repo():
    repo = MagicMock()
    repo.get = AsyncMock(return_value=None)
    repo.create = AsyncMock(side_effect=_persist)
    repo.update = AsyncMock(side_effect=_echo)
    return repo


@pytest.fixture
def calculate_use_case(mock_uow, mock_order_repo, mock_billing_repo):
    return CalculateOrderBilling(
        uow=mock_uow,
        order_repo=mock_order_repo,
        billing_repo=mock_billing_repo,
        max_attempts=3,
    )


@pytest.fixture
def june_command():
    return CalculateBillingCommandDTO(order_id=42, billing_month="2024-06")


@pytest.mark.asyncio
class TestCalculateOrderBillingSuccess:
    async def test_first_calculation_creates_row(
        self, calculate_use_case, mock_billing_repo, mock_uow, june_command
    ):
        """
        Given: no billing row for order 42 in 2024-06
        When: the billing is calculated
        Then: a calculating row with the prorated amount is inserted and committed
        """
        # Act
        result = await calculate_use_case.execute(june_command)

        # Assert
        assert result.is_ok()
        response = result.value
        assert response.status == "calculating"
        assert response.amount == Decimal("350.00")
        assert response.total_delivered == 7
        assert response.total_plan_days == 12
        assert response.customer_name == "Asha Patel"
        assert response.meal_plan_name == "Veg Lunch"

        mock_billing_repo.get.assert_called_once_with(42, "2024-06", for_update=True)
        mock_billing_repo.create.assert_called_once()
        mock_billing_repo.update.assert_not_called()
        mock_uow.commit.assert_called_once()

    async def test_recalculation_overwrites_calculating_row(
        self, calculate_use_case, mock_billing_repo, june_command
    ):
        # Arrange - row computed before the order was shortened
        stale = make_billing(amount=Decimal("500.00"), total_delivered=10)
        mock_billing_repo.get = AsyncMock(return_value=stale)

        # Act
        result = await calculate_use_case.execute(june_command)

        # Assert
        assert result.is_ok()
        assert result.value.amount == Decimal("350.00")
        assert result.value.total_delivered == 7
        mock_billing_repo.create.assert_not_called()
        mock_billing_repo.update.assert_called_once_with(stale)

    async def test_repeated_calculation_is_idempotent(
        self, calculate_use_case, mock_billing_repo, june_command
    ):
        existing = make_billing()
        mock_billing_repo.get = AsyncMock(return_value=existing)

        first = await calculate_use_case.execute(june_command)
        second = await calculate_use_case.execute(june_command)

        assert first.value.amount == second.value.amount == Decimal("350.00")
        mock_billing_repo.create.assert_not_called()

    async def test_finalized_row_is_returned_untouched(
        self, calculate_use_case, mock_order_repo, mock_billing_repo, june_command
    ):
        """
        Given: a finalized billing of 350.00 and an order whose quantity was later raised
        When: the billing is calculated again
        Then: the finalized figures are returned and nothing is written
        """
        mock_order_repo.get_details = AsyncMock(return_value=make_order(quantity=5))
        finalized = make_billing(status=BillingStatus.FINALIZED)
        mock_billing_repo.get = AsyncMock(return_value=finalized)

        result = await calculate_use_case.execute(june_command)

        assert result.is_ok()
        assert result.value.status == "finalized"
        assert result.value.amount == Decimal("350.00")
        mock_billing_repo.update.assert_not_called()
        mock_billing_repo.create.assert_not_called()


@pytest.mark.asyncio
class TestCalculateOrderBillingErrors:
    async def test_order_not_found(
        self, calculate_use_case, mock_order_repo, mock_billing_repo, mock_uow, june_command
    ):
        mock_order_repo.get_details = AsyncMock(return_value=None)

        result = await calculate_use_case.execute(june_command)

        assert result.is_err()
        assert result.error.code == "ORDER_NOT_FOUND"
        mock_billing_repo.get.assert_not_called()
        mock_uow.commit.assert_not_called()
        mock_uow.rollback.assert_called_once()

    async def test_month_outside_order_range(self, calculate_use_case, mock_billing_repo):
        result = await calculate_use_case.execute(
            CalculateBillingCommandDTO(order_id=42, billing_month="2024-08")
        )

        assert result.is_err()
        assert result.error.code == "BILLING_NOT_APPLICABLE"
        mock_billing_repo.create.assert_not_called()

    async def test_month_with_range_overlap_but_no_deliveries_is_billed_zero(
        self, calculate_use_case, mock_order_repo, june_command
    ):
        mock_order_repo.get_details = AsyncMock(
            return_value=make_order(
                start_date=date(2024, 6, 29), end_date=date(2024, 7, 1), selected_days="Wednesday"
            )
        )

        result = await calculate_use_case.execute(june_command)

        assert result.is_ok()
        assert result.value.amount == Decimal("0.00")
        assert result.value.total_delivered == 0

    async def test_malformed_billing_month(self, calculate_use_case, mock_order_repo):
        result = await calculate_use_case.execute(
            CalculateBillingCommandDTO(order_id=42, billing_month="2024-6")
        )

        assert result.is_err()
        assert result.error.code == "INVALID_BILLING_MONTH"
        mock_order_repo.get_details.assert_not_called()

    async def test_unexpected_error_is_wrapped(self, calculate_use_case, mock_order_repo, june_command):
        mock_order_repo.get_details = AsyncMock(side_effect=RuntimeError("connection reset"))

        result = await calculate_use_case.execute(june_command)

        assert result.is_err()
        assert result.error.code == "CALCULATE_ORDER_BILLING_FAILED"
        assert "connection reset" in result.error.reason


@pytest.mark.asyncio
class TestCalculateOrderBillingConcurrency:
    async def test_retries_after_concurrent_insert(
        self, calculate_use_case, mock_billing_repo, mock_uow, june_command
    ):
        """
        Given: a concurrent writer inserts the same (order, month) row first
        When: our insert hits the unique key
        Then: the transaction is rolled back and retried, finding the row on the second read
        """
        winner = make_billing(amount=Decimal("0.00"))
        mock_billing_repo.get = AsyncMock(side_effect=[None, winner])
        mock_billing_repo.create = AsyncMock(
            side_effect=ConcurrencyConflictError("Order billing 42/2024-06 was written concurrently")
        )

        result = await calculate_use_case.execute(june_command)

        assert result.is_ok()
        assert result.value.amount == Decimal("350.00")
        assert mock_billing_repo.get.call_count == 2
        mock_billing_repo.update.assert_called_once_with(winner)
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_called_once()

    async def test_gives_up_after_max_attempts(
        self, calculate_use_case, mock_billing_repo, mock_uow, june_command
    ):
        mock_billing_repo.get = AsyncMock(
            side_effect=ConcurrencyConflictError("Could not lock order billing 42/2024-06")
        )

        result = await calculate_use_case.execute(june_command)

        assert result.is_err()
        assert result.error.code == "CONCURRENCY_CONFLICT"
        assert mock_billing_repo.get.call_count == 3
        assert mock_uow.rollback.call_count == 3
        mock_uow.commit.assert_not_called()
