"""Unit tests for FinalizeOrderBilling use case

Tests cover:
- calculating -> finalized with identity and timestamp
- Finalizing twice is a no-op reported as already_finalized
- Customer level summary (all_orders_finalized, counts)
- Error mapping
"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.billing.dtos import FinalizeBillingCommandDTO
from src.app.use_cases.billing.finalize_order_billing import FinalizeOrderBilling
from src.domain.order_billing import BillingStatus
from tests.factories import make_billing, make_order


async def _echo(billing):
    return billing


@pytest.fixture
def mock_order_repo(sample_order):
    repo = MagicMock()
    repo.get_details = AsyncMock(return_value=sample_order)
    repo.list_root_orders_for_customer = AsyncMock(return_value=[sample_order])
    return repo


@pytest.fixture
def calculating_billing():
    return make_billing()


@pytest.fixture
def mock_billing_repo(calculating_billing):
    repo = MagicMock()
    repo.get = AsyncMock(return_value=calculating_billing)
    repo.create = AsyncMock()
    repo.update = AsyncMock(side_effect=_echo)
    repo.list_for_orders = AsyncMock(return_value=[calculating_billing])
    return repo


@pytest.fixture
def finalize_use_case(mock_uow, mock_order_repo, mock_billing_repo):
    return FinalizeOrderBilling(
        uow=mock_uow,
        order_repo=mock_order_repo,
        billing_repo=mock_billing_repo,
        default_finalized_by="admin",
    )


@pytest.mark.asyncio
class TestFinalizeOrderBillingSuccess:
    async def test_finalizes_calculating_billing(
        self, finalize_use_case, mock_billing_repo, mock_uow, calculating_billing
    ):
        """
        Given: a calculating billing for the customer's only root order
        When: it is finalized by "ops"
        Then: the row is finalized, stamped, committed, and the customer is fully finalized
        """
        # Act
        result = await finalize_use_case.execute(
            FinalizeBillingCommandDTO(order_id=42, billing_month="2024-06", finalized_by="ops")
        )

        # Assert
        assert result.is_ok()
        response = result.value
        assert response.already_finalized is False
        assert response.order_billing.status == "finalized"
        assert response.order_billing.finalized_by == "ops"
        assert response.order_billing.finalized_at is not None
        assert response.order_billing.amount == Decimal("350.00")
        assert response.all_orders_finalized is True
        assert response.total_orders == 1
        assert response.finalized_orders == 1

        assert calculating_billing.status == BillingStatus.FINALIZED
        mock_uow.commit.assert_called_once()

    async def test_defaults_finalized_by(self, finalize_use_case):
        result = await finalize_use_case.execute(
            FinalizeBillingCommandDTO(order_id=42, billing_month="2024-06")
        )

        assert result.value.order_billing.finalized_by == "admin"

    async def test_whitespace_finalized_by_uses_default(self, finalize_use_case, calculating_billing):
        result = await finalize_use_case.execute(
            FinalizeBillingCommandDTO(order_id=42, billing_month="2024-06", finalized_by="   ")
        )

        assert result.value.order_billing.finalized_by == "admin"
        assert calculating_billing.finalized_by == "admin"

    async def test_finalized_by_is_trimmed(self, finalize_use_case):
        result = await finalize_use_case.execute(
            FinalizeBillingCommandDTO(order_id=42, billing_month="2024-06", finalized_by="  ops  ")
        )

        assert result.value.order_billing.finalized_by == "ops"

    async def test_recalculates_before_finalizing(
        self, finalize_use_case, mock_billing_repo, calculating_billing
    ):
        # Row was computed with stale figures
        calculating_billing.amount = Decimal("999.00")

        result = await finalize_use_case.execute(
            FinalizeBillingCommandDTO(order_id=42, billing_month="2024-06")
        )

        assert result.value.order_billing.amount == Decimal("350.00")
        assert mock_billing_repo.update.call_count == 2

    async def test_already_finalized_is_a_no_op(self, finalize_use_case, mock_billing_repo):
        """
        Given: a billing finalized earlier by "admin"
        When: it is finalized again by "late-user"
        Then: success with already_finalized, nothing written, original stamp kept
        """
        finalized = make_billing(status=BillingStatus.FINALIZED)
        mock_billing_repo.get = AsyncMock(return_value=finalized)
        mock_billing_repo.list_for_orders = AsyncMock(return_value=[finalized])

        result = await finalize_use_case.execute(
            FinalizeBillingCommandDTO(order_id=42, billing_month="2024-06", finalized_by="late-user")
        )

        assert result.is_ok()
        assert result.value.already_finalized is True
        assert result.value.order_billing.finalized_by == "admin"
        mock_billing_repo.update.assert_not_called()

    async def test_first_of_two_orders_leaves_customer_open(
        self, finalize_use_case, mock_order_repo, mock_billing_repo, sample_order, calculating_billing
    ):
        """
        Given: a customer with two root orders in 2024-07, neither finalized
        When: the first order is finalized
        Then: all_orders_finalized is False with 1 of 2 finalized
        """
        second_order = make_order(order_id=43, meal_plan_name="Veg Dinner")
        mock_order_repo.list_root_orders_for_customer = AsyncMock(return_value=[sample_order, second_order])
        mock_billing_repo.list_for_orders = AsyncMock(
            return_value=[calculating_billing, make_billing(order_id=43, billing_id=2)]
        )

        result = await finalize_use_case.execute(
            FinalizeBillingCommandDTO(order_id=42, billing_month="2024-06")
        )

        assert result.value.all_orders_finalized is False
        assert result.value.total_orders == 2
        assert result.value.finalized_orders == 1


@pytest.mark.asyncio
class TestFinalizeOrderBillingErrors:
    async def test_order_not_found(self, finalize_use_case, mock_order_repo, mock_uow):
        mock_order_repo.get_details = AsyncMock(return_value=None)

        result = await finalize_use_case.execute(
            FinalizeBillingCommandDTO(order_id=999, billing_month="2024-06")
        )

        assert result.is_err()
        assert result.error.code == "ORDER_NOT_FOUND"
        mock_uow.commit.assert_not_called()

    async def test_month_not_applicable(self, finalize_use_case):
        result = await finalize_use_case.execute(
            FinalizeBillingCommandDTO(order_id=42, billing_month="2023-12")
        )

        assert result.is_err()
        assert result.error.code == "BILLING_NOT_APPLICABLE"

    async def test_row_missing_after_calculation(self, finalize_use_case, mock_billing_repo, calculating_billing):
        mock_billing_repo.get = AsyncMock(side_effect=[None, None])
        mock_billing_repo.create = AsyncMock(return_value=calculating_billing)

        result = await finalize_use_case.execute(
            FinalizeBillingCommandDTO(order_id=42, billing_month="2024-06")
        )

        assert result.is_err()
        assert result.error.code == "ORDER_BILLING_NOT_FOUND"

    async def test_unexpected_error_is_wrapped(self, finalize_use_case, mock_billing_repo):
        mock_billing_repo.update = AsyncMock(side_effect=RuntimeError("disk full"))

        result = await finalize_use_case.execute(
            FinalizeBillingCommandDTO(order_id=42, billing_month="2024-06")
        )

        assert result.is_err()
        assert result.error.code == "FINALIZE_ORDER_BILLING_FAILED"
