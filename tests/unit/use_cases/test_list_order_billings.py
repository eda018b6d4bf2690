"""Unit tests for ListOrderBillings use case"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.billing.list_order_billings import ListOrderBillings
from tests.factories import make_billing, make_order


@pytest.fixture
def mock_order_repo():
    repo = MagicMock()
    repo.list_details = AsyncMock(
        return_value=[
            make_order(order_id=1, customer_name="Zoya"),
            make_order(order_id=2, customer_name="Arjun"),
        ]
    )
    return repo


@pytest.fixture
def mock_billing_repo():
    repo = MagicMock()
    repo.search = AsyncMock(
        return_value=[
            make_billing(order_id=1, billing_id=1),
            make_billing(order_id=2, billing_id=2),
        ]
    )
    return repo


@pytest.mark.asyncio
class TestListOrderBillings:
    async def test_lists_with_names_sorted_by_customer(self, mock_order_repo, mock_billing_repo):
        use_case = ListOrderBillings(mock_order_repo, mock_billing_repo)

        result = await use_case.execute(billing_month="2024-06")

        assert result.is_ok()
        assert result.value.total == 2
        assert [item.customer_name for item in result.value.billings] == ["Arjun", "Zoya"]
        mock_billing_repo.search.assert_called_once_with(customer_id=None, billing_month="2024-06", order_id=None)
        mock_order_repo.list_details.assert_called_once_with([1, 2])

    async def test_passes_filters(self, mock_order_repo, mock_billing_repo):
        use_case = ListOrderBillings(mock_order_repo, mock_billing_repo)

        await use_case.execute(customer_id=7, order_id=1)

        mock_billing_repo.search.assert_called_once_with(customer_id=7, billing_month=None, order_id=1)

    async def test_empty_result(self, mock_order_repo, mock_billing_repo):
        mock_billing_repo.search = AsyncMock(return_value=[])
        mock_order_repo.list_details = AsyncMock(return_value=[])
        use_case = ListOrderBillings(mock_order_repo, mock_billing_repo)

        result = await use_case.execute()

        assert result.value.total == 0
        assert result.value.billings == []

    async def test_invalid_month(self, mock_order_repo, mock_billing_repo):
        use_case = ListOrderBillings(mock_order_repo, mock_billing_repo)

        result = await use_case.execute(billing_month="06-2024")

        assert result.is_err()
        assert result.error.code == "INVALID_BILLING_MONTH"
        mock_billing_repo.search.assert_not_called()
