"""Customer Order Repository Interface

Read access to the order directory, joined with customer and meal plan data.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional
from src.domain.customer_order import CustomerOrderDetails


class CustomerOrderRepository(ABC):
    """
    Repository interface for the order directory

    Range filters use inclusive overlap semantics:
    - for a date:  start_date <= X AND end_date >= X
    - for a month: start_date <= last day AND end_date >= first day
    """

    @abstractmethod
    async def get_details(self, order_id: int) -> Optional[CustomerOrderDetails]:
        """
        Retrieve one order with customer and meal plan data

        Args:
            order_id: Order ID

        Returns:
            CustomerOrderDetails if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_details(self, order_ids: List[int]) -> List[CustomerOrderDetails]:
        """
        Retrieve several orders with customer and meal plan data

        Args:
            order_ids: Order IDs (unknown IDs are skipped)

        Returns:
            List of order projections
        """
        pass

    @abstractmethod
    async def list_active_on(self, target_date: date) -> List[CustomerOrderDetails]:
        """
        Orders whose date range contains target_date, ordered by customer name

        Args:
            target_date: Delivery date

        Returns:
            List of order projections
        """
        pass

    @abstractmethod
    async def list_overlapping_month(self, billing_month: str) -> List[CustomerOrderDetails]:
        """
        Orders whose date range touches the billing month, newest first

        Args:
            billing_month: Month key (YYYY-MM)

        Returns:
            List of order projections
        """
        pass

    @abstractmethod
    async def list_root_orders_for_customer(
        self, customer_id: int, billing_month: str
    ) -> List[CustomerOrderDetails]:
        """
        Root orders (not renewals) of a customer overlapping the billing month

        Args:
            customer_id: Customer ID
            billing_month: Month key (YYYY-MM)

        Returns:
            List of order projections ordered by meal plan name
        """
        pass
