"""Order Billing Repository Interface

Defines the contract for order billing persistence. Writes happen under a
row-level lock on the (order_id, billing_month) key.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.order_billing import OrderBilling


class OrderBillingRepository(ABC):
    """
    Repository interface for OrderBilling persistence

    Implementations raise ConcurrencyConflictError when a lock cannot be
    obtained or a concurrent insert of the same key wins the race.
    """

    @abstractmethod
    async def get(
        self, order_id: int, billing_month: str, for_update: bool = False
    ) -> Optional[OrderBilling]:
        """
        Retrieve the billing row of an order for a month

        Args:
            order_id: Order ID
            billing_month: Month key (YYYY-MM)
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            OrderBilling if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, billing: OrderBilling) -> OrderBilling:
        """
        Insert a new billing row

        Args:
            billing: OrderBilling entity to persist

        Returns:
            Created OrderBilling with generated ID

        Raises:
            ConcurrencyConflictError: another transaction inserted the same key
        """
        pass

    @abstractmethod
    async def update(self, billing: OrderBilling) -> OrderBilling:
        """
        Flush changes of an existing billing row

        Args:
            billing: OrderBilling entity with updated values

        Returns:
            Updated OrderBilling
        """
        pass

    @abstractmethod
    async def list_for_orders(self, order_ids: List[int], billing_month: str) -> List[OrderBilling]:
        """
        Billing rows of several orders for one month

        Args:
            order_ids: Order IDs
            billing_month: Month key (YYYY-MM)

        Returns:
            List of OrderBilling (orders without a row are simply absent)
        """
        pass

    @abstractmethod
    async def search(
        self,
        customer_id: Optional[int] = None,
        billing_month: Optional[str] = None,
        order_id: Optional[int] = None,
    ) -> List[OrderBilling]:
        """
        Billing rows matching all given filters

        Args:
            customer_id: Optional customer filter
            billing_month: Optional month filter
            order_id: Optional order filter

        Returns:
            List of OrderBilling
        """
        pass
