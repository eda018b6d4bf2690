from .customer_repository import CustomerRepository
from .customer_order_repository import CustomerOrderRepository
from .order_billing_repository import OrderBillingRepository

__all__ = [
    "CustomerRepository",
    "CustomerOrderRepository",
    "OrderBillingRepository",
]
