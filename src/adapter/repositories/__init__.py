from .customer_repository import SqlAlchemyCustomerRepository
from .customer_order_repository import SqlAlchemyCustomerOrderRepository
from .order_billing_repository import SqlAlchemyOrderBillingRepository

__all__ = [
    "SqlAlchemyCustomerRepository",
    "SqlAlchemyCustomerOrderRepository",
    "SqlAlchemyOrderBillingRepository",
]
