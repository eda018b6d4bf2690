from .base import BaseModel
from .customer import Customer
from .meal_plan import MealPlan, MealFrequency, MealDays
from .customer_order import CustomerOrder, CustomerOrderDetails
from .order_billing import OrderBilling, BillingStatus
from .recurrence import Recurrence, WEEKDAY_NAMES, normalize_selected_days

__all__ = [
    "BaseModel",
    "Customer",
    "MealPlan",
    "MealFrequency",
    "MealDays",
    "CustomerOrder",
    "CustomerOrderDetails",
    "OrderBilling",
    "BillingStatus",
    "Recurrence",
    "WEEKDAY_NAMES",
    "normalize_selected_days",
]
