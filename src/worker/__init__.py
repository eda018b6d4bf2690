"""Background workers for tiffin billing service"""
from .monthly_billing import MonthlyBillingWorker

__all__ = ["MonthlyBillingWorker"]
