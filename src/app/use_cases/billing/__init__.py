"""Billing domain use cases"""
from .calculate_order_billing import CalculateOrderBilling
from .finalize_order_billing import FinalizeOrderBilling
from .get_finalization_status import GetCustomerFinalizationStatus
from .build_combined_invoice import BuildCombinedInvoice
from .list_order_billings import ListOrderBillings
from .dtos import (
    CalculateBillingCommandDTO,
    FinalizeBillingCommandDTO,
    OrderBillingDTO,
    ListOrderBillingsResponseDTO,
    CustomerFinalizationStatusDTO,
    FinalizeBillingResponseDTO,
    CombinedInvoiceDTO,
    MonthlyBillingResultDTO,
)

__all__ = [
    "CalculateOrderBilling",
    "FinalizeOrderBilling",
    "GetCustomerFinalizationStatus",
    "BuildCombinedInvoice",
    "ListOrderBillings",
    "CalculateBillingCommandDTO",
    "FinalizeBillingCommandDTO",
    "OrderBillingDTO",
    "ListOrderBillingsResponseDTO",
    "CustomerFinalizationStatusDTO",
    "FinalizeBillingResponseDTO",
    "CombinedInvoiceDTO",
    "MonthlyBillingResultDTO",
]
