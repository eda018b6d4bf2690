"""Domain errors for the billing and attendance engine

Each error carries a stable ``code`` that use cases copy into
``libs.result.Error`` and that the API layer maps onto an HTTP status.
"""


class BillingDomainError(Exception):
    code = "BILLING_ERROR"

    def __init__(self, message: str, reason: str = None):
        super().__init__(message)
        self.message = message
        self.reason = reason


class NotApplicableError(BillingDomainError):
    """Billing requested for a month the order's date range does not overlap"""
    code = "BILLING_NOT_APPLICABLE"


class OrderNotFoundError(BillingDomainError):
    code = "ORDER_NOT_FOUND"


class OrderBillingNotFoundError(BillingDomainError):
    code = "ORDER_BILLING_NOT_FOUND"


class CustomerNotFoundError(BillingDomainError):
    code = "CUSTOMER_NOT_FOUND"


class InvalidRecurrenceError(BillingDomainError):
    """Recurrence that cannot be represented (bad range or weekday names)"""
    code = "INVALID_RECURRENCE"


class InvalidBillingMonthError(BillingDomainError):
    code = "INVALID_BILLING_MONTH"


class InvalidStatusTransitionError(BillingDomainError):
    """Attempt to move an order billing backwards through its lifecycle"""
    code = "INVALID_STATUS_TRANSITION"


class ConcurrencyConflictError(BillingDomainError):
    """Lock or unique-key contention on an order billing row (retryable)"""
    code = "CONCURRENCY_CONFLICT"
