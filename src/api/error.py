"""API error envelope

Use case errors are raised as ClientError by the routes and rendered as
``{"error": {"code": ..., "message": ...}}``.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse
from libs.result import Error

# Domain error codes that are not plain 400s
ERROR_STATUS_CODES = {
    "ORDER_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "ORDER_BILLING_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "CUSTOMER_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "BILLING_NOT_APPLICABLE": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "INVALID_RECURRENCE": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "INVALID_STATUS_TRANSITION": status.HTTP_409_CONFLICT,
    "CONCURRENCY_CONFLICT": status.HTTP_409_CONFLICT,
}


class ClientError(Exception):
    def __init__(self, error: Error, status_code: int = None):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code or ERROR_STATUS_CODES.get(error.code, status.HTTP_400_BAD_REQUEST)


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": {"code": exc.error.code, "message": exc.error.message}},
    )
