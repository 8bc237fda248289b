"""
Request tracking middleware for logging correlation.
"""

from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .context import generate_transaction_id, set_transaction_id

TRANSACTION_HEADER = "x-transaction-id"


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Bind a transaction ID to the request context and echo it back."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        txn_id = request.headers.get(TRANSACTION_HEADER) or generate_transaction_id()
        set_transaction_id(txn_id)

        response = await call_next(request)
        response.headers[TRANSACTION_HEADER] = txn_id

        return response
