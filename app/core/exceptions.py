"""
Error taxonomy shared by the services and the HTTP boundary.

    StockDeskError
    +-- ValidationError        malformed or missing input, fix and resend
    +-- NotFoundError          referenced record absent
    |   +-- QuoteNotFoundError
    +-- InvalidStateError      transition from a non-pending state, refetch
    +-- AuthenticationError    caller identity could not be verified
    +-- AuthorizationError     caller lacks the required role

Each class carries a machine-readable `code`; the routes translate the
class to an HTTP status and echo `code` and `message` in the body.
None of them is retried by the services.
"""
from typing import Any, Dict, Optional


class StockDeskError(Exception):
    code: str = "STOCK_DESK_ERROR"

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details

    def to_dict(self) -> Dict[str, Any]:
        payload = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = {k: str(v) for k, v in self.details.items()}
        return payload


class ValidationError(StockDeskError):
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: Optional[str] = None, **details: Any):
        if field is not None:
            details["field"] = field
        super().__init__(message, **details)
        self.field = field


class NotFoundError(StockDeskError):
    code = "NOT_FOUND"


class QuoteNotFoundError(NotFoundError):
    code = "QUOTE_NOT_FOUND"

    def __init__(self, symbol: str):
        super().__init__(f"Stock not found: {symbol}", symbol=symbol)
        self.symbol = symbol


class InvalidStateError(StockDeskError):
    code = "INVALID_STATE"

    def __init__(self, message: str, current_status: Optional[str] = None, **details: Any):
        if current_status is not None:
            details["current_status"] = current_status
        super().__init__(message, **details)
        self.current_status = current_status


class AuthenticationError(StockDeskError):
    code = "UNAUTHENTICATED"


class AuthorizationError(StockDeskError):
    code = "FORBIDDEN"
