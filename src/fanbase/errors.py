"""Standardized error values for fanbase actions.

Internal components raise FanbaseError. The marketplace boundary converts
it into an ErrorResponse dict so that callers always receive a value:

    {"success": False, "error": "...", "code": "token_not_found",
     "category": "not_found", "retriable": False}

Usage:
    from src.fanbase.errors import FanbaseError, ErrorCode

    raise FanbaseError(ErrorCode.TOKEN_NOT_FOUND, f"Token {token_id} not found",
                       token_id=token_id)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(str, Enum):
    """Categories for error classification.

    - VALIDATION: Caller provided malformed input
    - AUTHORIZATION: Caller does not control the target record
    - CONFLICT: Id already registered
    - NOT_FOUND: Template or token absent
    - CAPACITY: Bounded index full
    - EXHAUSTION: Global id counter saturated
    - MARKET: Listing/supply state forbids the action
    - FUNDS: Payer cannot cover the bid
    """

    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    CAPACITY = "capacity"
    EXHAUSTION = "exhaustion"
    MARKET = "market"
    FUNDS = "funds"


class ErrorCode(str, Enum):
    """Specific error codes for programmatic handling."""

    # Validation errors
    INVALID_ARGUMENT = "invalid_argument"
    ZERO_SUPPLY = "zero_supply"

    # Authorization errors
    NOT_OWNER = "not_owner"

    # Conflict errors
    CREATOR_ACCOUNT_TAKEN = "creator_account_taken"

    # Not found errors
    TOKEN_NOT_FOUND = "token_not_found"

    # Capacity errors
    MAX_CREATOR_ACCOUNTS_REACHED = "max_creator_accounts_reached"
    MAX_LAUNCH_TOKENS_REACHED = "max_launch_tokens_reached"
    MAX_TOKENS_REACHED = "max_tokens_reached"

    # Exhaustion errors
    LAUNCH_TOKENS_OVERFLOW = "launch_tokens_overflow"
    TOKENS_OVERFLOW = "tokens_overflow"

    # Market state errors
    TOKEN_SOLD_OUT = "token_sold_out"
    TOKEN_NOT_FOR_SALE = "token_not_for_sale"
    TOKEN_UNAVAILABLE = "token_unavailable"
    TOKEN_NOT_LISTED = "token_not_listed"
    TOKEN_ALREADY_LISTED = "token_already_listed"
    BID_PRICE_TOO_LOW = "bid_price_too_low"
    TRANSFER_TO_SELF = "transfer_to_self"

    # Funds errors
    INSUFFICIENT_FUNDS = "insufficient_funds"


_CATEGORY_BY_CODE: dict[ErrorCode, ErrorCategory] = {
    ErrorCode.INVALID_ARGUMENT: ErrorCategory.VALIDATION,
    ErrorCode.ZERO_SUPPLY: ErrorCategory.VALIDATION,
    ErrorCode.NOT_OWNER: ErrorCategory.AUTHORIZATION,
    ErrorCode.CREATOR_ACCOUNT_TAKEN: ErrorCategory.CONFLICT,
    ErrorCode.TOKEN_NOT_FOUND: ErrorCategory.NOT_FOUND,
    ErrorCode.MAX_CREATOR_ACCOUNTS_REACHED: ErrorCategory.CAPACITY,
    ErrorCode.MAX_LAUNCH_TOKENS_REACHED: ErrorCategory.CAPACITY,
    ErrorCode.MAX_TOKENS_REACHED: ErrorCategory.CAPACITY,
    ErrorCode.LAUNCH_TOKENS_OVERFLOW: ErrorCategory.EXHAUSTION,
    ErrorCode.TOKENS_OVERFLOW: ErrorCategory.EXHAUSTION,
    ErrorCode.TOKEN_SOLD_OUT: ErrorCategory.MARKET,
    ErrorCode.TOKEN_NOT_FOR_SALE: ErrorCategory.MARKET,
    ErrorCode.TOKEN_UNAVAILABLE: ErrorCategory.MARKET,
    ErrorCode.TOKEN_NOT_LISTED: ErrorCategory.MARKET,
    ErrorCode.TOKEN_ALREADY_LISTED: ErrorCategory.MARKET,
    ErrorCode.BID_PRICE_TOO_LOW: ErrorCategory.MARKET,
    ErrorCode.TRANSFER_TO_SELF: ErrorCategory.MARKET,
    ErrorCode.INSUFFICIENT_FUNDS: ErrorCategory.FUNDS,
}


def category_for(code: ErrorCode) -> ErrorCategory:
    """Look up the category an error code belongs to."""
    return _CATEGORY_BY_CODE[code]


@dataclass
class ErrorResponse:
    """Standardized error response.

    All error responses include:
    - success: Always False
    - error: Human-readable message
    - code: Machine-readable error code
    - category: Error category (authorization, capacity, etc.)
    - retriable: Whether the call could succeed if retried unchanged
    - details: Optional additional context
    """

    success: bool = False  # Always False for errors
    error: str = ""  # Human-readable message
    code: str = ""  # Machine-readable error code
    category: str = ""  # Error category
    retriable: bool = False  # The core never retries; host policy decides
    details: dict[str, object] | None = None  # Optional additional context

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for serialization."""
        result: dict[str, object] = {
            "success": self.success,
            "error": self.error,
            "code": self.code,
            "category": self.category,
            "retriable": self.retriable,
        }
        if self.details:
            result["details"] = self.details
        return result


class FanbaseError(Exception):
    """Raised by fanbase components when an action cannot complete.

    Carries a machine-readable ErrorCode. The marketplace converts it to an
    error value with to_dict().
    """

    code: ErrorCode
    message: str
    details: dict[str, object]

    def __init__(self, code: ErrorCode, message: str = "", **details: object) -> None:
        self.code = code
        self.message = message or code.value.replace("_", " ")
        self.details = dict(details)
        super().__init__(self.message)

    @property
    def category(self) -> ErrorCategory:
        return category_for(self.code)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            error=self.message,
            code=self.code.value,
            category=self.category.value,
            retriable=False,
            details=self.details or None,
        )

    def to_dict(self) -> dict[str, object]:
        return self.to_response().to_dict()


def error_response(
    code: ErrorCode,
    message: str,
    **details: object,
) -> dict[str, object]:
    """Create an error response dict without raising.

    Args:
        code: Specific error code
        message: Human-readable error message
        **details: Additional context (e.g., method="list")

    Returns:
        Error response dict with success=False
    """
    return FanbaseError(code, message, **details).to_dict()
