"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth
  3xxx: Catalog
  4xxx: Listing
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Invalid or expired credentials", 401)


class ForbiddenError(AppError):
    def __init__(self, detail: str = "Administrator role required") -> None:
        super().__init__(1002, detail, 403)


# --- 3xxx: Catalog ---

class ItemNotFoundError(AppError):
    def __init__(self, item_id: str) -> None:
        super().__init__(3001, f"Catalog item not found: {item_id}", 404)


# --- 4xxx: Listing ---

class InvalidPriceError(AppError):
    def __init__(self, price_cents: int) -> None:
        super().__init__(4001, f"Price must be positive, got {price_cents} cents", 422)


class InvalidQuantityError(AppError):
    def __init__(self, quantity: int) -> None:
        super().__init__(4002, f"Quantity must be at least 1, got {quantity}", 422)


class InvalidListingAttributeError(AppError):
    def __init__(self, field: str, value: object) -> None:
        super().__init__(4003, f"Invalid {field}: {value!r}", 422)


class ListingNotFoundError(AppError):
    def __init__(self, listing_id: str) -> None:
        super().__init__(4004, f"Listing not found: {listing_id}", 404)


class UnauthorizedError(AppError):
    def __init__(self, listing_id: str) -> None:
        super().__init__(4005, f"Listing {listing_id} does not belong to caller", 403)


class InvalidTransitionError(AppError):
    def __init__(self, listing_id: str, status: str, event: str) -> None:
        super().__init__(
            4006, f"Listing {listing_id} in status {status} does not accept {event}", 409
        )


class InvalidReasonError(AppError):
    def __init__(self) -> None:
        super().__init__(4007, "Rejection reason must not be empty", 422)


class ConflictError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(4008, f"Concurrent update lost: {detail}", 409)


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self) -> None:
        super().__init__(9001, "Rate limit exceeded", 429)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
