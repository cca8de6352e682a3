"""Domain exceptions raised by coupon business logic.

The service layer raises these when a rule is violated; the handlers in
``app.core.error_handlers`` translate them into problem-detail responses.
"""


class BusinessRuleError(ValueError):
    """A request was well formed but breaks a business rule."""


class CouponValidationError(BusinessRuleError):
    """Base class for failures while building a coupon."""

    message = "Invalid coupon."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class EmptyCode(CouponValidationError):
    message = "Coupon code must not be empty."


class InvalidCodeLength(CouponValidationError):
    message = "Coupon code must have exactly 6 alphanumeric characters after sanitization."


class MissingDiscount(CouponValidationError):
    message = "Discount value is required."


class DiscountBelowMinimum(CouponValidationError):
    message = "Minimum discount value is 0.5."


class MissingExpirationDate(CouponValidationError):
    message = "Expiration date is required."


class ExpirationInPast(CouponValidationError):
    message = "Expiration date cannot be in the past."


class CouponAlreadyDeleted(BusinessRuleError):
    def __init__(self) -> None:
        super().__init__("Coupon is already deleted.")


class CouponNotFound(LookupError):
    def __init__(self) -> None:
        super().__init__("Coupon not found.")


class DuplicateCouponCode(Exception):
    """Another coupon, active or soft-deleted, already uses the code."""

    def __init__(self, code: str):
        self.code = code
        super().__init__("A coupon with this code already exists.")
