"""Build validated coupons from raw input."""

import re
from datetime import date
from decimal import Decimal

from app.core.exceptions import (
    DiscountBelowMinimum,
    EmptyCode,
    ExpirationInPast,
    InvalidCodeLength,
    MissingDiscount,
    MissingExpirationDate,
)
from app.models.coupon import CODE_LENGTH, Coupon

MIN_DISCOUNT_VALUE = Decimal("0.5")

_NON_ALPHANUMERIC = re.compile(r"[^A-Za-z0-9]")


def sanitize_code(raw_code: str | None) -> str:
    """Strip every non-alphanumeric ASCII character and uppercase the rest.

    Raises:
        EmptyCode: If ``raw_code`` is None or blank.
        InvalidCodeLength: If the sanitized code is not exactly 6 characters.
    """
    if raw_code is None or not raw_code.strip():
        raise EmptyCode()

    code = _NON_ALPHANUMERIC.sub("", raw_code).upper()
    if len(code) != CODE_LENGTH:
        raise InvalidCodeLength()
    return code


def validate_discount(value: Decimal | float | int | None) -> Decimal:
    if value is None:
        raise MissingDiscount()
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    if value < MIN_DISCOUNT_VALUE:
        raise DiscountBelowMinimum()
    return value


def validate_expiration(expiration_date: date | None, today: date) -> date:
    if expiration_date is None:
        raise MissingExpirationDate()
    if expiration_date < today:
        raise ExpirationInPast()
    return expiration_date


def build_coupon(
    raw_code: str | None,
    description: str,
    discount_value: Decimal | float | int | None,
    expiration_date: date | None,
    today: date | None = None,
) -> Coupon:
    """Create a new, not yet persisted, coupon.

    Checks run in a fixed order (code, discount, expiration) so the first
    failing rule is always the one reported.

    Args:
        raw_code: Code as typed by the user; sanitized before use.
        description: Free-text description.
        discount_value: Discount amount, at least 0.5.
        expiration_date: Last valid day; today is accepted.
        today: Reference date for the expiration check. Defaults to the
            current local date.

    Returns:
        A transient Coupon with ``deleted`` set to False.

    Raises:
        CouponValidationError: The subclass matching the first broken rule.
    """
    code = sanitize_code(raw_code)
    discount = validate_discount(discount_value)
    expiration = validate_expiration(expiration_date, today or date.today())

    return Coupon(
        code=code,
        description=description,
        discount_value=discount,
        expiration_date=expiration,
        deleted=False,
    )
