"""Coupon service: creation, listing and soft deletion."""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from math import ceil
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.exceptions import DuplicateCouponCode
from app.core.sorting import parse_sort
from app.models.coupon import Coupon
from app.repositories.coupon_repository import CouponRepository
from app.schemas.coupon import CouponCreate
from app.services.coupon_factory import build_coupon

logger = logging.getLogger(__name__)

# Public sort names mapped to Coupon columns
SORTABLE_FIELDS = {
    "code": "code",
    "description": "description",
    "discountValue": "discount_value",
    "discount_value": "discount_value",
    "expirationDate": "expiration_date",
    "expiration_date": "expiration_date",
}
DEFAULT_SORT_FIELD = "expiration_date"
DEFAULT_SORT_DIRECTION = "asc"


class CouponDeletion(str, Enum):
    """Outcome of a delete request."""

    DELETED = "deleted"
    ALREADY_DELETED = "already_deleted"
    NOT_FOUND = "not_found"


@dataclass
class CouponListing:
    """A page of coupons plus the numbers needed for page metadata."""

    items: list[Coupon]
    page: int
    size: int
    total: int

    @property
    def total_pages(self) -> int:
        return ceil(self.total / self.size) if self.size else 0


class CouponService:
    """Service for coupon business operations."""

    def __init__(self, db: Session):
        self.db = db
        self.coupon_repo = CouponRepository(db)

    def create_coupon(self, data: CouponCreate, today: date | None = None) -> Coupon:
        """Validate, normalize and persist a new coupon.

        Raises:
            CouponValidationError: If a business rule is broken.
            DuplicateCouponCode: If the sanitized code is already used, by an
                active or a soft-deleted coupon.
            IntegrityError: If a concurrent request inserted the same code first.
        """
        coupon = build_coupon(
            data.code,
            data.description,
            data.discount_value,
            data.expiration_date,
            today=today,
        )

        if self.coupon_repo.get_by_code(str(coupon.code)):
            logger.warning("Rejected duplicate coupon code %s", coupon.code)
            raise DuplicateCouponCode(str(coupon.code))

        created = self.coupon_repo.create(coupon)
        logger.info("Created coupon %s (%s)", created.id, created.code)
        return created

    def list_coupons(
        self,
        search: str | None = None,
        page: int = 0,
        size: int = 10,
        sort: str | None = None,
    ) -> CouponListing:
        """List active coupons, filtered by ``search`` when it is not blank.

        The search term is matched as given (surrounding spaces included)
        against code or description, as a case-insensitive substring. Trimming
        only decides whether the term is blank.
        """
        term = search if search and search.strip() else None
        order_field, order_direction = parse_sort(
            sort, SORTABLE_FIELDS, DEFAULT_SORT_FIELD, DEFAULT_SORT_DIRECTION
        )

        items = self.coupon_repo.get_all(
            skip=page * size,
            limit=size,
            search=term,
            order_field=order_field,
            order_direction=order_direction,
        )
        total = self.coupon_repo.count(search=term)
        return CouponListing(items=items, page=page, size=size, total=total)

    def delete_coupon(self, coupon_id: UUID) -> CouponDeletion:
        """Soft-delete a coupon.

        Only an active coupon is modified. A soft-deleted coupon and an unknown
        ID leave the store untouched and report distinct outcomes.
        """
        coupon = self.coupon_repo.get_active_by_id(coupon_id)
        if coupon is not None:
            self.coupon_repo.soft_delete(coupon)
            logger.info("Soft-deleted coupon %s (%s)", coupon_id, coupon.code)
            return CouponDeletion.DELETED

        if self.coupon_repo.is_deleted(coupon_id):
            logger.warning("Coupon %s is already deleted", coupon_id)
            return CouponDeletion.ALREADY_DELETED

        return CouponDeletion.NOT_FOUND
