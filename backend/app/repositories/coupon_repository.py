"""Coupon repository for data access."""

from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from app.core.sorting import apply_order_by
from app.models.coupon import Coupon


def _like_pattern(term: str) -> str:
    """Build a contains-pattern where LIKE wildcards in ``term`` match literally."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class CouponRepository:
    """Repository for Coupon model.

    Every read except ``get_by_code`` and ``is_deleted`` only sees active
    (non-deleted) coupons.
    """

    def __init__(self, db: Session):
        self.db = db

    def _active(self) -> Query:  # type: ignore[type-arg]
        return self.db.query(Coupon).filter(Coupon.deleted.is_(False))

    def _search(self, search: str | None) -> Query:  # type: ignore[type-arg]
        query = self._active()
        if not search:
            return query

        if self.db.get_bind().dialect.name == "sqlite":
            # ILIKE on SQLite folds ASCII only; compare Unicode-casefolded text
            pattern = _like_pattern(search.casefold())
            return query.filter(
                or_(
                    func.casefold(Coupon.code).like(pattern, escape="\\"),
                    func.casefold(Coupon.description).like(pattern, escape="\\"),
                )
            )

        pattern = _like_pattern(search)
        return query.filter(
            or_(
                Coupon.code.ilike(pattern, escape="\\"),
                Coupon.description.ilike(pattern, escape="\\"),
            )
        )

    def get_all(
        self,
        skip: int = 0,
        limit: int = 10,
        search: str | None = None,
        order_field: str = "expiration_date",
        order_direction: str = "asc",
    ) -> list[Coupon]:
        """Get active coupons, optionally matching ``search`` in code or description."""
        query = apply_order_by(self._search(search), Coupon, order_field, order_direction)
        return query.offset(skip).limit(limit).all()

    def count(self, search: str | None = None) -> int:
        """Count active coupons, optionally matching ``search``."""
        return self._search(search).count()

    def get_active_by_id(self, coupon_id: UUID) -> Coupon | None:
        """Get a non-deleted coupon by ID."""
        return self._active().filter(Coupon.id == coupon_id).first()

    def is_deleted(self, coupon_id: UUID) -> bool:
        """Check whether a soft-deleted row exists for ``coupon_id``.

        Bypasses the active-only filter so a deleted coupon can be told apart
        from one that never existed.
        """
        query = self.db.query(Coupon.id).filter(Coupon.id == coupon_id, Coupon.deleted.is_(True))
        return bool(self.db.query(query.exists()).scalar())

    def get_by_code(self, code: str) -> Coupon | None:
        """Get a coupon by code, including soft-deleted ones."""
        return self.db.query(Coupon).filter(Coupon.code == code).first()

    def create(self, coupon: Coupon) -> Coupon:
        """Persist a coupon built by the coupon factory.

        Raises:
            IntegrityError: If the code is already taken. The session is rolled
                back before re-raising.
        """
        self.db.add(coupon)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise
        self.db.refresh(coupon)
        return coupon

    def soft_delete(self, coupon: Coupon) -> Coupon:
        """Flag a coupon as deleted."""
        coupon.deleted = True  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(coupon)
        return coupon
