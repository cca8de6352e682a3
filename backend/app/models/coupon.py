"""Coupon model for promotional discounts."""

from sqlalchemy import Boolean, Column, Date, DateTime, Numeric, String, Text, func

from app.core.database import Base
from app.models.shared import UUIDType, generate_uuid

CODE_LENGTH = 6


class Coupon(Base):
    """Coupon model for promotional discounts.

    Rows are never removed physically: deleting a coupon sets ``deleted`` so the
    code stays reserved by the unique constraint.
    """

    __tablename__ = "coupons"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    code = Column(String(CODE_LENGTH), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=False)
    discount_value = Column(Numeric(12, 2), nullable=False)
    expiration_date = Column(Date, nullable=False)
    deleted = Column(Boolean, nullable=False, default=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<Coupon {self.code} deleted={self.deleted}>"
