"""Coupon request, response and page schemas."""

from datetime import date
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Exposes camelCase field names on the wire, accepts snake_case too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CouponCreate(CamelModel):
    code: str = Field(description="Raw code, sanitized to 6 characters")
    description: str = Field(min_length=1)
    discount_value: Decimal
    expiration_date: date

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class CouponResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    code: str
    description: str
    discount_value: Decimal
    expiration_date: date

    @field_serializer("discount_value")
    def serialize_discount_value(self, value: Decimal) -> float:
        return float(value)


class PageMetadata(CamelModel):
    size: int
    number: int
    total_elements: int
    total_pages: int


class CouponPage(CamelModel):
    """One page of coupons with its pagination metadata."""

    content: list[CouponResponse] = Field(default_factory=list)
    page: PageMetadata
