from app.schemas.coupon import CouponCreate, CouponPage, CouponResponse, PageMetadata
from app.schemas.problem import ProblemDetail

__all__ = [
    "CouponCreate",
    "CouponPage",
    "CouponResponse",
    "PageMetadata",
    "ProblemDetail",
]
