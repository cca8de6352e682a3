from app.models.coupon import Coupon

__all__ = ["Coupon"]
