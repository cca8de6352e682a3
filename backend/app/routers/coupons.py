"""Coupon API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import CouponAlreadyDeleted, CouponNotFound
from app.schemas.coupon import CouponCreate, CouponPage, CouponResponse, PageMetadata
from app.schemas.problem import ProblemDetail
from app.services.coupon_service import CouponDeletion, CouponService

router = APIRouter()


@router.post(
    "",
    response_model=CouponResponse,
    status_code=201,
    summary="Create coupon",
    responses={
        400: {"model": ProblemDetail, "description": "Invalid input or business rule violated"},
        409: {"model": ProblemDetail, "description": "Coupon with this code already exists"},
    },
)
async def create_coupon(
    data: CouponCreate,
    db: Session = Depends(get_db),
) -> CouponResponse:
    """Create a coupon, sanitizing its code and validating discount and expiration."""
    coupon = CouponService(db).create_coupon(data)
    return CouponResponse.model_validate(coupon)


@router.get(
    "",
    response_model=CouponPage,
    summary="List coupons",
    responses={400: {"model": ProblemDetail, "description": "Invalid query parameters"}},
)
async def list_coupons(
    response: Response,
    search: str | None = Query(
        default=None,
        description="Case-insensitive substring matched against code or description",
    ),
    page: int = Query(default=0, ge=0, description="Zero-based page number"),
    size: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    sort: str | None = Query(
        default=None,
        description='Sort as "field:direction", e.g. "expirationDate:asc" (the default)',
    ),
    db: Session = Depends(get_db),
) -> CouponPage:
    """List active coupons, optionally filtered by a search term."""
    listing = CouponService(db).list_coupons(search=search, page=page, size=size, sort=sort)
    response.headers["X-Total-Count"] = str(listing.total)
    return CouponPage(
        content=[CouponResponse.model_validate(c) for c in listing.items],
        page=PageMetadata(
            size=listing.size,
            number=listing.page,
            total_elements=listing.total,
            total_pages=listing.total_pages,
        ),
    )


@router.delete(
    "/{coupon_id}",
    status_code=204,
    summary="Delete coupon",
    responses={
        400: {"model": ProblemDetail, "description": "Coupon was already deleted"},
        404: {"model": ProblemDetail, "description": "Coupon not found"},
    },
)
async def delete_coupon(
    coupon_id: UUID,
    db: Session = Depends(get_db),
) -> Response:
    """Soft-delete a coupon."""
    outcome = CouponService(db).delete_coupon(coupon_id)
    if outcome is CouponDeletion.ALREADY_DELETED:
        raise CouponAlreadyDeleted()
    if outcome is CouponDeletion.NOT_FOUND:
        raise CouponNotFound()
    return Response(status_code=204)
