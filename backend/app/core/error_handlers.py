"""Translate exceptions into RFC 9457 problem-detail responses."""

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.exceptions import BusinessRuleError, CouponNotFound, DuplicateCouponCode
from app.schemas.problem import ProblemDetail

logger = logging.getLogger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"
DUPLICATE_CODE_DETAIL = "A coupon with this code already exists."


def problem_response(
    request: Request,
    status: int,
    title: str,
    detail: str,
    type_suffix: str | None = None,
) -> JSONResponse:
    """Build a problem-detail response for the current request."""
    problem = ProblemDetail(
        type=f"{settings.error_type_base}/{type_suffix}" if type_suffix else "about:blank",
        title=title,
        status=status,
        detail=detail,
        instance=request.url.path,
    )
    return JSONResponse(
        status_code=status,
        content=problem.model_dump(),
        media_type=PROBLEM_MEDIA_TYPE,
    )


def _format_validation_errors(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        # Skip the "body"/"query"/"path" prefix
        field = ".".join(str(loc) for loc in error["loc"][1:]) or str(error["loc"][0])
        messages.append(f"{field}: {error['msg']}")
    return "; ".join(messages)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return problem_response(
        request,
        status=400,
        title="Bad Request",
        detail=_format_validation_errors(exc),
        type_suffix="validation",
    )


async def business_rule_exception_handler(
    request: Request, exc: BusinessRuleError
) -> JSONResponse:
    return problem_response(
        request,
        status=400,
        title="Business Rule Violation",
        detail=str(exc),
        type_suffix="business-rule",
    )


async def not_found_exception_handler(request: Request, exc: CouponNotFound) -> JSONResponse:
    return problem_response(
        request,
        status=404,
        title="Not Found",
        detail=str(exc),
        type_suffix="not-found",
    )


async def conflict_exception_handler(
    request: Request, exc: DuplicateCouponCode | IntegrityError
) -> JSONResponse:
    """Handle duplicate codes caught by the pre-check or by the unique constraint."""
    if isinstance(exc, IntegrityError):
        logger.warning("Integrity constraint violated on %s: %s", request.url.path, exc.orig)
    return problem_response(
        request,
        status=409,
        title="Data Conflict",
        detail=DUPLICATE_CODE_DETAIL,
        type_suffix="data-conflict",
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    try:
        title = HTTPStatus(exc.status_code).phrase
    except ValueError:
        title = "Error"
    response = problem_response(
        request,
        status=exc.status_code,
        title=title,
        detail=str(exc.detail),
    )
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unexpected error while handling %s %s", request.method, request.url.path)
    return problem_response(
        request,
        status=500,
        title="Internal Server Error",
        detail="An unexpected error occurred.",
        type_suffix="internal",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach every problem-detail handler to ``app``."""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(BusinessRuleError, business_rule_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(CouponNotFound, not_found_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(DuplicateCouponCode, conflict_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, conflict_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, general_exception_handler)
