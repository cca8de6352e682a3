"""Shared sorting utilities for repository queries."""

from __future__ import annotations

from collections.abc import Mapping

from sqlalchemy import asc, desc
from sqlalchemy.orm import Query

from app.core.database import Base


def parse_sort(
    sort: str | None,
    allowed_fields: Mapping[str, str],
    default_field: str,
    default_direction: str = "asc",
) -> tuple[str, str]:
    """Resolve a sort string into a ``(column, direction)`` pair.

    Args:
        sort: Sort string in "field:direction" format (e.g. "code:desc").
            A comma is accepted as separator too ("code,desc").
            If None or empty, uses default_field and default_direction.
        allowed_fields: Maps public field names to model column names.
        default_field: Default column to sort by.
        default_direction: Default sort direction ("asc" or "desc").

    Returns:
        The model column name and the direction.
    """
    field = default_field
    direction = default_direction

    if sort:
        parts = sort.replace(",", ":").split(":", 1)
        candidate_field = parts[0].strip()
        candidate_direction = parts[1].strip().lower() if len(parts) > 1 else "asc"

        # Only whitelisted fields are sortable
        if candidate_field in allowed_fields:
            field = allowed_fields[candidate_field]
            if candidate_direction in ("asc", "desc"):
                direction = candidate_direction
            else:
                direction = default_direction

    return field, direction


def apply_order_by(
    query: Query,  # type: ignore[type-arg]
    model: type[Base],
    field: str,
    direction: str,
    tiebreaker: str | None = "id",
) -> Query:  # type: ignore[type-arg]
    """Apply ordering to a SQLAlchemy query.

    Args:
        query: The SQLAlchemy query to sort.
        model: The SQLAlchemy model class.
        field: Column to sort by.
        direction: "asc" or "desc".
        tiebreaker: Secondary column keeping page boundaries stable.

    Returns:
        The query with ordering applied.
    """
    order_func = asc if direction == "asc" else desc
    query = query.order_by(order_func(getattr(model, field)))
    if tiebreaker and tiebreaker != field:
        query = query.order_by(asc(getattr(model, tiebreaker)))
    return query
