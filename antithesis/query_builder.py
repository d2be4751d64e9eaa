"""Generic filter / search / sort / pagination for list endpoints."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic.alias_generators import to_snake
from sqlalchemy import Select
from sqlalchemy.orm import InstrumentedAttribute

from .errors import BadRequestError

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


@dataclass
class QueryParams:
    # Column keys accept either the attribute name or its camelCase wire name
    filters: dict[str, Any] = field(default_factory=dict)
    search: dict[str, str] = field(default_factory=dict)
    greater_than: dict[str, Any] = field(default_factory=dict)
    less_than: dict[str, Any] = field(default_factory=dict)
    page: int | None = None
    limit: int | None = None
    sort_by: str | None = None
    sort_direction: Literal["asc", "desc"] | None = None

    @property
    def effective_limit(self) -> int:
        return min(self.limit or DEFAULT_LIMIT, MAX_LIMIT)

    @property
    def offset(self) -> int:
        return ((self.page or 1) - 1) * self.effective_limit


def column_for(model: type, key: str) -> InstrumentedAttribute:
    for candidate in (key, to_snake(key)):
        attr = getattr(model, candidate, None)
        if isinstance(attr, InstrumentedAttribute):
            return attr
    raise BadRequestError(f"Unknown column: {key}")


def apply_filters(stmt: Select, model: type, params: QueryParams) -> Select:
    """Filters, search and range bounds without sort/paging (for counts)."""
    for key, value in params.filters.items():
        col = column_for(model, key)
        if value is None:
            stmt = stmt.where(col.is_(None))
        elif isinstance(value, (list, tuple, set)):
            stmt = stmt.where(col.in_(list(value)))
        else:
            stmt = stmt.where(col == value)
    for key, value in params.search.items():
        if value:
            stmt = stmt.where(column_for(model, key).ilike(f"%{value}%"))
    for key, value in params.greater_than.items():
        stmt = stmt.where(column_for(model, key) > value)
    for key, value in params.less_than.items():
        stmt = stmt.where(column_for(model, key) < value)
    return stmt


def build_query(stmt: Select, model: type, params: QueryParams | None = None) -> Select:
    params = params or QueryParams()
    stmt = apply_filters(stmt, model, params)
    if params.sort_by:
        col = column_for(model, params.sort_by)
        stmt = stmt.order_by(col.desc() if params.sort_direction == "desc" else col.asc())
    return stmt.limit(params.effective_limit).offset(params.offset)


__all__ = ["QueryParams", "DEFAULT_LIMIT", "MAX_LIMIT", "apply_filters", "build_query", "column_for"]
