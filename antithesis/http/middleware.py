"""Named BEFORE/AFTER request-processing units.

BEFORE handlers receive the ``RequestContext``; returning anything other than
``None`` (a Response, a redirect, a body) stops the chain and becomes the
response. AFTER handlers receive ``(ctx, result)`` and return the result to
pass on. Either kind may be ``async def``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any


class MiddlewareType(Enum):
    BEFORE = "before"
    AFTER = "after"


@dataclass(frozen=True)
class Middleware:
    name: str
    type: MiddlewareType
    handler: Callable[..., Any]


def middleware(*, name: str, type: MiddlewareType, handler: Callable[..., Any]) -> Middleware:
    return Middleware(name=name, type=type, handler=handler)


def before(name: str) -> Callable[[Callable[..., Any]], Middleware]:
    """Decorator form: ``@before("requireAuth")``."""

    def wrap(fn: Callable[..., Any]) -> Middleware:
        return Middleware(name=name, type=MiddlewareType.BEFORE, handler=fn)

    return wrap


def after(name: str) -> Callable[[Callable[..., Any]], Middleware]:
    def wrap(fn: Callable[..., Any]) -> Middleware:
        return Middleware(name=name, type=MiddlewareType.AFTER, handler=fn)

    return wrap


def flatten_chain(*groups: tuple[Middleware, ...] | list[Middleware]) -> tuple[tuple[Middleware, ...], tuple[Middleware, ...]]:
    """Split the concatenated groups into (BEFORE, AFTER), keeping declared order."""
    units = [m for group in groups for m in group]
    before_units = tuple(m for m in units if m.type is MiddlewareType.BEFORE)
    after_units = tuple(m for m in units if m.type is MiddlewareType.AFTER)
    return before_units, after_units


__all__ = ["Middleware", "MiddlewareType", "middleware", "before", "after", "flatten_chain"]
