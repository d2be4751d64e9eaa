"""``{data, meta}`` success envelope and its schema."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from ..dto import DTO

T = TypeVar("T")


def server_time() -> str:
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def api_response(data: Any, *, error: Exception | None = None, meta: dict[str, Any] | None = None) -> dict[str, Any]:
    envelope_meta: dict[str, Any] = {"serverTime": server_time()}
    if error is not None:
        envelope_meta["error"] = {
            "code": getattr(error, "code", type(error).__name__),
            "message": getattr(error, "message", str(error)),
            "details": getattr(error, "details", None) or {},
        }
    if meta:
        envelope_meta.update(meta)
    return {"meta": envelope_meta, "data": data}


class ApiError(DTO):
    code: str
    message: str | None = None
    details: Any = None


class ApiMeta(DTO):
    server_time: str
    error: ApiError | None = None


class ApiOutput(DTO, Generic[T]):
    meta: ApiMeta
    data: T


def api_output(schema: Any) -> type[ApiOutput]:
    return ApiOutput[schema]


__all__ = ["ApiError", "ApiMeta", "ApiOutput", "api_output", "api_response", "server_time"]
