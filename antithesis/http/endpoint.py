"""Fluent endpoint declarations.

    get("/:id", "getAlbum")
        .description("Get a single album")
        .input(params=AlbumIdParams)
        .response(AlbumWithPhotos)
        .envelope()
        .handler(get_album)

Builders only accumulate configuration. ``build()`` freezes it into an
``EndpointDescriptor``; topology problems (no target, two targets) surface
there, during the registration pass, never per request.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from ..errors import ConfigurationError
from .middleware import Middleware

HTTP_METHODS = ("GET", "PUT", "POST", "PATCH", "DELETE")

Handler = Callable[..., Any]


@dataclass(frozen=True)
class ViewSpec:
    template: str
    data_fn: Callable[..., Any]


@dataclass(frozen=True)
class EndpointDescriptor:
    method: str
    path: str
    name: str | None = None
    description: str | None = None
    middlewares: tuple[Middleware, ...] = ()
    params_schema: type | None = None
    query_schema: type | None = None
    body_schema: type | None = None
    response_schema: Any = None
    response_content_type: str = "application/json"
    status: int = 200
    envelope: bool = False
    hidden: bool = False
    oas_extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    handler: Handler | None = None
    view: ViewSpec | None = None

    @property
    def has_input(self) -> bool:
        return any(s is not None for s in (self.params_schema, self.query_schema, self.body_schema))


class EndpointBuilder:
    def __init__(self, method: str, path: str, name: str | None = None):
        method = method.upper()
        if method not in HTTP_METHODS:
            raise ConfigurationError(f"Unsupported HTTP method: {method}")
        self._opts: dict[str, Any] = {"method": method, "path": path, "name": name}
        self._middlewares: list[Middleware] = []
        self._targets = 0

    def name(self, name: str) -> EndpointBuilder:
        self._opts["name"] = name
        return self

    def description(self, text: str) -> EndpointBuilder:
        self._opts["description"] = text
        return self

    def middleware(self, unit: Middleware) -> EndpointBuilder:
        self._middlewares.append(unit)
        return self

    def middlewares(self, units: list[Middleware]) -> EndpointBuilder:
        self._middlewares.extend(units)
        return self

    def input(self, *, params: type | None = None, query: type | None = None, body: type | None = None) -> EndpointBuilder:
        self._opts.update(params_schema=params, query_schema=query, body_schema=body)
        return self

    def response(self, schema: Any) -> EndpointBuilder:
        self._opts["response_schema"] = schema
        return self

    def response_content_type(self, content_type: str) -> EndpointBuilder:
        self._opts["response_content_type"] = content_type
        return self

    def status(self, code: int) -> EndpointBuilder:
        self._opts["status"] = code
        return self

    def envelope(self) -> EndpointBuilder:
        """Wrap the handler result as ``{data, meta: {serverTime}}``."""
        self._opts["envelope"] = True
        return self

    def hide_from_openapi(self) -> EndpointBuilder:
        self._opts["hidden"] = True
        return self

    def oas(self, **extra: Any) -> EndpointBuilder:
        self._opts["oas_extra"] = MappingProxyType(dict(extra))
        return self

    def handler(self, fn: Handler) -> EndpointBuilder:
        self._targets += 1
        self._opts["handler"] = fn
        return self

    def render_view(self, template: str, data_fn: Callable[..., Any]) -> EndpointBuilder:
        self._targets += 1
        self._opts["view"] = ViewSpec(template, data_fn)
        self._opts["response_content_type"] = "text/html"
        return self

    @property
    def label(self) -> str:
        return f"{self._opts['method']} {self._opts['path']} ({self._opts.get('name') or 'unnamed'})"

    def build(self) -> EndpointDescriptor:
        if self._targets == 0:
            raise ConfigurationError(f"Endpoint {self.label} has no handler or view")
        if self._targets > 1:
            raise ConfigurationError(f"Endpoint {self.label} declares more than one handler/view")
        return EndpointDescriptor(middlewares=tuple(self._middlewares), **self._opts)


def endpoint(method: str, path: str, name: str | None = None) -> EndpointBuilder:
    return EndpointBuilder(method, path, name)


def get(path: str, name: str | None = None) -> EndpointBuilder:
    return endpoint("GET", path, name)


def put(path: str, name: str | None = None) -> EndpointBuilder:
    return endpoint("PUT", path, name)


def post(path: str, name: str | None = None) -> EndpointBuilder:
    return endpoint("POST", path, name)


def patch(path: str, name: str | None = None) -> EndpointBuilder:
    return endpoint("PATCH", path, name)


def delete(path: str, name: str | None = None) -> EndpointBuilder:
    return endpoint("DELETE", path, name)


__all__ = [
    "EndpointBuilder",
    "EndpointDescriptor",
    "ViewSpec",
    "endpoint",
    "get",
    "put",
    "post",
    "patch",
    "delete",
]
