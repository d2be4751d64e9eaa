"""Controllers: endpoint groups sharing a base path, tag and middleware."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

from ..errors import ConfigurationError
from .endpoint import EndpointBuilder, EndpointDescriptor
from .middleware import Middleware


@dataclass(frozen=True)
class ControllerDescriptor:
    base_path: str
    endpoints: tuple[EndpointDescriptor, ...]
    description: str | None = None
    tag: str | None = None
    middlewares: tuple[Middleware, ...] = ()


class ControllerBuilder:
    def __init__(self, base_path: str):
        self._base_path = base_path
        self._description: str | None = None
        self._tag: str | None = None
        self._middlewares: list[Middleware] = []
        self._endpoints: list[EndpointBuilder | EndpointDescriptor] = []
        self._endpoints_calls = 0

    @property
    def base_path(self) -> str:
        return self._base_path

    def description(self, text: str) -> ControllerBuilder:
        self._description = text
        return self

    def tag(self, name: str) -> ControllerBuilder:
        self._tag = name
        return self

    def middleware(self, unit: Middleware) -> ControllerBuilder:
        self._middlewares.append(unit)
        return self

    def middlewares(self, units: list[Middleware]) -> ControllerBuilder:
        self._middlewares.extend(units)
        return self

    def endpoints(self, endpoints: list[EndpointBuilder | EndpointDescriptor]) -> ControllerBuilder:
        # A second call is reported at build time rather than silently merged
        self._endpoints_calls += 1
        self._endpoints.extend(endpoints)
        return self

    def build(self) -> ControllerDescriptor:
        if self._endpoints_calls > 1:
            raise ConfigurationError(f"Controller {self._base_path!r}: endpoints() called more than once")
        built = tuple(e if isinstance(e, EndpointDescriptor) else e.build() for e in self._endpoints)
        names = Counter(e.name for e in built if e.name)
        dupes = sorted(n for n, c in names.items() if c > 1)
        if dupes:
            raise ConfigurationError(f"Controller {self._base_path!r}: duplicate endpoint names {dupes}")
        return ControllerDescriptor(
            base_path=self._base_path,
            endpoints=built,
            description=self._description,
            tag=self._tag,
            middlewares=tuple(self._middlewares),
        )


def controller(base_path: str) -> ControllerBuilder:
    return ControllerBuilder(base_path)


__all__ = ["ControllerBuilder", "ControllerDescriptor", "controller"]
