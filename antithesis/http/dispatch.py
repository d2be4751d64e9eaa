"""Registration pass + per-request pipeline.

``register_controllers`` consumes every controller at once: it builds the
descriptors, rejects an invalid topology with ``ConfigurationError`` and binds
one Flask URL rule per endpoint. Each request then moves through

    BEFORE middleware -> input validation -> handler / view
    -> AFTER middleware -> response serialization

with every failure handed to the central error handler.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

from flask import Flask, current_app, g, render_template, request, session
from flask import redirect as flask_redirect
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import to_jsonable_python
from werkzeug.wrappers.response import Response

from ..dto import issues_from
from ..errors import ConfigurationError, ValidationError
from ..logging_setup import get_logger
from .api_response import api_response
from .controller import ControllerBuilder, ControllerDescriptor
from .endpoint import EndpointDescriptor
from .middleware import Middleware, flatten_chain
from .paths import join_paths, path_to_title, route_signature, to_flask_rule

log = get_logger("http")


@dataclass
class Inputs:
    params: Any = None
    query: Any = None
    body: Any = None


class ResponseWriter:
    """Lets a handler or middleware set status/headers or write the response itself."""

    def __init__(self, status: int = 200):
        self.status = status
        self.headers: dict[str, str] = {}
        self._response: Response | None = None

    @property
    def sent(self) -> bool:
        return self._response is not None

    def redirect(self, location: str, code: int = 302) -> Response:
        self._response = flask_redirect(location, code=code)
        return self._response

    def send(self, body: Any = "", status: int | None = None, content_type: str | None = None) -> Response:
        if isinstance(body, Response):
            self._response = body
        else:
            self._response = current_app.make_response((body, status or self.status))
            if content_type:
                self._response.content_type = content_type
        return self._response

    def finalize(self, resp: Response | None = None) -> Response:
        out = resp if resp is not None else self._response
        if out is None:
            out = Response(status=self.status)
        for k, v in self.headers.items():
            out.headers[k] = v
        return out


@dataclass
class RequestContext:
    controller: ControllerDescriptor
    endpoint: EndpointDescriptor
    route_params: dict[str, Any]
    response: ResponseWriter
    inputs: Inputs = field(default_factory=Inputs)

    @property
    def request(self):
        return request

    @property
    def session(self):
        return session

    @property
    def user(self):
        return getattr(g, "user", None)

    @property
    def user_id(self) -> str | None:
        return session.get("userId")

    @property
    def tenant_id(self) -> str | None:
        return getattr(g, "tenant_id", None)

    @property
    def log(self):
        return log.child(endpoint=self.endpoint.name, tenantId=self.tenant_id)


# ---- registration ---------------------------------------------------------


def operation_name(ep: EndpointDescriptor) -> str:
    return ep.name or f"{ep.method.lower()}{path_to_title(ep.path)}"


def build_controllers(controllers: Iterable[ControllerBuilder | ControllerDescriptor]) -> list[ControllerDescriptor]:
    """Freeze every controller and check the global route table."""
    built = [c if isinstance(c, ControllerDescriptor) else c.build() for c in controllers]
    seen: dict[tuple[str, str], str] = {}
    for ctrl in built:
        for ep in ctrl.endpoints:
            full = join_paths(ctrl.base_path, ep.path)
            key = (ep.method, route_signature(full))
            owner = f"{ctrl.base_path}:{operation_name(ep)}"
            if key in seen:
                raise ConfigurationError(f"Duplicate route {ep.method} {full} ({seen[key]} and {owner})")
            seen[key] = owner
    return built


def register_controllers(
    app: Flask,
    controllers: Iterable[ControllerBuilder | ControllerDescriptor],
    middlewares: Iterable[Middleware] = (),
) -> list[ControllerDescriptor]:
    built = build_controllers(controllers)
    global_mw = tuple(middlewares)
    for c_idx, ctrl in enumerate(built):
        for e_idx, ep in enumerate(ctrl.endpoints):
            full = join_paths(ctrl.base_path, ep.path)
            before_units, after_units = flatten_chain(global_mw, ctrl.middlewares, ep.middlewares)
            view = _make_view(ctrl, ep, before_units, after_units)
            app.add_url_rule(
                to_flask_rule(full),
                endpoint=f"c{c_idx}e{e_idx}.{operation_name(ep)}",
                view_func=view,
                methods=[ep.method],
            )
            log.debug("Bound %s %s", ep.method, full)
    return built


def _make_view(ctrl, ep, before_units, after_units):
    def view(**route_params: Any) -> Response:
        return run_pipeline(ctrl, ep, before_units, after_units, route_params)

    view.__name__ = f"{operation_name(ep)}_view"
    return view


# ---- pipeline -------------------------------------------------------------


def _call(fn, *args):
    return current_app.ensure_sync(fn)(*args)


def run_pipeline(
    ctrl: ControllerDescriptor,
    ep: EndpointDescriptor,
    before_units: tuple[Middleware, ...],
    after_units: tuple[Middleware, ...],
    route_params: dict[str, Any],
) -> Response:
    ctx = RequestContext(controller=ctrl, endpoint=ep, route_params=route_params, response=ResponseWriter(ep.status))
    g.request_context = ctx

    for unit in before_units:
        out = _call(unit.handler, ctx)
        if out is not None:
            return ctx.response.finalize(current_app.make_response(out))
        if ctx.response.sent:
            log.info("Middleware %s wrote the response, stopping chain", unit.name)
            return ctx.response.finalize()

    ctx.inputs = validate_inputs(ep, route_params)

    if ep.view is not None:
        data = _call(ep.view.data_fn, ctx.inputs, ctx) or {}
        result: Any = render_template(f"{ep.view.template}.html", **data)
    else:
        result = _call(ep.handler, ctx.inputs, ctx)

    if ctx.response.sent:
        return ctx.response.finalize()
    if isinstance(result, Response):
        return ctx.response.finalize(result)

    for unit in after_units:
        result = _call(unit.handler, ctx, result)

    return ctx.response.finalize(serialize(ep, ctx, result))


def _query_dict() -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key in request.args:
        values = request.args.getlist(key)
        out[key] = values[0] if len(values) == 1 else values
    return out


def _body_dict() -> Any:
    if request.is_json:
        return request.get_json()
    if request.form:
        return request.form.to_dict()
    return {}


def validate_inputs(ep: EndpointDescriptor, route_params: dict[str, Any]) -> Inputs:
    inputs = Inputs()
    issues: list[dict[str, Any]] = []
    sections = (
        ("params", ep.params_schema, lambda: route_params),
        ("query", ep.query_schema, _query_dict),
        ("body", ep.body_schema, _body_dict),
    )
    for section, schema, raw in sections:
        if schema is None:
            continue
        try:
            setattr(inputs, section, schema.model_validate(raw()))
        except PydanticValidationError as exc:
            issues.extend(issues_from(exc, (section,)))
    if issues:
        raise ValidationError("Validation failed", issues)
    return inputs


@lru_cache(maxsize=None)
def _adapter(schema: Any) -> TypeAdapter:
    return TypeAdapter(schema)


def _project(ep: EndpointDescriptor, result: Any) -> Any:
    if ep.response_schema is None:
        return to_jsonable_python(result, by_alias=True)
    adapter = _adapter(ep.response_schema)
    try:
        checked = adapter.validate_python(to_jsonable_python(result, by_alias=True))
    except PydanticValidationError as exc:
        log.error("Response for %s failed its schema", operation_name(ep))
        raise ValidationError("Response validation failed", issues_from(exc, ("response",))) from exc
    return adapter.dump_python(checked, mode="json", by_alias=True)


def serialize(ep: EndpointDescriptor, ctx: RequestContext, result: Any) -> Response:
    status = ctx.response.status
    if isinstance(result, (str, bytes)):
        return Response(result, status=status, content_type=ep.response_content_type)
    if result is None and not ep.envelope:
        return Response(status=status)
    payload = _project(ep, result) if result is not None else None
    if ep.envelope:
        payload = api_response(payload)
    resp = current_app.json.response(payload)
    resp.status_code = status
    resp.content_type = ep.response_content_type
    return resp


__all__ = [
    "Inputs",
    "RequestContext",
    "ResponseWriter",
    "build_controllers",
    "operation_name",
    "register_controllers",
    "run_pipeline",
    "serialize",
    "validate_inputs",
]
