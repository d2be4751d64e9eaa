"""Request pipeline: middleware chain, validation, serialization, errors."""

from __future__ import annotations

import asyncio

from sqlalchemy.exc import IntegrityError

from antithesis.dto import DTO
from antithesis.errors import ForbiddenError, NotFoundError
from antithesis.http import after, before, controller, delete, get, post
from antithesis.tenant_schemas import SwitchTenant


class Thing(DTO):
    thing_id: str
    label: str


class ThingQuery(DTO):
    limit: int = 10


def test_middleware_runs_global_controller_endpoint_in_order(mini_app):
    seen = []

    def unit(name):
        @before(name)
        def mw(ctx):
            seen.append(name)

        return mw

    ctrl = (
        controller("/api/things")
        .middleware(unit("controller"))
        .endpoints([get("/", "list").middleware(unit("endpoint")).handler(lambda i, c: seen.append("handler") or [])])
    )
    app = mini_app([ctrl], [unit("global")])
    r = app.test_client().get("/api/things")
    assert r.status_code == 200
    assert seen == ["global", "controller", "endpoint", "handler"]


def test_before_middleware_short_circuits(mini_app):
    calls = []

    @before("gate")
    def gate(ctx):
        return ctx.response.send({"blocked": True}, status=418)

    @before("never")
    def never(ctx):
        calls.append("never")

    ctrl = controller("/api/gated").middleware(gate).middleware(never).endpoints(
        [get("/", "gated").handler(lambda i, c: calls.append("handler"))]
    )
    r = mini_app([ctrl]).test_client().get("/api/gated")
    assert r.status_code == 418
    assert r.get_json() == {"blocked": True}
    assert calls == []


def test_before_middleware_error_reaches_error_handler(mini_app):
    @before("deny")
    def deny(ctx):
        raise ForbiddenError("nope")

    ctrl = controller("/api/denied").middleware(deny).endpoints([get("/", "denied").handler(lambda i, c: {})])
    r = mini_app([ctrl]).test_client().get("/api/denied", headers={"Accept": "application/json"})
    assert r.status_code == 403
    body = r.get_json()
    assert body["error"] == {"code": "ForbiddenError", "message": "nope"}
    assert body["meta"]["serverTime"].endswith("Z")


def test_after_middleware_transforms_result(mini_app):
    @after("stamp")
    def stamp(ctx, result):
        return {**result, "stamped": True}

    ctrl = controller("/api/stamped").middleware(stamp).endpoints([get("/", "stamped").handler(lambda i, c: {"a": 1})])
    r = mini_app([ctrl]).test_client().get("/api/stamped")
    assert r.get_json() == {"a": 1, "stamped": True}


def test_async_handler(mini_app):
    async def handler(inputs, ctx):
        await asyncio.sleep(0)
        return Thing(thing_id="t1", label="async")

    ctrl = controller("/api/async").endpoints([get("/", "asyncThing").response(Thing).envelope().handler(handler)])
    r = mini_app([ctrl]).test_client().get("/api/async")
    body = r.get_json()
    assert r.status_code == 200
    assert body["data"] == {"thingId": "t1", "label": "async"}
    assert "serverTime" in body["meta"]


def test_inputs_are_validated_by_section(mini_app):
    ctrl = controller("/api/switch").endpoints(
        [post("/:id", "switch").input(query=ThingQuery, body=SwitchTenant).handler(lambda i, c: {"limit": i.query.limit})]
    )
    client = mini_app([ctrl]).test_client()
    r = client.post("/api/switch/1?limit=abc", json={"tenantId": "not-a-uuid"})
    assert r.status_code == 422
    body = r.get_json()
    assert body["error"]["code"] == "ValidationError"
    paths = [issue["path"] for issue in body["error"]["details"]]
    assert ["query", "limit"] in paths
    assert ["body", "tenantId"] in paths

    ok = client.post("/api/switch/1?limit=5", json={"tenantId": "7b0e0c9e-2c43-4a4e-9d7e-1c6f5d6c8a11"})
    assert ok.status_code == 200
    assert ok.get_json() == {"limit": 5}


def test_response_schema_violation_is_422(mini_app):
    ctrl = controller("/api/bad").endpoints([get("/", "bad").response(Thing).handler(lambda i, c: {"label": "no id"})])
    r = mini_app([ctrl]).test_client().get("/api/bad")
    assert r.status_code == 422
    assert r.get_json()["error"]["message"] == "Response validation failed"


def test_status_204_returns_no_body(mini_app):
    ctrl = controller("/api/gone").endpoints([delete("/:id", "remove").status(204).handler(lambda i, c: None)])
    r = mini_app([ctrl]).test_client().delete("/api/gone/1")
    assert r.status_code == 204
    assert r.data == b""


def test_string_result_uses_declared_content_type(mini_app):
    ctrl = controller("/").endpoints(
        [get("/robots.txt", "robots").response_content_type("text/plain").handler(lambda i, c: "User-agent: *")]
    )
    r = mini_app([ctrl]).test_client().get("/robots.txt")
    assert r.mimetype == "text/plain"
    assert r.data == b"User-agent: *"


def test_handler_can_set_status_and_headers(mini_app):
    def handler(inputs, ctx):
        ctx.response.status = 202
        ctx.response.headers["X-Thing"] = "queued"
        return {"queued": True}

    ctrl = controller("/api/jobs").endpoints([post("/", "enqueue").handler(handler)])
    r = mini_app([ctrl]).test_client().post("/api/jobs")
    assert r.status_code == 202
    assert r.headers["X-Thing"] == "queued"


def test_integrity_error_maps_to_conflict(mini_app):
    def handler(inputs, ctx):
        raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))

    ctrl = controller("/api/dupe").endpoints([post("/", "dupe").handler(handler)])
    r = mini_app([ctrl]).test_client().post("/api/dupe")
    assert r.status_code == 409
    assert r.get_json()["error"]["code"] == "ConflictError"


def test_unexpected_error_hides_details_unless_exposed(mini_app):
    def handler(inputs, ctx):
        raise RuntimeError("database password is hunter2")

    ctrl = controller("/api/boom").endpoints([get("/", "boom").handler(handler)])

    hidden = mini_app([ctrl], EXPOSE_ERROR_DETAILS=False).test_client().get("/api/boom")
    assert hidden.status_code == 500
    assert hidden.get_json()["error"] == {"code": "InternalServerError", "message": "Internal Server Error"}

    shown = mini_app([ctrl], EXPOSE_ERROR_DETAILS=True).test_client().get("/api/boom")
    assert "hunter2" in shown.get_json()["error"]["details"]["message"]


def test_browser_requests_get_html_error_page(mini_app):
    def handler(inputs, ctx):
        raise NotFoundError("Album not found")

    ctrl = controller("/albums").endpoints([get("/:id", "albumPage").handler(handler)])
    r = mini_app([ctrl]).test_client().get("/albums/1", headers={"Accept": "text/html"})
    assert r.status_code == 404
    assert r.mimetype == "text/html"
    assert b"Album not found" in r.data


def test_unknown_api_route_is_json_404(mini_app):
    app = mini_app([controller("/api/x").endpoints([get("/", "x").handler(lambda i, c: {})])])
    r = app.test_client().get("/api/nothing-here", headers={"Accept": "application/json"})
    assert r.status_code == 404
    assert r.get_json()["error"]["code"] == "NotFoundError"


def test_render_view(mini_app):
    ctrl = controller("/").endpoints(
        [get("/components", "components").render_view("pages/components", lambda i, c: {"title": "Demo page"})]
    )
    r = mini_app([ctrl]).test_client().get("/components")
    assert r.status_code == 200
    assert r.mimetype == "text/html"
    assert b"Demo page" in r.data
