"""CORS allow-list and baseline security headers.

 - An ``Origin`` outside ``CORS_ALLOWED_ORIGINS`` is refused with 400 unless
   ``CORS_BYPASS_ALLOWED_ORIGINS`` is on. Requests without ``Origin`` pass.
 - Allowed origins get credentialed CORS headers; preflights answer 204.
"""

from __future__ import annotations

from flask import Flask, current_app, request
from werkzeug.wrappers.response import Response

from .errors import BadRequestError

CORS_METHODS = "GET,POST,PUT,PATCH,DELETE,OPTIONS"


def _no_origin(origin: str | None) -> bool:
    # sandboxed iframes and file:// pages send the literal "null"
    return not origin or origin == "null"


def origin_allowed(origin: str | None) -> bool:
    if _no_origin(origin):
        return True
    if current_app.config.get("CORS_BYPASS_ALLOWED_ORIGINS"):
        return True
    allowed: list[str] = current_app.config.get("CORS_ALLOWED_ORIGINS", []) or []
    return origin in allowed


def _cors_headers(resp: Response) -> Response:
    origin = request.headers.get("Origin")
    if _no_origin(origin) or not origin_allowed(origin):
        return resp
    resp.headers.add("Vary", "Origin")
    resp.headers["Access-Control-Allow-Origin"] = origin
    resp.headers["Access-Control-Allow-Methods"] = CORS_METHODS
    req_hdrs = request.headers.get("Access-Control-Request-Headers")
    if req_hdrs:
        resp.headers["Access-Control-Allow-Headers"] = req_hdrs
    resp.headers["Access-Control-Allow-Credentials"] = "true"
    resp.headers["Access-Control-Max-Age"] = "600"
    return resp


def init_security(app: Flask) -> None:
    @app.before_request
    def _cors_before_request():
        if not origin_allowed(request.headers.get("Origin")):
            raise BadRequestError("Not allowed by CORS")
        if request.method == "OPTIONS" and request.headers.get("Access-Control-Request-Method"):
            return Response(status=204)
        return None

    @app.after_request
    def _security_after_request(resp: Response) -> Response:
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        resp.headers.setdefault(
            "Content-Security-Policy",
            "default-src 'self'; style-src 'self' 'unsafe-inline'; img-src 'self' https: data:; "
            "object-src 'none'; base-uri 'self'; frame-ancestors 'none'",
        )
        return _cors_headers(resp)


__all__ = ["init_security", "origin_allowed", "CORS_METHODS"]
