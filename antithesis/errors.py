"""HTTP error taxonomy + the single error-to-response mapping.

Every error raised from middleware, input validation or a handler ends up in
``register_error_handlers``. API callers receive

    {"error": {"code", "message", "details"}, "meta": {"serverTime"}}

while browser navigations get the rendered ``pages/error.html`` page.
"""
from __future__ import annotations

import traceback
from typing import Any

from flask import Flask, current_app, g, render_template, request
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException
from werkzeug.wrappers.response import Response

from .logging_setup import get_logger

log = get_logger("errorHandler")


class HttpError(Exception):
    status = 500
    default_message = "Internal Server Error"

    def __init__(self, message: str | None = None, details: Any = None, *, status: int | None = None):
        self.message = message or self.default_message
        self.details = details
        if status is not None:
            self.status = status
        super().__init__(self.message)

    @property
    def code(self) -> str:
        return type(self).__name__


class BadRequestError(HttpError):
    status = 400
    default_message = "Bad Request"


class UnauthorizedError(HttpError):
    status = 401
    default_message = "Unauthorized"


class ForbiddenError(HttpError):
    status = 403
    default_message = "Forbidden"


class NotFoundError(HttpError):
    status = 404
    default_message = "Not Found"


class ConflictError(HttpError):
    status = 409
    default_message = "Conflict"


class ValidationError(HttpError):
    """422; ``details`` is the list of ``{path, code, message}`` issues."""

    status = 422
    default_message = "Validation Error"


class InternalServerError(HttpError):
    status = 500
    default_message = "Internal Server Error"


class NotImplementedHttpError(HttpError):
    status = 501
    default_message = "Not Implemented"


class ConfigurationError(Exception):
    """Invalid controller/endpoint topology, raised before the server binds."""


def is_web_request() -> bool:
    accept = request.headers.get("Accept", "")
    if "text/html" in accept:
        return True
    if request.path.startswith("/api/"):
        return False
    # JSON-only clients get JSON errors on page routes too
    mimetypes = request.accept_mimetypes
    return not (mimetypes.accept_json and not mimetypes.accept_html)


def error_body(err: HttpError) -> dict[str, Any]:
    from .http.api_response import server_time

    payload: dict[str, Any] = {"code": err.code, "message": err.message}
    if err.details is not None:
        payload["details"] = err.details
    return {"error": payload, "meta": {"serverTime": server_time()}}


def _to_http_error(ex: Exception) -> HttpError:
    if isinstance(ex, HttpError):
        return ex
    if isinstance(ex, IntegrityError):
        return ConflictError("Resource conflicts with an existing record")
    if isinstance(ex, HTTPException):
        status = ex.code or 500
        if status == 404:
            return NotFoundError()
        return HttpError(ex.description or ex.name, status=status)
    return InternalServerError()


def handle_error(ex: Exception) -> Response:
    parsed = _to_http_error(ex)
    status = parsed.status
    internal = not isinstance(ex, (HttpError, HTTPException, IntegrityError))
    if status >= 500:
        log.error(
            "FAIL %s %s",
            request.method,
            request.full_path.rstrip("?"),
            meta={"error": parsed.message, "originalError": str(ex)},
            exc_info=ex,
        )
    else:
        log.warning("FAIL %s %s", request.method, request.full_path.rstrip("?"), meta={"error": parsed.message})

    expose = bool(current_app.config.get("EXPOSE_ERROR_DETAILS"))
    if internal and expose:
        parsed.details = {"message": str(ex), "stack": traceback.format_exception(ex)}

    if is_web_request():
        html = render_template(
            "pages/error.html",
            status=status,
            message=parsed.message,
            details="".join(traceback.format_exception(ex)) if (internal and expose) else None,
            user=getattr(g, "user", None),
        )
        return Response(html, status=status, mimetype="text/html")
    resp = current_app.json.response(error_body(parsed))
    resp.status_code = status
    return resp


def register_error_handlers(app: Flask) -> None:
    # HTTPException covers routing misses (404) and method mismatches (405)
    app.register_error_handler(HTTPException, handle_error)
    app.register_error_handler(Exception, handle_error)


__all__ = [
    "HttpError",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "ValidationError",
    "InternalServerError",
    "NotImplementedHttpError",
    "ConfigurationError",
    "error_body",
    "handle_error",
    "is_web_request",
    "register_error_handlers",
]
