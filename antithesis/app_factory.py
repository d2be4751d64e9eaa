"""Flask application factory.

Provides:
 - Config from environment (+ ``.env``) with per-call overrides
 - Logging, DB engine, error handlers, CORS/security headers
 - Request id + timing log line per request
 - Controller registration behind the global middleware chain
 - OpenAPI document + server context, database readiness hook
"""

from __future__ import annotations

import time
import uuid
from typing import Any

from dotenv import load_dotenv
from flask import Flask, g, request
from werkzeug.wrappers.response import Response

from .albums_api import albums_controller
from .albums_ui import albums_web_controller
from .auth_api import auth_controller
from .auth_middleware import GLOBAL_MIDDLEWARE
from .auth_service import AuthService
from .config import Config
from .dashboard_ui import dashboard_controller
from .db import init_engine, ping, remove_session
from .errors import register_error_handlers
from .health import health
from .health_api import health_controller
from .http import ServerContext, build_openapi, install_server_context, register_controllers
from .logging_setup import configure_logging, get_logger
from .openapi_ui import meta_controller
from .photos_api import album_photos_controller, photos_controller
from .photos_ui import photos_web_controller
from .security import init_security
from .tenants_api import tenants_controller

API_VERSION = "1.0.0"

log = get_logger("app")

CONTROLLERS = (
    meta_controller,
    health_controller,
    auth_controller,
    dashboard_controller,
    albums_controller,
    album_photos_controller,
    photos_controller,
    tenants_controller,
    albums_web_controller,
    photos_web_controller,
)


def create_app(config_override: dict[str, Any] | None = None) -> Flask:
    load_dotenv()
    app = Flask(__name__, template_folder="templates", static_folder="static", static_url_path="/static")

    # --- Configuration ---
    cfg = Config.from_env()
    if config_override:
        known = {k: v for k, v in config_override.items() if hasattr(cfg, k)}
        if known:
            cfg.override(known)
    app.config.update(cfg.to_flask_dict())
    if config_override:
        for k, v in config_override.items():  # also allow direct Flask config keys
            if k.isupper():
                app.config[k] = v
    configure_logging(cfg.log_level, cfg.log_format)

    # --- DB setup ---
    init_engine(cfg.database_url, force=bool(app.config.get("FORCE_DB_REINIT")), pool_size=cfg.db_pool_size)
    app.teardown_appcontext(remove_session)
    log.info("Database configured", meta={"url": cfg.database_url.split("@")[-1]})

    register_error_handlers(app)
    init_security(app)

    @app.before_request
    def _before_req() -> None:
        g._t0 = time.perf_counter()
        g.request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())

    @app.after_request
    def _after_req(resp: Response) -> Response:
        dur_ms = int((time.perf_counter() - getattr(g, "_t0", time.perf_counter())) * 1000)
        rid = getattr(g, "request_id", None) or str(uuid.uuid4())
        resp.headers["X-Request-Id"] = rid
        resp.headers["X-Request-Duration-ms"] = str(dur_ms)
        log.debug(
            "%s %s %s",
            request.method,
            request.path,
            resp.status_code,
            meta={"requestId": rid, "tenantId": getattr(g, "tenant_id", None), "durationMs": dur_ms},
        )
        return resp

    # --- Services shared by the auth flow ---
    app.extensions["config"] = cfg
    app.extensions["auth_service"] = AuthService(cfg)

    # --- Controllers, OpenAPI, server context ---
    controllers = register_controllers(app, CONTROLLERS, GLOBAL_MIDDLEWARE)
    openapi = build_openapi(
        controllers,
        title=f"{cfg.app_name} API",
        version=API_VERSION,
        description="Multi-tenant albums and photos",
    )
    install_server_context(app, ServerContext(app_name=cfg.app_name, openapi=openapi, controllers=tuple(controllers)))

    health.register_readiness_hook("database", ping)
    return app


__all__ = ["create_app", "CONTROLLERS", "API_VERSION"]
