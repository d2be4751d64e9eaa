"""Session-backed user loading, tenant resolution and route guards."""

from __future__ import annotations

from flask import current_app, g, request, session
from sqlalchemy.exc import SQLAlchemyError

from .app_sessions import CURRENT_TENANT_ID, RETURN_TO, USER_ID
from .auth_service import AuthService, unverified_claims
from .errors import UnauthorizedError
from .http.middleware import before
from .logging_setup import get_logger
from .user_repo import UserRepo
from .user_service import UserService

log = get_logger("auth")


def get_auth_service() -> AuthService:
    return current_app.extensions["auth_service"]


def get_user_service() -> UserService:
    return current_app.extensions.get("user_service") or UserService()


@before("populateUser")
def populate_user(ctx):
    g.user = None
    user_id = session.get(USER_ID)
    if not user_id:
        return None
    try:
        g.user = UserRepo().find_by_id(user_id)
    except SQLAlchemyError as ex:
        log.error("Failed to populate user from session", meta={"userId": user_id, "error": str(ex)})
    return None


def _tenant_from_bearer() -> str | None:
    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        return None
    try:
        claims = unverified_claims(header[len("Bearer "):])
    except ValueError:
        return None
    tenant_id = claims.get("tenant_id")
    return tenant_id if isinstance(tenant_id, str) else None


@before("tenantResolution")
def tenant_resolution(ctx):
    """Bearer ``tenant_id`` claim, then the session, then auto-select/provision."""
    user = getattr(g, "user", None)
    users = get_user_service()
    tenant_id = _tenant_from_bearer()
    if tenant_id and (user is None or not users.memberships.has_access(user.id, tenant_id)):
        log.warning("Ignoring bearer tenant without membership", meta={"tenantId": tenant_id})
        tenant_id = None
    tenant_id = tenant_id or session.get(CURRENT_TENANT_ID)

    if not tenant_id and user is not None:
        if users.memberships.find_tenants_for_user(user.id):
            tenant_id = users.determine_current_tenant(user.id)
        elif current_app.config.get("AUTO_PROVISION_TENANTS"):
            try:
                tenant_id = users.provision_personal_tenant(user)
            except SQLAlchemyError as ex:
                log.error("Failed to auto-provision tenant", meta={"userId": user.id, "error": str(ex)})
        if tenant_id:
            session[CURRENT_TENANT_ID] = tenant_id

    g.tenant_id = tenant_id
    g.user_id = user.id if user is not None else None
    return None


def _authenticated() -> bool:
    return bool(session.get(USER_ID)) and getattr(g, "user", None) is not None


@before("requireAuth")
def require_auth(ctx):
    if _authenticated():
        return None
    session[RETURN_TO] = request.full_path.rstrip("?")
    return ctx.response.redirect("/auth/login")


@before("requireApiAuth")
def require_api_auth(ctx):
    if not _authenticated():
        raise UnauthorizedError("Authentication required")
    return None


GLOBAL_MIDDLEWARE = (populate_user, tenant_resolution)


__all__ = [
    "GLOBAL_MIDDLEWARE",
    "get_auth_service",
    "get_user_service",
    "populate_user",
    "require_api_auth",
    "require_auth",
    "tenant_resolution",
]
