"""Auth controller: OIDC login/callback/logout and tenant switching."""

from __future__ import annotations

import secrets

from flask import current_app, session

from . import app_sessions
from .app_sessions import CURRENT_TENANT_ID, OAUTH_STATE, RETURN_TO, USER_ID
from .auth_middleware import get_auth_service, get_user_service
from .dto import DTO
from .errors import ForbiddenError, UnauthorizedError
from .http import controller, get, put
from .tenant_schemas import CurrentTenant, SwitchTenant

DEFAULT_RETURN_TO = "/dashboard"


class LoginQuery(DTO):
    return_to: str | None = None


class CallbackQuery(DTO):
    code: str
    state: str


def safe_return_to(value: str | None) -> str:
    """Only same-site absolute paths are accepted as post-login targets."""
    if not value or not value.startswith("/") or value.startswith("//"):
        return DEFAULT_RETURN_TO
    return value


def login(inputs, ctx):
    state = secrets.token_hex(32)
    session[OAUTH_STATE] = state
    session[RETURN_TO] = safe_return_to(inputs.query.return_to or session.get(RETURN_TO))
    return ctx.response.redirect(get_auth_service().generate_auth_url(state))


def callback(inputs, ctx):
    expected = session.get(OAUTH_STATE)
    if not expected or not secrets.compare_digest(expected, inputs.query.state):
        raise UnauthorizedError("Invalid state parameter")
    session.pop(OAUTH_STATE, None)

    claims = get_auth_service().handle_callback(inputs.query.code)
    users = get_user_service()
    user = users.sync_user_from_identity(claims)

    tenant_id = users.determine_current_tenant(user.id)
    if not tenant_id and current_app.config.get("AUTO_PROVISION_TENANTS"):
        tenant_id = users.provision_personal_tenant(user)
    if not tenant_id:
        app_sessions.clear()
        return ctx.response.redirect("/auth/login?error=no_tenant_access")

    app_sessions.persist_login(user.id, tenant_id)
    users.update_last_tenant(user.id, tenant_id)
    ctx.log.info("Login complete", meta={"userId": user.id})
    return ctx.response.redirect(safe_return_to(session.pop(RETURN_TO, None)))


def logout(inputs, ctx):
    public_url = current_app.config.get("PUBLIC_API_URL", "")
    logout_url = get_auth_service().get_logout_url(public_url)
    app_sessions.clear()
    return ctx.response.redirect(logout_url)


def switch_tenant(inputs, ctx):
    user_id = session.get(USER_ID)
    if not user_id or ctx.user is None:
        raise UnauthorizedError("Authentication required")
    tenant_id = inputs.body.tenant_id
    users = get_user_service()
    if not users.memberships.has_access(user_id, tenant_id):
        raise ForbiddenError("Access denied to tenant")
    session[CURRENT_TENANT_ID] = tenant_id
    users.update_last_tenant(user_id, tenant_id)
    return CurrentTenant(current_tenant_id=tenant_id)


auth_controller = (
    controller("/auth")
    .description("Authentication endpoints for Keycloak OIDC integration")
    .tag("Auth")
    .endpoints(
        [
            get("login", "login")
            .description("Initiate Keycloak OIDC login flow")
            .input(query=LoginQuery)
            .hide_from_openapi()
            .handler(login),
            get("callback", "callback")
            .description("Handle Keycloak OIDC callback")
            .input(query=CallbackQuery)
            .hide_from_openapi()
            .handler(callback),
            get("logout", "logout")
            .description("Logout user and destroy session")
            .hide_from_openapi()
            .handler(logout),
            put("tenant", "switchTenant")
            .description("Switch current tenant for multi-tenant users")
            .input(body=SwitchTenant)
            .response(CurrentTenant)
            .envelope()
            .handler(switch_tenant),
        ]
    )
)


__all__ = ["auth_controller", "safe_return_to", "LoginQuery", "CallbackQuery"]
