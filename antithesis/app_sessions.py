"""Cookie session fields used by the auth flow."""
from __future__ import annotations

from flask import session as flask_session

USER_ID = "userId"
CURRENT_TENANT_ID = "currentTenantId"
OAUTH_STATE = "oauthState"
RETURN_TO = "returnTo"


def persist_login(user_id: str, tenant_id: str, sess=flask_session) -> None:
    sess[USER_ID] = user_id
    sess[CURRENT_TENANT_ID] = tenant_id


def clear(sess=flask_session) -> None:
    sess.clear()


__all__ = [
    "USER_ID",
    "CURRENT_TENANT_ID",
    "OAUTH_STATE",
    "RETURN_TO",
    "persist_login",
    "clear",
]
