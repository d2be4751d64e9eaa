from __future__ import annotations

import base64
import json
import uuid

import pytest
import requests

from antithesis.auth_api import safe_return_to
from antithesis.auth_service import AuthService, OIDCError, extract_organizations, unverified_claims
from antithesis.config import Config
from antithesis.errors import UnauthorizedError
from antithesis.user_service import UserClaims

from conftest import login, seed_member

JSON = {"Accept": "application/json"}


def _jwt(payload):
    def enc(obj):
        return base64.urlsafe_b64encode(json.dumps(obj).encode()).rstrip(b"=").decode()

    return f"{enc({'alg': 'none'})}.{enc(payload)}.sig"


# ---- pure helpers -----------------------------------------------------------


def test_unverified_claims_decodes_payload():
    assert unverified_claims(_jwt({"sub": "abc", "tenant_id": "t1"})) == {"sub": "abc", "tenant_id": "t1"}


@pytest.mark.parametrize("token", ["", "nodots", "a.!!!.c"])
def test_unverified_claims_rejects_garbage(token):
    with pytest.raises(ValueError):
        unverified_claims(token)


@pytest.mark.parametrize(
    "payload, expected",
    [
        (None, []),
        ({"organizations": ["o1", "o2"]}, ["o1", "o2"]),
        ({"organization_ids": ["x"]}, ["x"]),
        ({"groups": ["org-acme", "admins", "org-beta"]}, ["acme", "beta"]),
        ({"groups": "org-acme"}, []),
        ({}, []),
    ],
)
def test_extract_organizations(payload, expected):
    assert extract_organizations(payload) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("/albums?page=2", "/albums?page=2"),
        (None, "/dashboard"),
        ("", "/dashboard"),
        ("https://evil.example.com", "/dashboard"),
        ("//evil.example.com", "/dashboard"),
    ],
)
def test_safe_return_to(value, expected):
    assert safe_return_to(value) == expected


# ---- AuthService against a stubbed HTTP session -------------------------------


class _Resp:
    def __init__(self, payload, status=200):
        self.payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


class _Http:
    def __init__(self, token_payload=None, token_status=200):
        self.token_payload = token_payload
        self.token_status = token_status
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append(("GET", url))
        return _Resp(
            {
                "authorization_endpoint": "https://idp.test/realms/app/auth",
                "token_endpoint": "https://idp.test/realms/app/token",
            }
        )

    def post(self, url, data=None, timeout=None):
        self.calls.append(("POST", url, data))
        return _Resp(self.token_payload, self.token_status)


def _cfg(**overrides):
    return Config(keycloak_url="https://idp.test", keycloak_realm="app", **overrides)


def test_auth_url_uses_discovered_endpoint_and_caches_metadata():
    http = _Http()
    svc = AuthService(_cfg(public_api_url="http://localhost:3000"), http=http)
    url = svc.generate_auth_url("st4te")
    svc.generate_auth_url("again")
    assert url.startswith("https://idp.test/realms/app/auth?")
    assert "state=st4te" in url
    assert "redirect_uri=http%3A%2F%2Flocalhost%3A3000%2Fauth%2Fcallback" in url
    assert "scope=openid+email+profile" in url
    assert [c for c in http.calls if c[0] == "GET"] == [("GET", "https://idp.test/realms/app/.well-known/openid-configuration")]


def test_plain_http_issuer_is_refused_unless_allowed():
    with pytest.raises(OIDCError):
        AuthService(Config(keycloak_url="http://kc.local", keycloak_allow_http=False), http=_Http()).discover()
    AuthService(Config(keycloak_url="http://kc.local", keycloak_allow_http=True), http=_Http()).discover()


def test_handle_callback_returns_claims():
    http = _Http({"id_token": _jwt({"sub": "kc-1", "email": "a@example.com"})})
    claims = AuthService(_cfg(), http=http).handle_callback("the-code")
    assert claims == UserClaims(keycloak_user_id="kc-1", email="a@example.com")
    (post,) = [c for c in http.calls if c[0] == "POST"]
    assert post[2]["code"] == "the-code"
    assert post[2]["grant_type"] == "authorization_code"


@pytest.mark.parametrize(
    "payload, status",
    [
        ({"id_token": _jwt({"email": "a@example.com"})}, 200),
        ({"id_token": _jwt({"sub": "kc-1"})}, 200),
        ({"access_token": "x"}, 200),
        ({"error": "invalid_grant"}, 400),
    ],
)
def test_handle_callback_failures_are_unauthorized(payload, status):
    with pytest.raises(UnauthorizedError):
        AuthService(_cfg(), http=_Http(payload, status)).handle_callback("code")


def test_logout_url():
    url = AuthService(_cfg(), http=_Http()).get_logout_url("http://localhost:3000")
    assert url == "https://idp.test/realms/app/protocol/openid-connect/logout?redirect_uri=http%3A%2F%2Flocalhost%3A3000"


# ---- guards --------------------------------------------------------------------


def test_web_guard_redirects_and_remembers_target(client):
    r = client.get("/albums?page=2")
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/auth/login")
    with client.session_transaction() as sess:
        assert sess["returnTo"] == "/albums?page=2"


def test_stale_session_user_is_not_authenticated(client):
    login(client, str(uuid.uuid4()))
    r = client.get("/api/albums", headers=JSON)
    assert r.status_code == 401


# ---- login / callback / logout -------------------------------------------------------


def _start_login(client, fake_auth, return_to=None):
    url = "/auth/login" + (f"?returnTo={return_to}" if return_to else "")
    r = client.get(url)
    assert r.status_code == 302
    assert r.headers["Location"] == f"https://idp.test/auth?state={fake_auth.states[-1]}"
    return fake_auth.states[-1]


def test_callback_rejects_unknown_state(client, fake_auth):
    _start_login(client, fake_auth)
    r = client.get("/auth/callback?code=abc&state=forged", headers=JSON)
    assert r.status_code == 401
    assert r.get_json()["error"]["message"] == "Invalid state parameter"


def test_callback_without_login_is_rejected(client, fake_auth):
    r = client.get("/auth/callback?code=abc&state=whatever", headers=JSON)
    assert r.status_code == 401


def test_callback_requires_code_and_state(client):
    r = client.get("/auth/callback", headers=JSON)
    assert r.status_code == 422


def test_first_login_provisions_personal_tenant(client, fake_auth):
    suffix = uuid.uuid4().hex[:8]
    fake_auth.claims = UserClaims(keycloak_user_id=f"kc-new-{suffix}", email=f"new-{suffix}@example.com")
    state = _start_login(client, fake_auth, return_to="/albums")

    r = client.get(f"/auth/callback?code=abc&state={state}")
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/albums")
    with client.session_transaction() as sess:
        assert sess["userId"]
        tenant_id = sess["currentTenantId"]
        assert "oauthState" not in sess
        assert "returnTo" not in sess

    albums = client.get("/api/albums", headers=JSON)
    assert albums.status_code == 200
    tenant = client.get(f"/api/tenants/{tenant_id}", headers=JSON).get_json()["data"]
    assert tenant["name"] == f"new-{suffix}@example.com's Organization"


def test_returning_user_gets_last_tenant(app_session, client, fake_auth):
    from antithesis.user_repo import UserRepo

    suffix = uuid.uuid4().hex[:8]
    email = f"back-{suffix}@example.com"
    fake_auth.claims = UserClaims(keycloak_user_id=f"kc-back-{suffix}", email=email)
    state = _start_login(client, fake_auth)
    client.get(f"/auth/callback?code=abc&state={state}")
    with app_session.app_context():
        user = UserRepo().find_by_email(email)
    _, (second,) = seed_member(app_session, email=f"other-{suffix}@example.com")
    with app_session.app_context():
        from antithesis.user_repo import UserTenantRepo

        UserTenantRepo().add_relationship(user.id, second)
        UserRepo().update(user.id, {"last_tenant_id": second})

    fresh = app_session.test_client()
    state = _start_login(fresh, fake_auth)
    r = fresh.get(f"/auth/callback?code=abc&state={state}")
    assert r.headers["Location"].endswith("/dashboard")
    with fresh.session_transaction() as sess:
        assert sess["currentTenantId"] == second


def test_user_without_tenant_is_sent_back_to_login(app_session, client, fake_auth):
    suffix = uuid.uuid4().hex[:8]
    fake_auth.claims = UserClaims(keycloak_user_id=f"kc-none-{suffix}", email=f"none-{suffix}@example.com")
    app_session.config["AUTO_PROVISION_TENANTS"] = False
    try:
        state = _start_login(client, fake_auth)
        r = client.get(f"/auth/callback?code=abc&state={state}")
    finally:
        app_session.config["AUTO_PROVISION_TENANTS"] = True
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/auth/login?error=no_tenant_access")
    with client.session_transaction() as sess:
        assert "userId" not in sess


def test_logout_clears_session(client_member, fake_auth):
    r = client_member.get("/auth/logout")
    assert r.status_code == 302
    assert r.headers["Location"].startswith("https://idp.test/logout")
    with client_member.session_transaction() as sess:
        assert dict(sess) == {}
    assert client_member.get("/api/albums", headers=JSON).status_code == 401


# ---- tenant resolution and switching -----------------------------------------------------


def test_switch_tenant(app_session, client_member):
    from antithesis.tenant_repo import TenantRepo
    from antithesis.user_repo import UserTenantRepo

    suffix = uuid.uuid4().hex[:8]
    with app_session.app_context():
        second = TenantRepo().create({"name": "Second", "slug": f"second-{suffix}"}).id
        UserTenantRepo().add_relationship(client_member.user_id, second)

    r = client_member.put("/auth/tenant", json={"tenantId": second}, headers=JSON)
    assert r.status_code == 200
    assert r.get_json()["data"] == {"currentTenantId": second}
    with client_member.session_transaction() as sess:
        assert sess["currentTenantId"] == second


def test_switch_to_foreign_tenant_is_forbidden(client_member, client_other_tenant):
    r = client_member.put("/auth/tenant", json={"tenantId": client_other_tenant.tenant_id}, headers=JSON)
    assert r.status_code == 403


def test_switch_tenant_requires_login(client):
    r = client.put("/auth/tenant", json={"tenantId": str(uuid.uuid4())}, headers=JSON)
    assert r.status_code == 401


def test_tenant_is_selected_when_session_has_none(app_session, client):
    user_id, (tenant_id,) = seed_member(app_session)
    login(client, user_id)
    assert client.get("/api/albums", headers=JSON).status_code == 200
    with client.session_transaction() as sess:
        assert sess["currentTenantId"] == tenant_id


def test_bearer_tenant_claim_selects_member_tenant(app_session, client_member):
    from antithesis.tenant_repo import TenantRepo
    from antithesis.user_repo import UserTenantRepo

    suffix = uuid.uuid4().hex[:8]
    with app_session.app_context():
        second = TenantRepo().create({"name": "Bearer", "slug": f"bearer-{suffix}"}).id
        UserTenantRepo().add_relationship(client_member.user_id, second)

    auth = {**JSON, "Authorization": f"Bearer {_jwt({'tenant_id': second})}"}
    created = client_member.post("/api/albums", json={"name": "Via bearer"}, headers=auth).get_json()["data"]
    assert created["tenantId"] == second
    # without the header the session tenant applies
    assert client_member.get(f"/api/albums/{created['id']}", headers=JSON).status_code == 404


def test_bearer_tenant_claim_for_foreign_tenant_is_ignored(client_member, client_other_tenant):
    created = client_other_tenant.post("/api/albums", json={"name": "Theirs"}, headers=JSON).get_json()["data"]
    token = _jwt({"tenant_id": client_other_tenant.tenant_id})
    r = client_member.get(f"/api/albums/{created['id']}", headers={**JSON, "Authorization": f"Bearer {token}"})
    assert r.status_code == 404
