import os
import sys
import uuid

import pytest

# Path setup before any project imports to satisfy E402
ROOT = os.path.dirname(__file__)
PARENT = os.path.abspath(os.path.join(ROOT, ".."))
if PARENT not in sys.path:  # pragma: no cover - environment dependent
    sys.path.insert(0, PARENT)


def _lazy_imports():  # isolate heavy imports & satisfy lint ordering
    from antithesis.app_factory import create_app  # noqa: E402
    from antithesis.db import create_all  # noqa: E402

    return create_app, create_all


class FakeAuthService:
    """Stands in for the IdP round-trips of the OIDC flow."""

    def __init__(self):
        self.claims = None
        self.states = []

    def generate_auth_url(self, state):
        self.states.append(state)
        return f"https://idp.test/auth?state={state}"

    def handle_callback(self, code):
        from antithesis.errors import UnauthorizedError

        if self.claims is None:
            raise UnauthorizedError("Authentication failed")
        return self.claims

    def get_logout_url(self, redirect_uri):
        return f"https://idp.test/logout?redirect_uri={redirect_uri}"


@pytest.fixture(scope="session")
def app_session(tmp_path_factory):
    create_app, create_all = _lazy_imports()
    db_file = tmp_path_factory.mktemp("db") / "test_app.db"
    url = f"sqlite:///{db_file}"

    app = create_app(
        {
            "TESTING": True,
            "SECRET_KEY": "test",
            "database_url": url,
            "FORCE_DB_REINIT": True,
            "log_level": "none",
            "keycloak_url": "https://idp.test",
            "public_api_url": "http://localhost",
        }
    )
    app.extensions["auth_service"] = FakeAuthService()
    with app.app_context():
        create_all()
    return app


@pytest.fixture
def fake_auth(app_session):
    svc = app_session.extensions["auth_service"]
    svc.claims = None
    svc.states.clear()
    return svc


@pytest.fixture(scope="function")
def client(app_session):
    c = app_session.test_client()
    # Ensure clean base environ to avoid leakage between tests
    c.environ_base = {}
    return c


def seed_member(app, email=None, tenant_ids=None):
    """Create a user and (unless tenant_ids == []) a fresh tenant they belong to.

    Returns ``(user_id, [tenant_id, ...])``.
    """
    from antithesis.tenant_repo import TenantRepo
    from antithesis.user_repo import UserRepo, UserTenantRepo

    suffix = uuid.uuid4().hex[:10]
    with app.app_context():
        user = UserRepo().create({"email": email or f"user-{suffix}@example.com", "keycloak_user_id": f"kc-{suffix}"})
        if tenant_ids is None:
            tenant = TenantRepo().create({"name": f"Tenant {suffix}", "slug": f"tenant-{suffix}"})
            tenant_ids = [tenant.id]
        memberships = UserTenantRepo()
        for tid in tenant_ids:
            memberships.add_relationship(user.id, tid)
        return user.id, list(tenant_ids)


def login(client, user_id, tenant_id=None):
    with client.session_transaction() as sess:
        sess["userId"] = user_id
        if tenant_id:
            sess["currentTenantId"] = tenant_id


@pytest.fixture
def member(app_session):
    return seed_member(app_session)


@pytest.fixture
def client_member(app_session, member):
    """Client logged in as a fresh user with one tenant selected."""
    c = app_session.test_client()
    c.environ_base = {}
    user_id, tenant_ids = member
    login(c, user_id, tenant_ids[0])
    c.user_id = user_id
    c.tenant_id = tenant_ids[0]
    return c


@pytest.fixture
def client_other_tenant(app_session):
    c = app_session.test_client()
    c.environ_base = {}
    user_id, tenant_ids = seed_member(app_session)
    login(c, user_id, tenant_ids[0])
    c.user_id = user_id
    c.tenant_id = tenant_ids[0]
    return c


@pytest.fixture
def mini_app():
    """Bare Flask app factory for exercising the controller layer in isolation."""
    from flask import Flask

    import antithesis
    from antithesis.errors import register_error_handlers
    from antithesis.http import ServerContext, build_openapi, install_server_context, register_controllers

    templates = os.path.join(os.path.dirname(antithesis.__file__), "templates")

    def make(controllers, middlewares=(), **config):
        app = Flask("mini", template_folder=templates)
        app.config.update({"TESTING": True, "SECRET_KEY": "mini", "DTO_AUTO_VALIDATE": True, **config})
        register_error_handlers(app)
        built = register_controllers(app, controllers, middlewares)
        install_server_context(
            app, ServerContext(app_name="mini", openapi=build_openapi(built, title="mini"), controllers=tuple(built))
        )
        return app

    return make
