from __future__ import annotations

import uuid

JSON = {"Accept": "application/json"}


def _slug():
    return f"acme-{uuid.uuid4().hex[:8]}"


def test_requires_authentication(client):
    assert client.get("/api/tenants", headers=JSON).status_code == 401


def test_tenant_crud(client_member):
    slug = _slug()
    r = client_member.post("/api/tenants", json={"name": "Acme", "slug": slug}, headers=JSON)
    assert r.status_code == 200
    tenant = r.get_json()["data"]
    assert tenant["slug"] == slug
    assert tenant["externalReferenceId"] is None

    got = client_member.get(f"/api/tenants/{tenant['id']}", headers=JSON).get_json()["data"]
    assert got["name"] == "Acme"

    updated = client_member.put(f"/api/tenants/{tenant['id']}", json={"name": "Acme Photos"}, headers=JSON)
    assert updated.get_json()["data"]["name"] == "Acme Photos"
    assert updated.get_json()["data"]["slug"] == slug

    listed = client_member.get("/api/tenants?search=Acme%20Photos&limit=100", headers=JSON).get_json()["data"]
    assert tenant["id"] in [t["id"] for t in listed]

    deleted = client_member.delete(f"/api/tenants/{tenant['id']}", headers=JSON)
    assert deleted.status_code == 200
    assert deleted.get_json()["data"] == {"deleted": True}
    assert client_member.get(f"/api/tenants/{tenant['id']}", headers=JSON).status_code == 404


def test_duplicate_slug_conflicts(client_member):
    slug = _slug()
    client_member.post("/api/tenants", json={"name": "One", "slug": slug}, headers=JSON)
    r = client_member.post("/api/tenants", json={"name": "Two", "slug": slug}, headers=JSON)
    assert r.status_code == 409
    assert r.get_json()["error"]["message"] == "Tenant with this slug already exists"


def test_update_to_taken_slug_conflicts(client_member):
    first, second = _slug(), _slug()
    client_member.post("/api/tenants", json={"name": "One", "slug": first}, headers=JSON)
    other = client_member.post("/api/tenants", json={"name": "Two", "slug": second}, headers=JSON).get_json()["data"]
    r = client_member.put(f"/api/tenants/{other['id']}", json={"slug": first}, headers=JSON)
    assert r.status_code == 409
    # keeping its own slug is fine
    r = client_member.put(f"/api/tenants/{other['id']}", json={"slug": second}, headers=JSON)
    assert r.status_code == 200


def test_invalid_slug_is_rejected(client_member):
    r = client_member.post("/api/tenants", json={"name": "Bad", "slug": "Not A Slug"}, headers=JSON)
    assert r.status_code == 422
    assert r.get_json()["error"]["details"][0]["path"] == ["body", "slug"]


def test_update_rejects_null_name_or_slug(client_member):
    tenant = client_member.post("/api/tenants", json={"name": "Null", "slug": _slug()}, headers=JSON).get_json()["data"]
    r = client_member.put(f"/api/tenants/{tenant['id']}", json={"name": None, "slug": None}, headers=JSON)
    assert r.status_code == 422
    paths = [i["path"] for i in r.get_json()["error"]["details"]]
    assert ["body", "name"] in paths
    assert ["body", "slug"] in paths


def test_missing_tenant(client_member):
    r = client_member.delete(f"/api/tenants/{uuid.uuid4()}", headers=JSON)
    assert r.status_code == 404
