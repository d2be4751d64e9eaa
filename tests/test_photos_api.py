from __future__ import annotations

import uuid

import pytest

JSON = {"Accept": "application/json"}


@pytest.fixture
def album_id(client_member):
    r = client_member.post("/api/albums", json={"name": "Photos home"}, headers=JSON)
    return r.get_json()["data"]["id"]


def _photo(client, album_id, **fields):
    payload = {"albumId": album_id, "title": "Pier", "url": "https://img.example.com/pier.jpg", **fields}
    r = client.post("/api/photos", json=payload, headers=JSON)
    assert r.status_code == 200, r.get_json()
    return r.get_json()["data"]


def test_photo_lifecycle(client_member, album_id):
    photo = _photo(client_member, album_id, thumbnailUrl="")
    assert photo["thumbnailUrl"] is None
    assert photo["status"] == "draft"
    assert photo["createdByUserId"] == client_member.user_id

    got = client_member.get(f"/api/photos/{photo['id']}", headers=JSON).get_json()["data"]
    assert got["title"] == "Pier"

    r = client_member.put(f"/api/photos/{photo['id']}", json={"status": "published"}, headers=JSON)
    assert r.get_json()["data"]["status"] == "published"
    assert r.get_json()["data"]["title"] == "Pier"

    assert client_member.delete(f"/api/photos/{photo['id']}", headers=JSON).status_code == 204
    listed = client_member.get(f"/api/photos?albumId={album_id}", headers=JSON).get_json()["data"]
    assert listed == []

    restored = client_member.post(f"/api/photos/{photo['id']}/restore", headers=JSON).get_json()["data"]
    assert restored["isDeleted"] is False


def test_list_filters(client_member, album_id):
    _photo(client_member, album_id, title="Harbour at dawn")
    _photo(client_member, album_id, title="Market", status="published")

    r = client_member.get("/api/photos?search=harbour", headers=JSON).get_json()["data"]
    assert [p["title"] for p in r] == ["Harbour at dawn"]
    r = client_member.get("/api/photos?status=published", headers=JSON).get_json()["data"]
    assert [p["title"] for p in r] == ["Market"]
    r = client_member.get("/api/photos?sortBy=title&sortDirection=asc", headers=JSON).get_json()["data"]
    assert [p["title"] for p in r] == ["Harbour at dawn", "Market"]


def test_photo_needs_album_of_current_tenant(client_member, client_other_tenant, album_id):
    payload = {"albumId": album_id, "title": "Sneaky", "url": "https://img.example.com/x.jpg"}
    r = client_other_tenant.post("/api/photos", json=payload, headers=JSON)
    assert r.status_code == 404
    assert r.get_json()["error"]["message"] == "Album not found"

    r = client_member.post("/api/photos", json={**payload, "albumId": str(uuid.uuid4())}, headers=JSON)
    assert r.status_code == 404


def test_photos_are_isolated_per_tenant(client_member, client_other_tenant, album_id):
    photo = _photo(client_member, album_id)
    assert client_other_tenant.get(f"/api/photos/{photo['id']}", headers=JSON).status_code == 404
    assert client_other_tenant.delete(f"/api/photos/{photo['id']}", headers=JSON).status_code == 404
    assert client_other_tenant.get("/api/photos", headers=JSON).get_json()["data"] == []


def test_invalid_photo_payload(client_member, album_id):
    r = client_member.post("/api/photos", json={"albumId": "nope", "title": "", "url": "ftp"}, headers=JSON)
    assert r.status_code == 422
    codes = {tuple(i["path"]): i["code"] for i in r.get_json()["error"]["details"]}
    assert codes[("body", "albumId")] == "invalid_uuid"
    assert codes[("body", "url")] == "invalid_url"
    assert ("body", "title") in codes


def test_update_rejects_null_for_required_fields(client_member, album_id):
    photo = _photo(client_member, album_id)
    r = client_member.put(
        f"/api/photos/{photo['id']}", json={"title": None, "url": None, "status": None}, headers=JSON
    )
    assert r.status_code == 422
    paths = {tuple(i["path"]) for i in r.get_json()["error"]["details"]}
    assert paths == {("body", "title"), ("body", "url"), ("body", "status")}
