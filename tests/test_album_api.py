"""API tests for albums and collections."""

from fastapi.testclient import TestClient

from conftest import auth_headers, upload


def _create_album(client, headers, name="Holidays", **extra):
    response = client.post("/album", json={"name": name, **extra}, headers=headers)
    assert response.status_code == 201
    return response.json()


def test_create_album(client: TestClient):
    headers = auth_headers(client)
    album = _create_album(client, headers, description="Summer 2024", color="#ff8800")
    assert album["name"] == "Holidays"
    assert album["description"] == "Summer 2024"
    assert album["color"] == "#ff8800"
    assert album["images"] == []


def test_create_album_requires_name(client: TestClient):
    headers = auth_headers(client)
    response = client.post("/album", json={"description": "nameless"}, headers=headers)
    assert response.status_code == 400
    assert response.json()["result"] == "Name is required"


def test_album_lists_images_and_counts(client: TestClient):
    headers = auth_headers(client)
    album = _create_album(client, headers)
    image_id = client.post(
        "/image/create", json={"title": "beach", "album_id": album["id"]}, headers=headers
    ).json()["content"]["id"]
    upload(client, headers, image_id)

    listed = client.get("/album", headers=headers).json()
    assert [(a["id"], a["qty"]) for a in listed] == [(album["id"], 1)]

    detail = client.get(f"/album/{album['id']}", headers=headers).json()
    assert [img["id"] for img in detail["images"]] == [image_id]
    assert detail["images"][0]["url"].startswith("/uploads/")


def test_image_cannot_join_foreign_album(client: TestClient):
    owner = auth_headers(client, "owner@example.com", "owner")
    other = auth_headers(client, "other@example.com", "other")
    album = _create_album(client, owner)

    response = client.post("/image/create", json={"title": "x", "album_id": album["id"]}, headers=other)
    assert response.status_code == 404
    assert response.json()["result"] == "Album not found"


def test_albums_are_owner_scoped(client: TestClient):
    owner = auth_headers(client, "owner@example.com", "owner")
    other = auth_headers(client, "other@example.com", "other")
    album = _create_album(client, owner)

    assert client.get("/album", headers=other).json() == []
    assert client.get(f"/album/{album['id']}", headers=other).status_code == 404
    assert client.put(f"/album/{album['id']}", json={"name": "mine"}, headers=other).status_code == 404
    assert client.delete(f"/album/{album['id']}", headers=other).status_code == 404


def test_update_album(client: TestClient):
    headers = auth_headers(client)
    album = _create_album(client, headers)

    response = client.put(f"/album/{album['id']}", json={"color": "#000000"}, headers=headers)

    assert response.status_code == 200
    assert response.json()["name"] == "Holidays"
    assert response.json()["color"] == "#000000"


def test_delete_album_detaches_images(client: TestClient):
    headers = auth_headers(client)
    album = _create_album(client, headers)
    image_id = client.post(
        "/image/create", json={"title": "beach", "album_id": album["id"]}, headers=headers
    ).json()["content"]["id"]

    response = client.delete(f"/album/{album['id']}", headers=headers)

    assert response.status_code == 204
    assert client.get(f"/album/{album['id']}", headers=headers).status_code == 404
    image = client.get(f"/image/{image_id}", headers=headers).json()["content"]
    assert image["album_id"] is None


def test_album_routes_require_auth(client: TestClient):
    assert client.get("/album").status_code == 401
    assert client.post("/album", json={"name": "x"}).status_code == 401


def test_collection_crud(client: TestClient):
    headers = auth_headers(client)

    created = client.post("/collection", json={"name": "Nature", "description": "trees"}, headers=headers)
    assert created.status_code == 201
    collection_id = created.json()["id"]

    assert client.get(f"/collection/{collection_id}", headers=headers).json()["name"] == "Nature"
    assert [c["id"] for c in client.get("/collection", headers=headers).json()] == [collection_id]

    updated = client.put(f"/collection/{collection_id}", json={"name": "Wildlife"}, headers=headers)
    assert updated.status_code == 200
    assert updated.json()["name"] == "Wildlife"
    assert updated.json()["description"] == "trees"

    assert client.delete(f"/collection/{collection_id}", headers=headers).status_code == 204
    assert client.get(f"/collection/{collection_id}", headers=headers).status_code == 404


def test_collection_requires_name_and_auth(client: TestClient):
    assert client.post("/collection", json={"name": "x"}).status_code == 401
    headers = auth_headers(client)
    assert client.post("/collection", json={}, headers=headers).status_code == 400
    assert client.delete("/collection/999", headers=headers).status_code == 404


def test_group_ids_beyond_sqlite_range_are_400(client: TestClient):
    headers = auth_headers(client)
    too_big = 2**63
    assert client.get(f"/album/{too_big}", headers=headers).status_code == 400
    assert client.delete(f"/album/{too_big}", headers=headers).status_code == 400
    assert client.get(f"/collection/{too_big}", headers=headers).status_code == 400
    assert client.put(f"/collection/{too_big}", json={"name": "x"}, headers=headers).status_code == 400


def test_unexpected_album_error_is_500(client: TestClient, monkeypatch):
    async def broken(request, user):
        raise RuntimeError("database went away")

    monkeypatch.setattr("controllers.album_controller.list_albums", broken)
    headers = auth_headers(client)

    response = client.get("/album", headers=headers)

    assert response.status_code == 500
    assert response.json() == {"success": False, "result": "Internal server error"}
