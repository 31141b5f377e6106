"""API tests for image creation, upload and deletion on the local backend."""

from fastapi.testclient import TestClient

from conftest import PNG_BYTES, auth_headers, create_image, upload


def _stored_files(upload_dir):
    return sorted(p.name for p in upload_dir.iterdir()) if upload_dir.exists() else []


def test_health_reports_local_backend(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True, "db_initialized": True, "storage_backend": "local"}


def test_create_image_requires_auth(client: TestClient):
    response = client.post("/image/create", json={"title": "x"})
    assert response.status_code == 401
    assert response.json() == {"success": False, "result": "Unauthorized"}


def test_create_image_requires_title(client: TestClient):
    headers = auth_headers(client)
    response = client.post("/image/create", json={"description": "no title"}, headers=headers)
    assert response.status_code == 400
    assert response.json()["result"] == "Title is required"


def test_upload_as_owner_stores_file(client: TestClient, upload_dir):
    headers = auth_headers(client)
    image_id = create_image(client, headers)

    response = upload(client, headers, image_id)

    assert response.status_code == 200
    body = response.json()
    assert body == {
        "success": True,
        "content": {"id": image_id, "filename": "sunset.png", "mime_type": "image/png"},
    }
    files = _stored_files(upload_dir)
    assert len(files) == 1
    assert files[0].endswith(".png")
    assert (upload_dir / files[0]).read_bytes() == PNG_BYTES


def test_uploaded_file_is_served_from_uploads(client: TestClient):
    headers = auth_headers(client)
    image_id = create_image(client, headers)
    upload(client, headers, image_id)

    view = client.get(f"/image/{image_id}", headers=headers).json()["content"]
    assert view["storage_type"] == "local"
    assert view["url"].startswith("/uploads/")

    served = client.get(view["url"])
    assert served.status_code == 200
    assert served.content == PNG_BYTES


def test_upload_without_credentials_is_401(client: TestClient, upload_dir):
    headers = auth_headers(client)
    image_id = create_image(client, headers)

    response = upload(client, {}, image_id)

    assert response.status_code == 401
    assert _stored_files(upload_dir) == []


def test_upload_with_invalid_token_is_401(client: TestClient):
    headers = auth_headers(client)
    image_id = create_image(client, headers)

    response = upload(client, {"Authorization": "Bearer not-a-token"}, image_id)
    assert response.status_code == 401


def test_upload_without_file_is_400(client: TestClient):
    headers = auth_headers(client)
    image_id = create_image(client, headers)

    response = client.post(f"/image/{image_id}/upload", headers=headers)

    assert response.status_code == 400
    assert response.json() == {"success": False, "result": "No file uploaded"}


def test_upload_to_missing_image_is_404_and_leaves_no_file(client: TestClient, upload_dir):
    headers = auth_headers(client)

    response = upload(client, headers, 4242)

    assert response.status_code == 404
    assert response.json() == {"success": False, "result": "Image not found"}
    assert _stored_files(upload_dir) == []


def test_upload_by_non_owner_is_403_and_leaves_no_file(client: TestClient, upload_dir):
    owner = auth_headers(client, "owner@example.com", "owner")
    other = auth_headers(client, "other@example.com", "other")
    image_id = create_image(client, owner)

    response = upload(client, other, image_id)

    assert response.status_code == 403
    assert response.json()["success"] is False
    assert response.json()["result"].startswith("Forbidden")
    assert _stored_files(upload_dir) == []


def test_upload_with_unsupported_type_is_415_without_mutation(client: TestClient, upload_dir):
    headers = auth_headers(client)
    image_id = create_image(client, headers)
    before = client.get(f"/image/{image_id}", headers=headers).json()["content"]

    response = upload(client, headers, image_id, b"%PDF-1.7", filename="doc.pdf", mime_type="application/pdf")

    assert response.status_code == 415
    after = client.get(f"/image/{image_id}", headers=headers).json()["content"]
    assert after == before
    assert _stored_files(upload_dir) == []


def test_upload_over_size_limit_is_413(client: TestClient, upload_dir):
    headers = auth_headers(client)
    image_id = create_image(client, headers)

    response = upload(client, headers, image_id, b"x" * 2048)

    assert response.status_code == 413
    assert _stored_files(upload_dir) == []


def test_reupload_replaces_pointer(client: TestClient, upload_dir):
    headers = auth_headers(client)
    image_id = create_image(client, headers)

    upload(client, headers, image_id, b"first-bytes", filename="a.png")
    first_url = client.get(f"/image/{image_id}", headers=headers).json()["content"]["url"]

    response = upload(client, headers, image_id, b"second-bytes", filename="b.gif", mime_type="image/gif")
    assert response.status_code == 200
    assert response.json()["content"]["mime_type"] == "image/gif"

    view = client.get(f"/image/{image_id}", headers=headers).json()["content"]
    assert view["url"] != first_url
    assert view["filename"] == "b.gif"

    files = _stored_files(upload_dir)
    assert len(files) == 1
    assert (upload_dir / files[0]).read_bytes() == b"second-bytes"

    images = client.get("/image/me", headers=headers).json()["content"]
    assert [img["id"] for img in images] == [image_id]


def test_get_image_by_non_owner_is_403(client: TestClient):
    owner = auth_headers(client, "owner@example.com", "owner")
    other = auth_headers(client, "other@example.com", "other")
    image_id = create_image(client, owner)

    assert client.get(f"/image/{image_id}", headers=other).status_code == 403


def test_my_images_only_lists_own_images(client: TestClient):
    owner = auth_headers(client, "owner@example.com", "owner")
    other = auth_headers(client, "other@example.com", "other")
    first = create_image(client, owner, "one")
    second = create_image(client, owner, "two")
    create_image(client, other, "theirs")

    response = client.get("/image/me", headers=owner)

    assert response.status_code == 200
    assert [img["id"] for img in response.json()["content"]] == [second, first]


def test_delete_removes_record_and_file(client: TestClient, upload_dir):
    headers = auth_headers(client)
    image_id = create_image(client, headers)
    upload(client, headers, image_id)
    assert len(_stored_files(upload_dir)) == 1

    response = client.delete(f"/image/{image_id}", headers=headers)

    assert response.status_code == 200
    assert response.json() == {"success": True, "result": "Image deleted successfully"}
    assert _stored_files(upload_dir) == []
    assert client.get(f"/image/{image_id}", headers=headers).status_code == 404


def test_delete_tolerates_missing_file(client: TestClient, upload_dir):
    headers = auth_headers(client)
    image_id = create_image(client, headers)
    upload(client, headers, image_id)
    for stored in upload_dir.iterdir():
        stored.unlink()

    response = client.delete(f"/image/{image_id}", headers=headers)

    assert response.status_code == 200
    assert client.get(f"/image/{image_id}", headers=headers).status_code == 404


def test_delete_by_non_owner_is_403(client: TestClient, upload_dir):
    owner = auth_headers(client, "owner@example.com", "owner")
    other = auth_headers(client, "other@example.com", "other")
    image_id = create_image(client, owner)
    upload(client, owner, image_id)

    response = client.delete(f"/image/{image_id}", headers=other)

    assert response.status_code == 403
    assert len(_stored_files(upload_dir)) == 1


def test_non_numeric_image_id_is_400(client: TestClient):
    headers = auth_headers(client)
    response = client.get("/image/not-a-number", headers=headers)
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_image_ids_beyond_sqlite_range_are_400(client: TestClient):
    headers = auth_headers(client)
    too_big = 2**63

    responses = [
        upload(client, headers, too_big),
        client.get(f"/image/{too_big}", headers=headers),
        client.delete(f"/image/{2**64}", headers=headers),
        client.post("/image/create", json={"title": "x", "album_id": too_big}, headers=headers),
    ]

    assert [r.status_code for r in responses] == [400, 400, 400, 400]
    assert all(r.json()["success"] is False for r in responses)


def test_largest_sqlite_id_is_404(client: TestClient):
    headers = auth_headers(client)
    largest = 2**63 - 1
    assert upload(client, headers, largest).status_code == 404
    assert client.get(f"/image/{largest}", headers=headers).status_code == 404
    assert client.delete(f"/image/{largest}", headers=headers).status_code == 404


def test_unexpected_error_is_500(client: TestClient, monkeypatch):
    async def broken(request, user):
        raise RuntimeError("database went away")

    monkeypatch.setattr("routes.image_route.get_my_images", broken)
    headers = auth_headers(client)

    response = client.get("/image/me", headers=headers)

    assert response.status_code == 500
    assert response.json() == {"success": False, "result": "Server error fetching images"}
