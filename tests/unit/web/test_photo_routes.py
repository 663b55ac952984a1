import pytest

from photogallery.core.modules.photo.models import PhotoSize
from photogallery.core.modules.photo.storage import write_photo_file

GALLERY_REFERER = {"Referer": "https://gallery.example.com/gallery"}


@pytest.fixture
def stored_photo(config):
    write_photo_file(config.photos_path, PhotoSize.FULL, "beach.jpg", b"jpeg bytes")
    return "beach.jpg"


class TestServePhoto:
    """Tests for GET /photos/{filename}."""

    def test_direct_access_redirects_to_gallery(self, client, stored_photo):
        response = client.get(f"/photos/{stored_photo}")

        assert response.status_code == 302
        assert response.headers["location"] == "https://gallery.example.com/gallery"

    def test_hotlinking_is_refused(self, client, stored_photo):
        response = client.get(f"/photos/{stored_photo}", headers={"Referer": "https://evil.test/"})

        assert response.status_code == 403
        assert response.headers["X-Blocked-Reason"] == "hotlinking"

    def test_serves_from_gallery(self, client, stored_photo):
        response = client.get(f"/photos/{stored_photo}", headers=GALLERY_REFERER)

        assert response.status_code == 200
        assert response.content == b"jpeg bytes"
        assert response.headers["content-type"] == "image/jpeg"
        assert response.headers["Cache-Control"] == "public, max-age=31536000"
        assert response.headers["X-Photo-Name"] == "beach.jpg"
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["ETag"]

    def test_same_origin_fetch_without_referer(self, client, stored_photo):
        response = client.get(f"/photos/{stored_photo}", headers={"Sec-Fetch-Site": "same-origin"})

        assert response.status_code == 200

    def test_not_modified(self, client, stored_photo):
        etag = client.get(f"/photos/{stored_photo}", headers=GALLERY_REFERER).headers["ETag"]

        response = client.get(f"/photos/{stored_photo}", headers={**GALLERY_REFERER, "If-None-Match": etag})

        assert response.status_code == 304
        assert response.content == b""

    def test_thumbnail_falls_back_to_full(self, client, stored_photo):
        response = client.get(f"/photos/{stored_photo}", params={"size": "thumb"}, headers=GALLERY_REFERER)

        assert response.status_code == 200
        assert response.content == b"jpeg bytes"

    def test_missing_photo(self, client):
        response = client.get("/photos/missing.jpg", headers=GALLERY_REFERER)

        assert response.status_code == 404

    def test_unsafe_filename(self, client):
        response = client.get("/photos/a..jpg", headers=GALLERY_REFERER)

        assert response.status_code == 400


class TestListPhotos:
    def test_empty(self, client):
        response = client.get("/api/photos")

        assert response.status_code == 200
        assert response.json() == {"count": 0, "photos": []}
        assert response.headers["Cache-Control"] == "public, max-age=60"

    def test_with_metadata(self, client, memory_store):
        memory_store.data["photo-list"] = '["a.jpg"]'

        response = client.get("/api/photos", params={"metadata": "true"})

        photos = response.json()["photos"]
        assert photos[0]["filename"] == "a.jpg"
        assert photos[0]["views"] == 0
