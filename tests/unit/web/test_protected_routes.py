class TestUpload:
    """Tests for POST /api/upload."""

    def test_requires_session(self, client, png_bytes):
        response = client.post("/api/upload", files={"files": ("a.png", png_bytes, "image/png")})

        assert response.status_code == 401
        assert response.json() == {"message": "Unauthorized", "type": "authentication_error"}
        assert response.headers["X-RateLimit-Limit"] == "10"
        assert response.headers["X-RateLimit-Remaining"] == "9"

    def test_rejects_non_owner(self, client, stranger_cookie, png_bytes):
        response = client.post(
            "/api/upload", files={"files": ("a.png", png_bytes, "image/png")}, headers=stranger_cookie
        )

        assert response.status_code == 403

    def test_owner_uploads(self, client, owner_cookie, png_bytes):
        response = client.post(
            "/api/upload", files={"files": ("a.png", png_bytes, "image/png")}, headers=owner_cookie
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["uploaded"] == 1
        assert "errors" not in body
        assert response.headers["X-RateLimit-Limit"] == "10"
        assert response.headers["X-RateLimit-Remaining"] == "9"

        listing = client.get("/api/photos").json()
        assert listing == {"count": 1, "photos": ["a.png"]}

    def test_all_failed(self, client, owner_cookie):
        response = client.post(
            "/api/upload", files={"files": ("a.jpg", b"not an image", "image/jpeg")}, headers=owner_cookie
        )

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "All uploads failed"
        assert body["details"][0]["filename"] == "a.jpg"
        assert response.headers["X-RateLimit-Limit"] == "10"

    def test_oversized_part_is_rejected_without_storing(self, client, owner_cookie, config, png_bytes):
        config.max_upload_size = len(png_bytes) - 1

        response = client.post(
            "/api/upload", files={"files": ("big.png", png_bytes, "image/png")}, headers=owner_cookie
        )

        assert response.status_code == 500
        assert "too large" in response.json()["details"][0]["error"]
        assert client.get("/api/photos").json()["count"] == 0

    def test_no_files(self, client, owner_cookie):
        response = client.post("/api/upload", headers=owner_cookie)

        assert response.status_code == 400

    def test_rate_limited(self, client, owner_cookie):
        """The eleventh upload in a minute is refused with retry headers."""
        for _ in range(10):
            assert client.post("/api/upload", headers=owner_cookie).status_code == 400

        response = client.post("/api/upload", headers=owner_cookie)

        assert response.status_code == 429
        assert response.json()["type"] == "rate_limited"
        assert int(response.headers["Retry-After"]) > 0
        assert response.headers["X-RateLimit-Remaining"] == "0"


class TestDeleteComment:
    """Tests for DELETE /api/comments/{id}."""

    def test_requires_session(self, client):
        assert client.delete("/api/comments/1").status_code == 401

    def test_invalid_session(self, client):
        assert client.delete("/api/comments/1", headers={"Cookie": "session=garbage"}).status_code == 401

    def test_rejects_non_owner(self, client, stranger_cookie):
        assert client.delete("/api/comments/1", headers=stranger_cookie).status_code == 403


class TestPublicRateLimits:
    """Tests for rate limits on visitor endpoints."""

    def test_comment_post_limit(self, client):
        """Validation failures still count against the comment budget."""
        for _ in range(3):
            response = client.post("/api/comments", json={"photo": "a.jpg"})
            assert response.status_code == 400

        response = client.post("/api/comments", json={"photo": "a.jpg", "text": "hi"})

        assert response.status_code == 429
        assert response.headers["X-RateLimit-Limit"] == "3"

    def test_limits_follow_forwarded_address(self, client):
        for _ in range(4):
            client.post("/api/comments", json={}, headers={"X-Forwarded-For": "10.0.0.1, 10.0.0.2"})

        response = client.post("/api/comments", json={}, headers={"X-Forwarded-For": "10.0.0.3"})

        assert response.status_code == 400

    def test_likes_require_photo(self, client):
        response = client.get("/api/likes")

        assert response.status_code == 400
