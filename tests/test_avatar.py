import io

import pytest
from PIL import Image

from app.services import avatar
from app.utils.base import ValidationError


class TestProcessing:

    def test_resizes_to_square_png(self, png_bytes):
        out = avatar.process_upload("me.jpg", png_bytes(size=(800, 600), fmt="JPEG"))

        image = Image.open(io.BytesIO(out))
        assert image.format == "PNG"
        assert image.size == avatar.AVATAR_SIZE

    @pytest.mark.parametrize("filename", ["me.gif", "me", None, "me.png.exe"])
    def test_rejects_other_extensions(self, png_bytes, filename):
        with pytest.raises(ValidationError) as exc_info:
            avatar.process_upload(filename, png_bytes())

        assert exc_info.value.detail == "Please upload an image!"

    def test_rejects_oversized_files(self):
        with pytest.raises(ValidationError):
            avatar.validate_upload("big.png", b"\0" * (avatar.MAX_FILE_SIZE + 1))

    def test_rejects_undecodable_data(self):
        with pytest.raises(ValidationError):
            avatar.process_upload("fake.png", b"definitely not an image")


class TestRoutes:

    def test_upload_serve_and_delete(self, client, alice, auth_headers, png_bytes):
        headers = auth_headers(alice)

        upload = client.post("/users/me/avatar", files={"avatar": ("me.png", png_bytes(), "image/png")}, headers=headers)
        assert upload.status_code == 200

        served = client.get(f"/users/{alice.id}/avatar")
        assert served.status_code == 200
        assert served.headers["content-type"] == "image/png"
        assert Image.open(io.BytesIO(served.content)).size == (250, 250)
        assert "avatar" not in client.get("/users/me", headers=headers).json()

        assert client.delete("/users/me/avatar", headers=headers).status_code == 200
        assert client.get(f"/users/{alice.id}/avatar").status_code == 404

    def test_bad_upload_is_400(self, client, alice, auth_headers):
        response = client.post(
            "/users/me/avatar",
            files={"avatar": ("notes.txt", b"hello", "text/plain")},
            headers=auth_headers(alice),
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Please upload an image!"

    def test_upload_requires_auth(self, client, png_bytes):
        response = client.post("/users/me/avatar", files={"avatar": ("me.png", png_bytes(), "image/png")})

        assert response.status_code == 401

    def test_repeat_upload_is_rate_limited(self, client, alice, auth_headers, png_bytes, redis_client):
        headers = auth_headers(alice)
        files = {"avatar": ("me.png", png_bytes(), "image/png")}

        assert client.post("/users/me/avatar", files=files, headers=headers).status_code == 200
        second = client.post("/users/me/avatar", files=files, headers=headers)

        assert second.status_code == 429
        assert redis_client.ttl(f"rl:{alice.id}:/users/me/avatar") > 0

    def test_missing_avatar_is_404(self, client, alice):
        assert client.get(f"/users/{alice.id}/avatar").status_code == 404
        assert client.get("/users/not-an-id/avatar").status_code == 404
