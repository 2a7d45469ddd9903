"""
Tests for the avatar pipeline and the avatar upload route.
"""

import asyncio
import io
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from contacts_api.services.avatars import AvatarDecodeError, AvatarPipeline
from helpers import png_bytes

XPM_BYTES = b'/* XPM */\nstatic char *img[] = {\n"2 2 1 1",\n"a c #FF0000",\n"aa",\n"aa"\n};\n'


@pytest.fixture
def pipeline(settings):
    p = AvatarPipeline(settings)
    p.ensure_dirs()
    return p


def upload(client, headers, data=None, name="me.png", content_type="image/png"):
    data = png_bytes() if data is None else data
    return client.patch(
        "/api/users/avatars",
        files={"avatarURL": (name, data, content_type)},
        headers=headers,
    )


# =============================================================================
# AvatarPipeline Tests
# =============================================================================


class TestAvatarPipeline:
    def test_filename_keeps_safe_suffix(self, pipeline):
        name = pipeline.make_filename("user_1", "Holiday.JPG")

        assert name.startswith("user_1_")
        assert name.endswith(".jpg")

    def test_filename_drops_unsafe_suffix(self, pipeline):
        assert "." not in pipeline.make_filename("user_1", "evil.p/hp")
        assert "." not in pipeline.make_filename("user_1", None)

    @pytest.mark.asyncio
    async def test_process_resizes_to_square(self, pipeline):
        relative = await pipeline.process("user_1", "me.png", png_bytes(640, 480))

        assert relative.startswith("avatars/")
        stored = pipeline.avatars_dir / Path(relative).name
        with Image.open(stored) as img:
            assert img.size == (250, 250)
            assert img.format == "PNG"
        assert list(pipeline.tmp_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_process_rejects_non_image(self, pipeline):
        with pytest.raises(AvatarDecodeError):
            await pipeline.process("user_1", "notes.png", b"definitely not an image")

        assert list(pipeline.avatars_dir.iterdir()) == []
        assert list(pipeline.tmp_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_process_rejects_format_pillow_cannot_write(self, pipeline):
        with pytest.raises(AvatarDecodeError):
            await pipeline.process("user_1", "me.xpm", XPM_BYTES)

        assert list(pipeline.avatars_dir.iterdir()) == []
        assert list(pipeline.tmp_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_remove_deletes_stored_avatar_only(self, pipeline):
        relative = await pipeline.process("user_1", "me.png", png_bytes())
        outside = pipeline.avatars_dir.parent / "keep.png"
        outside.write_bytes(b"x")

        await pipeline.remove("https://www.gravatar.com/avatar/abc?s=200")
        await pipeline.remove(None)
        await pipeline.remove("keep.png")
        assert list(pipeline.avatars_dir.iterdir()) != []

        await pipeline.remove(relative)
        assert list(pipeline.avatars_dir.iterdir()) == []
        assert outside.exists()

    @pytest.mark.asyncio
    async def test_move_failure_propagates(self, pipeline):
        with pytest.raises(OSError):
            await pipeline.move(pipeline.tmp_dir / "never-written.png")


# =============================================================================
# Upload Route Tests
# =============================================================================


class TestAvatarUpload:
    def test_upload_resizes_and_persists(self, client, services, settings, auth_headers):
        response = upload(client, auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["email"] == "a@b.com"
        assert body["subscription"] == "starter"
        assert body["avatarURL"].startswith("avatars/")

        filename = body["avatarURL"].split("/", 1)[1]
        with Image.open(Path(settings.avatars_dir) / filename) as img:
            assert img.size == (250, 250)

        user = asyncio.run(services.users.get_by_email("a@b.com"))
        assert user.avatar_url == body["avatarURL"]

    def test_uploaded_avatar_is_served(self, client, auth_headers):
        avatar_url = upload(client, auth_headers).json()["avatarURL"]

        response = client.get(f"/{avatar_url}")

        assert response.status_code == 200
        with Image.open(io.BytesIO(response.content)) as img:
            assert img.size == (250, 250)

    def test_non_image_is_rejected(self, client, services, settings, auth_headers):
        before = asyncio.run(services.users.get_by_email("a@b.com")).avatar_url

        response = upload(client, auth_headers, data=b"plain text", name="notes.txt", content_type="text/plain")

        assert response.status_code == 400
        assert response.json() == {"message": "Unsupported image file"}
        assert list(Path(settings.avatars_dir).iterdir()) == []
        assert asyncio.run(services.users.get_by_email("a@b.com")).avatar_url == before

    def test_missing_file_field(self, client, auth_headers):
        response = client.patch(
            "/api/users/avatars",
            files={"picture": ("me.png", png_bytes(), "image/png")},
            headers=auth_headers,
        )

        assert response.status_code == 400

    def test_requires_auth(self, client):
        assert upload(client, {}).status_code == 401

    def test_io_error_is_a_server_error(self, app, services):
        async def broken_move(tmp_path):
            raise OSError("disk full")

        services.avatars.move = broken_move

        with TestClient(app, raise_server_exceptions=False) as client:
            client.post("/api/users/register", json={"email": "a@b.com", "password": "secret1"})
            token = client.post(
                "/api/users/login", json={"email": "a@b.com", "password": "secret1"}
            ).json()["token"]

            response = upload(client, {"Authorization": f"Bearer {token}"})

        assert response.status_code == 500
        assert response.json() == {"message": "Server error"}

    def test_unwritable_format_is_rejected(self, client, services, settings, auth_headers):
        before = asyncio.run(services.users.get_by_email("a@b.com")).avatar_url

        response = upload(client, auth_headers, data=XPM_BYTES, name="me.xpm", content_type="image/x-xpixmap")

        assert response.status_code == 400
        assert response.json() == {"message": "Unsupported image file"}
        assert list(Path(settings.avatars_dir).iterdir()) == []
        assert asyncio.run(services.users.get_by_email("a@b.com")).avatar_url == before

    def test_new_upload_replaces_previous_file(self, client, services, settings, auth_headers):
        first = upload(client, auth_headers).json()["avatarURL"]
        second = upload(client, auth_headers).json()["avatarURL"]

        assert first != second
        stored = [p.name for p in Path(settings.avatars_dir).iterdir()]
        assert stored == [second.split("/", 1)[1]]
        assert asyncio.run(services.users.get_by_email("a@b.com")).avatar_url == second

    def test_failed_save_removes_new_file(self, app, services, settings):
        with TestClient(app, raise_server_exceptions=False) as client:
            client.post("/api/users/register", json={"email": "a@b.com", "password": "secret1"})
            token = client.post(
                "/api/users/login", json={"email": "a@b.com", "password": "secret1"}
            ).json()["token"]

            async def broken_update(user_id, **fields):
                raise RuntimeError("storage down")

            services.users.update = broken_update

            response = upload(client, {"Authorization": f"Bearer {token}"})

        assert response.status_code == 500
        assert response.json() == {"message": "Server error"}
        assert list(Path(settings.avatars_dir).iterdir()) == []
