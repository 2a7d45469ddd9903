"""
Request helpers shared by the API tests.
"""

import io

from PIL import Image


def png_bytes(width: int = 400, height: int = 300) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color=(200, 30, 30)).save(buf, format="PNG")
    return buf.getvalue()


def register(client, email="a@b.com", password="secret1", **extra):
    return client.post("/api/users/register", json={"email": email, "password": password, **extra})


def login(client, email="a@b.com", password="secret1") -> str:
    response = client.post("/api/users/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["token"]


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
