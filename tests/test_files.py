import pytest
from fastapi.testclient import TestClient

from unfold_note.app.core.settings import get_settings
from unfold_note.app.db.base import Base
from unfold_note.app.db.session import engine
from unfold_note.app.main import app
from unfold_note.app.services.files import (
    get_file_info_from_url,
    get_project_images,
    get_public_url,
    upload_image,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def register_and_login(client: TestClient, email: str, password: str) -> str:
    client.post("/auth/register", json={"email": email, "password": password})
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200
    return response.json()["access_token"]


def test_upload_image_writes_under_project_directory(tmp_path, monkeypatch):
    monkeypatch.setattr(get_settings(), "storage_dir", str(tmp_path))

    url = upload_image("proj123", "photo.JPG", PNG_BYTES)

    info = get_file_info_from_url(url)
    assert info["bucket"] == "notes"
    assert info["file_path"].startswith("proj123/")
    assert info["file_path"].endswith(".jpg")
    assert (tmp_path / "notes" / info["file_path"]).read_bytes() == PNG_BYTES


def test_upload_image_names_are_unique(tmp_path, monkeypatch):
    monkeypatch.setattr(get_settings(), "storage_dir", str(tmp_path))
    first = upload_image("proj123", "a.png", PNG_BYTES)
    second = upload_image("proj123", "a.png", PNG_BYTES)
    assert first != second
    assert len(get_project_images("proj123")) == 2


def test_upload_image_without_extension(tmp_path, monkeypatch):
    monkeypatch.setattr(get_settings(), "storage_dir", str(tmp_path))
    url = upload_image("proj123", "", PNG_BYTES, bucket_name="public")
    assert url.endswith(".bin")
    assert get_file_info_from_url(url)["bucket"] == "public"


def test_get_file_info_from_url():
    url = get_public_url("notes", "abc/image.png")
    assert get_file_info_from_url(url) == {"bucket": "notes", "file_path": "abc/image.png"}
    assert get_file_info_from_url("https://example.com/other/path.png") is None
    assert get_file_info_from_url("not a url") is None
    assert get_file_info_from_url("/storage/v1/object/public/notes/abc/image.png") is None


def test_project_images_empty_when_nothing_uploaded(tmp_path, monkeypatch):
    monkeypatch.setattr(get_settings(), "storage_dir", str(tmp_path))
    assert get_project_images("missing") == []


def test_upload_endpoint_returns_served_url():
    client = TestClient(app)
    token = register_and_login(client, "files@example.com", "secret")
    headers = {"Authorization": f"Bearer {token}"}
    project = client.get("/projects", headers=headers).json()[0]["url_id"]

    resp = client.post(
        f"/projects/{project}/images",
        files={"file": ("cover.png", PNG_BYTES, "image/png")},
        headers=headers,
    )
    assert resp.status_code == 200
    url = resp.json()["url"]
    info = get_file_info_from_url(url)
    assert info["file_path"].startswith(f"{project}/")

    served = client.get(f"/storage/v1/object/public/{info['bucket']}/{info['file_path']}")
    assert served.status_code == 200
    assert served.content == PNG_BYTES

    listed = client.get(f"/projects/{project}/images", headers=headers).json()
    assert url in [item["url"] for item in listed]


def test_upload_endpoint_rejects_non_images():
    client = TestClient(app)
    token = register_and_login(client, "files@example.com", "secret")
    headers = {"Authorization": f"Bearer {token}"}
    project = client.get("/projects", headers=headers).json()[0]["url_id"]

    resp = client.post(
        f"/projects/{project}/images",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=headers,
    )
    assert resp.status_code == 400


def test_upload_endpoint_requires_auth():
    client = TestClient(app)
    resp = client.post("/projects/whatever/images", files={"file": ("a.png", PNG_BYTES, "image/png")})
    assert resp.status_code == 401
