import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError

from unfold_note.app.db.base import Base
from unfold_note.app.db.session import SessionLocal, engine
from unfold_note.app.main import app
from unfold_note.app.models.tag import NoteTag
from unfold_note.app.services import tags as tag_service
from unfold_note.app.services.tags import (
    MAX_MATCHING_NOTES,
    MAX_MATCHING_TAGS,
    associate_tag_with_note,
    check_if_matching_note_exists,
    extract_tags_from_text,
    get_matching_note_infos,
    get_notes_by_tag_name,
    get_or_create_tag,
    get_tag_class_name,
)


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


def setup_project(client: TestClient) -> tuple[dict, str]:
    token = register_and_login(client, "tags@example.com", "secret")
    headers = {"Authorization": f"Bearer {token}"}
    project = client.get("/projects", headers=headers).json()[0]["url_id"]
    return headers, project


def create_note(client: TestClient, headers: dict, project: str, title: str, content: str) -> dict:
    resp = client.post(f"/projects/{project}/notes", json={"title": title, "content": content}, headers=headers)
    assert resp.status_code == 200
    return resp.json()


def test_extract_tags_strips_html_and_dedupes():
    text = "<p>#python and <b>#web</b></p><p>#python again</p>"
    assert extract_tags_from_text(text) == ["python", "web"]


def test_extract_tags_supports_unicode_hyphen_and_underscore():
    text = "<p>#日本語 #machine-learning #snake_case #v2</p>"
    assert extract_tags_from_text(text) == ["日本語", "machine-learning", "snake_case", "v2"]


def test_extract_tags_ignores_markup_attributes():
    assert extract_tags_from_text('<a href="#anchor">link</a>') == []


def test_extract_tags_stops_at_punctuation():
    assert extract_tags_from_text("#done. #next!") == ["done", "next"]
    assert extract_tags_from_text("") == []


def test_tag_class_name():
    assert get_tag_class_name("x", True) == "tag-highlight has-matching-note"
    assert get_tag_class_name("x", False) == "tag-highlight"


def test_note_tags_follow_content():
    client = TestClient(app)
    headers, project = setup_project(client)
    note = create_note(client, headers, project, "Stack", "<p>#python #fastapi</p>")

    tags = client.get(f"/projects/{project}/notes/{note['url_id']}/tags", headers=headers).json()
    assert sorted(t["name"] for t in tags) == ["fastapi", "python"]

    client.put(f"/projects/{project}/notes/{note['url_id']}", json={"content": "<p>#sqlalchemy</p>"}, headers=headers)
    tags = client.get(f"/projects/{project}/notes/{note['url_id']}/tags", headers=headers).json()
    assert [t["name"] for t in tags] == ["sqlalchemy"]

    # Tag rows outlive their last association.
    project_tags = client.get(f"/projects/{project}/tags", headers=headers).json()
    assert [t["name"] for t in project_tags] == ["fastapi", "python", "sqlalchemy"]


def test_title_only_update_keeps_tags():
    client = TestClient(app)
    headers, project = setup_project(client)
    note = create_note(client, headers, project, "Keep", "<p>#stay</p>")
    client.put(f"/projects/{project}/notes/{note['url_id']}", json={"title": "Renamed"}, headers=headers)
    tags = client.get(f"/projects/{project}/notes/{note['url_id']}/tags", headers=headers).json()
    assert [t["name"] for t in tags] == ["stay"]


def test_tag_status_reports_matching_note():
    client = TestClient(app)
    headers, project = setup_project(client)
    create_note(client, headers, project, "Python", "<p>#python</p>")

    matched = client.get(f"/projects/{project}/tags/python", headers=headers).json()
    assert matched == {"name": "python", "has_matching_note": True, "class_name": "tag-highlight has-matching-note"}

    unmatched = client.get(f"/projects/{project}/tags/rust", headers=headers).json()
    assert unmatched["has_matching_note"] is False
    assert unmatched["class_name"] == "tag-highlight"


def test_related_notes_grouped_by_tag_excluding_current():
    client = TestClient(app)
    headers, project = setup_project(client)
    current = create_note(client, headers, project, "Current", "<p>#python #lonely</p>")
    other = create_note(client, headers, project, "Other", "<p>#python</p>")
    create_note(client, headers, project, "Elsewhere", "<p>#rust</p>")

    resp = client.get(f"/projects/{project}/notes/{current['url_id']}/related", headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["tags"] == ["python", "lonely"]
    assert [n["url_id"] for n in data["grouped_notes"]["python"]] == [other["url_id"]]
    assert data["grouped_notes"]["lonely"] == []


def test_related_notes_for_unsaved_draft():
    client = TestClient(app)
    headers, project = setup_project(client)
    current = create_note(client, headers, project, "Draft", "<p>nothing yet</p>")
    rusty = create_note(client, headers, project, "Rusty", "<p>#rust</p>")

    resp = client.post(
        f"/projects/{project}/notes/{current['url_id']}/related",
        json={"content": "<p>now about #rust</p>"},
        headers=headers,
    )
    assert resp.status_code == 200
    assert [n["title"] for n in resp.json()["grouped_notes"]["rust"]] == [rusty["title"]]


def test_duplicate_association_is_ignored():
    client = TestClient(app)
    headers, project = setup_project(client)
    note = create_note(client, headers, project, "Dup", "<p>#once</p>")

    with SessionLocal() as db:
        tag = get_or_create_tag(db, "once", note["project_id"])
        associate_tag_with_note(db, note["id"], tag.id)
        associate_tag_with_note(db, note["id"], tag.id)
        count = db.query(NoteTag).filter(NoteTag.note_id == note["id"]).count()
        assert count == 1


def test_get_or_create_tag_reuses_existing_row():
    client = TestClient(app)
    headers, project = setup_project(client)
    note = create_note(client, headers, project, "Tagged", "<p>#shared</p>")
    with SessionLocal() as db:
        first = get_or_create_tag(db, "shared", note["project_id"])
        second = get_or_create_tag(db, "shared", note["project_id"])
        assert first.id == second.id


def test_notes_by_unknown_tag_is_empty():
    with SessionLocal() as db:
        assert get_notes_by_tag_name(db, "missing", 1) == []


def test_matching_notes_link_tags_to_titles():
    client = TestClient(app)
    headers, project = setup_project(client)
    target = create_note(client, headers, project, "python", "<p>all about it</p>")
    create_note(client, headers, project, "Unrelated", "<p>#python</p>")

    resp = client.post(
        f"/projects/{project}/notes/matching",
        json={"content": "<p>see #python and #missing</p>"},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json() == [{"title": "python", "url_id": target["url_id"]}]


def test_matching_notes_without_tags_is_empty():
    client = TestClient(app)
    headers, project = setup_project(client)
    create_note(client, headers, project, "python", "")
    resp = client.post(f"/projects/{project}/notes/matching", json={"content": "<p>no tags</p>"}, headers=headers)
    assert resp.json() == []


def test_matching_notes_only_use_first_tags():
    client = TestClient(app)
    headers, project = setup_project(client)
    titles = [f"t{i}" for i in range(MAX_MATCHING_TAGS + 1)]
    for title in titles:
        create_note(client, headers, project, title, "")
    content = " ".join(f"#{title}" for title in titles)

    with SessionLocal() as db:
        project_id = client.get(f"/projects/{project}", headers=headers).json()["id"]
        infos = get_matching_note_infos(db, project_id, content)
    assert [info["title"] for info in infos] == titles[:MAX_MATCHING_TAGS]


def test_matching_notes_result_is_capped():
    client = TestClient(app)
    headers, project = setup_project(client)
    for _ in range(MAX_MATCHING_NOTES + 1):
        create_note(client, headers, project, "daily", "")

    resp = client.post(f"/projects/{project}/notes/matching", json={"content": "#daily"}, headers=headers)
    assert len(resp.json()) == MAX_MATCHING_NOTES


def test_matching_check_is_false_when_lookup_fails(monkeypatch):
    client = TestClient(app)
    headers, project = setup_project(client)
    note = create_note(client, headers, project, "Tagged", "<p>#python</p>")

    def failing_lookup(*args, **kwargs):
        raise SQLAlchemyError("lookup failed")

    monkeypatch.setattr(tag_service, "get_notes_by_tag_name", failing_lookup)
    with SessionLocal() as db:
        assert check_if_matching_note_exists(db, "python", note["project_id"]) is False
