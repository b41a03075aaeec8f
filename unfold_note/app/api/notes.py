"""Project notes endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from unfold_note.app.core.time import parse_cursor
from unfold_note.app.db.session import get_db
from unfold_note.app.dependencies.auth import get_current_user
from unfold_note.app.models.user import User
from unfold_note.app.schemas.note import NoteCreate, NoteDraft, NoteRead, NoteUpdate
from unfold_note.app.schemas.tag import MatchingNoteInfo, RelatedNotes, TagRead
from unfold_note.app.services.notes import (
    DEFAULT_PAGE_SIZE,
    create_note,
    delete_note,
    get_project_note,
    get_project_notes,
    search_notes,
    update_note,
)
from unfold_note.app.services.projects import get_project_by_url_id
from unfold_note.app.services.tags import (
    extract_tags_from_text,
    get_matching_note_infos,
    get_related_notes_by_tag,
    get_tags_by_note_id,
)

router = APIRouter(prefix="/projects/{project_url_id}/notes", tags=["notes"])


@router.get("", response_model=list[NoteRead])
async def list_notes(
    project_url_id: str,
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=200),
    cursor: str | None = None,
    search: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    project = get_project_by_url_id(db, project_url_id, current_user.id)
    if search and search.strip():
        return search_notes(db, project.id, search)
    cursor_value = None
    if cursor:
        try:
            cursor_value = parse_cursor(cursor)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid cursor value")
    return get_project_notes(db, project.id, limit=limit, cursor=cursor_value)


@router.post("", response_model=NoteRead)
async def create_project_note(
    project_url_id: str,
    note_in: NoteCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    project = get_project_by_url_id(db, project_url_id, current_user.id)
    return create_note(db, project, note_in.title, note_in.content)


@router.post("/matching", response_model=list[MatchingNoteInfo])
async def matching_notes(
    project_url_id: str,
    draft: NoteDraft,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Notes titled like the tags in the editor content, so those tags can link to them."""
    project = get_project_by_url_id(db, project_url_id, current_user.id)
    return get_matching_note_infos(db, project.id, draft.content)


@router.get("/{note_url_id}", response_model=NoteRead)
async def get_note(
    project_url_id: str,
    note_url_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    project = get_project_by_url_id(db, project_url_id, current_user.id)
    return get_project_note(db, project, note_url_id)


@router.put("/{note_url_id}", response_model=NoteRead)
async def update_project_note(
    project_url_id: str,
    note_url_id: str,
    note_in: NoteUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    project = get_project_by_url_id(db, project_url_id, current_user.id)
    note = get_project_note(db, project, note_url_id)
    return update_note(db, note, title=note_in.title, content=note_in.content)


@router.delete("/{note_url_id}")
async def delete_project_note(
    project_url_id: str,
    note_url_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    project = get_project_by_url_id(db, project_url_id, current_user.id)
    note = get_project_note(db, project, note_url_id)
    delete_note(db, note)
    return {"status": "deleted", "url_id": note_url_id}


@router.get("/{note_url_id}/tags", response_model=list[TagRead])
async def list_note_tags(
    project_url_id: str,
    note_url_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    project = get_project_by_url_id(db, project_url_id, current_user.id)
    note = get_project_note(db, project, note_url_id)
    return get_tags_by_note_id(db, note.id)


def _related(db: Session, note_id: int, project_id: int, content: str) -> dict:
    return {
        "tags": extract_tags_from_text(content),
        "grouped_notes": get_related_notes_by_tag(db, note_id, project_id, content),
    }


@router.get("/{note_url_id}/related", response_model=RelatedNotes)
async def related_notes(
    project_url_id: str,
    note_url_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    project = get_project_by_url_id(db, project_url_id, current_user.id)
    note = get_project_note(db, project, note_url_id)
    return _related(db, note.id, project.id, note.content)


@router.post("/{note_url_id}/related", response_model=RelatedNotes)
async def related_notes_for_draft(
    project_url_id: str,
    note_url_id: str,
    draft: NoteDraft,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Related notes for unsaved editor content; the editor calls this after its debounce delay."""
    project = get_project_by_url_id(db, project_url_id, current_user.id)
    note = get_project_note(db, project, note_url_id)
    return _related(db, note.id, project.id, draft.content)
