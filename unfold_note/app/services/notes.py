"""Note services: listing, search, and create/update with thumbnail and tag sync."""

import logging
import re
from datetime import datetime
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from unfold_note.app.core.url_id import generate_unique_url_id
from unfold_note.app.models.note import Note
from unfold_note.app.models.project import Project
from unfold_note.app.services.tags import update_note_tags

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50
IMG_SRC_RE = re.compile(r"<img[^>]+src=\"([^\"'>]+)\"")


def extract_first_image_url(content: Optional[str]) -> Optional[str]:
    """Return the ``src`` of the first ``<img>`` in the HTML content, if any."""
    match = IMG_SRC_RE.search(content or "")
    return match.group(1) if match else None


def _note_url_id_exists(db: Session, url_id: str) -> bool:
    return db.query(Note.id).filter(Note.url_id == url_id).first() is not None


def get_project_notes(
    db: Session,
    project_id: int,
    limit: int = DEFAULT_PAGE_SIZE,
    cursor: Optional[datetime] = None,
) -> List[Note]:
    """Newest-updated first; ``cursor`` is the ``updated_at`` of the last note already shown."""
    query = db.query(Note).filter(Note.project_id == project_id)
    if cursor is not None:
        query = query.filter(Note.updated_at < cursor)
    return query.order_by(Note.updated_at.desc(), Note.id.desc()).limit(limit).all()


def get_note_by_id(db: Session, note_id: int) -> Optional[Note]:
    return db.query(Note).filter(Note.id == note_id).first()


def get_note_by_url_id(db: Session, url_id: str) -> Optional[Note]:
    return db.query(Note).filter(Note.url_id == url_id).first()


def get_project_note(db: Session, project: Project, note_url_id: str) -> Note:
    note = (
        db.query(Note)
        .filter(Note.url_id == note_url_id, Note.project_id == project.id)
        .first()
    )
    if not note:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Note not found")
    return note


def search_notes(db: Session, project_id: int, search_term: str) -> List[Note]:
    if not search_term.strip():
        return get_project_notes(db, project_id)
    pattern = f"%{search_term}%"
    return (
        db.query(Note)
        .filter(
            Note.project_id == project_id,
            or_(Note.title.ilike(pattern), Note.content.ilike(pattern)),
        )
        .order_by(Note.updated_at.desc(), Note.id.desc())
        .all()
    )


def create_note(db: Session, project: Project, title: str, content: str) -> Note:
    url_id = generate_unique_url_id(lambda candidate: _note_url_id_exists(db, candidate))
    note = Note(
        url_id=url_id,
        title=title,
        content=content,
        project_id=project.id,
        thumbnail_url=extract_first_image_url(content),
    )
    db.add(note)
    db.commit()
    db.refresh(note)
    update_note_tags(db, note, content)
    db.refresh(note)
    logger.info("Created note %s in project %s", note.url_id, project.url_id)
    return note


def update_note(
    db: Session,
    note: Note,
    title: Optional[str] = None,
    content: Optional[str] = None,
) -> Note:
    if title is not None:
        note.title = title
    if content is not None:
        note.content = content
    # Empty content keeps the previous thumbnail and tags.
    if content:
        note.thumbnail_url = extract_first_image_url(content)
    db.commit()
    db.refresh(note)
    if content:
        update_note_tags(db, note, content)
        db.refresh(note)
    return note


def delete_note(db: Session, note: Note) -> None:
    db.delete(note)
    db.commit()
    logger.info("Deleted note %s", note.url_id)
