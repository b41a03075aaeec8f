"""Backfill of ``notes.thumbnail_url`` for rows written before thumbnails existed."""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from unfold_note.app.models.note import Note
from unfold_note.app.services.notes import extract_first_image_url

logger = logging.getLogger(__name__)


def _set_thumbnail(db: Session, note: Note, thumbnail_url: str) -> None:
    # updated_at is pinned so a backfill does not reorder the note list.
    db.query(Note).filter(Note.id == note.id).update(
        {Note.thumbnail_url: thumbnail_url, Note.updated_at: note.updated_at},
        synchronize_session=False,
    )
    db.commit()


def _backfill_thumbnails(db: Session, project_id: Optional[int] = None) -> int:
    query = db.query(Note).filter(Note.thumbnail_url.is_(None))
    if project_id is not None:
        query = query.filter(Note.project_id == project_id)
    notes = query.order_by(Note.id.asc()).all()

    if not notes:
        logger.info("No notes need a thumbnail")
        return 0

    logger.info("Backfilling thumbnails for %d notes", len(notes))
    updated_count = 0
    for note in notes:
        thumbnail_url = extract_first_image_url(note.content)
        if not thumbnail_url:
            continue
        try:
            _set_thumbnail(db, note, thumbnail_url)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed updating thumbnail for note %s", note.id)
            continue
        updated_count += 1

    logger.info("Updated thumbnails for %d notes", updated_count)
    return updated_count


def update_existing_notes_thumbnails(db: Session) -> int:
    return _backfill_thumbnails(db)


def update_project_notes_thumbnails(db: Session, project_id: int) -> int:
    return _backfill_thumbnails(db, project_id=project_id)
