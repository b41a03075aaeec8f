"""Tag services: inline ``#tag`` extraction and note/tag bookkeeping."""

import logging
import re
from typing import Dict, List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from unfold_note.app.models.note import Note
from unfold_note.app.models.tag import NoteTag, Tag

logger = logging.getLogger(__name__)

HTML_TAG_RE = re.compile(r"<[^>]*>")
# \w is Unicode aware: letters and digits of any script, plus underscore.
INLINE_TAG_RE = re.compile(r"#([\w-]+)")

TAG_CLASS_NAME = "tag-highlight"
MATCHING_TAG_CLASS_NAME = "tag-highlight has-matching-note"

MAX_MATCHING_TAGS = 5
MAX_MATCHING_NOTES = 15


def extract_tags_from_text(text: str) -> List[str]:
    """Return tag names (without ``#``) in first-seen order, duplicates dropped."""
    plain_text = HTML_TAG_RE.sub(" ", text or "")
    return list(dict.fromkeys(INLINE_TAG_RE.findall(plain_text)))


def get_project_tags(db: Session, project_id: int) -> List[Tag]:
    return db.query(Tag).filter(Tag.project_id == project_id).order_by(Tag.name.asc()).all()


def get_or_create_tag(db: Session, tag_name: str, project_id: int) -> Tag:
    tag = db.query(Tag).filter(Tag.name == tag_name, Tag.project_id == project_id).first()
    if tag:
        return tag
    tag = Tag(name=tag_name, project_id=project_id)
    db.add(tag)
    db.commit()
    db.refresh(tag)
    return tag


def associate_tag_with_note(db: Session, note_id: int, tag_id: int) -> None:
    if db.get(NoteTag, (note_id, tag_id)) is not None:
        return
    db.add(NoteTag(note_id=note_id, tag_id=tag_id))
    try:
        db.commit()
    except IntegrityError:
        # Linked concurrently.
        db.rollback()


def remove_all_tags_from_note(db: Session, note_id: int) -> None:
    db.query(NoteTag).filter(NoteTag.note_id == note_id).delete()
    db.commit()


def get_tags_by_note_id(db: Session, note_id: int) -> List[Tag]:
    return (
        db.query(Tag)
        .join(NoteTag, NoteTag.tag_id == Tag.id)
        .filter(NoteTag.note_id == note_id)
        .order_by(Tag.name.asc())
        .all()
    )


def get_notes_by_tag_name(db: Session, tag_name: str, project_id: int) -> List[Note]:
    tag = db.query(Tag).filter(Tag.name == tag_name, Tag.project_id == project_id).first()
    if not tag:
        return []
    return (
        db.query(Note)
        .join(NoteTag, NoteTag.note_id == Note.id)
        .filter(NoteTag.tag_id == tag.id)
        .order_by(Note.updated_at.desc(), Note.id.desc())
        .all()
    )


def update_note_tags(db: Session, note: Note, content: str) -> List[Tag]:
    """Replace the note's tag associations with the tags found in ``content``."""
    tag_names = extract_tags_from_text(content)
    try:
        remove_all_tags_from_note(db, note.id)
        tags = []
        for tag_name in tag_names:
            tag = get_or_create_tag(db, tag_name, note.project_id)
            associate_tag_with_note(db, note.id, tag.id)
            tags.append(tag)
    except SQLAlchemyError:
        logger.exception("Failed updating tags for note %s", note.id)
        db.rollback()
        raise
    return tags


def check_if_matching_note_exists(db: Session, tag_name: str, project_id: int) -> bool:
    try:
        return len(get_notes_by_tag_name(db, tag_name, project_id)) > 0
    except SQLAlchemyError:
        logger.exception("Failed checking notes for tag %r", tag_name)
        return False


def get_tag_class_name(tag_name: str, has_matching_note: bool) -> str:
    return MATCHING_TAG_CLASS_NAME if has_matching_note else TAG_CLASS_NAME


def get_related_notes_by_tag(
    db: Session, note_id: int | None, project_id: int, content: str
) -> Dict[str, List[Note]]:
    """Group the other notes of a project by the tags found in ``content``.

    Every extracted tag appears as a key, mapped to an empty list when no other
    note carries it. ``note_id`` may be None for a note that is not saved yet.
    """
    grouped: Dict[str, List[Note]] = {}
    for tag_name in extract_tags_from_text(content):
        notes = get_notes_by_tag_name(db, tag_name, project_id)
        grouped[tag_name] = [note for note in notes if note.id != note_id]
    return grouped


def get_matching_note_infos(db: Session, project_id: int, content: str) -> List[Dict[str, str]]:
    """Notes whose title equals one of the first tags in ``content``; used to turn tags into links."""
    tag_names = extract_tags_from_text(content)[:MAX_MATCHING_TAGS]
    if not tag_names:
        return []
    rows = (
        db.query(Note.title, Note.url_id)
        .filter(Note.project_id == project_id, Note.title.in_(tag_names))
        .order_by(Note.id.asc())
        .limit(MAX_MATCHING_NOTES)
        .all()
    )
    return [{"title": title, "url_id": url_id} for title, url_id in rows]
