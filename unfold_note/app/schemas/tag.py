"""Tag schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from unfold_note.app.schemas.note import NoteRead


class TagRead(BaseModel):
    id: int
    name: str
    project_id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TagStatus(BaseModel):
    name: str
    has_matching_note: bool
    class_name: str


class RelatedNotes(BaseModel):
    tags: list[str]
    grouped_notes: dict[str, list[NoteRead]]


class MatchingNoteInfo(BaseModel):
    title: str
    url_id: str
