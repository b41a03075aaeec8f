"""Note schemas for project notes."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class NoteCreate(BaseModel):
    title: str = ""
    content: str = ""


class NoteUpdate(BaseModel):
    """Schema for note updates with partial fields."""

    title: Optional[str] = None
    content: Optional[str] = None


class NoteRead(BaseModel):
    id: int
    url_id: str
    title: str
    content: str
    project_id: int
    thumbnail_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NoteDraft(BaseModel):
    """Unsaved editor content used for related-note lookups."""

    content: str
