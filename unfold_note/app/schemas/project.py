"""Project schemas for create, update and read operations."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProjectCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str = ""


class ProjectUpdate(BaseModel):
    """Partial update; omitted fields stay unchanged."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    is_archived: Optional[bool] = None


class ProjectRead(BaseModel):
    id: int
    url_id: str
    name: str
    description: Optional[str] = None
    owner_id: int
    is_archived: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
