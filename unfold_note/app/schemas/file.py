from typing import Optional

from pydantic import BaseModel


class ImageUploadRead(BaseModel):
    url: str


class StoredFileRead(BaseModel):
    name: str
    size: int
    url: str
    updated_at: Optional[str] = None
