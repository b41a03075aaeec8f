from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr


class AllowedEmailCreate(BaseModel):
    email: EmailStr


class AllowedEmailRead(BaseModel):
    id: int
    email: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
