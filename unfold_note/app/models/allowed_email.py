from sqlalchemy import Column, DateTime, Integer, String

from unfold_note.app.core.time import utc_now
from unfold_note.app.db.base_class import Base


class AllowedEmail(Base):
    __tablename__ = "allowed_emails"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
