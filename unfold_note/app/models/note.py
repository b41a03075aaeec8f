"""Note model for Unfold Note projects."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from unfold_note.app.core.time import utc_now
from unfold_note.app.db.base_class import Base


class Note(Base):
    __tablename__ = "notes"

    id = Column(Integer, primary_key=True, index=True)
    url_id = Column(String(15), unique=True, index=True, nullable=False)
    title = Column(String, nullable=False, default="")
    content = Column(Text, nullable=False, default="")
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    thumbnail_url = Column(String(1024), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now, index=True)

    project = relationship("Project", back_populates="notes")
    note_tags = relationship("NoteTag", back_populates="note", cascade="all, delete-orphan")
