from unfold_note.app.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all in tests
from unfold_note.app.models.user import User  # noqa: F401
from unfold_note.app.models.project import Project  # noqa: F401
from unfold_note.app.models.note import Note  # noqa: F401
from unfold_note.app.models.tag import NoteTag, Tag  # noqa: F401
from unfold_note.app.models.allowed_email import AllowedEmail  # noqa: F401
