# SQLAlchemy models package. Importing it registers every table on Base.metadata.
from modules.backend.models.base import Base
from modules.backend.models.note import Note
from modules.backend.models.tag import NoteTag, Tag
from modules.backend.models.user import User

__all__ = [
    "Base",
    "Note",
    "NoteTag",
    "Tag",
    "User",
]
