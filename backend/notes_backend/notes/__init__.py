from .routes import NOTE_STORE_EXTENSION, notes_bp
from .service import Note, NoteStore, create_store, serialize_note

__all__ = ["NOTE_STORE_EXTENSION", "notes_bp", "Note", "NoteStore", "create_store", "serialize_note"]
