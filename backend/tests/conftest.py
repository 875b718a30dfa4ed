import sys
from pathlib import Path

import pytest

BACKEND_ROOT = Path(__file__).resolve().parents[1]
BACKEND_PATH = str(BACKEND_ROOT)
if BACKEND_PATH not in sys.path:
    sys.path.insert(0, BACKEND_PATH)

from notes_backend.notes.service import NoteStore, seed_notes  # noqa: E402


@pytest.fixture
def seeded_store() -> NoteStore:
    """A fresh store holding only the two welcome notes."""
    return NoteStore(seed_notes())
