from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Iterable
import logging
import threading

log = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_AUTHOR_ID",
    "DEFAULT_TITLE",
    "Note",
    "NoteNotFoundError",
    "NoteStore",
    "NoteStoreError",
    "create_store",
    "seed_notes",
    "serialize_note",
]

DEFAULT_TITLE = "Untitled"
DEFAULT_AUTHOR_ID = "anonymous"


class NoteStoreError(Exception):
    """Base exception for note storage errors."""


class NoteNotFoundError(NoteStoreError):
    """Raised when a boundary needs a note that does not exist."""


@dataclass(frozen=True, slots=True)
class Note:
    id: str
    title: str
    content: str
    author_id: str | None
    created_at: datetime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def serialize_note(note: Note) -> dict[str, Any]:
    return {
        "id": note.id,
        "title": note.title,
        "content": note.content,
        "authorId": note.author_id,
        "createdAt": _to_iso(note.created_at),
    }


def seed_notes() -> list[Note]:
    """Return the notes a fresh public server starts with."""

    return [
        Note(
            id="1",
            title="Welcome Note",
            content="This is a public note that anyone can access.",
            author_id="public",
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        ),
        Note(
            id="2",
            title="Getting Started",
            content="This server has no authentication - all data is public.",
            author_id="public",
            created_at=datetime(2024, 1, 2, tzinfo=timezone.utc),
        ),
    ]


def _clean_title(value: str | None) -> str:
    return value or DEFAULT_TITLE


def _clean_content(value: str | None) -> str:
    return value or ""


def _next_id_after(notes: Iterable[Note]) -> int:
    numeric = [int(note.id) for note in notes if note.id.isdigit()]
    return max(numeric, default=0) + 1


class NoteStore:
    """In-memory, insertion-ordered collection of public notes.

    Ids come from a counter that only moves forward, so a deleted note's id is
    never handed out again. Every operation holds the store lock; the HTTP
    server and the MCP websocket server share one instance across threads.
    """

    def __init__(
        self,
        notes: Iterable[Note] | None = None,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        initial = list(notes or [])
        ids = [note.id for note in initial]
        if len(ids) != len(set(ids)):
            raise ValueError("Initial notes must have unique ids")

        self._notes: list[Note] = initial
        self._next_id = _next_id_after(initial)
        self._clock = clock
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._notes)

    def get(self, note_id: str) -> Note | None:
        log.info("Getting note %s", note_id)
        with self._lock:
            for note in self._notes:
                if note.id == note_id:
                    return note
        return None

    def list(self, author_id: str | None = None) -> list[Note]:
        if author_id:
            log.info("Listing notes filtered by author: %s", author_id)
        else:
            log.info("Listing notes")
        with self._lock:
            return self._filter_by_author(author_id)

    def create(
        self,
        *,
        title: str | None = None,
        content: str | None = None,
        author_id: str | None = None,
    ) -> Note:
        with self._lock:
            note = Note(
                id=str(self._next_id),
                title=_clean_title(title),
                content=_clean_content(content),
                author_id=author_id or DEFAULT_AUTHOR_ID,
                created_at=self._clock(),
            )
            self._next_id += 1
            self._notes.append(note)

        log.info("Created note %s by %s", note.id, note.author_id)
        return note

    def delete(self, note_id: str) -> bool:
        log.info("Deleting note %s", note_id)
        with self._lock:
            for index, note in enumerate(self._notes):
                if note.id == note_id:
                    del self._notes[index]
                    return True
        return False

    def search(self, query: str, author_id: str | None = None) -> list[Note]:
        if author_id:
            log.info("Searching notes for %r filtered by author: %s", query, author_id)
        else:
            log.info("Searching notes for %r", query)

        needle = query.lower()
        with self._lock:
            candidates = self._filter_by_author(author_id)

        return [
            note
            for note in candidates
            if needle in note.title.lower() or needle in note.content.lower()
        ]

    def _filter_by_author(self, author_id: str | None) -> list[Note]:
        if not author_id:
            return list(self._notes)
        return [note for note in self._notes if note.author_id == author_id]


def create_store(*, seed: bool = True) -> NoteStore:
    """Build the process-wide store, optionally with the welcome notes."""

    return NoteStore(seed_notes() if seed else None)
