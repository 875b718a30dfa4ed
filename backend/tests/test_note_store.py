import unittest
from datetime import datetime, timezone

from notes_backend.notes.service import (
    DEFAULT_AUTHOR_ID,
    DEFAULT_TITLE,
    Note,
    NoteStore,
    create_store,
    seed_notes,
    serialize_note,
)

FIXED_NOW = datetime(2025, 3, 4, 5, 6, 7, tzinfo=timezone.utc)


def _fixed_clock() -> datetime:
    return FIXED_NOW


class NoteStoreCreateTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = NoteStore(seed_notes(), clock=_fixed_clock)

    def test_create_after_seed_assigns_next_id_and_defaults_author(self):
        note = self.store.create(title="A", content="hello world")
        self.assertEqual(note.id, "3")
        self.assertEqual(note.author_id, DEFAULT_AUTHOR_ID)
        self.assertEqual(note.created_at, FIXED_NOW)
        self.assertIs(self.store.list()[-1], note)

    def test_falsy_fields_fall_back_to_defaults(self):
        note = self.store.create(title="", content=None, author_id="")
        self.assertEqual(note.title, DEFAULT_TITLE)
        self.assertEqual(note.content, "")
        self.assertEqual(note.author_id, "anonymous")

    def test_ids_stay_unique_after_delete(self):
        self.assertTrue(self.store.delete("1"))
        created = [self.store.create(title=f"n{i}") for i in range(3)]
        ids = [note.id for note in self.store.list()]
        self.assertEqual(len(ids), len(set(ids)))
        self.assertEqual([note.id for note in created], ["3", "4", "5"])

    def test_deleting_newest_note_does_not_reuse_its_id(self):
        first = self.store.create(title="first")
        self.store.delete(first.id)
        second = self.store.create(title="second")
        self.assertNotEqual(first.id, second.id)

    def test_empty_store_starts_at_one(self):
        store = NoteStore()
        self.assertEqual(store.create().id, "1")

    def test_duplicate_initial_ids_are_rejected(self):
        note = seed_notes()[0]
        with self.assertRaises(ValueError):
            NoteStore([note, note])

    def test_notes_are_immutable(self):
        note = self.store.create(title="frozen")
        with self.assertRaises(AttributeError):
            note.title = "thawed"  # type: ignore[misc]


class NoteStoreReadTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = NoteStore(seed_notes(), clock=_fixed_clock)
        self.alice_one = self.store.create(title="Groceries", content="Milk and eggs", author_id="alice")
        self.bob = self.store.create(title="Standup", content="Discuss the welcome flow", author_id="bob")
        self.alice_two = self.store.create(title="Trip", content="Pack MILK powder", author_id="alice")

    def test_get_returns_note_or_none(self):
        self.assertIs(self.store.get(self.bob.id), self.bob)
        self.assertIsNone(self.store.get("999"))

    def test_delete_then_get_is_not_found(self):
        self.assertTrue(self.store.delete("1"))
        self.assertIsNone(self.store.get("1"))

    def test_delete_missing_reports_false(self):
        self.assertFalse(self.store.delete("999"))
        self.assertEqual(len(self.store), 5)

    def test_list_preserves_creation_order(self):
        self.assertEqual(
            [note.id for note in self.store.list()],
            ["1", "2", self.alice_one.id, self.bob.id, self.alice_two.id],
        )

    def test_list_filters_by_author(self):
        self.assertEqual(self.store.list("alice"), [self.alice_one, self.alice_two])
        self.assertEqual(self.store.list("nobody"), [])

    def test_empty_author_filter_lists_everything(self):
        self.assertEqual(len(self.store.list("")), 5)

    def test_search_matches_seed_title_case_insensitively(self):
        results = self.store.search("WELCOME")
        self.assertEqual([note.title for note in results], ["Welcome Note", "Standup"])

    def test_search_matches_content_within_author(self):
        self.assertEqual(self.store.search("milk", "alice"), [self.alice_one, self.alice_two])
        self.assertEqual(self.store.search("welcome", "alice"), [])

    def test_search_results_are_subset_of_list(self):
        for author in (None, "alice", "bob", "public"):
            listed = self.store.list(author)
            for note in self.store.search("e", author):
                self.assertIn(note, listed)

    def test_empty_query_matches_all_candidates(self):
        self.assertEqual(self.store.search("", "public"), self.store.list("public"))


class SerializeNoteTests(unittest.TestCase):
    def test_uses_wire_keys_and_iso_timestamp(self):
        note = Note(
            id="7",
            title="Title",
            content="Body",
            author_id="carol",
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        self.assertEqual(
            serialize_note(note),
            {
                "id": "7",
                "title": "Title",
                "content": "Body",
                "authorId": "carol",
                "createdAt": "2024-01-01T00:00:00+00:00",
            },
        )

    def test_naive_timestamps_are_treated_as_utc(self):
        note = Note(id="8", title="t", content="", author_id=None, created_at=datetime(2024, 5, 1, 12, 0))
        self.assertEqual(serialize_note(note)["createdAt"], "2024-05-01T12:00:00+00:00")


def test_create_store_without_seed_is_empty():
    assert len(create_store(seed=False)) == 0
    assert [note.id for note in create_store().list()] == ["1", "2"]


def test_seeded_store_continues_numbering(seeded_store):
    assert seeded_store.create(title="A", content="hello world").id == "3"
    assert seeded_store.delete("1") is True
    assert seeded_store.get("1") is None
    assert seeded_store.delete("999") is False


if __name__ == "__main__":
    unittest.main()
