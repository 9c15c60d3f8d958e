"""Tests for study notes."""
from scholar_chronicle.notes import add_note, delete_note, get_notes, get_notes_by_subject, is_drive_url

DRIVE_URL = "https://drive.google.com/file/d/abc123/view"


def test_is_drive_url():
    assert is_drive_url(DRIVE_URL)
    assert not is_drive_url("https://example.com/notes.pdf")


def test_add_note(store):
    note = add_note(store, "SHM summary", "physics", "Circular motion and Simple Harmonic Motion", DRIVE_URL)
    assert note.id
    assert note.date_added
    assert get_notes(store) == [note]


def test_add_note_rejects_missing_fields_and_foreign_urls(store):
    assert add_note(store, "", "physics", "Waves", DRIVE_URL) is None
    assert add_note(store, "Title", "physics", "Waves", "https://example.com/x") is None
    assert get_notes(store) == []


def test_delete_note(store):
    note = add_note(store, "SHM summary", "physics", "Waves", DRIVE_URL)
    assert delete_note(store, note.id) is True
    assert get_notes(store) == []
    assert delete_note(store, note.id) is False


def test_get_notes_by_subject(store):
    add_note(store, "A", "physics", "Waves", DRIVE_URL)
    add_note(store, "B", "mathematics", "Proof techniques", DRIVE_URL)
    notes = get_notes(store)
    assert [n.title for n in get_notes_by_subject(notes, "Physics")] == ["A"]
