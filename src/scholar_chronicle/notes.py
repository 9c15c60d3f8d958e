"""Study notes stored as links to Google Drive documents."""
import logging
import uuid
from datetime import datetime, timezone

from scholar_chronicle.config import AppConfig, get_config
from scholar_chronicle.db import read_records, write_records
from scholar_chronicle.models import Note

logger = logging.getLogger(__name__)


def is_drive_url(url: str) -> bool:
    return "drive.google.com" in url


def get_notes(db_path: str, config: AppConfig | None = None) -> list[Note]:
    config = config or get_config()
    return read_records(db_path, config.slot("notes"), Note.from_dict)


def add_note(
    db_path: str, title: str, subject: str, topic: str, url: str, config: AppConfig | None = None
) -> Note | None:
    config = config or get_config()
    if not all(v and v.strip() for v in (title, subject, topic, url)):
        logger.warning("Rejected note: all fields are required")
        return None
    if not is_drive_url(url):
        logger.warning("Rejected note %r: not a Google Drive URL", title)
        return None
    note = Note(
        id=uuid.uuid4().hex,
        title=title.strip(),
        subject=subject,
        topic=topic,
        url=url.strip(),
        date_added=datetime.now(timezone.utc).isoformat(),
    )
    notes = get_notes(db_path, config)
    notes.append(note)
    if not write_records(db_path, config.slot("notes"), notes, Note.from_dict):
        return None
    return note


def delete_note(db_path: str, note_id: str, config: AppConfig | None = None) -> bool:
    config = config or get_config()
    notes = get_notes(db_path, config)
    remaining = [n for n in notes if n.id != note_id]
    if len(remaining) == len(notes):
        return False
    return write_records(db_path, config.slot("notes"), remaining, Note.from_dict)


def get_notes_by_subject(notes: list[Note], subject: str) -> list[Note]:
    return [n for n in notes if n.subject.lower() == subject.lower()]
