"""JSON file store for processed notes."""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from autonote.config import Config
from autonote.errors import NoteStoreError
from autonote.models import Note


class NoteStore:
    """Keeps every note in a single JSON file, newest first."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else Config.NOTES_PATH

    def _read(self) -> List[Note]:
        """Read all notes, raising NoteStoreError if the file is unreadable."""
        if not self.path.exists():
            return []
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise NoteStoreError(f"Could not read notes from {self.path}: {e}") from e
        if not isinstance(data, list):
            raise NoteStoreError(f"Notes file {self.path} does not contain a list")
        return [Note.from_dict(item) for item in data if isinstance(item, dict)]

    def load(self) -> List[Note]:
        """Read all notes; a missing or unreadable file yields an empty list."""
        try:
            return self._read()
        except NoteStoreError as e:
            print(f"⚠ {e}")
            return []

    def save(self, notes: List[Note]) -> None:
        """Write all notes, replacing the file only once the new content is complete."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data: List[Dict[str, Any]] = [note.to_dict() for note in notes]
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except BaseException:
            os.unlink(tmp_name)
            raise

    # Mutations read strictly: an unreadable file raises instead of being replaced.

    def add_note(self, note: Note) -> List[Note]:
        notes = sorted([note] + self._read(), key=lambda n: n.date, reverse=True)
        self.save(notes)
        return notes

    def update_note(self, note_id: str, **changes: Any) -> Optional[Note]:
        """Apply field changes to one note. Returns the updated note, or None if unknown."""
        notes = self._read()
        updated = None
        for note in notes:
            if note.id == note_id:
                for key, value in changes.items():
                    if not hasattr(note, key) or key == 'id':
                        raise AttributeError(f"Note has no editable field '{key}'")
                    setattr(note, key, value)
                updated = note
        if updated is not None:
            self.save(notes)
        return updated

    def delete_note(self, note_id: str) -> bool:
        notes = self._read()
        remaining = [note for note in notes if note.id != note_id]
        if len(remaining) == len(notes):
            return False
        self.save(remaining)
        return True

    def get_note(self, note_id: str) -> Optional[Note]:
        return next((note for note in self.load() if note.id == note_id), None)
