"""Writer for JSON format."""

import json
from pathlib import Path
from autonote.models import Note


def write_json(note: Note, output_path: Path) -> None:
    """Write a note, including its word timeline, to a JSON file."""
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(note.to_dict(), f, indent=2, ensure_ascii=False)
