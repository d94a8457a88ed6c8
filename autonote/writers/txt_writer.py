"""Writer for TXT format with timestamps."""

from pathlib import Path
from autonote.models import Note
from autonote.timeline import chunk_timeline


def format_seconds(seconds: float) -> str:
    """Format seconds as HH:MM:SS."""
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def write_txt(note: Note, output_path: Path, chunk_size: int = 8) -> None:
    """
    Write the transcript to a TXT file, one timeline chunk per line.

    Format: [HH:MM:SS] text
    Notes without a timeline get the plain transcript instead.
    """
    with open(output_path, 'w', encoding='utf-8') as f:
        if not note.timeline:
            f.write(f"{note.transcript}\n")
            return
        for chunk in chunk_timeline(note.timeline, chunk_size):
            f.write(f"[{format_seconds(chunk.start)}] {chunk.text}\n")
