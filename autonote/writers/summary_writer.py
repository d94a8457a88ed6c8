"""Writer for the note summary as Markdown."""

from pathlib import Path
from autonote.models import Note


def format_clock(seconds: float) -> str:
    """Format seconds as M:SS."""
    total = max(0, int(seconds or 0))
    return f"{total // 60}:{total % 60:02d}"


def write_summary(note: Note, output_path: Path) -> None:
    """
    Write title, summary, key points, actions and keyword times to a Markdown file.

    Args:
        note: The processed note
        output_path: Path where the summary will be saved
    """
    lines = [f"# {note.title}", "", note.summary, ""]

    if note.key_points:
        lines += ["## Key points", ""] + [f"- {point}" for point in note.key_points] + [""]
    if note.action_items:
        lines += ["## Actions", ""] + [f"- [ ] {action}" for action in note.action_items] + [""]
    if note.timed_keywords:
        lines += ["## Keywords", ""]
        lines += [f"- {format_clock(k.time)} {k.keyword}" for k in note.timed_keywords]
        lines.append("")

    with open(output_path, 'w', encoding='utf-8') as f:
        f.write("\n".join(lines))
