"""Behavior tests for note export writers."""

import json

from autonote.models import Note, TimedKeyword, WordTimestamp
from autonote.writers.json_writer import write_json
from autonote.writers.summary_writer import format_clock, write_summary
from autonote.writers.txt_writer import format_seconds, write_txt


def _note(**fields):
    base = dict(id="note-1", title="Sync", audio_path="a.m4a", duration=5.0, date="2026-01-01T00:00:00+00:00")
    base.update(fields)
    return Note(**base)


def test_format_helpers() -> None:
    assert format_seconds(3725.4) == "01:02:05"
    assert format_clock(65.9) == "1:05"
    assert format_clock(-3) == "0:00"


def test_txt_writer_writes_one_chunk_per_line(tmp_path) -> None:
    timeline = [WordTimestamp(f"w{i}", float(i * 10), float(i * 10) + 1) for i in range(5)]
    path = tmp_path / "transcript.txt"

    write_txt(_note(timeline=timeline), path, chunk_size=2)

    assert path.read_text(encoding="utf-8").splitlines() == [
        "[00:00:00] w0 w1",
        "[00:00:20] w2 w3",
        "[00:00:40] w4",
    ]


def test_txt_writer_without_timeline_writes_transcript(tmp_path) -> None:
    path = tmp_path / "transcript.txt"

    write_txt(_note(transcript="plain text"), path)

    assert path.read_text(encoding="utf-8") == "plain text\n"


def test_json_writer_round_trips(tmp_path) -> None:
    note = _note(timeline=[WordTimestamp("é", 0.1, 0.2)])
    path = tmp_path / "note.json"

    write_json(note, path)

    assert Note.from_dict(json.loads(path.read_text(encoding="utf-8"))) == note


def test_summary_writer_sections(tmp_path) -> None:
    note = _note(summary="Short summary.", key_points=["Point"], action_items=["Do it"],
                 timed_keywords=[TimedKeyword("Point", 75.0)])
    path = tmp_path / "summary.md"

    write_summary(note, path)
    content = path.read_text(encoding="utf-8")

    assert content.startswith("# Sync\n\nShort summary.")
    assert "## Key points\n\n- Point" in content
    assert "- [ ] Do it" in content
    assert "- 1:15 Point" in content
