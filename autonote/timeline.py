"""Derived views of a word timeline: display chunks and keyword alignment."""

from typing import Iterable, List

from autonote.models import TimedKeyword, TimelineChunk, WordTimestamp


def chunk_timeline(timeline: List[WordTimestamp], size: int = 8) -> List[TimelineChunk]:
    """
    Group consecutive timeline words into fixed-size chunks.

    Args:
        timeline: Ordered word timeline
        size: Number of words per chunk (the last chunk may be shorter)

    Returns:
        List of TimelineChunk, each starting at its first word
    """
    if size < 1:
        raise ValueError("Chunk size must be at least 1")

    chunks = []
    for i in range(0, len(timeline), size):
        group = timeline[i:i + size]
        chunks.append(TimelineChunk(
            text=" ".join(w.word for w in group),
            start=group[0].start if group else 0.0,
        ))
    return chunks


def estimate_keyword_times(keywords: Iterable[str], timeline: List[WordTimestamp]) -> List[TimedKeyword]:
    """
    Estimate when each keyword phrase was spoken.

    The text before the first space is matched case-insensitively as a
    substring of timeline words; the earliest match wins and unmatched
    phrases get 0. An empty first token matches the first word.
    """
    lowered = [(w.word.lower(), w.start) for w in timeline]

    timed = []
    for keyword in keywords:
        key = keyword.lower().split(' ')[0]
        time = next((start for word, start in lowered if key in word), 0.0)
        timed.append(TimedKeyword(keyword=keyword, time=time))
    return timed


def sort_timeline(timeline: List[WordTimestamp]) -> List[WordTimestamp]:
    """Return the timeline ordered by start then end time (stable for ties)."""
    return sorted(timeline, key=lambda w: (w.start, w.end))


def timeline_preview(timeline: List[WordTimestamp], limit: int = 12) -> str:
    """Short 'word (start-end) | ...' rendering of the first words."""
    return " | ".join(f"{w.word} ({w.start:.2f}-{w.end:.2f})" for w in timeline[:limit])
