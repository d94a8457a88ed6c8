"""
Normalization of Speechmatics transcript payloads.

The transcript endpoint has returned several shapes across API versions:
json-v2 results carrying `alternatives` with per-result timing, results with a
flat `words` array, and results nesting another `results` list. Everything
here is pure and tolerant: unknown shapes produce an empty timeline and an
empty transcript instead of an exception.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from autonote.models import WordTimestamp, to_number


@dataclass
class NormalizedPayload:
    """Word timeline and transcript text extracted from one payload."""
    timeline: List[WordTimestamp] = field(default_factory=list)
    text: str = ""


def _first_present(item: Dict[str, Any], *keys: str) -> Any:
    """Value of the first key that is present and not null."""
    for key in keys:
        value = item.get(key)
        if value is not None:
            return value
    return None


def _as_word(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _word_entry(entry: Dict[str, Any]) -> WordTimestamp:
    return WordTimestamp.create(
        _as_word(_first_present(entry, 'word', 'text')),
        to_number(_first_present(entry, 'start_time', 'start')),
        to_number(_first_present(entry, 'end_time', 'end')),
    )


def _map_words(words: List[Any]) -> List[WordTimestamp]:
    return [_word_entry(w) for w in words if isinstance(w, dict)]


# --- Timeline extractors -----------------------------------------------------
# Each takes one element of `results` and returns None when its shape doesn't apply.

def _from_direct_words(element: Dict[str, Any]) -> Optional[List[WordTimestamp]]:
    words = element.get('words')
    if not isinstance(words, list):
        return None
    return _map_words(words)


def _from_nested_results(element: Dict[str, Any]) -> Optional[List[WordTimestamp]]:
    nested = element.get('results')
    if not isinstance(nested, list) or not nested or not isinstance(nested[0], dict):
        return None
    words = nested[0].get('words')
    if not isinstance(words, list):
        return None
    return _map_words(words)


def _from_alternatives(element: Dict[str, Any]) -> Optional[List[WordTimestamp]]:
    alternatives = element.get('alternatives')
    if not isinstance(alternatives, list):
        return None

    parent_start = _first_present(element, 'start_time', 'start')
    parent_end = _first_present(element, 'end_time', 'end')
    words = []
    for alt in alternatives:
        if not isinstance(alt, dict):
            continue
        word = _as_word(_first_present(alt, 'content', 'word', 'text'))
        if not word:
            continue
        start = _first_present(alt, 'start_time', 'start')
        start = to_number(start if start is not None else parent_start)
        end = _first_present(alt, 'end_time', 'end')
        if end is None:
            end = parent_end
        end = to_number(end) if end is not None else start
        words.append(WordTimestamp.create(word, start, end))
    return words


TIMELINE_EXTRACTORS: List[Callable[[Dict[str, Any]], Optional[List[WordTimestamp]]]] = [
    _from_direct_words,
    _from_nested_results,
    _from_alternatives,
]


def _results_list(raw: Any) -> List[Any]:
    if not isinstance(raw, dict):
        return []
    results = raw.get('results')
    return results if isinstance(results, list) else []


def extract_timeline(raw: Any) -> List[WordTimestamp]:
    """
    Extract the flat word timeline from a transcript payload.

    Each element of `results` is handled by the first extractor that
    recognizes its shape; outputs are concatenated in `results` order.

    Args:
        raw: Decoded JSON returned by the transcript endpoint (any shape)

    Returns:
        List of WordTimestamp in source order (possibly empty)
    """
    timeline: List[WordTimestamp] = []
    for element in _results_list(raw):
        if not isinstance(element, dict):
            continue
        for extractor in TIMELINE_EXTRACTORS:
            words = extractor(element)
            if words is not None:
                timeline.extend(words)
                break
    return timeline


# --- Transcript text candidates ----------------------------------------------

def _path(value: Any, *steps: Any) -> Any:
    """Follow dict keys and list indexes, returning None on any mismatch."""
    for step in steps:
        if isinstance(step, int):
            if not isinstance(value, list) or len(value) <= step:
                return None
        elif not isinstance(value, dict):
            return None
        value = value[step] if isinstance(step, int) else value.get(step)
    return value


def _joined_alternatives(raw: Any) -> str:
    words = []
    for element in _results_list(raw):
        alternatives = element.get('alternatives') if isinstance(element, dict) else None
        if not isinstance(alternatives, list):
            continue
        for alt in alternatives:
            if isinstance(alt, dict):
                word = _as_word(_first_present(alt, 'content', 'word', 'text'))
                if word:
                    words.append(word)
    return " ".join(words).strip()


def _joined_timeline(raw: Any) -> str:
    return " ".join(w.word for w in extract_timeline(raw)).strip()


# Ordered by how reliable each provider shape is; first non-empty string wins.
TEXT_CANDIDATES: List[Callable[[Any], Any]] = [
    lambda raw: _path(raw, 'results', 0, 'alternatives', 0, 'transcript'),
    lambda raw: _path(raw, 'results', 'alternatives', 0, 'transcript'),  # object-shaped results
    lambda raw: _path(raw, 'results', 'transcripts', 0, 'transcript'),
    lambda raw: _path(raw, 'results', 0, 'text'),
    lambda raw: _path(raw, 'results', 0, 'results', 0, 'text'),
    lambda raw: _path(raw, 'text'),
    _joined_alternatives,
    _joined_timeline,
]


def extract_transcript_text(raw: Any) -> str:
    """
    Find the best available transcript string in a payload.

    Args:
        raw: Decoded JSON returned by the transcript endpoint (any shape)

    Returns:
        Transcript text, or an empty string when nothing usable was found
    """
    for candidate in TEXT_CANDIDATES:
        value = candidate(raw)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def join_words(timeline: List[WordTimestamp]) -> str:
    """Rebuild plain text from timeline words."""
    return " ".join(w.word for w in timeline).strip()


def normalize(raw: Any) -> NormalizedPayload:
    """Extract both the word timeline and the transcript text from a payload."""
    timeline = extract_timeline(raw)
    text = extract_transcript_text(raw)
    if not text and timeline:
        text = join_words(timeline)
    return NormalizedPayload(timeline=timeline, text=text)
