"""Data models for timelines, transcription jobs and notes."""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def to_number(value: Any) -> float:
    """
    Coerce a JSON value to seconds the way JavaScript's Number() does.

    Numeric strings parse (including 0x/0o/0b literals), booleans are 0/1,
    and anything non-numeric or non-finite becomes 0.
    """
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text or '_' in text:
            return 0.0
        try:
            if text[:2].lower() in ('0x', '0o', '0b'):
                number = float(int(text, 0))
            else:
                number = float(text)
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def _text(value: Any) -> str:
    if value is None:
        return ''
    return value if isinstance(value, str) else str(value)


def _text_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [_text(item) for item in value if item is not None]


# Job states reported by the transcription service
QUEUED = "queued"
RUNNING = "running"
DONE = "done"
COMPLETE = "complete"
FAILED = "failed"
REJECTED = "rejected"

SUCCESS_STATUSES = (DONE, COMPLETE)
FAILURE_STATUSES = (FAILED, REJECTED)


@dataclass(frozen=True)
class WordTimestamp:
    """A single recognized word with timing information."""
    word: str
    start: float  # Start time in seconds
    end: float    # End time in seconds

    @classmethod
    def create(cls, word: str, start: float, end: float) -> "WordTimestamp":
        """Build a word, clamping times so that end >= start >= 0."""
        start = max(0.0, start)
        return cls(word=word, start=start, end=max(start, end))

    def to_dict(self) -> Dict[str, Any]:
        return {'word': self.word, 'start': self.start, 'end': self.end}


@dataclass
class TranscriptionJob:
    """Handle on a job tracked by the transcription service."""
    id: str
    status: str
    error: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.status in SUCCESS_STATUSES

    @property
    def failed(self) -> bool:
        return self.status in FAILURE_STATUSES

    @classmethod
    def from_response(cls, job_id: str, payload: Any) -> "TranscriptionJob":
        """
        Build a job from a status endpoint response.

        The service nests details under "job"; older responses put them at the top level.
        """
        payload = payload if isinstance(payload, dict) else {}
        job = payload.get('job') if isinstance(payload.get('job'), dict) else {}

        status = job.get('status') or payload.get('status') or ''
        error = job.get('error') or payload.get('error')
        if not error:
            errors = job.get('errors') or payload.get('errors')
            if isinstance(errors, list) and errors:
                first = errors[0]
                error = first.get('message') if isinstance(first, dict) else first

        return cls(
            id=str(job.get('id') or job_id),
            status=str(status),
            error=str(error) if error else None,
            raw=payload,
        )


@dataclass(frozen=True)
class TimelineChunk:
    """A display-sized group of consecutive timeline words."""
    text: str
    start: float


@dataclass(frozen=True)
class TimedKeyword:
    """A keyword phrase with its estimated position in the recording."""
    keyword: str
    time: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {'keyword': self.keyword, 'time': self.time}


@dataclass
class TranscriptResult:
    """Output of a completed transcription job."""
    transcript_raw: Any
    transcript_text: str
    timeline: List[WordTimestamp] = field(default_factory=list)


@dataclass
class Summary:
    """Structured summary of a transcript."""
    title: str = ""
    summary: str = ""
    key_points: List[str] = field(default_factory=list)
    action_items: List[str] = field(default_factory=list)
    timed_keywords: List[TimedKeyword] = field(default_factory=list)


@dataclass
class Note:
    """A processed recording as persisted in the note store."""
    id: str
    title: str
    audio_path: str
    duration: float
    date: str  # ISO-8601
    transcript: str = ""
    summary: str = ""
    key_points: List[str] = field(default_factory=list)
    action_items: List[str] = field(default_factory=list)
    notes: str = ""
    timeline: List[WordTimestamp] = field(default_factory=list)
    timed_keywords: List[TimedKeyword] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'audio_path': self.audio_path,
            'duration': self.duration,
            'date': self.date,
            'transcript': self.transcript,
            'summary': self.summary,
            'key_points': list(self.key_points),
            'action_items': list(self.action_items),
            'notes': self.notes,
            'timeline': [w.to_dict() for w in self.timeline],
            'timed_keywords': [k.to_dict() for k in self.timed_keywords],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Note":
        """
        Rebuild a note from its stored form.

        Missing fields get defaults and malformed values are coerced field by
        field, so one bad value never makes the whole note unreadable.
        """
        timeline = data.get('timeline')
        timeline = [
            WordTimestamp.create(_text(w.get('word')), to_number(w.get('start')), to_number(w.get('end')))
            for w in (timeline if isinstance(timeline, list) else [])
            if isinstance(w, dict)
        ]
        timed_keywords = data.get('timed_keywords')
        timed_keywords = [
            TimedKeyword(keyword=_text(k.get('keyword')), time=to_number(k.get('time')))
            for k in (timed_keywords if isinstance(timed_keywords, list) else [])
            if isinstance(k, dict)
        ]
        return cls(
            id=_text(data.get('id')),
            title=_text(data.get('title')),
            audio_path=_text(data.get('audio_path')),
            duration=to_number(data.get('duration')),
            date=_text(data.get('date')),
            transcript=_text(data.get('transcript')),
            summary=_text(data.get('summary')),
            key_points=_text_list(data.get('key_points')),
            action_items=_text_list(data.get('action_items')),
            notes=_text(data.get('notes')),
            timeline=timeline,
            timed_keywords=timed_keywords,
        )
