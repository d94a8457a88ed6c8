"""Turns a recording into a saved note: upload, transcribe, summarize, align, persist."""

import asyncio
import re
import time
import unicodedata
from datetime import datetime, timezone
from pathlib import Path
from typing import Awaitable, Callable, List, Optional

from autonote.config import Config
from autonote.models import SUCCESS_STATUSES, Note, Summary, WordTimestamp
from autonote.poller import poll_transcript
from autonote.storage import NoteStore
from autonote.summarizer import summarize
from autonote.timeline import estimate_keyword_times, sort_timeline


# Processing steps, in order, as shown to the user
UPLOADING = 0
TRANSCRIBING = 1
SUMMARIZING = 2
SAVING = 3
DONE = 4

STEP_LABELS = [
    "Uploading audio...",
    "Transcribing...",
    "Generating summary...",
    "Saving note...",
]

EMPTY_TRANSCRIPT_SUMMARY = "Empty transcript received from Speechmatics."
FAILED_SUMMARY = "Summary unavailable (summarization error)."


def fallback_title_from_file_name(file_name: Optional[str]) -> str:
    """Title derived from the recording name, or a dated default for generic names."""
    stem = Path(file_name).stem if file_name else ''
    if stem and stem.lower() != 'recording':
        return stem
    return f"Audio note {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}"


def slugify_title(title: str) -> str:
    """Convert a title to an ASCII, filesystem-safe slug."""
    text = unicodedata.normalize('NFD', title)
    text = ''.join(c for c in text if not unicodedata.combining(c))
    text = re.sub(r'[^a-zA-Z0-9]+', '-', text)
    text = re.sub(r'-{2,}', '-', text).strip('-')
    return (text or 'note').lower()[:60]


def rename_recording(audio_path: Path, title: str) -> Path:
    """
    Move the recording next to itself under a name built from the note title.

    Returns the new path, or the original one if the move fails.
    """
    extension = audio_path.suffix.lstrip('.') or 'm4a'
    target = audio_path.with_name(f"{slugify_title(title)}-{int(time.time() * 1000)}.{extension}")
    try:
        return audio_path.rename(target)
    except OSError as e:
        print(f"⚠ Could not rename recording: {e}")
        return audio_path


def probe_duration(audio_path: Path) -> float:
    """Length of the recording in seconds (0 if it cannot be decoded)."""
    try:
        from pydub import AudioSegment

        return len(AudioSegment.from_file(str(audio_path))) / 1000.0
    except Exception as e:
        print(f"⚠ Could not read audio duration: {e}")
        return 0.0


async def _summarize_safely(
    summarize_fn: Callable[[str, List[WordTimestamp]], Summary],
    transcript_text: str,
    timeline: List[WordTimestamp],
) -> Summary:
    if not transcript_text:
        return Summary(summary=EMPTY_TRANSCRIPT_SUMMARY)
    try:
        return await asyncio.to_thread(summarize_fn, transcript_text, timeline)
    except Exception as e:
        print(f"⚠ Summary failed: {str(e)}")
        print("Continuing without summary...")
        return Summary(summary=FAILED_SUMMARY)


async def process_recording(
    audio_path: Path,
    client,
    store: Optional[NoteStore] = None,
    summarize_fn: Callable[[str, List[WordTimestamp]], Summary] = summarize,
    on_step: Optional[Callable[[int], None]] = None,
    on_status: Optional[Callable[[str], None]] = None,
    language: Optional[str] = None,
    duration: Optional[float] = None,
    rename: bool = True,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> Note:
    """
    Process one recording end to end and persist the resulting note.

    Transcription errors propagate to the caller. A failing summary does not:
    the note is still saved with the transcript and a placeholder summary.

    Args:
        audio_path: Path to the recording
        client: SpeechmaticsClient (or any object with the same methods)
        store: Note store to save into (Config.NOTES_PATH when omitted)
        summarize_fn: Function mapping (transcript, timeline) to a Summary
        on_step: Called with each processing step index (UPLOADING ... DONE)
        on_status: Called with each job status while polling
        language: Transcription language (Config.LANGUAGE when omitted)
        duration: Recording length in seconds (probed from the file when omitted)
        rename: Rename the recording after the note title
        sleep: Awaitable used between polls

    Returns:
        The saved Note
    """
    audio_path = Path(audio_path)
    store = store or NoteStore()

    def step(index: int) -> None:
        if on_step:
            on_step(index)

    def status_changed(status: str) -> None:
        if on_status:
            on_status(status)
        step(SUMMARIZING if status in SUCCESS_STATUSES else TRANSCRIBING)

    title = fallback_title_from_file_name(audio_path.name)
    if duration is None:
        duration = await asyncio.to_thread(probe_duration, audio_path)

    step(UPLOADING)
    job_id = await asyncio.to_thread(client.submit_job, audio_path, language or Config.LANGUAGE)
    print(f"✓ Uploaded, job id: {job_id}")

    step(TRANSCRIBING)
    result = await poll_transcript(
        client,
        job_id,
        on_status=status_changed,
        max_attempts=Config.MAX_POLL_ATTEMPTS,
        interval=Config.POLL_INTERVAL,
        sleep=sleep,
    )
    timeline = sort_timeline(result.timeline) if Config.SORT_TIMELINE else result.timeline
    print(f"✓ Transcription complete: {len(timeline)} words")

    step(SUMMARIZING)
    summary = await _summarize_safely(summarize_fn, result.transcript_text, timeline)
    if summary.title and summary.title.strip():
        title = summary.title.strip()

    step(SAVING)
    if rename:
        audio_path = await asyncio.to_thread(rename_recording, audio_path, title)
    now = datetime.now(timezone.utc)
    note = Note(
        id=f"note-{int(now.timestamp() * 1000)}",
        title=title,
        audio_path=str(audio_path),
        duration=float(duration or 0),
        date=now.isoformat(),
        transcript=result.transcript_text,
        summary=summary.summary,
        key_points=list(summary.key_points),
        action_items=list(summary.action_items),
        timeline=list(timeline),
        timed_keywords=estimate_keyword_times(summary.key_points, timeline),
    )
    await asyncio.to_thread(store.add_note, note)
    print(f"✓ Note saved: {note.title}")

    step(DONE)
    return note
