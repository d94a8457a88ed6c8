"""Polling of Speechmatics jobs until a transcript is available."""

import asyncio
from typing import Awaitable, Callable, Optional

from autonote.errors import JobFailedError, JobStillProcessingError
from autonote.models import TranscriptResult
from autonote.normalizer import join_words, normalize


async def poll_transcript(
    client,
    job_id: str,
    on_status: Optional[Callable[[str], None]] = None,
    max_attempts: int = 20,
    interval: float = 3.0,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> TranscriptResult:
    """
    Poll a transcription job until it finishes, then fetch and normalize its transcript.

    The wait between attempts is fixed. Client calls are blocking HTTP requests
    and run in a worker thread so other tasks keep running meanwhile.

    Args:
        client: Object exposing get_job_status(job_id) and get_job_transcript(job_id)
        job_id: Id returned when the job was submitted
        on_status: Optional callback receiving each status as it is fetched
        max_attempts: Number of status fetches before giving up
        interval: Seconds to wait between attempts
        sleep: Awaitable used for waiting (tests pass a no-op)

    Returns:
        TranscriptResult with the raw payload, transcript text and word timeline

    Raises:
        JobFailedError: If the job is failed or rejected
        JobStillProcessingError: If the job is still running after max_attempts
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    for attempt in range(max_attempts):
        job = await asyncio.to_thread(client.get_job_status, job_id)
        if on_status:
            on_status(job.status)

        if job.succeeded:
            transcript_raw = await asyncio.to_thread(client.get_job_transcript, job_id)
            normalized = normalize(transcript_raw)
            transcript_text = normalized.text
            if not transcript_text and normalized.timeline:
                transcript_text = join_words(normalized.timeline)
            return TranscriptResult(
                transcript_raw=transcript_raw,
                transcript_text=transcript_text or "",
                timeline=normalized.timeline,
            )

        if job.failed:
            raise JobFailedError(job.error)

        if attempt < max_attempts - 1:
            await sleep(interval)

    raise JobStillProcessingError(
        f"Speechmatics transcription still processing after {max_attempts} attempts, try again in a moment."
    )
