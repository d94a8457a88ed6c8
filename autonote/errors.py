"""Error types raised by the transcription pipeline."""

from typing import Optional


class TranscriptionError(RuntimeError):
    """Base class for transcription job failures."""


class SpeechmaticsAPIError(TranscriptionError):
    """The Speechmatics API answered with an error or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class JobSubmissionError(SpeechmaticsAPIError):
    """Uploading the audio file or creating the job failed."""


class JobFailedError(TranscriptionError):
    """The job reached a failed or rejected state."""

    def __init__(self, reason: Optional[str] = None):
        self.reason = reason or "Speechmatics job failed"
        super().__init__(self.reason)


class JobStillProcessingError(TranscriptionError):
    """The job did not finish within the allowed number of polls."""


class SummarizationError(RuntimeError):
    """The summary could not be generated."""


class NoteStoreError(RuntimeError):
    """The notes file exists but cannot be read, so it must not be overwritten."""
