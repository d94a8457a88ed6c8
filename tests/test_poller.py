"""Behavior tests for job polling."""

import asyncio

import pytest

from autonote.errors import JobFailedError, JobStillProcessingError, SpeechmaticsAPIError
from autonote.models import TranscriptionJob, WordTimestamp
from autonote.poller import poll_transcript


class FakeClient:
    """Replays a fixed sequence of job states."""

    def __init__(self, statuses, transcript=None, error=None):
        self.statuses = list(statuses)
        self.transcript = transcript if transcript is not None else {"results": []}
        self.error = error
        self.status_calls = 0
        self.transcript_calls = 0

    def get_job_status(self, job_id):
        status = self.statuses[min(self.status_calls, len(self.statuses) - 1)]
        self.status_calls += 1
        return TranscriptionJob(id=job_id, status=status, error=self.error)

    def get_job_transcript(self, job_id):
        self.transcript_calls += 1
        return self.transcript


class SleepRecorder:
    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


def _poll(client, **kwargs):
    kwargs.setdefault("sleep", SleepRecorder())
    return asyncio.run(poll_transcript(client, "job-1", **kwargs))


def test_poll_reaches_done_after_queued_and_running() -> None:
    """Each status is reported once and the transcript is fetched exactly once."""
    transcript = {"results": [{"alternatives": [{"content": "hello"}], "start_time": 1.0, "end_time": 1.5}]}
    client = FakeClient(["queued", "running", "done"], transcript=transcript)
    seen = []
    sleep = SleepRecorder()

    result = _poll(client, on_status=seen.append, sleep=sleep, interval=3.0)

    assert client.status_calls == 3
    assert seen == ["queued", "running", "done"]
    assert client.transcript_calls == 1
    assert sleep.calls == [3.0, 3.0]
    assert result.transcript_raw is transcript
    assert result.transcript_text == "hello"
    assert result.timeline == [WordTimestamp("hello", 1.0, 1.5)]


def test_complete_status_is_terminal_success() -> None:
    client = FakeClient(["complete"], transcript={"results": [{"words": [{"word": "a"}, {"word": "b"}]}]})

    result = _poll(client)

    assert result.transcript_text == "a b"
    assert client.status_calls == 1


def test_poll_gives_up_after_max_attempts() -> None:
    """A job stuck in running raises the still-processing error."""
    client = FakeClient(["running"])
    sleep = SleepRecorder()

    with pytest.raises(JobStillProcessingError):
        _poll(client, max_attempts=3, sleep=sleep)

    assert client.status_calls == 3
    assert client.transcript_calls == 0
    assert len(sleep.calls) == 2


def test_failed_job_raises_reason_immediately() -> None:
    client = FakeClient(["failed"], error="bad audio")

    with pytest.raises(JobFailedError) as excinfo:
        _poll(client)

    assert str(excinfo.value) == "bad audio"
    assert excinfo.value.reason == "bad audio"
    assert client.status_calls == 1


def test_rejected_job_without_reason_uses_generic_message() -> None:
    client = FakeClient(["rejected"])

    with pytest.raises(JobFailedError, match="Speechmatics job failed"):
        _poll(client)


def test_still_processing_is_distinct_from_job_failure() -> None:
    assert not issubclass(JobStillProcessingError, JobFailedError)
    assert not issubclass(JobFailedError, JobStillProcessingError)


def test_unknown_status_keeps_polling() -> None:
    client = FakeClient(["", "accepted", "done"])

    _poll(client)

    assert client.status_calls == 3


def test_empty_transcript_returns_empty_text() -> None:
    client = FakeClient(["done"], transcript={"results": []})

    result = _poll(client)

    assert result.transcript_text == ""
    assert result.timeline == []


def test_client_errors_propagate() -> None:
    class BrokenClient(FakeClient):
        def get_job_status(self, job_id):
            raise SpeechmaticsAPIError("unauthorized", status_code=401)

    with pytest.raises(SpeechmaticsAPIError):
        _poll(BrokenClient(["done"]))


def test_invalid_max_attempts() -> None:
    with pytest.raises(ValueError):
        _poll(FakeClient(["done"]), max_attempts=0)


def test_independent_polls_can_run_concurrently() -> None:
    async def run_both():
        first = FakeClient(["running", "done"], transcript={"text": "one"})
        second = FakeClient(["done"], transcript={"text": "two"})
        return await asyncio.gather(
            poll_transcript(first, "a", sleep=SleepRecorder()),
            poll_transcript(second, "b", sleep=SleepRecorder()),
        )

    first, second = asyncio.run(run_both())

    assert (first.transcript_text, second.transcript_text) == ("one", "two")
