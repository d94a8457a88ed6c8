"""Behavior tests for the Speechmatics client with a fake HTTP session."""

import json

import pytest
import requests

from autonote.errors import JobSubmissionError, SpeechmaticsAPIError
from autonote.models import TranscriptionJob
from autonote.speechmatics import SpeechmaticsClient


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self.payload = payload
        self.text = text

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self.payload is None:
            raise ValueError("no json")
        return self.payload


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response or FakeResponse()
        self.exc = exc
        self.requests = []

    def _handle(self, method, url, **kwargs):
        files = kwargs.get("files")
        if files:
            name, handle, mime = files["data_file"]
            kwargs["files"] = {"data_file": (name, handle.read(), mime)}
        self.requests.append((method, url, kwargs))
        if self.exc:
            raise self.exc
        return self.response

    def post(self, url, **kwargs):
        return self._handle("POST", url, **kwargs)

    def get(self, url, **kwargs):
        return self._handle("GET", url, **kwargs)


def _client(session):
    return SpeechmaticsClient(api_key="secret", base_url="https://sm.test/v2/", session=session)


def test_missing_api_key_is_rejected() -> None:
    with pytest.raises(ValueError):
        SpeechmaticsClient(api_key="", session=FakeSession())


def test_submit_job_posts_config_and_audio(tmp_path) -> None:
    audio = tmp_path / "meeting.WAV"
    audio.write_bytes(b"RIFF")
    session = FakeSession(FakeResponse(201, {"id": "abc123"}))

    job_id = _client(session).submit_job(audio, language="en")

    assert job_id == "abc123"
    method, url, kwargs = session.requests[0]
    assert (method, url) == ("POST", "https://sm.test/v2/jobs/")
    assert kwargs["headers"]["Authorization"] == "Bearer secret"
    assert json.loads(kwargs["data"]["config"]) == {
        "type": "transcription",
        "transcription_config": {"language": "en"},
    }
    assert kwargs["files"]["data_file"] == ("recording.wav", b"RIFF", "audio/wav")


def test_submit_job_uses_m4a_for_other_files(tmp_path) -> None:
    audio = tmp_path / "memo.m4a"
    audio.write_bytes(b"data")
    session = FakeSession(FakeResponse(201, {"id": "x"}))

    _client(session).submit_job(audio)

    assert session.requests[0][2]["files"]["data_file"][2] == "audio/m4a"


def test_submit_job_surfaces_service_message(tmp_path) -> None:
    audio = tmp_path / "memo.m4a"
    audio.write_bytes(b"data")
    session = FakeSession(FakeResponse(403, {"message": "Quota exceeded"}))

    with pytest.raises(JobSubmissionError, match="Quota exceeded") as excinfo:
        _client(session).submit_job(audio)

    assert excinfo.value.status_code == 403


def test_submit_job_wraps_network_errors(tmp_path) -> None:
    audio = tmp_path / "memo.m4a"
    audio.write_bytes(b"data")
    session = FakeSession(exc=requests.exceptions.ConnectionError("offline"))

    with pytest.raises(JobSubmissionError, match="offline"):
        _client(session).submit_job(audio)


def test_submit_job_requires_existing_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        _client(FakeSession()).submit_job(tmp_path / "missing.m4a")


def test_get_job_status_reads_nested_job() -> None:
    payload = {"job": {"id": "abc", "status": "rejected", "errors": [{"message": "bad audio"}]}}
    session = FakeSession(FakeResponse(200, payload))

    job = _client(session).get_job_status("abc")

    assert job == TranscriptionJob(id="abc", status="rejected", error="bad audio", raw=payload)
    assert job.failed
    assert session.requests[0][1] == "https://sm.test/v2/jobs/abc"


def test_get_job_status_accepts_top_level_status() -> None:
    session = FakeSession(FakeResponse(200, {"status": "done"}))

    job = _client(session).get_job_status("abc")

    assert job.status == "done"
    assert job.succeeded


def test_get_job_transcript_requests_json_v2() -> None:
    session = FakeSession(FakeResponse(200, {"results": []}))

    assert _client(session).get_job_transcript("abc") == {"results": []}
    _, url, kwargs = session.requests[0]
    assert url == "https://sm.test/v2/jobs/abc/transcript"
    assert kwargs["params"] == {"format": "json-v2"}


def test_get_errors_raise_api_error() -> None:
    session = FakeSession(FakeResponse(404, None, text="job not found"))

    with pytest.raises(SpeechmaticsAPIError, match="job not found") as excinfo:
        _client(session).get_job_status("nope")

    assert excinfo.value.status_code == 404
