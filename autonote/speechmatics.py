"""Speechmatics batch API client."""

import json
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from autonote.config import Config
from autonote.errors import JobSubmissionError, SpeechmaticsAPIError
from autonote.models import TranscriptionJob


def _error_reason(response: requests.Response, default: str) -> str:
    """Best human-readable reason from an error response."""
    try:
        payload = response.json()
    except ValueError:
        return response.text or default
    if isinstance(payload, dict):
        reason = payload.get('message') or payload.get('error') or payload.get('detail')
        if reason:
            return str(reason)
    return json.dumps(payload) if payload else default


class SpeechmaticsClient:
    """Thin wrapper around the Speechmatics v2 job endpoints."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 60.0,
    ):
        api_key = api_key if api_key is not None else Config.SPEECHMATICS_API_KEY
        if not api_key:
            raise ValueError("Missing SPEECHMATICS_API_KEY. Please set it in your .env file.")
        self.api_key = api_key
        self.base_url = (base_url or Config.SPEECHMATICS_URL).rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout

    @property
    def headers(self) -> Dict[str, str]:
        return {'Authorization': f'Bearer {self.api_key}', 'Accept': 'application/json'}

    def submit_job(self, audio_path: Path, language: Optional[str] = None) -> str:
        """
        Upload an audio file and create a transcription job.

        Args:
            audio_path: Local path to the recording (.wav or .m4a)
            language: Transcription language code (defaults to Config.LANGUAGE)

        Returns:
            The job id assigned by Speechmatics

        Raises:
            FileNotFoundError: If the audio file does not exist
            JobSubmissionError: If the upload fails or the API rejects it
        """
        audio_path = Path(audio_path)
        if not audio_path.is_file():
            raise FileNotFoundError(f"Audio file is missing: {audio_path}")

        is_wav = audio_path.suffix.lower() == '.wav'
        mime = 'audio/wav' if is_wav else 'audio/m4a'
        name = 'recording.wav' if is_wav else 'recording.m4a'
        config = {
            'type': 'transcription',
            'transcription_config': {'language': language or Config.LANGUAGE},
        }

        try:
            with open(audio_path, 'rb') as audio_file:
                response = self.session.post(
                    f"{self.base_url}/jobs/",
                    headers=self.headers,
                    data={'config': json.dumps(config)},
                    files={'data_file': (name, audio_file, mime)},
                    timeout=self.timeout,
                )
        except requests.exceptions.RequestException as e:
            raise JobSubmissionError(f"Could not upload audio to Speechmatics: {e}") from e

        if not response.ok:
            raise JobSubmissionError(
                _error_reason(response, "Error while sending audio to Speechmatics"),
                status_code=response.status_code,
            )

        try:
            job_id = response.json().get('id')
        except (ValueError, AttributeError) as e:
            raise JobSubmissionError("Speechmatics returned an unreadable job response") from e
        if not job_id:
            raise JobSubmissionError("Speechmatics did not return a job id")
        return str(job_id)

    def get_job_status(self, job_id: str) -> TranscriptionJob:
        """Fetch the current state of a job."""
        payload = self._get(f"/jobs/{job_id}", "Speechmatics job status error")
        return TranscriptionJob.from_response(job_id, payload)

    def get_job_transcript(self, job_id: str) -> Any:
        """Fetch the raw json-v2 transcript of a finished job."""
        return self._get(
            f"/jobs/{job_id}/transcript",
            "Speechmatics transcript retrieval error",
            params={'format': 'json-v2'},
        )

    def _get(self, path: str, default_error: str, params: Optional[Dict[str, str]] = None) -> Any:
        try:
            response = self.session.get(
                f"{self.base_url}{path}",
                headers=self.headers,
                params=params,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise SpeechmaticsAPIError(f"{default_error}: {e}") from e

        if not response.ok:
            raise SpeechmaticsAPIError(
                _error_reason(response, default_error),
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise SpeechmaticsAPIError(f"{default_error}: response is not JSON") from e
