"""OpenAI GPT API integration for note summaries."""

import json
import math
import re
import time
from typing import Any, Dict, List, Optional
from openai import OpenAI
from openai import APIError, RateLimitError, APIConnectionError

from autonote.config import Config
from autonote.errors import SummarizationError
from autonote.models import Summary, TimedKeyword, WordTimestamp


SUMMARY_PROMPT = """Analyze the transcript below and answer with a JSON object only, no other text.

Return exactly this structure:
{
  "title": "Short, clear title, 8 words max",
  "summary": "",
  "key_points": [],
  "action_items": [],
  "timed_keywords": [
    { "word": "...", "approx_time": "00:12" }
  ]
}

Write the summary, key points and action items in the language of the transcript.
Use the word timestamps to fill approx_time as MM:SS."""


def build_prompt(transcript_text: str, timeline: List[WordTimestamp]) -> str:
    """Combine instructions, transcript and word timestamps into one message."""
    timestamps = json.dumps([w.to_dict() for w in timeline], indent=2, ensure_ascii=False)
    return (
        f"{SUMMARY_PROMPT}\n\n"
        f"Full transcript:\n{transcript_text}\n\n"
        f"Available timestamps:\n{timestamps}"
    )


def time_to_seconds(value: Any) -> float:
    """Convert 'MM:SS' or 'H:MM:SS' to seconds; unreadable values give 0."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value) if math.isfinite(value) else 0.0
    if not isinstance(value, str) or not value.strip():
        return 0.0
    seconds = 0.0
    for part in value.strip().split(':'):
        if '_' in part:
            return 0.0
        try:
            seconds = seconds * 60 + float(part)
        except ValueError:
            return 0.0
    return seconds if math.isfinite(seconds) else 0.0


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


def parse_summary(text: str) -> Summary:
    """
    Parse the model's answer into a Summary.

    Markdown code fences are ignored. If the answer is not a JSON object the
    whole text becomes the summary.
    """
    cleaned = re.sub(r"```(?:json)?", "", text or "").strip()
    try:
        parsed = json.loads(cleaned)
    except ValueError:
        parsed = None
    if not isinstance(parsed, dict):
        parsed = {'summary': text or ''}

    summary_text = parsed.get('summary') or ''
    if not isinstance(summary_text, str):
        summary_text = str(summary_text)
    first_line = summary_text.split('\n')[0].strip()
    title = str(parsed.get('title') or first_line or '').strip()

    timed_keywords = [
        TimedKeyword(keyword=str(k.get('word', '')), time=time_to_seconds(k.get('approx_time')))
        for k in parsed.get('timed_keywords') or []
        if isinstance(k, dict) and k.get('word')
    ]

    return Summary(
        title=title,
        summary=summary_text,
        key_points=_string_list(parsed.get('key_points')),
        action_items=_string_list(parsed.get('action_items')),
        timed_keywords=timed_keywords,
    )


def summarize(
    transcript_text: str,
    timeline: Optional[List[WordTimestamp]] = None,
    client: Optional[OpenAI] = None,
) -> Summary:
    """
    Summarize a transcript with the OpenAI chat API.

    Args:
        transcript_text: Full transcript text
        timeline: Word timestamps passed to the model for keyword timing
        client: Preconfigured OpenAI client (created from Config when omitted)

    Returns:
        Parsed Summary

    Raises:
        ValueError: If no client is given and OPENAI_API_KEY is not set
        SummarizationError: If the API keeps failing
    """
    if client is None:
        Config.validate_openai()
        client = OpenAI(api_key=Config.OPENAI_API_KEY, timeout=300.0)

    messages: List[Dict[str, str]] = [
        {"role": "user", "content": build_prompt(transcript_text, timeline or [])}
    ]

    last_error = None
    for attempt in range(Config.MAX_RETRIES + 1):
        try:
            if attempt > 0:
                print(f"Summarizing transcript (attempt {attempt + 1}/{Config.MAX_RETRIES + 1})...")

            response = client.chat.completions.create(
                model=Config.ANALYSIS_MODEL,
                messages=messages,
            )
            return parse_summary(response.choices[0].message.content or "")

        except RateLimitError as e:
            last_error = e
            if attempt < Config.MAX_RETRIES:
                wait_time = 2 ** attempt
                print(f"⚠ Rate limit hit. Waiting {wait_time} seconds before retry...")
                time.sleep(wait_time)
                continue
            raise SummarizationError(
                f"Rate limit exceeded after {Config.MAX_RETRIES + 1} attempts."
            ) from e

        except APIConnectionError as e:
            last_error = e
            if attempt < Config.MAX_RETRIES:
                wait_time = 2 ** attempt
                print(f"⚠ Connection error. Waiting {wait_time} seconds before retry...")
                time.sleep(wait_time)
                continue
            raise SummarizationError(
                f"Connection error after {Config.MAX_RETRIES + 1} attempts: {str(e)}"
            ) from e

        except APIError as e:
            status_code = getattr(e, 'status_code', None)
            if status_code and 500 <= status_code < 600 and attempt < Config.MAX_RETRIES:
                last_error = e
                wait_time = 2 ** attempt
                print(f"⚠ Server error ({status_code}). Waiting {wait_time} seconds before retry...")
                time.sleep(wait_time)
                continue
            raise SummarizationError(f"OpenAI API error: {str(e)}") from e

    raise SummarizationError(f"Failed to summarize after {Config.MAX_RETRIES + 1} attempts") from last_error
