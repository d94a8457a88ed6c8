"""Configuration management and environment variable loading."""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file (don't override existing env vars)
load_dotenv(override=False)


def _flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Application configuration."""

    # Speechmatics batch API
    SPEECHMATICS_API_KEY: str = os.getenv("SPEECHMATICS_API_KEY", "")
    SPEECHMATICS_URL: str = os.getenv("SPEECHMATICS_URL", "https://asr.api.speechmatics.com/v2")
    LANGUAGE: str = os.getenv("LANGUAGE", "fr")
    POLL_INTERVAL: float = float(os.getenv("POLL_INTERVAL", "3"))
    MAX_POLL_ATTEMPTS: int = int(os.getenv("MAX_POLL_ATTEMPTS", "20"))

    # Timeline handling
    SORT_TIMELINE: bool = _flag(os.getenv("SORT_TIMELINE", "false"))
    CHUNK_SIZE: int = int(os.getenv("CHUNK_SIZE", "8"))

    # Summarization
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    ANALYSIS_MODEL: str = os.getenv("ANALYSIS_MODEL", "gpt-4o-mini")
    MAX_RETRIES: int = int(os.getenv("MAX_RETRIES", "2"))

    # Output locations
    OUT_DIR: Path = Path(os.getenv("OUT_DIR", "./out")).resolve()
    NOTES_PATH: Path = Path(os.getenv("NOTES_PATH", str(OUT_DIR / "notes.json"))).resolve()

    @classmethod
    def validate(cls) -> None:
        """Validate that required configuration is present."""
        if not cls.SPEECHMATICS_API_KEY:
            raise ValueError(
                "SPEECHMATICS_API_KEY is required. Please set it in your .env file or environment variables."
            )

    @classmethod
    def validate_openai(cls) -> None:
        """Validate the settings needed for summarization."""
        if not cls.OPENAI_API_KEY:
            raise ValueError(
                "OPENAI_API_KEY is required for summaries. Please set it in your .env file or environment variables."
            )
