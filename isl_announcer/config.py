"""Settings loaded from the environment (and a .env file if present)."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .matcher import DEFAULT_MAX_PHRASE_LENGTH


@dataclass
class Settings:
    """Runtime configuration for the ISL announcement service."""
    public_dir: str = "./public"
    dataset_dir: str = "./public/isl_dataset"
    output_dir: str = "./public/isl_output"
    output_url_prefix: str = "/isl_output"
    audio_dir: str = "./public/audio"
    max_phrase_length: int = DEFAULT_MAX_PHRASE_LENGTH  # Longest phrase tried, in words
    ffmpeg_binary: str = "ffmpeg"
    google_api_key: Optional[str] = None  # Used by the translation and speech clients


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Build Settings from environment variables.

    Args:
        env_file: Optional path to a .env file; the default lookup is used
            when omitted.

    Raises:
        ValueError: If a numeric variable is not an integer or out of range.
    """
    load_dotenv(env_file)

    public_dir = os.getenv("ISL_PUBLIC_DIR", "./public")
    settings = Settings(
        public_dir=public_dir,
        dataset_dir=os.getenv("ISL_DATASET_DIR", str(Path(public_dir) / "isl_dataset")),
        output_dir=os.getenv("ISL_OUTPUT_DIR", str(Path(public_dir) / "isl_output")),
        output_url_prefix=os.getenv("ISL_OUTPUT_URL_PREFIX", "/isl_output"),
        audio_dir=os.getenv("ISL_AUDIO_DIR", str(Path(public_dir) / "audio")),
        max_phrase_length=_int_env("ISL_MAX_PHRASE_LENGTH", DEFAULT_MAX_PHRASE_LENGTH),
        ffmpeg_binary=os.getenv("FFMPEG_BINARY", "ffmpeg"),
        google_api_key=os.getenv("GOOGLE_API_KEY") or None,
    )

    if settings.max_phrase_length < 1:
        raise ValueError("ISL_MAX_PHRASE_LENGTH must be at least 1")

    return settings
