"""Clients for the external translation, text-to-speech and speech-to-text services.

All talk to the Google Cloud REST APIs with an API key. Translation falls
back to the input text and speech synthesis returns None on failure. A failed
transcription raises TranscriptionError, since there is no text to fall back to.
"""

import base64
import html
import logging
from dataclasses import dataclass
from typing import Optional

import requests

from .exceptions import ServiceError, TranscriptionError

logger = logging.getLogger(__name__)

# Voice locale used for each announcement language
VOICE_LOCALES = {
    "en": "en-IN",
    "hi": "hi-IN",
    "mr": "mr-IN",
    "gu": "gu-IN",
}


@dataclass
class ServiceConfig:
    """Configuration shared by the Google Cloud clients."""
    api_key: str
    translate_url: str = "https://translation.googleapis.com/language/translate/v2"
    tts_url: str = "https://texttospeech.googleapis.com/v1/text:synthesize"
    stt_url: str = "https://speech.googleapis.com/v1/speech:recognize"
    timeout: int = 30
    audio_encoding: str = "LINEAR16"  # WAV output
    sample_rate_hertz: int = 16000  # Recorded speech sample rate


def _session(config: ServiceConfig) -> requests.Session:
    if not config.api_key:
        raise ServiceError("An API key is required. Set GOOGLE_API_KEY in your environment.")
    session = requests.Session()
    session.headers.update({
        "X-Goog-Api-Key": config.api_key,
        "User-Agent": "IslAnnouncer/1.0"
    })
    return session


class TranslationClient:
    """Translates short texts with the Cloud Translation API."""

    def __init__(self, config: ServiceConfig):
        """Initialize the translation client.

        Raises:
            ServiceError: If no API key is configured.
        """
        self.config = config
        self.session = _session(config)
        logger.info("TranslationClient initialized")

    def translate(self, text: str, target_lang: str, source_lang: str) -> str:
        """Translate ``text`` from ``source_lang`` to ``target_lang``.

        Returns the input unchanged when there is nothing to do or the
        request fails.
        """
        if not text or not target_lang or target_lang == source_lang:
            return text

        payload = {
            "q": [text],
            "target": target_lang,
            "source": source_lang,
            "format": "text",
        }

        try:
            response = self.session.post(
                self.config.translate_url,
                json=payload,
                timeout=self.config.timeout
            )
            if response.status_code != 200:
                logger.error(
                    f"Translation from '{source_lang}' to '{target_lang}' failed "
                    f"(HTTP {response.status_code}): {response.text}"
                )
                return text

            translations = response.json().get("data", {}).get("translations", [])
            if translations and translations[0].get("translatedText"):
                return html.unescape(translations[0]["translatedText"])
            return text

        except (requests.RequestException, ValueError) as e:
            logger.error(f"Error during translation from '{source_lang}' to '{target_lang}': {e}")
            return text


class SpeechClient:
    """Synthesizes speech with the Cloud Text-to-Speech API."""

    def __init__(self, config: ServiceConfig):
        """Initialize the speech client.

        Raises:
            ServiceError: If no API key is configured.
        """
        self.config = config
        self.session = _session(config)
        logger.info("SpeechClient initialized")

    def synthesize_speech(self, text: str, lang: str) -> Optional[bytes]:
        """Return audio bytes for ``text`` spoken in ``lang``, or None."""
        if not text or not text.strip():
            return None

        payload = {
            "input": {"text": text},
            "voice": {"languageCode": VOICE_LOCALES.get(lang, lang)},
            "audioConfig": {"audioEncoding": self.config.audio_encoding},
        }

        try:
            response = self.session.post(
                self.config.tts_url,
                json=payload,
                timeout=self.config.timeout
            )
            if response.status_code != 200:
                logger.error(f"Speech synthesis for '{lang}' failed (HTTP {response.status_code}): {response.text}")
                return None

            audio_content = response.json().get("audioContent")
            if not audio_content:
                logger.warning(f"Speech synthesis for '{lang}' returned no audio")
                return None
            return base64.b64decode(audio_content)

        except (requests.RequestException, ValueError) as e:
            logger.error(f"Error during speech synthesis for '{lang}': {e}")
            return None


def decode_audio_data_uri(data_uri: str) -> bytes:
    """Decode a ``data:<mimetype>;base64,<data>`` URI into raw audio bytes.

    Raises:
        ValueError: If the URI is not base64 encoded data.
    """
    header, sep, data = data_uri.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError("Audio must be a base64 data URI")
    try:
        return base64.b64decode(data, validate=True)
    except ValueError as e:
        raise ValueError(f"Audio data URI is not valid base64: {e}") from e


class TranscriptionClient:
    """Transcribes recorded speech with the Cloud Speech-to-Text API."""

    def __init__(self, config: ServiceConfig):
        """Initialize the transcription client.

        Raises:
            ServiceError: If no API key is configured.
        """
        self.config = config
        self.session = _session(config)
        logger.info("TranscriptionClient initialized")

    def transcribe(self, audio_bytes: bytes, language_code: str) -> str:
        """Transcribe audio spoken in ``language_code`` (e.g. ``hi-IN``).

        Returns:
            The transcript, one line per recognized result. Empty if nothing
            was recognized.

        Raises:
            TranscriptionError: If the request fails.
        """
        if not audio_bytes:
            return ""

        payload = {
            "config": {
                "encoding": self.config.audio_encoding,
                "sampleRateHertz": self.config.sample_rate_hertz,
                "languageCode": language_code,
            },
            "audio": {"content": base64.b64encode(audio_bytes).decode("ascii")},
        }

        try:
            response = self.session.post(
                self.config.stt_url,
                json=payload,
                timeout=self.config.timeout
            )
            if response.status_code != 200:
                logger.error(f"Transcription for '{language_code}' failed (HTTP {response.status_code}): {response.text}")
                raise TranscriptionError("Failed to transcribe audio.")

            results = response.json().get("results", [])
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Error during transcription for '{language_code}': {e}")
            raise TranscriptionError("Failed to transcribe audio.") from e

        transcripts = [
            result["alternatives"][0].get("transcript", "")
            for result in results
            if result.get("alternatives")
        ]
        return "\n".join(t for t in transcripts if t)
