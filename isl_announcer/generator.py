"""Orchestrates text -> ISL clip playlist -> stitched announcement video."""

import logging
import time
from dataclasses import dataclass
from typing import List, Optional

from .concatenator import VideoConcatenator
from .config import Settings
from .exceptions import ServiceError
from .library import VideoClip, build_library, list_clips
from .matcher import Playlist, build_playlist
from .stitcher import PlaylistStitcher
from .text import normalize_digits

logger = logging.getLogger(__name__)


@dataclass
class IslAnnouncement:
    """Result of generating an ISL announcement."""
    text: str
    playlist: Playlist
    video: Optional[VideoClip] = None  # None when nothing matched or stitching failed
    transcription: Optional[str] = None  # Set when the text came from recorded speech

    @property
    def missing_words(self) -> List[str]:
        return self.playlist.missing_words


class IslAnnouncementGenerator:
    """Main class that turns announcement text into ISL video."""

    def __init__(self, settings: Settings, translator=None, transcriber=None):
        """Initialize the generator.

        Args:
            settings: Directories and limits to use.
            translator: Optional object with a
                ``translate(text, target_lang, source_lang)`` method.
            transcriber: Optional object with a
                ``transcribe(audio_bytes, language_code)`` method.
        """
        self.settings = settings
        self.translator = translator
        self.transcriber = transcriber
        self.stitcher = PlaylistStitcher(
            output_dir=settings.output_dir,
            output_url_prefix=settings.output_url_prefix,
            concatenator=VideoConcatenator(
                temp_dir=f"{settings.output_dir}/.concat",
                ffmpeg_binary=settings.ffmpeg_binary
            )
        )

    def available_videos(self) -> List[str]:
        return list_clips(self.settings.dataset_dir, self.settings.public_dir)

    def generate_playlist(self, text: str, normalize_numbers: bool = True) -> Playlist:
        """Match text against a freshly indexed clip library.

        Args:
            text: Announcement text, typically English.
            normalize_numbers: Split numbers into single digits first.

        Returns:
            Playlist in reading order (possibly empty).
        """
        if normalize_numbers:
            text = normalize_digits(text)

        library = build_library(self.settings.dataset_dir, self.settings.public_dir)
        return build_playlist(text, library, self.settings.max_phrase_length)

    def generate_video(
        self,
        text: str,
        normalize_numbers: bool = True,
        output_name: Optional[str] = None
    ) -> IslAnnouncement:
        """Build the playlist for ``text`` and stitch it into one video."""
        start_time = time.time()
        logger.info(f"Starting ISL generation from text: '{text}'")

        playlist = self.generate_playlist(text, normalize_numbers)
        lookup_time = time.time() - start_time
        logger.info(f"✓ Lookup completed in {lookup_time:.2f}s")

        video = None
        if playlist:
            phase_start = time.time()
            video = self.stitcher.stitch_playlist(playlist, output_name)
            logger.info(f"✓ Stitching completed in {time.time() - phase_start:.2f}s")
            if video is None:
                logger.warning("Announcement video unavailable: stitching failed")
        else:
            logger.info("No ISL clips matched; no video produced")

        logger.info(f"ISL generation finished in {time.time() - start_time:.2f}s")
        return IslAnnouncement(text=text, playlist=playlist, video=video)

    def translate_and_generate(
        self,
        text: str,
        source_lang: str,
        normalize_numbers: bool = True
    ) -> IslAnnouncement:
        """Translate text to English and build its playlist (no stitching)."""
        english = self.to_english(text, source_lang)
        return IslAnnouncement(
            text=english,
            playlist=self.generate_playlist(english, normalize_numbers)
        )

    def to_english(self, text: str, source_lang: str) -> str:
        # Language tags such as "hi-IN" are reduced to their primary subtag
        lang = source_lang.split("-")[0].lower() if source_lang else "en"
        if lang == "en" or self.translator is None:
            return text
        return self.translator.translate(text, "en", lang)

    def transcribe_and_generate(
        self,
        audio_bytes: bytes,
        language_code: str,
        normalize_numbers: bool = True
    ) -> IslAnnouncement:
        """Transcribe recorded speech, translate it to English and build its playlist.

        Raises:
            ServiceError: If no transcriber is configured or transcription fails.
        """
        if self.transcriber is None:
            raise ServiceError("Speech transcription is not configured")

        transcription = self.transcriber.transcribe(audio_bytes, language_code)
        if not transcription:
            logger.info("Transcription returned no text")
            return IslAnnouncement(text="", playlist=Playlist(), transcription="")

        announcement = self.translate_and_generate(transcription, language_code, normalize_numbers)
        announcement.transcription = transcription
        return announcement
