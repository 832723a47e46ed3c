import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from isl_announcer import IslAnnouncementGenerator, load_settings
from isl_announcer.concatenator import VideoConcatenator
from isl_announcer.exceptions import ConcatenationError, ServiceError
from isl_announcer.services import (
    ServiceConfig, TranscriptionClient, TranslationClient, decode_audio_data_uri
)

logger = logging.getLogger(__name__)

settings = load_settings()

app = FastAPI(title="ISL Announcer API", version="0.1")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Stitched announcement videos; the clip library is mounted after the API routes
OUTPUT_DIR = Path(settings.output_dir)
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
app.mount(settings.output_url_prefix, StaticFiles(directory=str(OUTPUT_DIR)), name="isl_output")


@lru_cache()
def get_translator() -> Optional[TranslationClient]:
    try:
        return TranslationClient(ServiceConfig(api_key=settings.google_api_key or ""))
    except ServiceError as e:
        logger.warning(f"Translation disabled: {e}")
        return None


@lru_cache()
def get_transcriber() -> Optional[TranscriptionClient]:
    try:
        return TranscriptionClient(ServiceConfig(api_key=settings.google_api_key or ""))
    except ServiceError as e:
        logger.warning(f"Speech transcription disabled: {e}")
        return None


def get_generator() -> IslAnnouncementGenerator:
    return IslAnnouncementGenerator(
        settings,
        translator=get_translator(),
        transcriber=get_transcriber()
    )


class IslRequest(BaseModel):
    text: str
    lang: Optional[str] = "en"  # Language of `text`; translated to English first if not "en"
    normalize_numbers: Optional[bool] = True


class ClipResponseItem(BaseModel):
    phrase: str
    path: str


class PlaylistResponse(BaseModel):
    text: str
    playlist: List[ClipResponseItem]
    missing_words: List[str]


class VideoResponse(BaseModel):
    status: str
    text: str
    playlist: List[str]  # Zero or one stitched video URL
    missing_words: List[str]
    message: Optional[str] = None


class SpeechRequest(BaseModel):
    audio_data_uri: str  # data:<mimetype>;base64,<data>
    language_code: str  # Spoken language, e.g. "hi-IN"
    normalize_numbers: Optional[bool] = True


class SpeechResponse(BaseModel):
    transcribed_text: str
    text: str  # English text the playlist was built from
    playlist: List[ClipResponseItem]
    missing_words: List[str]


class TranslateRequest(BaseModel):
    text: str
    lang: str


class TranslateResponse(BaseModel):
    translated_text: str


def _clean_text(text: str) -> str:
    text = text.strip()
    if not text:
        raise HTTPException(400, detail="text is required")
    return text


@app.get("/health")
def health():
    """Report liveness and whether ffmpeg is available for stitching."""
    try:
        VideoConcatenator(ffmpeg_binary=settings.ffmpeg_binary).verify_ffmpeg()
        ffmpeg_ok = True
    except ConcatenationError as e:
        logger.warning(f"Stitching unavailable: {e}")
        ffmpeg_ok = False
    return {"ok": True, "ffmpeg": ffmpeg_ok}


@app.get("/isl/videos", response_model=List[str])
def isl_videos(generator: IslAnnouncementGenerator = Depends(get_generator)):
    """List every clip in the ISL dataset."""
    try:
        return generator.available_videos()
    except Exception as e:
        logger.exception(f"Failed to list ISL videos: {e}")
        raise HTTPException(500, detail="Failed to list ISL videos")


@app.post("/isl/playlist", response_model=PlaylistResponse)
def isl_playlist(request: IslRequest, generator: IslAnnouncementGenerator = Depends(get_generator)):
    """Match text against the clip library and return the per-word playlist."""
    text = _clean_text(request.text)
    try:
        announcement = generator.translate_and_generate(
            text,
            request.lang or "en",
            normalize_numbers=request.normalize_numbers is not False
        )
    except Exception as e:
        logger.exception(f"ISL playlist generation failed: {e}")
        raise HTTPException(500, detail="Failed to generate ISL playlist")

    return PlaylistResponse(
        text=announcement.text,
        playlist=[ClipResponseItem(phrase=item.phrase, path=item.path) for item in announcement.playlist.items],
        missing_words=announcement.missing_words,
    )


@app.post("/isl/video", response_model=VideoResponse)
def isl_video(request: IslRequest, generator: IslAnnouncementGenerator = Depends(get_generator)):
    """Build the playlist and stitch it into a single announcement video."""
    text = _clean_text(request.text)
    try:
        english = generator.to_english(text, request.lang or "en")
        announcement = generator.generate_video(
            english,
            normalize_numbers=request.normalize_numbers is not False
        )
    except Exception as e:
        logger.exception(f"ISL video generation failed: {e}")
        raise HTTPException(500, detail="Failed to generate ISL video")

    if announcement.video is None:
        message = "No ISL clips matched" if not announcement.playlist else "ISL video unavailable"
        return VideoResponse(
            status="unavailable",
            text=english,
            playlist=[],
            missing_words=announcement.missing_words,
            message=message,
        )

    return VideoResponse(
        status="success",
        text=english,
        playlist=[announcement.video.path],
        missing_words=announcement.missing_words,
    )


@app.post("/translate", response_model=TranslateResponse)
def translate(request: TranslateRequest, translator: Optional[TranslationClient] = Depends(get_translator)):
    """Translate input text into English for ISL matching."""
    text = _clean_text(request.text)
    if translator is None:
        raise HTTPException(503, detail="Translation service is not configured")
    try:
        return TranslateResponse(translated_text=translator.translate(text, "en", request.lang))
    except Exception as e:
        logger.exception(f"Translation failed: {e}")
        raise HTTPException(500, detail="Failed to translate the text")


@app.post("/isl/speech", response_model=SpeechResponse)
def isl_speech(request: SpeechRequest, generator: IslAnnouncementGenerator = Depends(get_generator)):
    """Transcribe recorded speech, translate it to English and return its playlist."""
    try:
        audio = decode_audio_data_uri(request.audio_data_uri)
    except ValueError as e:
        raise HTTPException(400, detail=str(e))

    if generator.transcriber is None:
        raise HTTPException(503, detail="Speech transcription is not configured")

    try:
        announcement = generator.transcribe_and_generate(
            audio,
            request.language_code,
            normalize_numbers=request.normalize_numbers is not False
        )
    except Exception as e:
        logger.exception(f"Speech to ISL failed: {e}")
        raise HTTPException(500, detail="Failed to transcribe audio")

    return SpeechResponse(
        transcribed_text=announcement.transcription or "",
        text=announcement.text,
        playlist=[ClipResponseItem(phrase=item.phrase, path=item.path) for item in announcement.playlist.items],
        missing_words=announcement.missing_words,
    )


# Clip URLs are relative to the public directory; mounted last so the API routes win
PUBLIC_DIR = Path(settings.public_dir)
PUBLIC_DIR.mkdir(parents=True, exist_ok=True)
app.mount("/", StaticFiles(directory=str(PUBLIC_DIR)), name="public")
