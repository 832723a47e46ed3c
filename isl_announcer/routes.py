"""Train route records, their translations and generated audio."""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .text import spell_digits

logger = logging.getLogger(__name__)

ANNOUNCEMENT_LANGUAGES = ("en", "mr", "hi", "gu")
AUDIO_FIELDS = ("train_number", "train_name", "start_station", "end_station")


@dataclass(frozen=True)
class TrainRoute:
    """A train route as maintained by administrators."""
    train_number: str
    train_name: str
    start_station: str
    start_code: str
    end_station: str
    end_code: str
    id: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrainRoute":
        """Build a route from a row or form payload.

        Accepts both snake_case keys and the spreadsheet-style headers
        ("Train Number", "Start Station", ...).

        Raises:
            ValueError: If a required field is missing or blank.
        """
        values = {}
        for name in ("train_number", "train_name", "start_station", "start_code", "end_station", "end_code"):
            header = name.replace("_", " ").title()
            value = data.get(name, data.get(header))
            if value is None or str(value).strip() == "":
                raise ValueError(f"Missing required route field: {name}")
            values[name] = str(value).strip()

        route_id = data.get("id")
        return cls(id=int(route_id) if route_id is not None else None, **values)


@dataclass(frozen=True)
class RouteTranslation:
    """Route fields rendered in one announcement language."""
    route_id: Optional[int]
    language_code: str
    train_number_translation: str
    train_name_translation: str
    start_station_translation: str
    end_station_translation: str

    def field_text(self, field: str) -> str:
        return getattr(self, f"{field}_translation")


@dataclass(frozen=True)
class RouteAudio:
    """Root-relative audio paths for one route in one language.

    Fields whose synthesis produced nothing are empty strings.
    """
    route_id: Optional[int]
    language_code: str
    train_number_audio_path: str = ""
    train_name_audio_path: str = ""
    start_station_audio_path: str = ""
    end_station_audio_path: str = ""

    @property
    def has_audio(self) -> bool:
        return any(getattr(self, f"{field}_audio_path") for field in AUDIO_FIELDS)


def translate_route(route: TrainRoute, lang: str, translator) -> RouteTranslation:
    """Translate one route into ``lang``.

    The train number is spelled digit by digit where a digit map exists for
    the language; the remaining fields are translated concurrently.
    """
    train_number = spell_digits(route.train_number, lang)

    with ThreadPoolExecutor(max_workers=4) as executor:
        number_future = None
        if train_number is None:
            number_future = executor.submit(translator.translate, route.train_number, lang, "en")
        name_future = executor.submit(translator.translate, route.train_name, lang, "en")
        start_future = executor.submit(translator.translate, route.start_station, lang, "en")
        end_future = executor.submit(translator.translate, route.end_station, lang, "en")

        if number_future is not None:
            train_number = number_future.result()

        return RouteTranslation(
            route_id=route.id,
            language_code=lang,
            train_number_translation=train_number,
            train_name_translation=name_future.result(),
            start_station_translation=start_future.result(),
            end_station_translation=end_future.result(),
        )


def translate_routes(
    routes: Iterable[TrainRoute],
    translator,
    languages: Iterable[str] = ANNOUNCEMENT_LANGUAGES
) -> List[RouteTranslation]:
    """Translate every saved route into every announcement language."""
    languages = list(languages)
    translations = []
    for route in routes:
        if route.id is None:
            logger.debug(f"Skipping unsaved route {route.train_number}")
            continue
        for lang in languages:
            translations.append(translate_route(route, lang, translator))
    logger.info(f"Produced {len(translations)} route translations")
    return translations


def _save_audio(audio: bytes, file_path: Path, public_dir: Path) -> str:
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_bytes(audio)
    try:
        return "/" + file_path.resolve().relative_to(public_dir.resolve()).as_posix()
    except ValueError:
        return str(file_path)


def generate_route_audio(
    translation: RouteTranslation,
    speech_client,
    audio_dir: str,
    public_dir: Optional[str] = None
) -> RouteAudio:
    """Synthesize the four route fields and write them as WAV files.

    All four syntheses run concurrently. A field whose synthesis returned
    nothing is skipped and its path left empty.

    Args:
        translation: Route fields in one language.
        speech_client: Object with ``synthesize_speech(text, lang)``.
        audio_dir: Directory for this route's audio files.
        public_dir: Directory that returned paths are relative to. Defaults
            to the parent of ``audio_dir``'s parent.

    Returns:
        RouteAudio with root-relative paths.
    """
    lang = translation.language_code
    target_dir = Path(audio_dir)
    public = Path(public_dir) if public_dir else target_dir.parent.parent

    with ThreadPoolExecutor(max_workers=len(AUDIO_FIELDS)) as executor:
        futures = {
            field: executor.submit(speech_client.synthesize_speech, translation.field_text(field), lang)
            for field in AUDIO_FIELDS
        }
        results = {field: future.result() for field, future in futures.items()}

    paths = {}
    for field, audio in results.items():
        if not audio:
            logger.warning(f"No audio generated for {field} ({lang}); skipping")
            paths[f"{field}_audio_path"] = ""
            continue
        paths[f"{field}_audio_path"] = _save_audio(audio, target_dir / f"{field}_{lang}.wav", public)

    return RouteAudio(route_id=translation.route_id, language_code=lang, **paths)
