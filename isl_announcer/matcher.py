"""Greedy longest-phrase matching of text against the ISL clip library."""

import logging
from dataclasses import dataclass, field
from typing import List

from .library import VideoClip, VideoLibrary
from .text import tokenize

logger = logging.getLogger(__name__)

DEFAULT_MAX_PHRASE_LENGTH = 3


@dataclass(frozen=True)
class PlaylistItem:
    """One matched phrase and the clip that signs it."""
    phrase: str
    clip: VideoClip
    start: int  # Index of the first consumed token
    end: int  # Index one past the last consumed token

    @property
    def path(self) -> str:
        return self.clip.path

    @property
    def word_count(self) -> int:
        return self.end - self.start


@dataclass
class Playlist:
    """Ordered clips for a piece of text, in reading order."""
    items: List[PlaylistItem] = field(default_factory=list)
    tokens: List[str] = field(default_factory=list)
    missing_words: List[str] = field(default_factory=list)

    def paths(self) -> List[str]:
        """Root-relative clip URLs, for presentation."""
        return [item.clip.path for item in self.items]

    def file_paths(self) -> List[str]:
        return [item.clip.file_path for item in self.items]

    def __len__(self) -> int:
        return len(self.items)

    def __bool__(self) -> bool:
        return bool(self.items)


def build_playlist(
    text: str,
    library: VideoLibrary,
    max_phrase_length: int = DEFAULT_MAX_PHRASE_LENGTH
) -> Playlist:
    """Resolve text into an ordered list of sign clips.

    At each position the longest window of up to ``max_phrase_length`` tokens
    that exists in the library is taken, and the cursor moves past it. Tokens
    with no clip at all are skipped and reported in ``missing_words``.

    Args:
        text: Input text, typically English.
        library: Clip lookup table.
        max_phrase_length: Longest phrase (in tokens) to try.

    Returns:
        Playlist; empty if the text or library is empty or nothing matched.

    Raises:
        ValueError: If max_phrase_length is less than 1.
    """
    if max_phrase_length < 1:
        raise ValueError("max_phrase_length must be at least 1")

    if not text or len(library) == 0:
        words = tokenize(text) if text else []
        return Playlist(tokens=words, missing_words=list(words))

    words = tokenize(text)
    playlist = Playlist(tokens=words)
    i = 0

    while i < len(words):
        matched = None
        longest = min(max_phrase_length, len(words) - i)

        # Try phrases from longest to shortest
        for phrase_len in range(longest, 0, -1):
            phrase = " ".join(words[i:i + phrase_len])
            clip = library.lookup(phrase)
            if clip is not None:
                matched = PlaylistItem(phrase=phrase, clip=clip, start=i, end=i + phrase_len)
                if phrase_len > 1:
                    logger.debug(f"Found {phrase_len}-word phrase: '{phrase}'")
                break

        if matched is None:
            playlist.missing_words.append(words[i])
            logger.debug(f"No clip found for word: {words[i]}")
            i += 1
        else:
            playlist.items.append(matched)
            i = matched.end

    logger.info(
        f"Matched {len(playlist.items)} clips for {len(words)} words, "
        f"{len(playlist.missing_words)} words skipped"
    )
    return playlist
