"""Video library indexer for ISL sign clips stored on disk."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)

CLIP_EXTENSION = ".mp4"


@dataclass(frozen=True)
class VideoClip:
    """A single sign clip that represents one matchable phrase."""
    name: str
    path: str  # Root-relative URL path, e.g. /isl_dataset/stations/Mumbai_Central.mp4
    file_path: str  # Absolute location on disk


def normalize_clip_name(filename: str, extension: str = CLIP_EXTENSION) -> str:
    """Turn a clip filename into its lookup key.

    Strips the extension, replaces underscores with spaces and lowercases.
    No other normalization is applied.

    Args:
        filename: Bare file name (no directories).
        extension: Clip extension to strip.

    Returns:
        Normalized phrase, e.g. ``"mumbai central"`` for ``Mumbai_Central.mp4``.
    """
    if filename.lower().endswith(extension.lower()):
        filename = filename[:-len(extension)]
    return filename.replace("_", " ").lower()


class VideoLibrary:
    """Lookup table from normalized phrase to sign clip."""

    def __init__(self, clips: Optional[Dict[str, VideoClip]] = None):
        self._clips: Dict[str, VideoClip] = dict(clips or {})

    def add(self, clip: VideoClip) -> bool:
        """Register a clip, keeping the first clip seen for a name.

        Returns:
            True if the clip was added, False if the name was already taken.
        """
        existing = self._clips.get(clip.name)
        if existing is not None:
            logger.warning(
                f"Duplicate clip name '{clip.name}': keeping {existing.path}, ignoring {clip.path}"
            )
            return False
        self._clips[clip.name] = clip
        return True

    def lookup(self, phrase: str) -> Optional[VideoClip]:
        return self._clips.get(phrase.lower())

    def names(self) -> List[str]:
        return sorted(self._clips)

    def clips(self) -> List[VideoClip]:
        return [self._clips[name] for name in self.names()]

    def __contains__(self, phrase: str) -> bool:
        return phrase.lower() in self._clips

    def __len__(self) -> int:
        return len(self._clips)

    def __iter__(self) -> Iterator[str]:
        return iter(self._clips)


def _walk_clips(directory: Path, extension: str) -> Iterator[Path]:
    """Yield clip files depth-first, skipping directories that can't be read."""
    try:
        entries = sorted(os.scandir(directory), key=lambda e: e.name)
    except OSError as e:
        logger.warning(f"Could not read directory {directory}: {e}")
        return

    for entry in entries:
        if entry.is_dir(follow_symlinks=False):
            yield from _walk_clips(Path(entry.path), extension)
        elif entry.is_file() and entry.name.lower().endswith(extension.lower()):
            yield Path(entry.path)


def _relative_url(file_path: Path, public_root: Path) -> str:
    try:
        relative = file_path.relative_to(public_root)
    except ValueError:
        relative = Path(file_path.name)
    return "/" + relative.as_posix()


def build_library(
    root_dir: str,
    public_root: Optional[str] = None,
    extension: str = CLIP_EXTENSION
) -> VideoLibrary:
    """Scan a directory tree and index every clip by its normalized name.

    A missing root is treated as an empty library. Unreadable subdirectories
    are logged and skipped.

    Args:
        root_dir: Directory containing the sign clips (may be nested).
        public_root: Directory that clip URLs are relative to. Defaults to
            the parent of ``root_dir``.
        extension: Clip file extension.

    Returns:
        VideoLibrary with one entry per distinct normalized name.
    """
    root = Path(root_dir).resolve()
    public = Path(public_root).resolve() if public_root else root.parent
    library = VideoLibrary()

    if not root.is_dir():
        logger.warning(f"ISL dataset directory does not exist or is not accessible: {root}")
        return library

    for file_path in _walk_clips(root, extension):
        library.add(VideoClip(
            name=normalize_clip_name(file_path.name, extension),
            path=_relative_url(file_path, public),
            file_path=str(file_path)
        ))

    logger.info(f"Indexed {len(library)} ISL clips from {root}")
    return library


def list_clips(
    root_dir: str,
    public_root: Optional[str] = None,
    extension: str = CLIP_EXTENSION
) -> List[str]:
    """List root-relative URLs of every clip file under ``root_dir``.

    Unlike :func:`build_library`, duplicates are not collapsed.
    """
    root = Path(root_dir).resolve()
    public = Path(public_root).resolve() if public_root else root.parent
    if not root.is_dir():
        logger.warning(f"ISL dataset directory does not exist or is not accessible: {root}")
        return []
    return sorted(_relative_url(p, public) for p in _walk_clips(root, extension))
