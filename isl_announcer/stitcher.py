"""Turns a playlist of sign clips into a single announcement video."""

import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from .concatenator import VideoConcatenator
from .exceptions import ConcatenationError
from .library import VideoClip
from .matcher import Playlist, PlaylistItem

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_PREFIX = "isl_announcement"


def _file_path(entry: Union[str, VideoClip, PlaylistItem]) -> str:
    if isinstance(entry, PlaylistItem):
        return entry.clip.file_path
    if isinstance(entry, VideoClip):
        return entry.file_path
    return str(entry)


class PlaylistStitcher:
    """Joins ordered clips into one file in a dedicated output directory."""

    def __init__(
        self,
        output_dir: str,
        output_url_prefix: str = "/isl_output",
        concatenator: Optional[VideoConcatenator] = None
    ):
        """Initialize the stitcher.

        Args:
            output_dir: Directory where stitched videos are written.
            output_url_prefix: URL path the output directory is served under.
            concatenator: ffmpeg wrapper; a default one is created if omitted.
        """
        self.output_dir = Path(output_dir)
        self.output_url_prefix = "/" + output_url_prefix.strip("/")
        self.concatenator = concatenator or VideoConcatenator(
            temp_dir=str(self.output_dir / ".concat")
        )

    def output_path_for(self, output_name: Optional[str] = None) -> Path:
        """Build a fresh output path: prefix, timestamp and a random suffix."""
        prefix = Path(output_name).stem if output_name else DEFAULT_OUTPUT_PREFIX
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return self.output_dir / f"{prefix}_{timestamp}_{uuid.uuid4().hex[:8]}.mp4"

    def stitch(
        self,
        paths: List[Union[str, VideoClip, PlaylistItem]],
        output_name: Optional[str] = None
    ) -> Union[str, VideoClip, PlaylistItem, None]:
        """Merge clips into one video.

        Args:
            paths: Clip file paths, ``VideoClip`` or ``PlaylistItem`` objects,
                in playback order.
            output_name: Optional name prefix for the merged file.

        Returns:
            None if ``paths`` is empty or ffmpeg failed, the single element
            unchanged if there is only one, otherwise the new file's path.
        """
        if not paths:
            logger.info("Nothing to stitch: empty playlist")
            return None

        if len(paths) == 1:
            return paths[0]

        file_paths = [_file_path(entry) for entry in paths]
        output_path = self.output_path_for(output_name)
        try:
            self.concatenator.concatenate_videos(file_paths, str(output_path))
        except ConcatenationError as e:
            logger.error(f"Stitching {len(paths)} clips failed: {e}")
            return None

        return str(output_path)

    def stitch_playlist(self, playlist: Playlist, output_name: Optional[str] = None) -> Optional[VideoClip]:
        """Stitch a playlist and describe the result as a clip.

        A single-item playlist returns that item's clip.
        """
        if len(playlist) == 1:
            return playlist.items[0].clip

        stitched = self.stitch(playlist.file_paths(), output_name)
        if stitched is None:
            return None

        stitched_path = Path(stitched)
        return VideoClip(
            name=" ".join(item.phrase for item in playlist.items),
            path=f"{self.output_url_prefix}/{stitched_path.name}",
            file_path=str(stitched_path.resolve())
        )
