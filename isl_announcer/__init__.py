"""ISL Announcer - builds Indian Sign Language video announcements from text."""

from .library import VideoClip, VideoLibrary, build_library, list_clips
from .matcher import Playlist, PlaylistItem, build_playlist
from .stitcher import PlaylistStitcher
from .text import normalize_digits, tokenize
from .generator import IslAnnouncement, IslAnnouncementGenerator
from .config import Settings, load_settings

__version__ = "0.1.0"
__all__ = [
    "VideoClip", "VideoLibrary", "build_library", "list_clips",
    "Playlist", "PlaylistItem", "build_playlist",
    "PlaylistStitcher", "normalize_digits", "tokenize",
    "IslAnnouncement", "IslAnnouncementGenerator",
    "Settings", "load_settings",
]
