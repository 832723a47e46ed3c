"""ffmpeg concat-demuxer wrapper for joining sign clips without re-encoding."""

import logging
import subprocess
import uuid
from pathlib import Path
from typing import List

from .exceptions import ConcatenationError

logger = logging.getLogger(__name__)


class VideoConcatenator:
    """Concatenates clips into a single output file using stream copy."""

    def __init__(self, temp_dir: str = "./temp_concat", ffmpeg_binary: str = "ffmpeg"):
        """Initialize the video concatenator.

        Args:
            temp_dir: Directory for concat manifests.
            ffmpeg_binary: Name or path of the ffmpeg executable.
        """
        self.temp_dir = Path(temp_dir)
        self.ffmpeg_binary = ffmpeg_binary

        logger.debug(f"VideoConcatenator initialized with temp dir: {self.temp_dir}")

    def verify_ffmpeg(self) -> None:
        """Verify that ffmpeg is installed and available.

        Raises:
            ConcatenationError: If ffmpeg is not found or does not respond.
        """
        try:
            subprocess.run(
                [self.ffmpeg_binary, '-version'],
                capture_output=True,
                check=True,
                timeout=10
            )
            logger.debug("ffmpeg is available")
        except subprocess.TimeoutExpired as e:
            raise ConcatenationError(
                "ffmpeg verification timed out. "
                "Try running 'ffmpeg -version' manually to diagnose the issue."
            ) from e
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            raise ConcatenationError(
                "ffmpeg is not installed or not in PATH. "
                "Please install ffmpeg: https://ffmpeg.org/download.html"
            ) from e

    def create_concat_file(self, video_paths: List[str]) -> str:
        """Write an ffmpeg concat demuxer manifest.

        Each call gets its own file so concurrent requests don't clobber
        each other's manifests.

        Args:
            video_paths: Clip file paths, in playback order.

        Returns:
            Path to the manifest.
        """
        self.temp_dir.mkdir(parents=True, exist_ok=True)
        concat_file_path = self.temp_dir / f"concat_{uuid.uuid4().hex}.txt"

        with open(concat_file_path, 'w', encoding='utf-8') as f:
            for video_path in video_paths:
                abs_path = Path(video_path).resolve()
                # Escape single quotes in the path by replacing ' with '\''
                escaped_path = str(abs_path).replace("'", "'\\''")
                f.write(f"file '{escaped_path}'\n")

        logger.debug(f"Created concat file: {concat_file_path}")
        return str(concat_file_path)

    def concatenate_videos(self, video_paths: List[str], output_path: str) -> None:
        """Concatenate clips losslessly with the ffmpeg concat demuxer.

        Args:
            video_paths: Clip file paths to concatenate, in order.
            output_path: Path of the file to create.

        Raises:
            ConcatenationError: If an input is missing or ffmpeg fails.
        """
        if not video_paths:
            raise ConcatenationError("No video paths provided for concatenation")

        for path in video_paths:
            if not Path(path).exists():
                raise ConcatenationError(f"Input file does not exist: {path}")

        logger.info(f"Concatenating {len(video_paths)} videos to {output_path}")
        concat_file = None

        try:
            Path(output_path).parent.mkdir(parents=True, exist_ok=True)
            concat_file = self.create_concat_file(video_paths)

            cmd = [
                self.ffmpeg_binary,
                '-f', 'concat',
                '-safe', '0',
                '-i', concat_file,
                '-c', 'copy',  # Stream copy, no re-encoding
                '-y',
                output_path
            ]

            logger.debug(f"Running ffmpeg concat command: {' '.join(cmd)}")
            subprocess.run(
                cmd,
                capture_output=True,
                check=True,
                text=True
            )

            output_file = Path(output_path)
            if not output_file.exists():
                raise ConcatenationError("Output file was not created")
            if output_file.stat().st_size == 0:
                raise ConcatenationError("Output file is empty")

            logger.info(f"Successfully concatenated {len(video_paths)} videos to {output_path}")

        except subprocess.CalledProcessError as e:
            error_msg = f"Concatenation failed: {e.stderr}"
            logger.error(error_msg)
            raise ConcatenationError(error_msg) from e
        except FileNotFoundError as e:
            if concat_file is None:
                raise ConcatenationError(f"Could not prepare concatenation: {e}") from e
            raise ConcatenationError(f"ffmpeg executable not found: {self.ffmpeg_binary}") from e
        except OSError as e:
            # Unwritable output directory or non-executable ffmpeg binary
            raise ConcatenationError(f"Concatenation failed: {e}") from e
        finally:
            if concat_file is not None:
                self._remove(concat_file)

    def _remove(self, path: str) -> None:
        try:
            Path(path).unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to delete temp file {path}: {e}")
