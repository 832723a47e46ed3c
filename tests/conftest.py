"""Shared fixtures for the ISL announcer tests."""

import os
import tempfile
from pathlib import Path

import pytest

# app.py reads settings at import time; keep its directories out of the repo
os.environ.setdefault("ISL_PUBLIC_DIR", tempfile.mkdtemp(prefix="isl_public_"))

from isl_announcer.config import Settings


def make_clip(root: Path, relative: str, content: bytes = b"fake mp4 data") -> Path:
    """Create a fake clip file at root/relative."""
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


@pytest.fixture
def public_dir(tmp_path):
    public = tmp_path / "public"
    public.mkdir()
    return public


@pytest.fixture
def dataset_dir(public_dir):
    """An ISL dataset with stations nested in a subdirectory."""
    dataset = public_dir / "isl_dataset"
    for relative in [
        "words/Train.mp4",
        "words/arriving.mp4",
        "words/on.mp4",
        "words/platform.mp4",
        "words/delhi.mp4",
        "stations/Mumbai_Central.mp4",
        "stations/New_Delhi.mp4",
        "digits/1.mp4",
        "digits/2.mp4",
        "digits/9.mp4",
        "notes.txt",
    ]:
        make_clip(dataset, relative)
    return dataset


@pytest.fixture
def settings(public_dir, dataset_dir):
    return Settings(
        public_dir=str(public_dir),
        dataset_dir=str(dataset_dir),
        output_dir=str(public_dir / "isl_output"),
        audio_dir=str(public_dir / "audio"),
    )


@pytest.fixture
def fake_ffmpeg():
    """A subprocess.run stand-in that writes the requested output file."""
    calls = []

    def run(cmd, **kwargs):
        calls.append(cmd)
        Path(cmd[-1]).write_bytes(b"stitched video")

        class Result:
            returncode = 0
            stdout = ""
            stderr = ""
        return Result()

    run.calls = calls
    return run
