"""Tests for the ISL video library indexer."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from isl_announcer.library import (
    VideoClip, VideoLibrary, build_library, list_clips, normalize_clip_name
)

from conftest import make_clip


class TestNormalizeClipName:

    def test_strips_extension_and_underscores(self):
        assert normalize_clip_name("Mumbai_Central.mp4") == "mumbai central"

    def test_keeps_other_punctuation(self):
        assert normalize_clip_name("don't_stop.mp4") == "don't stop"

    def test_digit_clip(self):
        assert normalize_clip_name("7.mp4") == "7"


class TestBuildLibrary:

    def test_indexes_nested_clips(self, dataset_dir, public_dir):
        library = build_library(str(dataset_dir), str(public_dir))

        assert len(library) == 10
        assert "mumbai central" in library
        assert "train" in library
        assert "notes" not in library

    def test_paths_are_root_relative(self, dataset_dir, public_dir):
        library = build_library(str(dataset_dir), str(public_dir))

        clip = library.lookup("mumbai central")
        assert clip.path == "/isl_dataset/stations/Mumbai_Central.mp4"
        assert Path(clip.file_path).exists()

    def test_public_root_defaults_to_parent(self, dataset_dir):
        library = build_library(str(dataset_dir))

        assert library.lookup("new delhi").path == "/isl_dataset/stations/New_Delhi.mp4"

    def test_lookup_is_case_insensitive(self, dataset_dir):
        library = build_library(str(dataset_dir))

        assert library.lookup("MUMBAI Central") is not None

    def test_missing_root_is_empty(self, tmp_path):
        library = build_library(str(tmp_path / "does_not_exist"))

        assert len(library) == 0

    def test_duplicate_names_keep_first(self, tmp_path):
        dataset = tmp_path / "isl_dataset"
        make_clip(dataset, "a/Hello.mp4")
        make_clip(dataset, "b/hello.mp4")

        library = build_library(str(dataset))

        assert len(library) == 1
        assert library.lookup("hello").path == "/isl_dataset/a/Hello.mp4"

    @pytest.mark.skipif(
        not hasattr(os, "geteuid") or os.geteuid() == 0,
        reason="root can read any directory"
    )
    def test_unreadable_directory_is_skipped(self, tmp_path):
        dataset = tmp_path / "isl_dataset"
        make_clip(dataset, "locked/secret.mp4")
        make_clip(dataset, "open/visible.mp4")
        locked = dataset / "locked"
        locked.chmod(0)
        try:
            library = build_library(str(dataset))
        finally:
            locked.chmod(0o755)

        assert "visible" in library
        assert "secret" not in library

    def test_permission_denied_subdirectory_is_skipped(self, tmp_path):
        dataset = tmp_path / "isl_dataset"
        make_clip(dataset, "locked/secret.mp4")
        make_clip(dataset, "open/visible.mp4")
        real_scandir = os.scandir

        def scandir(path):
            if Path(path).name == "locked":
                raise PermissionError(13, "Permission denied", str(path))
            return real_scandir(path)

        with patch("isl_announcer.library.os.scandir", side_effect=scandir):
            library = build_library(str(dataset))

        assert "visible" in library
        assert "secret" not in library

    def test_symlinked_directories_not_followed(self, tmp_path):
        dataset = tmp_path / "isl_dataset"
        make_clip(dataset, "words/train.mp4")
        make_clip(dataset, "words/arriving.mp4")
        (dataset / "words" / "loop").symlink_to(dataset, target_is_directory=True)

        library = build_library(str(dataset))
        clips = list_clips(str(dataset))

        assert library.names() == ["arriving", "train"]
        assert clips == ["/isl_dataset/words/arriving.mp4", "/isl_dataset/words/train.mp4"]


class TestVideoLibrary:

    def test_add_rejects_duplicates(self):
        library = VideoLibrary()
        first = VideoClip(name="hello", path="/a/hello.mp4", file_path="/x/a/hello.mp4")
        second = VideoClip(name="hello", path="/b/hello.mp4", file_path="/x/b/hello.mp4")

        assert library.add(first) is True
        assert library.add(second) is False
        assert library.lookup("hello") is first

    def test_names_sorted(self):
        library = VideoLibrary()
        for name in ["train", "arriving", "on"]:
            library.add(VideoClip(name=name, path=f"/{name}.mp4", file_path=f"/{name}.mp4"))

        assert library.names() == ["arriving", "on", "train"]


class TestListClips:

    def test_lists_all_clip_urls(self, dataset_dir, public_dir):
        clips = list_clips(str(dataset_dir), str(public_dir))

        assert len(clips) == 10
        assert "/isl_dataset/digits/1.mp4" in clips
        assert clips == sorted(clips)

    def test_missing_root(self, tmp_path):
        assert list_clips(str(tmp_path / "missing")) == []
