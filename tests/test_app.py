"""Tests for the HTTP API."""

import base64
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
from fastapi.testclient import TestClient

import app as api
from isl_announcer.exceptions import TranscriptionError
from isl_announcer.generator import IslAnnouncementGenerator

from conftest import make_clip


@pytest.fixture
def translator():
    fake = Mock()
    fake.translate.return_value = "Train arriving at Mumbai Central"
    return fake


@pytest.fixture
def client(settings, translator):
    api.app.dependency_overrides[api.get_generator] = lambda: IslAnnouncementGenerator(settings, translator=translator)
    api.app.dependency_overrides[api.get_translator] = lambda: translator
    yield TestClient(api.app)
    api.app.dependency_overrides.clear()


class TestApi:

    def test_health(self, client):
        with patch("isl_announcer.concatenator.subprocess.run") as run:
            body = client.get("/health").json()

        assert body == {"ok": True, "ffmpeg": True}
        assert run.call_args.args[0][-1] == "-version"

    def test_health_reports_missing_ffmpeg(self, client):
        with patch("isl_announcer.concatenator.subprocess.run", side_effect=FileNotFoundError()):
            response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"ok": True, "ffmpeg": False}

    def test_list_videos(self, client):
        response = client.get("/isl/videos")

        assert response.status_code == 200
        assert "/isl_dataset/stations/New_Delhi.mp4" in response.json()

    def test_playlist(self, client):
        response = client.post("/isl/playlist", json={"text": "Train 12 arriving at New Delhi"})

        assert response.status_code == 200
        body = response.json()
        assert [item["phrase"] for item in body["playlist"]] == ["train", "1", "2", "arriving", "new delhi"]
        assert body["missing_words"] == ["at"]

    def test_playlist_translates_first(self, client, translator):
        response = client.post("/isl/playlist", json={"text": "गाड़ी आ रही है", "lang": "hi"})

        assert response.status_code == 200
        translator.translate.assert_called_once_with("गाड़ी आ रही है", "en", "hi")
        assert response.json()["text"] == "Train arriving at Mumbai Central"

    def test_blank_text_rejected(self, client):
        assert client.post("/isl/playlist", json={"text": "   "}).status_code == 400

    def test_video_single_clip(self, client):
        with patch("isl_announcer.concatenator.subprocess.run") as run:
            response = client.post("/isl/video", json={"text": "Mumbai Central"})

        run.assert_not_called()
        body = response.json()
        assert body["status"] == "success"
        assert body["playlist"] == ["/isl_dataset/stations/Mumbai_Central.mp4"]

    def test_video_stitched(self, client, fake_ffmpeg):
        with patch("isl_announcer.concatenator.subprocess.run", side_effect=fake_ffmpeg):
            response = client.post("/isl/video", json={"text": "Train arriving"})

        body = response.json()
        assert body["status"] == "success"
        assert len(body["playlist"]) == 1
        assert body["playlist"][0].startswith("/isl_output/")

    def test_video_unavailable(self, client):
        response = client.post("/isl/video", json={"text": "hello"})

        body = response.json()
        assert response.status_code == 200
        assert body["status"] == "unavailable"
        assert body["playlist"] == []

    def test_internal_error_is_generic(self, client, settings):
        broken = Mock(spec=IslAnnouncementGenerator)
        broken.translate_and_generate.side_effect = RuntimeError("disk on fire")
        api.app.dependency_overrides[api.get_generator] = lambda: broken

        response = client.post("/isl/playlist", json={"text": "train"})

        assert response.status_code == 500
        assert "disk on fire" not in response.text

    def test_translate(self, client, translator):
        response = client.post("/translate", json={"text": "नमस्ते", "lang": "hi"})

        assert response.json() == {"translated_text": "Train arriving at Mumbai Central"}

    def test_translate_not_configured(self, client):
        api.app.dependency_overrides[api.get_translator] = lambda: None

        response = client.post("/translate", json={"text": "नमस्ते", "lang": "hi"})

        assert response.status_code == 503

    def test_clip_urls_are_served(self, client):
        make_clip(Path(api.settings.dataset_dir), "words/Signal.mp4", b"signal clip")
        api.app.dependency_overrides[api.get_generator] = lambda: IslAnnouncementGenerator(api.settings)

        playlist = client.post("/isl/playlist", json={"text": "signal"}).json()["playlist"]
        response = client.get(playlist[0]["path"])

        assert response.status_code == 200
        assert response.content == b"signal clip"

    def test_stitched_video_is_served(self, client, fake_ffmpeg):
        make_clip(Path(api.settings.dataset_dir), "words/Signal.mp4", b"signal clip")
        make_clip(Path(api.settings.dataset_dir), "words/Green.mp4", b"green clip")
        api.app.dependency_overrides[api.get_generator] = lambda: IslAnnouncementGenerator(api.settings)

        with patch("isl_announcer.concatenator.subprocess.run", side_effect=fake_ffmpeg):
            body = client.post("/isl/video", json={"text": "signal green"}).json()
        response = client.get(body["playlist"][0])

        assert body["status"] == "success"
        assert response.status_code == 200
        assert response.content == b"stitched video"

    def test_api_routes_take_precedence_over_static_files(self, client):
        assert client.get("/isl/videos").status_code == 200
        assert client.get("/no_such_clip.mp4").status_code == 404


class TestSpeechApi:

    @pytest.fixture
    def transcriber(self):
        fake = Mock()
        fake.transcribe.return_value = "गाड़ी आ रही है"
        return fake

    @pytest.fixture
    def audio_uri(self):
        return "data:audio/wav;base64," + base64.b64encode(b"RIFF....WAVEfmt ").decode()

    def test_speech_to_playlist(self, client, settings, translator, transcriber, audio_uri):
        api.app.dependency_overrides[api.get_generator] = lambda: IslAnnouncementGenerator(
            settings, translator=translator, transcriber=transcriber
        )

        response = client.post("/isl/speech", json={"audio_data_uri": audio_uri, "language_code": "hi-IN"})

        assert response.status_code == 200
        body = response.json()
        transcriber.transcribe.assert_called_once_with(b"RIFF....WAVEfmt ", "hi-IN")
        assert body["transcribed_text"] == "गाड़ी आ रही है"
        assert body["text"] == "Train arriving at Mumbai Central"
        assert [item["phrase"] for item in body["playlist"]] == ["train", "arriving", "mumbai central"]
        assert body["missing_words"] == ["at"]

    def test_bad_audio_rejected(self, client, settings, transcriber):
        api.app.dependency_overrides[api.get_generator] = lambda: IslAnnouncementGenerator(
            settings, transcriber=transcriber
        )

        response = client.post("/isl/speech", json={"audio_data_uri": "not audio", "language_code": "hi-IN"})

        assert response.status_code == 400
        transcriber.transcribe.assert_not_called()

    def test_not_configured(self, client, audio_uri):
        response = client.post("/isl/speech", json={"audio_data_uri": audio_uri, "language_code": "hi-IN"})

        assert response.status_code == 503

    def test_transcription_failure_is_generic(self, client, settings, transcriber, audio_uri):
        transcriber.transcribe.side_effect = TranscriptionError("Failed to transcribe audio.")
        api.app.dependency_overrides[api.get_generator] = lambda: IslAnnouncementGenerator(
            settings, transcriber=transcriber
        )

        response = client.post("/isl/speech", json={"audio_data_uri": audio_uri, "language_code": "hi-IN"})

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to transcribe audio"
