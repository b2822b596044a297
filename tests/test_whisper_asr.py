from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

from meeting_transcript.models import SegmentRef


@pytest.fixture
def audio_file(tmp_path: Path) -> Path:
    audio = tmp_path / "audio_000.mp3"
    audio.write_bytes(b"fake-audio")
    return audio


def test_transcribe_posts_audio_with_fixed_options(audio_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    from meeting_transcript.asr_client import WhisperASRClient

    monkeypatch.setenv("OPENAI_API_KEY", "secret")
    monkeypatch.delenv("OPENAI_BASE_URL", raising=False)

    captured: dict[str, object] = {}
    mock_response = MagicMock()
    mock_response.text = "hello world\n"
    mock_response.raise_for_status.return_value = None

    def fake_post(url: str, headers: dict, data: dict, files: dict, timeout: int) -> MagicMock:  # type: ignore[override]
        captured["url"] = url
        captured["headers"] = headers
        captured["data"] = data
        captured["filename"] = files["file"][0]
        captured["timeout"] = timeout
        return mock_response

    monkeypatch.setattr("meeting_transcript.asr_client.requests.post", fake_post)

    client = WhisperASRClient()
    transcript = client.transcribe(audio_file)

    assert transcript == "hello world\n"
    assert captured["url"] == "https://api.openai.com/v1/audio/transcriptions"
    assert captured["headers"] == {"Authorization": "Bearer secret"}
    assert captured["data"] == {
        "model": "whisper-1",
        "language": "en",
        "response_format": "text",
        "temperature": "0.0",
    }
    assert captured["filename"] == "audio_000.mp3"


def test_transcribe_wraps_request_errors(audio_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    from meeting_transcript.asr_client import WhisperASRClient

    def fake_post(*_args, **_kwargs):
        raise requests.ConnectionError("boom")

    monkeypatch.setattr("meeting_transcript.asr_client.requests.post", fake_post)

    client = WhisperASRClient(api_key="secret", base_url="https://example.test/v1/")
    with pytest.raises(RuntimeError, match="request failed for audio_000.mp3"):
        client.transcribe(audio_file)


def test_transcribe_reports_unreadable_segment(tmp_path: Path) -> None:
    from meeting_transcript.asr_client import WhisperASRClient

    client = WhisperASRClient(api_key="secret")
    with pytest.raises(RuntimeError, match="Could not read"):
        client.transcribe(tmp_path / "missing.mp3")


def test_client_requires_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    from meeting_transcript.asr_client import WhisperASRClient

    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(RuntimeError, match="OPENAI_API_KEY"):
        WhisperASRClient()


@pytest.mark.parametrize("raw", ["", "   ", "\n\t\n"])
def test_transcribe_segment_treats_blank_as_no_content(raw: str, audio_file: Path) -> None:
    from meeting_transcript.asr_client import transcribe_segment

    client = MagicMock()
    client.transcribe.return_value = raw
    segment = SegmentRef(index=0, path=audio_file, filename=audio_file.name)

    assert transcribe_segment(client, segment) is None
    client.transcribe.assert_called_once_with(audio_file)


def test_transcribe_segment_strips_text(audio_file: Path) -> None:
    from meeting_transcript.asr_client import transcribe_segment

    client = MagicMock()
    client.transcribe.return_value = " Budget approved.\n"
    segment = SegmentRef(index=0, path=audio_file, filename=audio_file.name)

    assert transcribe_segment(client, segment) == "Budget approved."
