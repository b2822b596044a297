from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Protocol

import requests

from .models import SegmentRef

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"


class Transcriber(Protocol):
    def transcribe(self, audio_path: Path | str) -> str:
        ...


class WhisperASRClient:
    """Client for an OpenAI-compatible ``/audio/transcriptions`` endpoint."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str = "whisper-1",
        language: str = "en",
        temperature: float = 0.0,
        timeout: int = 600,
    ) -> None:
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self.api_key:
            raise RuntimeError("OPENAI_API_KEY is not set")

        self.base_url = (base_url or os.getenv("OPENAI_BASE_URL") or DEFAULT_BASE_URL).rstrip("/")
        self.model = model
        self.language = language
        self.temperature = temperature
        self.timeout = timeout

    def transcribe(self, audio_path: Path | str) -> str:
        path = Path(audio_path)

        data: dict[str, Any] = {
            "model": self.model,
            "language": self.language,
            "response_format": "text",
            "temperature": str(self.temperature),
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            with path.open("rb") as handle:
                response = requests.post(
                    f"{self.base_url}/audio/transcriptions",
                    headers=headers,
                    data=data,
                    files={"file": (path.name, handle, "audio/mpeg")},
                    timeout=self.timeout,
                )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise RuntimeError(f"Transcription request failed for {path.name}") from exc
        except OSError as exc:
            raise RuntimeError(f"Could not read audio segment {path.name}") from exc

        return response.text


def transcribe_segment(client: Transcriber, segment: SegmentRef) -> str | None:
    """Transcribe one segment; ``None`` means the segment had no speech content.

    Errors raised by ``client`` propagate to the caller.
    """

    text = client.transcribe(segment.path)
    if text is None or not text.strip():
        return None
    return text.strip()
