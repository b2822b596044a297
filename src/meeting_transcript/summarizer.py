from __future__ import annotations

import os
from typing import Any, Protocol

import requests

from .asr_client import DEFAULT_BASE_URL
from .models import MeetingInfo

SYSTEM_PROMPT = (
    "You are an expert meeting summarizer. "
    "Generate clear, well-structured meeting summaries from transcripts."
)

SUMMARY_SECTIONS = (
    "Executive Summary (2-3 paragraphs)",
    "Key Topics Discussed (bullet points)",
    "Important Decisions Made (bullet points)",
    "Action Items (bullet points with assignee names if mentioned)",
    "Follow-up Timeline (bullet points with dates if available)",
)


class Summarizer(Protocol):
    def summarize(self, transcript: str, meeting_info: MeetingInfo) -> str:
        ...


def build_summary_prompt(transcript: str, meeting_info: MeetingInfo) -> str:
    sections = "\n".join(f"{number}. {section}" for number, section in enumerate(SUMMARY_SECTIONS, start=1))
    return (
        "Based on the following transcript, generate a well-structured meeting summary "
        "with these sections:\n"
        f"{sections}\n\n"
        "Meeting Context:\n"
        f"- Title: {meeting_info.title}\n"
        f"- Date: {meeting_info.date}\n"
        f"- Project: {meeting_info.description}\n"
        f"- Participants: {meeting_info.participants_text}\n\n"
        "Transcript:\n"
        f"{transcript}"
    )


class MeetingSummarizer:
    """Client for an OpenAI-compatible chat completions endpoint."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str = "gpt-4o",
        max_tokens: int = 2000,
        temperature: float = 0.3,
        timeout: int = 300,
    ) -> None:
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self.api_key:
            raise RuntimeError("OPENAI_API_KEY is not set")

        self.base_url = (base_url or os.getenv("OPENAI_BASE_URL") or DEFAULT_BASE_URL).rstrip("/")
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout

    def summarize(self, transcript: str, meeting_info: MeetingInfo) -> str:
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_summary_prompt(transcript, meeting_info)},
            ],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = requests.post(
                f"{self.base_url}/chat/completions",
                headers=headers,
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise RuntimeError("Summarization request failed") from exc

        data = response.json()
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise RuntimeError("Unexpected summarization response payload") from exc

        if not isinstance(content, str):
            raise RuntimeError("Summarization response content is not text")

        return content
