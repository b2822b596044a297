from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from meeting_transcript.models import MeetingInfo


def _setup_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "token")
    monkeypatch.delenv("OPENAI_BASE_URL", raising=False)


@pytest.fixture
def meeting_info() -> MeetingInfo:
    return MeetingInfo.from_strings(
        date="2025-01-15",
        title="Q1 Planning Meeting",
        description="Quarterly planning and goal setting",
        participants="Dan, Ben , Claudia",
    )


def test_summarize_posts_meeting_context(monkeypatch: pytest.MonkeyPatch, meeting_info: MeetingInfo) -> None:
    from meeting_transcript.summarizer import MeetingSummarizer

    _setup_env(monkeypatch)

    mock_response = MagicMock()
    mock_response.json.return_value = {
        "choices": [
            {
                "message": {
                    "content": "1. Executive Summary\nThe team met."
                }
            }
        ]
    }
    mock_response.raise_for_status.return_value = None

    captured_payload = {}

    def fake_post(url: str, headers: dict, json: dict, timeout: int) -> MagicMock:  # type: ignore[override]
        captured_payload["url"] = url
        captured_payload["headers"] = headers
        captured_payload["json"] = json
        captured_payload["timeout"] = timeout
        return mock_response

    monkeypatch.setattr("meeting_transcript.summarizer.requests.post", fake_post)

    summarizer = MeetingSummarizer()
    result = summarizer.summarize("Hello team.\n\nBudget approved.\n\n", meeting_info)

    assert result == "1. Executive Summary\nThe team met."
    assert captured_payload["url"] == "https://api.openai.com/v1/chat/completions"
    assert captured_payload["headers"]["Authorization"] == "Bearer token"

    payload = captured_payload["json"]
    assert payload["model"] == "gpt-4o"
    assert payload["max_tokens"] == 2000
    assert payload["temperature"] == 0.3
    assert "expert meeting summarizer" in payload["messages"][0]["content"]

    user_prompt = payload["messages"][1]["content"]
    for section in (
        "Executive Summary",
        "Key Topics Discussed",
        "Important Decisions Made",
        "Action Items",
        "Follow-up Timeline",
    ):
        assert section in user_prompt
    assert "- Title: Q1 Planning Meeting" in user_prompt
    assert "- Participants: Dan, Ben, Claudia" in user_prompt
    assert user_prompt.endswith("Transcript:\nHello team.\n\nBudget approved.\n\n")


def test_summarize_raises_when_content_not_text(monkeypatch: pytest.MonkeyPatch, meeting_info: MeetingInfo) -> None:
    from meeting_transcript.summarizer import MeetingSummarizer

    _setup_env(monkeypatch)

    mock_response = MagicMock()
    mock_response.json.return_value = {
        "choices": [
            {
                "message": {
                    "content": {"summary": "hello"}
                }
            }
        ]
    }
    mock_response.raise_for_status.return_value = None

    monkeypatch.setattr(
        "meeting_transcript.summarizer.requests.post", lambda *args, **kwargs: mock_response
    )

    summarizer = MeetingSummarizer()
    with pytest.raises(RuntimeError, match="content is not text"):
        summarizer.summarize("another text", meeting_info)


def test_summarize_raises_on_malformed_payload(monkeypatch: pytest.MonkeyPatch, meeting_info: MeetingInfo) -> None:
    from meeting_transcript.summarizer import MeetingSummarizer

    _setup_env(monkeypatch)

    mock_response = MagicMock()
    mock_response.json.return_value = {"choices": []}
    mock_response.raise_for_status.return_value = None

    monkeypatch.setattr(
        "meeting_transcript.summarizer.requests.post", lambda *args, **kwargs: mock_response
    )

    with pytest.raises(RuntimeError, match="Unexpected summarization response payload"):
        MeetingSummarizer().summarize("text", meeting_info)


def test_summarize_wraps_http_errors(monkeypatch: pytest.MonkeyPatch, meeting_info: MeetingInfo) -> None:
    from meeting_transcript.summarizer import MeetingSummarizer

    _setup_env(monkeypatch)

    mock_response = MagicMock()
    mock_response.raise_for_status.side_effect = requests.HTTPError("429 Too Many Requests")

    monkeypatch.setattr(
        "meeting_transcript.summarizer.requests.post", lambda *args, **kwargs: mock_response
    )

    with pytest.raises(RuntimeError, match="Summarization request failed"):
        MeetingSummarizer().summarize("text", meeting_info)
