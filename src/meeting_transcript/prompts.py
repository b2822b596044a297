from __future__ import annotations

import re
from datetime import date
from typing import Callable

from .models import MeetingInfo

_DATE_FORMAT = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _ask_until_valid(
    ask: Callable[[str], str],
    message: str,
    error: str,
    is_valid: Callable[[str], bool],
    notify: Callable[[str], None],
    default: str | None = None,
) -> str:
    prompt = f"{message} ({default}): " if default else f"{message}: "
    while True:
        answer = ask(prompt).strip()
        if not answer and default is not None:
            answer = default
        if is_valid(answer):
            return answer
        notify(error)


def collect_meeting_info(
    ask: Callable[[str], str] = input,
    *,
    today: date | None = None,
    notify: Callable[[str], None] = print,
) -> MeetingInfo:
    """Prompt for the meeting date, title, description and participants."""

    default_date = (today or date.today()).isoformat()

    meeting_date = _ask_until_valid(
        ask,
        "Meeting date (YYYY-MM-DD)",
        "Please enter date in YYYY-MM-DD format",
        lambda value: bool(_DATE_FORMAT.match(value)),
        notify,
        default=default_date,
    )
    title = _ask_until_valid(ask, "Project/Meeting title", "Please enter a title", bool, notify)
    description = _ask_until_valid(ask, "Project description", "Please enter a description", bool, notify)
    participants = _ask_until_valid(
        ask,
        "Participants (comma-separated, e.g., Dan, Ben, Claudia)",
        "Please enter at least one participant",
        lambda value: any(name.strip() for name in value.split(",")),
        notify,
    )

    return MeetingInfo.from_strings(
        date=meeting_date,
        title=title,
        description=description,
        participants=participants,
    )
