from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable


@dataclass(frozen=True)
class MeetingInfo:
    """Metadata describing a single meeting recording."""

    date: str
    title: str
    description: str
    participants: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.title.strip():
            raise ValueError("title must not be empty")
        if not self.description.strip():
            raise ValueError("description must not be empty")
        cleaned = tuple(name.strip() for name in self.participants if name.strip())
        if not cleaned:
            raise ValueError("at least one participant is required")
        object.__setattr__(self, "participants", cleaned)

    @classmethod
    def from_strings(
        cls,
        *,
        date: str,
        title: str,
        description: str,
        participants: str | Iterable[str],
    ) -> "MeetingInfo":
        if isinstance(participants, str):
            names = tuple(participants.split(","))
        else:
            names = tuple(participants)
        return cls(date=date, title=title, description=description, participants=names)

    @property
    def participants_text(self) -> str:
        return ", ".join(self.participants)


@dataclass(frozen=True)
class SegmentRef:
    index: int
    path: Path
    filename: str
