from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from .models import MeetingInfo

TRANSCRIPT_FILENAME = "transcript.txt"
SUMMARY_FILENAME = "summary.txt"
AUDIO_DIRNAME = "audio"
SUMMARY_HEADING = "## MEETING SUMMARY"

_INVALID_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*]')
_WHITESPACE_RUN = re.compile(r"\s+")
_SEPARATOR = "⸻"


def sanitize_filename(name: str) -> str:
    """Strip characters that are illegal in file names on common platforms.

    Whitespace is collapsed after removal, so ``"Q1: Planning / Review?"``
    becomes ``"Q1 Planning Review"``.
    """

    without_invalid = _INVALID_FILENAME_CHARS.sub("", name)
    return _WHITESPACE_RUN.sub(" ", without_invalid).strip()


def output_folder_name(meeting_info: MeetingInfo) -> str:
    return f"{meeting_info.date} - {sanitize_filename(meeting_info.title)}"


def directory_for(meeting_info: MeetingInfo, source_parent: Path | str) -> Path:
    return Path(source_parent).resolve() / output_folder_name(meeting_info)


@dataclass(frozen=True)
class OutputArtifacts:
    directory: Path
    transcript_path: Path
    summary_path: Path
    audio_dir: Path

    @classmethod
    def for_meeting(cls, meeting_info: MeetingInfo, source_parent: Path | str) -> "OutputArtifacts":
        directory = directory_for(meeting_info, source_parent)
        return cls(
            directory=directory,
            transcript_path=directory / TRANSCRIPT_FILENAME,
            summary_path=directory / SUMMARY_FILENAME,
            audio_dir=directory / AUDIO_DIRNAME,
        )

    def ensure_directories(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self.audio_dir.mkdir(parents=True, exist_ok=True)


def transcript_header(meeting_info: MeetingInfo) -> str:
    return (
        f"{_SEPARATOR}\n\n"
        f"Transcript: {meeting_info.title}\n\n"
        f"Date: {meeting_info.date}\n"
        f"Project: {meeting_info.description}\n"
        f"Participants: {meeting_info.participants_text}\n\n"
        f"{_SEPARATOR}\n\n"
    )


def write_transcript(artifacts: OutputArtifacts, text: str) -> Path:
    # Full rewrite on every call; callers never append.
    artifacts.transcript_path.write_text(text, encoding="utf-8")
    return artifacts.transcript_path


def write_summary(artifacts: OutputArtifacts, summary: str) -> Path:
    artifacts.summary_path.write_text(f"{SUMMARY_HEADING}\n\n{summary}", encoding="utf-8")
    return artifacts.summary_path
