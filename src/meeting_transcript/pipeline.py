from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional, Sequence

from .asr_client import Transcriber, WhisperASRClient, transcribe_segment
from .audio import SEGMENT_SECONDS, extract_audio, split_audio
from .models import MeetingInfo, SegmentRef
from .output import OutputArtifacts, transcript_header, write_summary, write_transcript
from .summarizer import MeetingSummarizer, Summarizer

logger = logging.getLogger(__name__)

FULL_AUDIO_FILENAME = "full-audio.mp3"


class NoSegmentsError(RuntimeError):
    """Raised when splitting produced no audio chunks to transcribe."""


def chunk_label(position: int, filename: str) -> str:
    return f"--- Chunk {position + 1} ({filename}) ---"


def run_chunks(
    segments: Sequence[SegmentRef],
    meeting_info: MeetingInfo,
    *,
    transcriber: Transcriber,
    summarizer: Summarizer,
    artifacts: OutputArtifacts,
) -> dict[str, Any]:
    """Transcribe ``segments`` one at a time, then summarize the result.

    The transcript artifact is rewritten after every segment that did not
    raise, so the file on disk always holds the text accumulated so far.
    Failures of single segments and of the summarizer are logged and reported
    in the returned dict; only filesystem errors propagate.
    """

    if not segments:
        raise NoSegmentsError("No audio chunks found")

    total = len(segments)
    formatted = transcript_header(meeting_info)
    raw = ""
    transcribed: list[str] = []
    skipped: list[str] = []
    failed: list[str] = []

    logger.info("Transcribing %d audio chunk(s)", total)

    for position, segment in enumerate(segments):
        try:
            text = transcribe_segment(transcriber, segment)
        except Exception as exc:  # noqa: BLE001 - one bad chunk must not abort the run
            failed.append(segment.filename)
            logger.error("Failed to transcribe %s: %s", segment.filename, exc)
            continue

        if text is None:
            skipped.append(segment.filename)
            logger.warning("No content in %s", segment.filename)
        else:
            formatted += f"\n{chunk_label(position, segment.filename)}\n{text}\n\n"
            raw += f"{text}\n\n"
            transcribed.append(segment.filename)
            logger.info(
                "Transcribed chunk %d/%d (%d chars)",
                position + 1,
                total,
                len(text),
            )

        write_transcript(artifacts, formatted)

    logger.info("Transcribed %d of %d chunk(s)", len(transcribed), total)

    result: dict[str, Any] = {
        "transcript": formatted,
        "raw_transcript": raw,
        "summary": None,
        "transcribed": transcribed,
        "skipped": skipped,
        "failed": failed,
    }

    if not raw:
        logger.warning("No transcript content; skipping summary")
        write_transcript(artifacts, formatted)
        return result

    logger.info("Generating meeting summary")
    try:
        summary = summarizer.summarize(raw, meeting_info)
    except Exception as exc:  # noqa: BLE001 - we must preserve the transcript on any failure
        result["summarizer_error"] = str(exc) or exc.__class__.__name__
        logger.error("Failed to generate summary: %s", result["summarizer_error"])
        write_transcript(artifacts, formatted)
        return result

    write_transcript(artifacts, formatted)
    write_summary(artifacts, summary)
    result["summary"] = summary
    logger.info("Summary written to %s", artifacts.summary_path)
    return result


def process_recording(
    source_path: Path | str,
    meeting_info: MeetingInfo,
    *,
    is_video: bool,
    transcriber: Optional[Transcriber] = None,
    summarizer: Optional[Summarizer] = None,
    api_key: str | None = None,
    base_url: str | None = None,
    segment_seconds: int = SEGMENT_SECONDS,
) -> dict[str, Any]:
    """Run the end-to-end flow from a video or audio file to transcript and summary."""

    source = Path(source_path).resolve()
    if not source.exists():
        kind = "Video" if is_video else "Audio"
        raise FileNotFoundError(f"{kind} file not found: {source}")

    artifacts = OutputArtifacts.for_meeting(meeting_info, source.parent)
    artifacts.ensure_directories()
    logger.info("Processing %s into %s", source.name, artifacts.directory)

    if is_video:
        audio_source = extract_audio(source, artifacts.audio_dir / FULL_AUDIO_FILENAME)
    else:
        audio_source = source

    segments = split_audio(audio_source, artifacts.audio_dir, segment_seconds=segment_seconds)
    if not segments:
        raise NoSegmentsError("No audio chunks found")

    asr = transcriber if transcriber is not None else WhisperASRClient(api_key=api_key, base_url=base_url)
    llm = summarizer if summarizer is not None else MeetingSummarizer(api_key=api_key, base_url=base_url)

    result = run_chunks(
        segments,
        meeting_info,
        transcriber=asr,
        summarizer=llm,
        artifacts=artifacts,
    )
    result["output_dir"] = artifacts.directory
    return result
