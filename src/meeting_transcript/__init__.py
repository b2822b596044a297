"""Meeting recording to transcript and summary pipeline."""

from .asr_client import WhisperASRClient, transcribe_segment
from .audio import extract_audio, list_segments, split_audio
from .config import Config, resolve_api_key, validate_api_key
from .models import MeetingInfo, SegmentRef
from .output import OutputArtifacts, directory_for, sanitize_filename
from .pipeline import NoSegmentsError, process_recording, run_chunks
from .prompts import collect_meeting_info
from .summarizer import MeetingSummarizer

__all__ = [
    "Config",
    "MeetingInfo",
    "MeetingSummarizer",
    "NoSegmentsError",
    "OutputArtifacts",
    "SegmentRef",
    "WhisperASRClient",
    "collect_meeting_info",
    "directory_for",
    "extract_audio",
    "list_segments",
    "process_recording",
    "resolve_api_key",
    "run_chunks",
    "sanitize_filename",
    "split_audio",
    "transcribe_segment",
    "validate_api_key",
]
