from __future__ import annotations

import logging
import math
import re
import subprocess
from pathlib import Path

from pydub.utils import mediainfo

from .models import SegmentRef

logger = logging.getLogger(__name__)

SEGMENT_SECONDS = 600
SEGMENT_PATTERN = "audio_%03d.mp3"
_SEGMENT_NAME = re.compile(r"^audio_(\d+)\.mp3$")


def _run_ffmpeg(command: list[str], failure_message: str) -> None:
    try:
        subprocess.run(command, check=True, stdout=subprocess.DEVNULL, stderr=subprocess.PIPE)
    except FileNotFoundError as exc:
        raise RuntimeError(f"{failure_message}: ffmpeg is not installed") from exc
    except subprocess.CalledProcessError as exc:
        detail = (exc.stderr or b"").decode("utf-8", errors="replace").strip().splitlines()
        suffix = f": {detail[-1]}" if detail else ""
        raise RuntimeError(f"{failure_message}{suffix}") from exc


def extract_audio(input_video: Path | str, output_path: Path | str) -> Path:
    """Extract the best-quality audio track from ``input_video`` with ffmpeg.

    Args:
        input_video: Path to the source video file.
        output_path: Target path of the extracted track. The container is
            inferred by ffmpeg from the suffix.

    Returns:
        Path to the extracted audio file.
    """

    source = Path(input_video)
    target = Path(output_path)

    command = [
        "ffmpeg",
        "-y",
        "-i",
        str(source),
        "-q:a",
        "0",
        "-map",
        "a",
        str(target),
    ]
    logger.info("Extracting audio from %s", source.name)
    _run_ffmpeg(command, "Failed to extract audio with ffmpeg")
    return target


def split_audio(
    audio_path: Path | str,
    output_dir: Path | str,
    *,
    segment_seconds: int = SEGMENT_SECONDS,
) -> list[SegmentRef]:
    """Cut ``audio_path`` into fixed-length ``audio_NNN.mp3`` files in ``output_dir``.

    Returns the segments found in ``output_dir`` afterwards, in numeric order.
    """

    if segment_seconds <= 0:
        raise ValueError("segment_seconds must be positive")

    source = Path(audio_path)
    target_dir = Path(output_dir)
    target_dir.mkdir(parents=True, exist_ok=True)

    duration = probe_duration(source)
    if duration is not None:
        expected = max(1, math.ceil(duration / segment_seconds))
        logger.info(
            "Splitting %.1f minutes of audio into ~%d chunk(s) of %d seconds",
            duration / 60,
            expected,
            segment_seconds,
        )

    command = [
        "ffmpeg",
        "-y",
        "-i",
        str(source),
        "-f",
        "segment",
        "-segment_time",
        str(segment_seconds),
        "-q:a",
        "0",
        "-map",
        "a",
        str(target_dir / SEGMENT_PATTERN),
    ]
    _run_ffmpeg(command, "Failed to create audio chunks with ffmpeg")
    return list_segments(target_dir)


def list_segments(directory: Path | str) -> list[SegmentRef]:
    """Return the ``audio_NNN.mp3`` files in ``directory`` sorted by their numeric index.

    The index is parsed from the file name, so ordering does not depend on
    zero-padding width (``audio_1000.mp3`` sorts after ``audio_999.mp3``).
    """

    candidates: list[tuple[int, Path]] = []
    for path in Path(directory).iterdir():
        if not path.is_file():
            continue
        match = _SEGMENT_NAME.match(path.name)
        if match is None:
            continue
        candidates.append((int(match.group(1)), path))

    candidates.sort(key=lambda pair: pair[0])
    return [
        SegmentRef(index=position, path=path, filename=path.name)
        for position, (_, path) in enumerate(candidates)
    ]


def probe_duration(audio_path: Path | str) -> float | None:
    """Duration of ``audio_path`` in seconds, or ``None`` when ffprobe cannot tell."""

    try:
        info = mediainfo(str(audio_path))
    except OSError:
        return None

    try:
        return float(info["duration"])
    except (KeyError, TypeError, ValueError):
        return None
