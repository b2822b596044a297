import argparse
import getpass
import logging
import sys
from pathlib import Path
from typing import Optional

from meeting_transcript import (
	Config,
	collect_meeting_info,
	process_recording,
	resolve_api_key,
	validate_api_key,
)
from meeting_transcript.config import SOURCE_SAVED

EPILOG = """\
examples:
  process_meeting.py --video=./meeting.mp4
  process_meeting.py --audio=~/recordings/call.mp3

requirements:
  OpenAI API key (saved to ~/.meeting-transcript-config.json after first use,
  or set OPENAI_API_KEY) and ffmpeg on PATH.
"""


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(
		prog="process_meeting.py",
		description="Transcribe a meeting recording and generate a structured summary.",
		epilog=EPILOG,
		formatter_class=argparse.RawDescriptionHelpFormatter,
	)
	source = parser.add_mutually_exclusive_group()
	source.add_argument(
		"--video",
		help="Process a video file (extracts audio, transcribes, summarizes)",
	)
	source.add_argument(
		"--audio",
		help="Process an audio file (chunks, transcribes, summarizes)",
	)
	parser.add_argument(
		"--verbose",
		action="store_true",
		help="Show debug logging",
	)
	return parser


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
	return build_parser().parse_args(argv)


def confirm(message: str) -> bool:
	answer = input(f"{message} [Y/n]: ").strip().lower()
	return answer in {"", "y", "yes"}


def setup_api_key(config: Config) -> str:
	api_key, source = resolve_api_key(config, confirm=confirm, ask_secret=getpass.getpass)

	print("Validating API key...")
	try:
		validate_api_key(api_key)
	except RuntimeError as exc:
		print(f"Error: {exc}", file=sys.stderr)
		if source == SOURCE_SAVED:
			print("The saved API key appears to be invalid.")
			if confirm("Delete the invalid saved API key?"):
				config.api_key = None
				if config.save():
					print("Invalid API key deleted")
		sys.exit(1)
	print("API key validated successfully")
	return api_key


def main(argv: Optional[list[str]] = None) -> None:
	parser = build_parser()
	args = parser.parse_args(argv)

	if not args.video and not args.audio:
		parser.print_help()
		return

	logging.basicConfig(
		level=logging.DEBUG if args.verbose else logging.INFO,
		format="%(levelname)s %(message)s",
	)

	source = Path(args.video or args.audio).expanduser()
	if not source.exists():
		kind = "Video" if args.video else "Audio"
		print(f"{kind} file not found: {source.resolve()}", file=sys.stderr)
		sys.exit(1)

	try:
		api_key = setup_api_key(Config.load())
		meeting_info = collect_meeting_info()
		result = process_recording(
			source,
			meeting_info,
			is_video=bool(args.video),
			api_key=api_key,
		)
	except (KeyboardInterrupt, EOFError):
		print("\nAborted.", file=sys.stderr)
		sys.exit(1)
	except Exception as exc:  # noqa: BLE001 - report any fatal error before exiting
		print(f"An error occurred: {exc}", file=sys.stderr)
		sys.exit(1)

	if result.get("summarizer_error"):
		print(f"Summary failed: {result['summarizer_error']}")
	if result["failed"]:
		print(f"Chunks that failed to transcribe: {', '.join(result['failed'])}")
	kind = "Video" if args.video else "Audio"
	print(f"{kind} processing completed!")
	print(f"Files saved to: {result['output_dir']}")


if __name__ == "__main__":
	main()
