from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, Mapping

import requests

from .asr_client import DEFAULT_BASE_URL

logger = logging.getLogger(__name__)

_CONFIG_PATH_ENV = "MEETING_TRANSCRIPT_CONFIG"
API_KEY_FIELD = "openaiApiKey"
MIN_API_KEY_LENGTH = 20

SOURCE_ENV = "environment variable"
SOURCE_SAVED = "saved configuration"
SOURCE_PROMPT = "prompt"


def default_config_path() -> Path:
    override = os.getenv(_CONFIG_PATH_ENV)
    if override:
        return Path(override)
    return Path.home() / ".meeting-transcript-config.json"


class Config:
    """Persisted key-value settings, loaded once and saved only on request."""

    def __init__(self, path: Path, data: dict[str, Any] | None = None) -> None:
        self.path = path
        self.data: dict[str, Any] = dict(data or {})

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        target = path if path is not None else default_config_path()
        try:
            loaded = json.loads(target.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return cls(target)
        except (OSError, json.JSONDecodeError):
            logger.warning("Could not read config file %s, ignoring it", target)
            return cls(target)

        if not isinstance(loaded, dict):
            logger.warning("Config file %s does not hold an object, ignoring it", target)
            return cls(target)
        return cls(target, loaded)

    def save(self) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self.data, indent=2), encoding="utf-8")
        except OSError:
            logger.warning("Could not save config file %s", self.path)
            return False
        return True

    @property
    def api_key(self) -> str | None:
        value = self.data.get(API_KEY_FIELD)
        return value if isinstance(value, str) and value else None

    @api_key.setter
    def api_key(self, value: str | None) -> None:
        if value:
            self.data[API_KEY_FIELD] = value
        else:
            self.data.pop(API_KEY_FIELD, None)


def mask_api_key(api_key: str) -> str:
    return f"{api_key[:7]}...{api_key[-4:]}"


def resolve_api_key(
    config: Config,
    *,
    confirm: Callable[[str], bool],
    ask_secret: Callable[[str], str],
    env: Mapping[str, str] | None = None,
    notify: Callable[[str], None] = print,
) -> tuple[str, str]:
    """Find an API key: environment first, then saved config, then a prompt.

    Returns the key and a label naming where it came from. ``config`` is only
    written back when the user agrees to it.
    """

    environ = os.environ if env is None else env
    api_key: str | None = environ.get("OPENAI_API_KEY") or None
    source: str | None = SOURCE_ENV if api_key else None

    if api_key is None and config.api_key:
        api_key = config.api_key
        source = SOURCE_SAVED

    if api_key is not None:
        notify(f"Found OpenAI API key from {source}: {mask_api_key(api_key)}")
        if not confirm("Use this API key?"):
            if source == SOURCE_SAVED and confirm("Delete the saved API key?"):
                config.api_key = None
                if config.save():
                    notify("Saved API key deleted")
            api_key = None

    if api_key is None:
        while True:
            entered = ask_secret("Enter your OpenAI API key: ").strip()
            if len(entered) >= MIN_API_KEY_LENGTH:
                break
            notify("Please enter a valid OpenAI API key")
        api_key = entered
        source = SOURCE_PROMPT
        if confirm("Save this API key for future use?"):
            config.api_key = api_key
            if config.save():
                notify("API key saved successfully")

    return api_key, source or SOURCE_PROMPT


def validate_api_key(api_key: str, *, base_url: str | None = None, timeout: int = 30) -> None:
    base = (base_url or os.getenv("OPENAI_BASE_URL") or DEFAULT_BASE_URL).rstrip("/")
    try:
        response = requests.get(
            f"{base}/models",
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=timeout,
        )
        response.raise_for_status()
    except requests.RequestException as exc:
        raise RuntimeError("Invalid API key or connection failed") from exc
