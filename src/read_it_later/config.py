"""Configuration management."""

import dataclasses
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import orjson
import structlog

log = structlog.get_logger()

# Global singleton instance
_config_instance: "Config | None" = None


@dataclass(frozen=True)
class NoteSettings:
    """Templates and formatting options read by the parsers.

    Instances are immutable so a parser can hold one for its whole lifetime.
    Date formats use strftime directives.
    """

    youtube_note: str = "[[ReadItLater]] [[Youtube]]\n\n# [%videoTitle%](%videoURL%)\n\n%videoPlayer%"
    youtube_note_title: str = "Youtube - %title%"
    twitter_note: str = (
        "[[ReadItLater]] [[Tweet]]\n\n# [%tweetAuthorName%](%tweetURL%)\n\n%tweetContent%"
    )
    twitter_note_title: str = "Tweet from %tweetAuthorName% (%date%)"
    parsable_article_note: str = (
        "[[ReadItLater]] [[Article]]\n\n# [%articleTitle%](%articleURL%)\n\n%articleContent%"
    )
    parsable_article_note_title: str = "%title%"
    not_parsable_article_note: str = "[[ReadItLater]] [[Article]]\n\n[%articleURL%](%articleURL%)"
    not_parsable_article_note_title: str = "Article %date%"
    text_snippet_note: str = "[[ReadItLater]] [[Textsnippet]]\n\n%content%"
    text_snippet_note_title: str = "Notice %date%"
    date_title_fmt: str = "%Y-%m-%d %H-%M-%S"
    date_content_fmt: str = "%Y-%m-%d"
    youtube_api_key: str = ""
    youtube_embed_width: str = "560"
    youtube_embed_height: str = "315"
    youtube_use_privacy_enhanced_embed: bool = False

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "NoteSettings":
        """Build settings from a mapping, ignoring keys that are not settings.

        Args:
            data: Setting names mapped to values.

        Returns:
            A NoteSettings with defaults for every key not in ``data``.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            log.warning("unknown_note_settings_ignored", keys=unknown)

        values = {k: v for k, v in data.items() if k in known}
        if "youtube_use_privacy_enhanced_embed" in values:
            values["youtube_use_privacy_enhanced_embed"] = _as_bool(
                values["youtube_use_privacy_enhanced_embed"]
            )
        for key in ("youtube_embed_width", "youtube_embed_height"):
            if key in values:
                values[key] = str(values[key])
        return cls(**values)


class Config:
    """Application configuration."""

    def __init__(self) -> None:
        """Initialize configuration with defaults and env overrides."""
        # Vault root and inbox folder notes are written to
        self._vault_dir = Path(
            os.environ.get("READ_IT_LATER_VAULT_DIR", Path.home() / "ReadItLater")
        )
        self._inbox_dir = os.environ.get("READ_IT_LATER_INBOX_DIR", "ReadItLater Inbox")

        self._log_level = os.environ.get("READ_IT_LATER_LOG_LEVEL", "INFO")

        json_logging_env = os.environ.get("READ_IT_LATER_JSON_LOGGING", "true")
        self._json_logging = _as_bool(json_logging_env)

        self._http_timeout = float(os.environ.get("READ_IT_LATER_HTTP_TIMEOUT", "30"))

        settings_file = os.environ.get("READ_IT_LATER_SETTINGS_FILE")
        self._settings_file = Path(settings_file) if settings_file else None

        self._youtube_api_key = os.environ.get("READ_IT_LATER_YOUTUBE_API_KEY")

    @property
    def vault_dir(self) -> Path:
        """Root directory of the vault."""
        return self._vault_dir

    @property
    def inbox_dir(self) -> str:
        """Vault-relative folder new notes are saved into."""
        return self._inbox_dir

    @property
    def log_level(self) -> str:
        """Logging level."""
        return self._log_level

    @property
    def json_logging(self) -> bool:
        """Whether to use JSON logging format."""
        return self._json_logging

    @property
    def http_timeout(self) -> float:
        """Timeout in seconds for outgoing HTTP requests."""
        return self._http_timeout

    @property
    def settings_file(self) -> Path | None:
        """Optional JSON file with note template overrides."""
        return self._settings_file

    @property
    def note_settings(self) -> NoteSettings:
        """Snapshot of the note settings.

        Defaults are overlaid with the settings file, then with the
        YouTube API key from the environment.
        """
        data: dict[str, Any] = {}
        if self._settings_file is not None:
            data.update(load_settings_file(self._settings_file))
        if self._youtube_api_key is not None:
            data["youtube_api_key"] = self._youtube_api_key
        return NoteSettings.from_mapping(data)


def get_config() -> Config:
    """Get the global configuration instance.

    Returns:
        The singleton Config instance.
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance


def load_settings_file(path: Path) -> dict[str, Any]:
    """Read note settings from a JSON file.

    Args:
        path: Path to a JSON object of setting names to values.

    Returns:
        The decoded settings, or an empty dict if the file does not exist.

    Raises:
        ValueError: If the file is not a JSON object.
    """
    if not path.exists():
        log.warning("settings_file_missing", path=str(path))
        return {}

    try:
        data = orjson.loads(path.read_bytes())
    except orjson.JSONDecodeError as e:
        raise ValueError(f"Settings file {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a JSON object")
    return data


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")
