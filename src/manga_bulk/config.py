"""Configuration loaded from config.json."""

import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

log = logging.getLogger(__name__)

CONFIG_FILE = "config.json"

DEFAULT_VOLUME_PATTERN = r"v(?:ol|olume)?\D?(\d+)"
DEFAULT_CHAPTER_PATTERN = r"c(?:h(?:apter)?)?(?:\D)?(\d+([\.|x|p]\d+)?)"


class AppConfig(BaseModel):
    """Settings shared by all commands. CLI flags take precedence."""

    username: str | None = None
    password: str | None = None

    base_url: str = "https://mangadex.org"
    user_agent: str = "manga-bulk/0.3.0"
    request_timeout: float = 300.0
    cookie_file: Path = Path("mangadex-cookies.txt")
    group_cache_file: Path = Path("groupcache.json")

    # Sent in place of an unset primary group (-1). Historical "no group" id.
    fallback_group_id: int = 2

    volume_pattern: str = DEFAULT_VOLUME_PATTERN
    chapter_pattern: str = DEFAULT_CHAPTER_PATTERN
    title_pattern: str | None = None
    language: int = 1
    archive_extensions: list[str] = Field(default_factory=lambda: [".zip"])


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration, falling back to defaults.

    A missing file is normal. A broken file is logged and ignored.
    """
    config_path = path or Path(CONFIG_FILE)
    if not config_path.exists():
        return AppConfig()

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
        return AppConfig.model_validate(data)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        log.warning("Ignoring unreadable config file %s: %s", config_path, e)
        return AppConfig()
