"""TikTok downloader package exposing configuration, API, and service helpers."""

from __future__ import annotations

import os
from pathlib import Path

__version__ = "1.0.0"

ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


def _read_env_file(path: Path) -> dict[str, str]:
    """Parse ``KEY=value`` lines, ignoring blanks and ``#`` comments."""

    values: dict[str, str] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        key, sep, value = line.strip().partition("=")
        key = key.strip()
        if sep and key and not key.startswith("#"):
            values[key] = value.strip()
    return values


if ENV_FILE.is_file():
    for _key, _value in _read_env_file(ENV_FILE).items():
        os.environ.setdefault(_key, _value)

from .config import AppConfig, ScraperConfig, ServerConfig  # noqa: E402,F401
from .models import ExtractionResult, ImageItem, VideoLinks  # noqa: E402,F401

__all__ = [
    "AppConfig",
    "ExtractionResult",
    "ImageItem",
    "ScraperConfig",
    "ServerConfig",
    "VideoLinks",
    "__version__",
]
