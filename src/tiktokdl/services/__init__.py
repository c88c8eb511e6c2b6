"""Service layer entry points for the TikTok downloader."""

from __future__ import annotations

from .downloader import DownloadOutcome, handle, resolve  # noqa: F401
from .scraper import TikTokioScraper, decode  # noqa: F401
from .validator import validate_reference  # noqa: F401

__all__ = ["DownloadOutcome", "TikTokioScraper", "decode", "handle", "resolve", "validate_reference"]
