"""Configuration models and helpers for the TikTok downloader API."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List

from pydantic import BaseModel, Field, HttpUrl, ValidationError

__all__ = [
    "AppConfig",
    "ScraperConfig",
    "ServerConfig",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_ENDPOINT",
    "DEFAULT_HEADERS",
    "DEFAULT_PREFIX",
    "DEFAULT_TIMEOUT_MS",
]

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "data" / "settings.json"

DEFAULT_ENDPOINT = "https://tiktokio.com/api/v1/tk/html"
DEFAULT_PREFIX = "tiktokio.com"
DEFAULT_TIMEOUT_MS = 15_000
DEFAULT_HEADERS = {
    "accept": "*/*",
    "accept-language": "ms-MY",
    "cache-control": "no-cache",
    "content-type": "application/json",
    "origin": "https://tiktokio.com",
    "pragma": "no-cache",
    "referer": "https://tiktokio.com/",
    "user-agent": (
        "Mozilla/5.0 (Linux; Android 10) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/127.0.0.0 Mobile Safari/537.36"
    ),
}


class ScraperConfig(BaseModel):
    """Settings for the outbound call to the extraction service."""

    base_url: HttpUrl = Field(
        default=DEFAULT_ENDPOINT,
        validate_default=True,
        description="Endpoint receiving the POST with the TikTok URL",
    )
    prefix: str = Field(
        default=DEFAULT_PREFIX,
        description="Identifying prefix sent alongside the URL",
    )
    headers: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_HEADERS),
        description="Headers mimicking a mobile browser request",
    )
    timeout_ms: int = Field(
        default=DEFAULT_TIMEOUT_MS,
        gt=0,
        description="Upper bound for the outbound request in milliseconds",
    )

    @property
    def endpoint(self) -> str:
        return str(self.base_url)

    @property
    def timeout(self) -> float:
        """Return the timeout in seconds as expected by :mod:`requests`."""

        return self.timeout_ms / 1000


class ServerConfig(BaseModel):
    """Settings for the HTTP server process."""

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)
    environment: str = Field(default="development")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    max_port_attempts: int = Field(
        default=100,
        ge=1,
        description="How many consecutive ports to probe when the configured one is taken",
    )


class AppConfig(BaseModel):
    """Top level configuration combining scraper and server settings."""

    scraper: ScraperConfig = Field(default_factory=ScraperConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @classmethod
    def from_file(cls, path: Path | str | None = None) -> "AppConfig":
        """Read settings from ``path`` (default: ``data/settings.json``).

        A missing file raises :class:`FileNotFoundError`; unparsable or
        invalid content raises :class:`ValueError` naming the file.
        """

        source = Path(path or DEFAULT_CONFIG_PATH)
        if not source.is_file():
            raise FileNotFoundError(f"Settings file does not exist: {source}")

        try:
            return cls.model_validate_json(source.read_bytes())
        except ValidationError as exc:
            raise ValueError(f"Settings file {source} could not be used:\n{exc}") from exc

    @classmethod
    def load(cls, path: Path | str | None = None) -> "AppConfig":
        """Return the effective configuration.

        An explicit ``path`` must exist. Without one, the default settings file
        is used when present and built-in defaults otherwise. Environment
        variables are applied last.
        """

        if path is not None:
            config = cls.from_file(path)
        elif DEFAULT_CONFIG_PATH.exists():
            config = cls.from_file(DEFAULT_CONFIG_PATH)
        else:
            config = cls()
        return config.with_env_overrides()

    def with_env_overrides(self) -> "AppConfig":
        """Return a copy with ``PORT``, ``APP_ENV`` and endpoint overrides applied."""

        data = self.model_dump(mode="json")
        env = os.environ

        if env.get("PORT"):
            data["server"]["port"] = env["PORT"]
        if env.get("APP_ENV"):
            data["server"]["environment"] = env["APP_ENV"]
        if env.get("TIKTOKIO_ENDPOINT"):
            data["scraper"]["base_url"] = env["TIKTOKIO_ENDPOINT"]
        if env.get("TIKTOKIO_PREFIX"):
            data["scraper"]["prefix"] = env["TIKTOKIO_PREFIX"]

        try:
            return type(self).model_validate(data)
        except ValidationError as exc:
            raise ValueError(f"Invalid configuration from environment\n{exc}") from exc

    def dump(self, path: Path | str | None = None) -> Path:
        """Write these settings as indented JSON and return the file written."""

        target = Path(path or DEFAULT_CONFIG_PATH)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2) + "\n", encoding="utf-8")
        return target
