"""Exception hierarchy shared by the validator, scraper and API layers."""

from __future__ import annotations

from typing import Any, Dict

__all__ = [
    "DownloaderError",
    "EmptyInputError",
    "InvalidFormatError",
    "ContentNotFoundError",
    "UpstreamConnectionError",
    "UpstreamHttpError",
    "UpstreamTimeoutError",
    "UpstreamNoResponseError",
    "InternalError",
    "EXAMPLE_URL",
]

EXAMPLE_URL = "https://vt.tiktok.com/ZSrJxqY5S/"


class DownloaderError(Exception):
    """Base class for every failure surfaced to API callers.

    Each subclass knows the HTTP status it maps to and the human readable
    message returned in the response body. ``detail`` holds the raw error
    string for diagnostics and is only rendered when ``include_detail`` is set.
    """

    status_code: int = 500
    message: str = "Internal server error"
    include_detail: bool = False

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.message)
        self.detail = detail

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"success": False, "message": self.message}
        if self.include_detail:
            payload["error"] = self.detail or self.message
        return payload


class EmptyInputError(DownloaderError):
    status_code = 400
    message = "URL must not be empty"


class InvalidFormatError(DownloaderError):
    status_code = 400
    message = f"Invalid TikTok URL. Example: {EXAMPLE_URL}"


class ContentNotFoundError(DownloaderError):
    """Raised when the upstream answered but nothing downloadable was found."""

    status_code = 404
    message = "Could not find any content. The URL may be wrong or the video may be private."


class UpstreamConnectionError(DownloaderError):
    status_code = 503
    message = "Failed to connect to the TikTok service. Please try again later."


class UpstreamHttpError(DownloaderError):
    """The extraction service answered with a non-success status."""

    include_detail = True

    def __init__(self, upstream_status: int | None, detail: str | None = None) -> None:
        super().__init__(detail)
        self.upstream_status = upstream_status
        self.status_code = upstream_status or 500
        if upstream_status == 404:
            self.message = "Video not found on TikTok"
            self.include_detail = False
        else:
            self.message = f"TikTok service returned an error: {self.status_code}"


class UpstreamTimeoutError(DownloaderError):
    status_code = 504
    message = "No response from the TikTok service. Timeout?"


class UpstreamNoResponseError(DownloaderError):
    status_code = 504
    message = "No response from the TikTok service. Timeout?"


class InternalError(DownloaderError):
    include_detail = True
