"""Request handling shared by the HTTP API and the command line scraper."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict

from tiktokdl.config import ScraperConfig
from tiktokdl.errors import ContentNotFoundError, DownloaderError, InternalError
from tiktokdl.models import ExtractionResult
from tiktokdl.services.scraper import TikTokioScraper
from tiktokdl.services.validator import validate_reference

__all__ = ["DownloadOutcome", "SUCCESS_MESSAGE", "handle", "resolve"]

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Data fetched successfully"


@dataclass
class DownloadOutcome:
    """Status code and JSON body produced for one download request."""

    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return bool(self.body.get("success"))


def resolve(reference: Any, scraper: TikTokioScraper | None = None) -> ExtractionResult:
    """Validate ``reference`` and return its non-empty extraction result.

    Raises a :class:`~tiktokdl.errors.DownloaderError` subclass for invalid
    input, upstream failures and posts without any downloadable content.
    """

    url = validate_reference(reference)
    logger.info("Processing URL: %s", url)

    scraper = scraper or TikTokioScraper()
    result = scraper.fetch(url)

    if result.is_empty():
        raise ContentNotFoundError()

    logger.info("Extraction succeeded for %s", url)
    return result


def handle(
    reference: Any,
    *,
    scraper: TikTokioScraper | None = None,
    config: ScraperConfig | None = None,
) -> DownloadOutcome:
    """Run a complete download request and map its result to a response."""

    owns_scraper = scraper is None
    if owns_scraper:
        scraper = TikTokioScraper(config)

    try:
        result = resolve(reference, scraper)
    except DownloaderError as exc:
        logger.warning("Download request failed (%s): %s", exc.status_code, exc)
        return DownloadOutcome(exc.status_code, exc.to_payload())
    except Exception as exc:  # noqa: BLE001 - every failure must become a JSON response
        logger.exception("Unexpected failure while processing %r", reference)
        error = InternalError(str(exc))
        return DownloadOutcome(error.status_code, error.to_payload())
    finally:
        if owns_scraper:
            scraper.close()

    return DownloadOutcome(
        200,
        {"success": True, "message": SUCCESS_MESSAGE, "data": result.model_dump()},
    )
