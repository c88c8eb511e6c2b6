"""Client for the tiktokio.com HTML endpoint and parser for its markup."""

from __future__ import annotations

import logging
from typing import Dict, List

import requests
from bs4 import BeautifulSoup
from urllib3.exceptions import ProtocolError

from tiktokdl.config import ScraperConfig
from tiktokdl.errors import (
    UpstreamConnectionError,
    UpstreamHttpError,
    UpstreamNoResponseError,
    UpstreamTimeoutError,
)
from tiktokdl.models import ExtractionResult, ImageItem, VideoLinks

__all__ = ["TikTokioScraper", "decode"]

logger = logging.getLogger(__name__)

ENCODED_AMPERSAND = "&#38;"
ERROR_BODY_PREVIEW = 500


def decode(url: str | None) -> str | None:
    """Turn every ``&#38;`` back into ``&``; empty input yields ``None``."""

    if not url:
        return None
    while ENCODED_AMPERSAND in url:
        url = url.replace(ENCODED_AMPERSAND, "&")
    return url


def _classify_link(label: str) -> str | None:
    """Return the result slot a download link label belongs to."""

    if "without watermark" in label and "hd" in label:
        return "nowm_hd"
    if "without watermark" in label:
        return "nowm"
    if "watermark" in label:
        return "wm"
    if "mp3" in label:
        return "mp3"
    return None


class TikTokioScraper:
    """Fetch a TikTok URL through tiktokio.com and extract its download links."""

    def __init__(
        self,
        config: ScraperConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config or ScraperConfig()
        self._owns_session = session is None
        self._session = session or requests.Session()

    def close(self) -> None:
        """Release pooled connections of a session this scraper created."""

        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "TikTokioScraper":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False

    decode = staticmethod(decode)

    def parse_html(self, html: str) -> ExtractionResult:
        """Extract title, cover, gallery images and download links from ``html``."""

        soup = BeautifulSoup(html, "lxml")

        heading = soup.select_one(".video-info h3")
        title = heading.get_text().strip() if heading else ""

        cover = soup.select_one(".video-info > img")
        cover_url = self.decode(cover.get("src")) if cover else None

        images: List[ImageItem] = []
        for item in soup.select(".images-grid .image-item"):
            anchor = item.select_one("a")
            image = item.select_one("img")
            url = (anchor.get("href") if anchor else None) or (image.get("src") if image else None)
            url = self.decode(url)
            if url:
                images.append(ImageItem(index=len(images) + 1, url=url))

        links: Dict[str, str] = {}
        for anchor in soup.select(".download-links a"):
            href = self.decode(anchor.get("href"))
            if not href:
                continue
            slot = _classify_link(anchor.get_text().lower())
            if slot:
                links[slot] = href

        return ExtractionResult(
            title=title or None,
            cover=cover_url,
            images=images,
            videos=VideoLinks(
                nowm=links.get("nowm"),
                nowm_hd=links.get("nowm_hd"),
                wm=links.get("wm"),
            ),
            mp3=links.get("mp3"),
        )

    def fetch(self, reference: str) -> ExtractionResult:
        """POST ``reference`` to the extraction service and parse the answer.

        Transport failures are translated into the ``Upstream*`` errors of
        :mod:`tiktokdl.errors`. Nothing is retried.
        """

        logger.info("Fetching %s from %s", reference, self.config.endpoint)
        try:
            response = self._session.post(
                self.config.endpoint,
                json={"vid": reference, "prefix": self.config.prefix},
                headers=self.config.headers,
                timeout=self.config.timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            upstream = exc.response
            status = upstream.status_code if upstream is not None else None
            logger.error(
                "Extraction service responded with %s: %s",
                status,
                upstream.text[:ERROR_BODY_PREVIEW] if upstream is not None else "",
            )
            raise UpstreamHttpError(status, str(exc)) from exc
        except requests.Timeout as exc:
            logger.error("Timed out after %sms fetching %s", self.config.timeout_ms, reference)
            raise UpstreamTimeoutError(str(exc)) from exc
        except requests.ConnectionError as exc:
            if _is_dropped_response(exc):
                logger.error("Connection dropped before a response for %s: %s", reference, exc)
                raise UpstreamNoResponseError(str(exc)) from exc
            logger.error("Could not reach %s: %s", self.config.endpoint, exc)
            raise UpstreamConnectionError(str(exc)) from exc
        except requests.exceptions.ChunkedEncodingError as exc:
            logger.error("Incomplete response for %s: %s", reference, exc)
            raise UpstreamNoResponseError(str(exc)) from exc

        return self.parse_html(_response_text(response))


def _response_text(response: requests.Response) -> str:
    """Return the body, reading it as UTF-8 when the upstream names no charset."""

    content_type = response.headers.get("content-type", "")
    if "charset" not in content_type.lower():
        response.encoding = "utf-8"
    return response.text


def _is_dropped_response(exc: requests.ConnectionError) -> bool:
    """Return ``True`` when the request went out but the connection died before a reply."""

    reason = exc.args[0] if exc.args else None
    return isinstance(reason, ProtocolError)
