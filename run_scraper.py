"""Convenience script for fetching TikTok download links from the command line."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

# Ensure the src directory is on the Python path so the tiktokdl package can be imported
SRC_PATH = Path(__file__).resolve().parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from tiktokdl.config import AppConfig  # noqa: E402  (import after path setup)
from tiktokdl.services.downloader import handle  # noqa: E402
from tiktokdl.services.scraper import TikTokioScraper  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    """Fetch every URL given on the command line and print the results as JSON."""

    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("urls", nargs="+", help="TikTok URLs to fetch")
    parser.add_argument("--config", help="Path to a JSON settings file")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    try:
        config = AppConfig.load(args.config)
    except (FileNotFoundError, ValueError) as exc:
        logging.error("Could not load configuration: %s", exc)
        return 1

    scraper = TikTokioScraper(config.scraper)

    results = []
    for url in args.urls:
        outcome = handle(url, scraper=scraper)
        if not outcome.success:
            logging.error("Failed to fetch %s: %s", url, outcome.body.get("message"))
        results.append(
            {"url": url, "success": outcome.success, "status": outcome.status_code, "body": outcome.body}
        )

    print(json.dumps(results, indent=2, ensure_ascii=False))
    return 0 if all(entry["success"] for entry in results) else 2


if __name__ == "__main__":
    sys.exit(main())
