"""Run the TikTok downloader API with Uvicorn on the first free port."""

from __future__ import annotations

import errno
import logging
import socket
import sys
import threading

import uvicorn

from tiktokdl.api.app import create_app
from tiktokdl.config import AppConfig

__all__ = ["find_available_port", "install_exception_logging", "main"]

logger = logging.getLogger(__name__)


def find_available_port(start: int, host: str = "0.0.0.0", max_attempts: int = 100) -> int:
    """Return the first port at or above ``start`` that can be bound on ``host``."""

    for port in range(start, min(start + max_attempts, 65536)):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            try:
                sock.bind((host, port))
            except OSError as exc:
                if exc.errno != errno.EADDRINUSE:
                    raise
                logger.warning("Port %d is already in use, trying %d...", port, port + 1)
                continue
        return port

    raise RuntimeError(f"No free port found between {start} and {start + max_attempts - 1}")


def install_exception_logging() -> None:
    """Log uncaught exceptions from the main thread and worker threads."""

    def _log_uncaught(exc_type, exc_value, exc_traceback) -> None:
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        logger.critical("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))

    def _log_thread_exception(args: threading.ExceptHookArgs) -> None:
        logger.critical(
            "Uncaught exception in thread %s",
            args.thread.name if args.thread else "<unknown>",
            exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
        )

    sys.excepthook = _log_uncaught
    threading.excepthook = _log_thread_exception


def _log_banner(port: int, environment: str) -> None:
    base = f"http://localhost:{port}"
    logger.info("TikTok Downloader API")
    logger.info("  Server:   %s", base)
    logger.info("  API:      %s/api", base)
    logger.info("  Endpoints:")
    logger.info("    GET  /api/status   - server status")
    logger.info("    POST /api/download - download TikTok")
    logger.info("    GET  /api          - API info")
    logger.info("  Mode: %s", environment)


def main() -> None:
    """Load the configuration, pick a port and serve the API until interrupted."""

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    install_exception_logging()

    try:
        config = AppConfig.load()
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Could not load configuration: %s", exc)
        sys.exit(1)

    logger.info("Looking for an available port...")
    try:
        port = find_available_port(
            config.server.port,
            host=config.server.host,
            max_attempts=config.server.max_port_attempts,
        )
    except (OSError, RuntimeError) as exc:
        logger.error("Failed to start server: %s", exc)
        sys.exit(1)

    _log_banner(port, config.server.environment)
    uvicorn.run(create_app(config), host=config.server.host, port=port, log_level="info")


if __name__ == "__main__":
    main()
