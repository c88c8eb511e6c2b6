from __future__ import annotations

import logging
import socket
import sys
import threading

import pytest

from tiktokdl import server


def _busy_socket() -> socket.socket:
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    sock.listen(1)
    return sock


def test_find_available_port_returns_free_start_port() -> None:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as probe:
        probe.bind(("127.0.0.1", 0))
        port = probe.getsockname()[1]

    assert server.find_available_port(port, host="127.0.0.1") == port


def test_find_available_port_skips_busy_port(caplog) -> None:
    busy = _busy_socket()
    try:
        port = busy.getsockname()[1]
        with caplog.at_level(logging.WARNING, logger="tiktokdl.server"):
            found = server.find_available_port(port, host="127.0.0.1")
    finally:
        busy.close()

    assert found > port
    assert f"Port {port} is already in use" in caplog.text


def test_find_available_port_gives_up_after_max_attempts() -> None:
    busy = _busy_socket()
    try:
        port = busy.getsockname()[1]
        with pytest.raises(RuntimeError, match="No free port"):
            server.find_available_port(port, host="127.0.0.1", max_attempts=1)
    finally:
        busy.close()


def test_install_exception_logging_logs_uncaught_errors(monkeypatch, caplog) -> None:
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    monkeypatch.setattr(threading, "excepthook", threading.excepthook)

    server.install_exception_logging()

    try:
        raise ValueError("process level fault")
    except ValueError:
        exc_info = sys.exc_info()

    with caplog.at_level(logging.CRITICAL, logger="tiktokdl.server"):
        sys.excepthook(*exc_info)

    assert "Uncaught exception" in caplog.text
    assert "process level fault" in caplog.text


def test_main_runs_uvicorn_on_discovered_port(monkeypatch) -> None:
    for name in ("PORT", "APP_ENV", "TIKTOKIO_ENDPOINT", "TIKTOKIO_PREFIX"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    monkeypatch.setattr(threading, "excepthook", threading.excepthook)

    captured: dict[str, object] = {}
    monkeypatch.setattr(server, "find_available_port", lambda start, host, max_attempts: start + 1)
    monkeypatch.setattr(
        server.uvicorn,
        "run",
        lambda app, host, port, log_level: captured.update(app=app, host=host, port=port),
    )

    server.main()

    assert captured["port"] == 3001
    assert captured["host"] == "0.0.0.0"
    assert captured["app"].state.config.server.port == 3000
