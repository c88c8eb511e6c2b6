from pathlib import Path

import pytest

pytest.importorskip("pydantic")

from tiktokdl.config import DEFAULT_HEADERS, AppConfig, ScraperConfig, ServerConfig


def test_scraper_defaults() -> None:
    config = ScraperConfig()

    assert config.endpoint == "https://tiktokio.com/api/v1/tk/html"
    assert config.prefix == "tiktokio.com"
    assert config.timeout_ms == 15000
    assert config.timeout == 15.0
    assert config.headers == DEFAULT_HEADERS
    assert config.headers is not DEFAULT_HEADERS


def test_round_trip(tmp_path: Path) -> None:
    config_path = tmp_path / "nested" / "settings.json"
    config = AppConfig(
        scraper=ScraperConfig(prefix="mirror.example", timeout_ms=5000),
        server=ServerConfig(port=8080, environment="production"),
    )
    assert config.dump(config_path) == config_path

    loaded = AppConfig.from_file(config_path)
    assert loaded.scraper.prefix == "mirror.example"
    assert loaded.scraper.timeout == 5.0
    assert loaded.server.port == 8080
    assert loaded.server.environment == "production"


def test_from_file_reports_missing_and_invalid_files(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        AppConfig.from_file(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError, match="could not be used"):
        AppConfig.from_file(broken)

    invalid = tmp_path / "invalid.json"
    invalid.write_text('{"scraper": {"timeout_ms": -1}}', encoding="utf-8")
    with pytest.raises(ValueError, match="timeout_ms"):
        AppConfig.from_file(invalid)


def test_load_applies_environment_overrides(tmp_path: Path, monkeypatch) -> None:
    config_path = tmp_path / "settings.json"
    AppConfig().dump(config_path)

    monkeypatch.setenv("PORT", "4321")
    monkeypatch.setenv("APP_ENV", "staging")
    monkeypatch.setenv("TIKTOKIO_ENDPOINT", "https://mirror.example/api/html")
    monkeypatch.setenv("TIKTOKIO_PREFIX", "mirror.example")

    loaded = AppConfig.load(config_path)

    assert loaded.server.port == 4321
    assert loaded.server.environment == "staging"
    assert loaded.scraper.endpoint == "https://mirror.example/api/html"
    assert loaded.scraper.prefix == "mirror.example"


def test_load_falls_back_to_defaults_without_settings_file(tmp_path: Path, monkeypatch) -> None:
    for name in ("PORT", "APP_ENV", "TIKTOKIO_ENDPOINT", "TIKTOKIO_PREFIX"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("tiktokdl.config.DEFAULT_CONFIG_PATH", tmp_path / "absent.json")

    loaded = AppConfig.load()

    assert loaded == AppConfig()


def test_invalid_port_from_environment_is_rejected(monkeypatch) -> None:
    monkeypatch.setenv("PORT", "not-a-port")

    with pytest.raises(ValueError, match="environment"):
        AppConfig().with_env_overrides()


def test_read_env_file_skips_comments_and_blank_lines(tmp_path: Path) -> None:
    from tiktokdl import _read_env_file

    env_file = tmp_path / ".env"
    env_file.write_text("# comment\n\nPORT = 8080\nAPP_ENV=staging\nBROKEN\n", encoding="utf-8")

    assert _read_env_file(env_file) == {"PORT": "8080", "APP_ENV": "staging"}
