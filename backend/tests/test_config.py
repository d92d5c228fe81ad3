"""Tests for settings and logging configuration."""

import json
import logging

import structlog

from advisor.config import Settings
from advisor.logging import configure_logging, resolve_level


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("CATALOG_MODE", "LLM_PROVIDER", "ANTHROPIC_API_KEY", "MAX_RESULTS"):
            monkeypatch.delenv(name, raising=False)
        config = Settings(_env_file=None)
        assert config.catalog_mode == "mock"
        assert config.catalog_page_size == 25
        assert config.max_results == 5
        assert config.llm_provider == "anthropic"

    def test_env_is_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("catalog_mode", "live")
        monkeypatch.setenv("MAX_RESULTS", "8")
        config = Settings(_env_file=None)
        assert config.catalog_mode == "live"
        assert config.max_results == 8

    def test_signing_needs_all_credentials(self):
        partial = Settings(_env_file=None, catalog_consumer_id="c", catalog_key_version="1")
        assert partial.signing_configured is False
        full = Settings(
            _env_file=None,
            catalog_consumer_id="c",
            catalog_key_version="1",
            catalog_private_key="pem",
        )
        assert full.signing_configured is True

    def test_llm_configured_follows_provider(self):
        config = Settings(_env_file=None, llm_provider="gemini", anthropic_api_key="sk")
        assert config.llm_configured is False


class TestLogging:
    def test_resolve_level(self):
        assert resolve_level("debug") == logging.DEBUG
        assert resolve_level("bogus") == logging.INFO

    def test_log_file_receives_json(self, tmp_path, capsys):
        log_file = tmp_path / "advisor.log"
        config = Settings(_env_file=None, environment="test", log_file=str(log_file))
        configure_logging(config)
        structlog.get_logger("test").info("catalog_search_complete", records=3)
        assert '"event": "catalog_search_complete"' in log_file.read_text()
        assert "catalog_search_complete" in capsys.readouterr().out
        configure_logging(Settings(_env_file=None))

    def test_log_file_stays_json_under_console_renderer(self, tmp_path, capsys):
        log_file = tmp_path / "advisor.log"
        config = Settings(_env_file=None, environment="development", log_file=str(log_file))
        configure_logging(config)
        structlog.get_logger("test").warning("ranking_fallback", reason="no model configured")
        line = json.loads(log_file.read_text().splitlines()[-1])
        assert line["event"] == "ranking_fallback"
        assert line["level"] == "warning"
        out = capsys.readouterr().out
        assert "ranking_fallback" in out
        assert not out.lstrip().startswith("{")
        configure_logging(Settings(_env_file=None))

    def test_unwritable_log_file_falls_back_to_stdout(self, tmp_path, capsys):
        config = Settings(
            _env_file=None,
            environment="test",
            log_file=str(tmp_path / "missing-dir" / "advisor.log"),
        )
        configure_logging(config)
        structlog.get_logger("test").info("still_logged")
        assert "still_logged" in capsys.readouterr().out
        configure_logging(Settings(_env_file=None))
