"""Tests for environment-backed settings and the extractor dependency."""

import logging

import pytest
from pydantic import ValidationError

from web_extractor.config import LoggingSettings, Settings
from web_extractor.dependencies import get_extractor
from web_extractor.main import configure_logging
from web_extractor.services.extractor import WebExtractor


class TestSettings:
    def test_loads_from_environment(self, monkeypatch):
        monkeypatch.setenv("WEB_EXTRACTOR_FIRECRAWL_API_KEY", "fc-env")
        monkeypatch.setenv("WEB_EXTRACTOR_TIMEOUT", "12.5")
        monkeypatch.setenv("WEB_EXTRACTOR_DEBUG", "true")

        settings = Settings(_env_file=None)

        assert settings.firecrawl_api_key == "fc-env"
        assert settings.timeout == 12.5
        assert settings.debug is True
        assert settings.firecrawl_base_url == "https://api.firecrawl.dev"

    def test_api_key_required(self, monkeypatch):
        monkeypatch.delenv("WEB_EXTRACTOR_FIRECRAWL_API_KEY", raising=False)
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_extractor_config(self):
        settings = Settings(_env_file=None, firecrawl_api_key="fc-direct", firecrawl_base_url="http://localhost:3002")
        config = settings.extractor_config()
        assert config.api_key == "fc-direct"
        assert config.base_url == "http://localhost:3002"
        assert config.timeout == 30.0

    def test_get_extractor_uses_settings(self):
        settings = Settings(_env_file=None, firecrawl_api_key="fc-direct", debug=True)
        extractor = get_extractor(settings)
        assert isinstance(extractor, WebExtractor)
        assert extractor.config.api_key == "fc-direct"
        assert extractor.config.debug is True


class TestLoggingSettings:
    def test_log_level_without_api_key(self, monkeypatch):
        monkeypatch.delenv("WEB_EXTRACTOR_FIRECRAWL_API_KEY", raising=False)
        monkeypatch.setenv("WEB_EXTRACTOR_LOG_LEVEL", "debug")
        assert LoggingSettings(_env_file=None).log_level == "debug"

    def test_default_level(self, monkeypatch):
        monkeypatch.delenv("WEB_EXTRACTOR_LOG_LEVEL", raising=False)
        assert LoggingSettings(_env_file=None).log_level == "INFO"

    def test_configure_logging_sets_root_level(self):
        root = logging.getLogger()
        previous = root.level
        try:
            configure_logging("warning")
            assert root.level == logging.WARNING
        finally:
            root.setLevel(previous)
