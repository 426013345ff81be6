"""Tests for configuration and logging setup."""

import logging

import pytest
from unittest.mock import patch

from diapredict.config import DEFAULT_BASE_URL, DEFAULT_MODEL, Settings
from diapredict.prompts.builder import BMIMode
from diapredict.utils.logging import get_logger, setup_logging


class TestSettings:
    """Tests for Settings.from_env."""

    def test_defaults(self):
        with patch.dict("os.environ", {}, clear=True):
            settings = Settings.from_env()

        assert settings.api_key is None
        assert not settings.ai_configured
        assert settings.base_url == DEFAULT_BASE_URL
        assert settings.model == DEFAULT_MODEL
        assert settings.structured_output is True
        assert settings.bmi_mode == BMIMode.COMPUTED
        assert settings.require_api_key is False
        assert settings.request_timeout == 30.0

    def test_overrides(self):
        env = {
            "OPENROUTER_API_KEY": "sk-test",
            "DIAPREDICT_MODEL": "openai/gpt-4o-mini",
            "DIAPREDICT_TEMPERATURE": "0.5",
            "DIAPREDICT_MAX_TOKENS": "128",
            "DIAPREDICT_TIMEOUT": "12.5",
            "DIAPREDICT_STRUCTURED_OUTPUT": "false",
            "DIAPREDICT_BMI_MODE": "formula",
            "DIAPREDICT_REQUIRE_API_KEY": "yes",
            "DIAPREDICT_CORS_ORIGINS": "https://a.example, https://b.example",
            "LOG_LEVEL": "DEBUG",
        }
        with patch.dict("os.environ", env, clear=True):
            settings = Settings.from_env()

        assert settings.ai_configured
        assert settings.model == "openai/gpt-4o-mini"
        assert settings.temperature == 0.5
        assert settings.max_tokens == 128
        assert settings.request_timeout == 12.5
        assert settings.structured_output is False
        assert settings.bmi_mode == BMIMode.FORMULA
        assert settings.require_api_key is True
        assert settings.cors_origins == ["https://a.example", "https://b.example"]
        assert settings.log_level == "DEBUG"

    def test_blank_key_is_missing(self):
        with patch.dict("os.environ", {"OPENROUTER_API_KEY": "   "}, clear=True):
            assert Settings.from_env().api_key is None

    @pytest.mark.parametrize("env", [
        {"DIAPREDICT_STRUCTURED_OUTPUT": "maybe"},
        {"DIAPREDICT_BMI_MODE": "guess"},
        {"DIAPREDICT_TIMEOUT": "0"},
        {"DIAPREDICT_TEMPERATURE": "hot"},
    ])
    def test_invalid_values_raise(self, env):
        with patch.dict("os.environ", env, clear=True):
            with pytest.raises(ValueError):
                Settings.from_env()

    def test_api_key_not_in_repr(self):
        assert "sk-secret" not in repr(Settings(api_key="sk-secret"))

    def test_frozen(self):
        settings = Settings()
        with pytest.raises(ValueError):
            settings.model = "other"


class TestLogging:
    """Tests for logging helpers."""

    def test_setup_logging_level(self):
        logger = setup_logging("DEBUG")

        assert logger.name == "diapredict"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_repeated_setup_keeps_one_handler(self):
        setup_logging("INFO")
        logger = setup_logging("WARNING")

        assert len(logger.handlers) == 1
        assert logger.handlers[0].level == logging.WARNING

    def test_setup_logging_file(self, tmp_path):
        log_file = tmp_path / "logs" / "diapredict.log"
        logger = setup_logging("INFO", log_file=str(log_file))

        logger.info("hello")
        for handler in logger.handlers:
            handler.flush()

        assert log_file.exists()
        assert "hello" in log_file.read_text()

        for handler in logger.handlers:
            handler.close()
        logger.handlers = []

    def test_get_logger_namespace(self):
        assert get_logger("gateway").name == "diapredict.gateway"
        assert get_logger().name == "diapredict"
