from __future__ import annotations

import logging

import pytest

from core.env import env_bool, env_str
from core.logging import get_logger
from inheritance.config import DEFAULT_DISCRIMINATOR, get_settings


def test_defaults_without_environment(settings_env: pytest.MonkeyPatch) -> None:
    for key in ("INHERITS_FROM_DISCRIMINATOR", "INHERITS_FROM_TYPE_CHECKS", "INHERITS_FROM_VALIDATE_ON_FLUSH"):
        settings_env.delenv(key, raising=False)

    settings = get_settings()

    assert settings.discriminator == DEFAULT_DISCRIMINATOR
    assert settings.type_checks is True
    assert settings.validate_on_flush is True


def test_settings_read_environment(settings_env: pytest.MonkeyPatch) -> None:
    settings_env.setenv("INHERITS_FROM_DISCRIMINATOR", " subtype ")
    settings_env.setenv("INHERITS_FROM_TYPE_CHECKS", "off")
    settings_env.setenv("INHERITS_FROM_VALIDATE_ON_FLUSH", "0")

    settings = get_settings()

    assert settings.discriminator == "subtype"
    assert settings.type_checks is False
    assert settings.validate_on_flush is False
    assert get_settings() is settings


def test_invalid_boolean_falls_back_to_default(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    monkeypatch.setenv("INHERITS_FROM_TEST_FLAG", "maybe")

    with caplog.at_level(logging.WARNING, logger="core.env"):
        assert env_bool("INHERITS_FROM_TEST_FLAG", True) is True

    assert any("INHERITS_FROM_TEST_FLAG" in record.getMessage() for record in caplog.records)


def test_blank_string_uses_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INHERITS_FROM_TEST_VALUE", "   ")

    assert env_str("INHERITS_FROM_TEST_VALUE", "fallback") == "fallback"


def test_log_level_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INHERITS_FROM_LOG_LEVEL", "debug")

    assert get_logger("inheritance.tests.level").level == logging.DEBUG
