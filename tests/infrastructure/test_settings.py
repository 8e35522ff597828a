"""Tests for infrastructure settings."""

from unittest.mock import MagicMock

import pytest

from property_stats.infrastructure import settings as settings_module
from property_stats.infrastructure.retry import RetryPolicy
from property_stats.infrastructure.settings import StatisticsSettings

_NAMES = (
    "STATS_RENTAL_INCOME_TYPE_ID",
    "STATS_MAX_RETRIES",
    "STATS_RETRY_BASE_DELAY",
    "STATS_RETRY_MAX_DELAY",
)


@pytest.fixture()
def logger(monkeypatch) -> MagicMock:
    fake = MagicMock()
    monkeypatch.setattr(settings_module.dotenv, "load_dotenv", lambda: None)
    monkeypatch.setattr(settings_module, "get_app_logger", lambda: fake)
    for name in _NAMES:
        monkeypatch.delenv(name, raising=False)
    return fake


def test_from_env_defaults(logger) -> None:
    settings = StatisticsSettings.from_env()

    assert settings == StatisticsSettings()
    assert settings.rental_income_type_id is None
    logger.warning.assert_not_called()


def test_from_env_reads_values(monkeypatch, logger) -> None:
    monkeypatch.setenv("STATS_RENTAL_INCOME_TYPE_ID", "12")
    monkeypatch.setenv("STATS_MAX_RETRIES", "8")
    monkeypatch.setenv("STATS_RETRY_BASE_DELAY", "0.2")
    monkeypatch.setenv("STATS_RETRY_MAX_DELAY", "3")

    settings = StatisticsSettings.from_env()

    assert settings.rental_income_type_id == 12
    assert settings.retry_policy() == RetryPolicy(total=8, base=0.2, cap=3.0)


@pytest.mark.parametrize(
    ("name", "raw"),
    [
        ("STATS_RENTAL_INCOME_TYPE_ID", "rent"),
        ("STATS_RENTAL_INCOME_TYPE_ID", "0"),
        ("STATS_MAX_RETRIES", "-1"),
        ("STATS_RETRY_BASE_DELAY", "fast"),
        ("STATS_RETRY_MAX_DELAY", "-2"),
    ],
)
def test_invalid_values_fall_back_with_warning(
    monkeypatch,
    logger,
    name,
    raw,
) -> None:
    monkeypatch.setenv(name, raw)

    settings = StatisticsSettings.from_env()

    assert settings == StatisticsSettings()
    logger.warning.assert_called_once()


def test_max_delay_is_raised_to_base_delay(monkeypatch, logger) -> None:
    monkeypatch.setenv("STATS_RETRY_BASE_DELAY", "2")
    monkeypatch.setenv("STATS_RETRY_MAX_DELAY", "1")

    settings = StatisticsSettings.from_env()

    assert settings.retry_max_delay == 2.0
    logger.warning.assert_called_once()
