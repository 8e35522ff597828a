"""Tests for the statistics_search_cli adapter."""

from decimal import Decimal

import pytest

from property_stats.adapters import statistics_search_cli
from property_stats.domain.constants import StatisticKey
from property_stats.domain.models import StatisticRow, StatisticsFilter


class _Logger:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def warning(self, msg: str) -> None:
        self.messages.append(msg)

    def error(self, msg: str) -> None:
        self.messages.append(msg)


class _UseCase:
    def __init__(self) -> None:
        self.filters: list[StatisticsFilter] = []

    def search(self, statistics_filter):
        self.filters.append(statistics_filter)
        return [
            StatisticRow(1, StatisticKey.INCOME, None, None, Decimal("1339.00")),
            StatisticRow(1, StatisticKey.INCOME, 2023, None, Decimal("1339.00")),
            StatisticRow(1, StatisticKey.INCOME, 2023, 2, Decimal("249.00")),
        ]


@pytest.fixture()
def cli(monkeypatch):
    logger = _Logger()
    use_case = _UseCase()
    for name in (
        "STATS_SEARCH_PROPERTY_ID",
        "STATS_SEARCH_KEY",
        "STATS_SEARCH_YEAR",
        "STATS_SEARCH_MONTH",
        "STATS_SEARCH_INCLUDE_YEARLY",
        "STATS_SEARCH_INCLUDE_MONTHLY",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(statistics_search_cli, "get_app_logger", lambda: logger)
    monkeypatch.setattr(
        statistics_search_cli,
        "build_query_statistics_use_case",
        lambda: use_case,
    )
    return use_case, logger


def test_main_builds_filter_and_prints_rows(cli, monkeypatch, capsys) -> None:
    use_case, _ = cli
    monkeypatch.setenv("STATS_SEARCH_PROPERTY_ID", "1")
    monkeypatch.setenv("STATS_SEARCH_KEY", "Income")
    monkeypatch.setenv("STATS_SEARCH_YEAR", "2023")
    monkeypatch.setenv("STATS_SEARCH_INCLUDE_MONTHLY", "true")

    statistics_search_cli.main()

    assert use_case.filters == [
        StatisticsFilter(
            property_id=1,
            key=StatisticKey.INCOME,
            year=2023,
            include_monthly=True,
        )
    ]
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "3 statistic rows"
    assert lines[1] == "property=1 key=income period=all-time value=1339.00"
    assert lines[2].endswith("period=2023 value=1339.00")
    assert lines[3].endswith("period=2023-02 value=249.00")


def test_unknown_key_is_ignored_with_warning(cli, monkeypatch) -> None:
    use_case, logger = cli
    monkeypatch.setenv("STATS_SEARCH_KEY", "profit")

    statistics_search_cli.main()

    assert use_case.filters == [StatisticsFilter()]
    assert "Unknown statistic key 'profit'" in logger.messages[0]


def test_month_without_year_is_rejected(cli, monkeypatch, capsys) -> None:
    use_case, logger = cli
    monkeypatch.setenv("STATS_SEARCH_MONTH", "2")

    statistics_search_cli.main()

    assert use_case.filters == []
    assert capsys.readouterr().out == ""
    assert logger.messages[0].startswith("Invalid search filter")
