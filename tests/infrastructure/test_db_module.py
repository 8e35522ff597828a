"""Tests for the infrastructure.db module."""

import pytest

from property_stats.infrastructure import db as db_module


@pytest.fixture(autouse=True)
def _reset_engines(monkeypatch):
    monkeypatch.setattr(db_module, "_statistics_engine", None)
    monkeypatch.setattr(db_module, "_ledger_engine", None)
    monkeypatch.setattr(db_module.dotenv, "load_dotenv", lambda: None)


def test_read_url_strips_the_value(monkeypatch):
    monkeypatch.setenv("STATISTICS_DB_URL", " postgresql://example ")

    assert db_module._read_url("STATISTICS_DB_URL") == "postgresql://example"


def test_read_url_raises_when_required_and_missing(monkeypatch):
    monkeypatch.setenv("STATISTICS_DB_URL", "  ")

    with pytest.raises(RuntimeError, match="STATISTICS_DB_URL"):
        db_module._read_url("STATISTICS_DB_URL")
    assert db_module._read_url("STATISTICS_DB_URL", required=False) is None


def test_postgres_engines_use_a_checked_pool():
    options = db_module._engine_options("postgresql+psycopg2://u@h/stats")

    assert options["poolclass"] is db_module.QueuePool
    assert options["pool_size"] == 5
    assert options["max_overflow"] == 5
    assert options["pool_pre_ping"] is True
    assert "connect_args" not in options


def test_sqlite_engines_wait_for_the_write_lock(monkeypatch):
    captured = {}

    def fake_create_engine(db_url, **kwargs):
        captured["db_url"] = db_url
        captured["kwargs"] = kwargs
        return "engine"

    monkeypatch.setattr(db_module, "create_engine", fake_create_engine)

    assert db_module._create_engine("sqlite:///stats.db") == "engine"
    assert captured["kwargs"]["connect_args"] == {
        "timeout": db_module.SQLITE_BUSY_TIMEOUT_SECONDS
    }


def test_get_statistics_engine_caches_engine(monkeypatch):
    created = []

    def fake_create_engine(url):
        created.append(url)
        return f"engine:{url}"

    monkeypatch.setattr(db_module, "_create_engine", fake_create_engine)
    monkeypatch.setenv("STATISTICS_DB_URL", "postgresql://statistics")

    engine_one = db_module.get_statistics_engine()
    engine_two = db_module.get_statistics_engine()

    assert engine_one is engine_two
    assert created == ["postgresql://statistics"]


def test_get_ledger_engine_uses_its_own_url(monkeypatch):
    created = []

    def fake_create_engine(url):
        created.append(url)
        return f"engine:{url}"

    monkeypatch.setattr(db_module, "_create_engine", fake_create_engine)
    monkeypatch.setenv("LEDGER_DB_URL", "postgresql://ledger")

    assert db_module.get_ledger_engine() == "engine:postgresql://ledger"
    assert db_module.get_ledger_engine() == "engine:postgresql://ledger"
    assert created == ["postgresql://ledger"]


def test_get_ledger_engine_falls_back_to_statistics(monkeypatch):
    """Without LEDGER_DB_URL both ports share one engine."""
    monkeypatch.setattr(
        db_module,
        "_create_engine",
        lambda url: f"engine:{url}",
    )
    monkeypatch.delenv("LEDGER_DB_URL", raising=False)
    monkeypatch.setenv("STATISTICS_DB_URL", "sqlite:///stats.db")

    assert db_module.get_ledger_engine() is db_module.get_statistics_engine()


def test_adapter_serves_module_engines(monkeypatch):
    monkeypatch.setattr(db_module, "get_statistics_engine", lambda: "stats")
    monkeypatch.setattr(db_module, "get_ledger_engine", lambda: "ledger")

    adapter = db_module.SqlAlchemyDatabaseEngineAdapter()

    assert adapter.get_statistics_engine() == "stats"
    assert adapter.get_ledger_engine() == "ledger"
