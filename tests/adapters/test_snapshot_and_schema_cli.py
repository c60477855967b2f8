"""Tests for the schema and snapshot command-line adapters."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine, inspect

from src.adapters import init_db_cli, take_snapshot_cli
from src.domain.constants import AccountKind
from src.infrastructure.container import build_workspace
from src.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from src.infrastructure.schema import TABLE_NAMES, ensure_schema
from src.infrastructure.settings import AppSettings


@pytest.fixture
def adapter(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'cli.db'}")
    yield SqlAlchemyDatabaseEngineAdapter(engine)
    engine.dispose()


@pytest.fixture
def quiet(monkeypatch):
    logger = MagicMock()
    for module in (init_db_cli, take_snapshot_cli):
        monkeypatch.setattr(module, "get_app_logger", lambda: logger)
    return logger


def _use_settings(monkeypatch, **values):
    settings = AppSettings(**values)
    monkeypatch.setattr(
        take_snapshot_cli.AppSettings,
        "from_env",
        classmethod(lambda cls: settings),
    )
    return settings


def test_init_db_creates_tables(monkeypatch, adapter, quiet, capsys):
    monkeypatch.setattr(init_db_cli, "build_database_adapter", lambda: adapter)

    init_db_cli.main()

    tables = set(inspect(adapter.get_engine()).get_table_names())
    assert set(TABLE_NAMES) <= tables
    assert "Schema ready" in capsys.readouterr().out


def test_take_snapshot_requires_a_user(monkeypatch, quiet) -> None:
    _use_settings(monkeypatch)

    assert take_snapshot_cli.main([]) == 2
    quiet.warning.assert_called_once()


def test_take_snapshot_records_totals(monkeypatch, adapter, quiet, capsys):
    ensure_schema(adapter.get_engine(), logger=MagicMock())
    settings = _use_settings(
        monkeypatch,
        currency_symbol="€",
        snapshot_user_email="me@example.com",
    )
    monkeypatch.setattr(
        take_snapshot_cli,
        "build_database_adapter",
        lambda: adapter,
    )
    session = take_snapshot_cli.build_sign_in_use_case(adapter).execute(
        "me@example.com"
    )
    workspace = build_workspace(session, db_port=adapter, settings=settings)
    workspace.ledger.add_account(
        AccountKind.ASSET,
        {"name": "Cash", "amount": "100", "category": "cash"},
    )
    workspace.ledger.add_account(
        AccountKind.LIABILITY,
        {"name": "Card", "amount": "40", "category": "credit_card"},
    )

    assert take_snapshot_cli.main([]) == 0

    output = capsys.readouterr().out
    assert "net worth €60" in output
    workspace.recorder.load()
    assert len(workspace.recorder.history) == 1


def test_take_snapshot_reports_domain_errors(monkeypatch, adapter, quiet):
    _use_settings(monkeypatch)
    monkeypatch.setattr(
        take_snapshot_cli,
        "build_database_adapter",
        lambda: adapter,
    )

    assert take_snapshot_cli.main(["--email", "not-an-email"]) == 1
    quiet.error.assert_called_once()
