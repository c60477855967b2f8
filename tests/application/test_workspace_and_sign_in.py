"""Tests for the workspace reset and sign-in use cases."""

from decimal import Decimal

import pytest

from src.application.use_cases import SignInUseCase, WorkspaceResetUseCase
from src.application.use_cases.workspace_reset import (
    DEMO_ASSETS,
    DEMO_LIABILITIES,
)
from src.domain.constants import AccountKind
from src.domain.errors import GatewayError, ValidationError


@pytest.fixture
def reset(ledger, recorder, logger):
    return WorkspaceResetUseCase(ledger, recorder, logger=logger)


def test_load_demo_data_replaces_workspace(
    reset,
    ledger,
    recorder,
    snapshots_repository,
    session,
) -> None:
    ledger.add_account(
        AccountKind.ASSET,
        {"name": "Old", "amount": 1, "category": "cash"},
    )
    recorder.take_snapshot()

    accounts = reset.load_demo_data()

    assert len(accounts) == len(DEMO_ASSETS) + len(DEMO_LIABILITIES)
    assert len(ledger.assets) == 7
    assert len(ledger.liabilities) == 3
    assert "Old" not in {account.name for account in ledger.assets}
    assert recorder.history == ()
    assert snapshots_repository.rows[session.user_id] == []

    totals = ledger.totals()
    assert totals.total_assets == Decimal("3993500")
    assert totals.total_liabilities == Decimal("2295000")
    assert totals.net_worth == Decimal("1698500")


def test_clear_all_data(reset, ledger, recorder) -> None:
    reset.load_demo_data()
    recorder.take_snapshot()

    reset.clear_all_data()

    assert ledger.assets == ()
    assert ledger.liabilities == ()
    assert recorder.history == ()


def test_sign_in_creates_profile_once(backend, logger) -> None:
    use_case = SignInUseCase(backend, logger=logger)

    first = use_case.execute("  New.User@Example.com ")
    second = use_case.execute("new.user@example.com")

    assert first.email == "new.user@example.com"
    assert first == second
    assert backend.profiles[first.user_id] == first.email


def test_sign_in_rejects_malformed_email(backend, logger) -> None:
    use_case = SignInUseCase(backend, logger=logger)

    with pytest.raises(ValidationError):
        use_case.execute("not-an-email")

    assert backend.calls == []


def test_sign_in_logs_gateway_failure(backend, logger) -> None:
    backend.fail_on.add("ensure_profile")
    use_case = SignInUseCase(backend, logger=logger)

    with pytest.raises(GatewayError):
        use_case.execute("owner@example.com")

    logger.error.assert_called_once()
