"""Tests for the composition root."""

from unittest.mock import MagicMock

from src.application.use_cases import (
    AccountLedger,
    FamilyDirectory,
    InvitationWorkflow,
    SignInUseCase,
)
from src.domain.models import UserSession
from src.infrastructure import container
from src.infrastructure.accounts_repository import (
    SqlAlchemyAccountsRepository,
)
from src.infrastructure.settings import AppSettings


def test_build_workspace_shares_one_session(monkeypatch) -> None:
    monkeypatch.setattr(container, "get_app_logger", lambda: MagicMock())
    session = UserSession(user_id="user-1", email="me@example.com")

    workspace = container.build_workspace(
        session,
        db_port=MagicMock(),
        settings=AppSettings(invitation_ttl_days=3),
    )

    assert workspace.session is session
    assert isinstance(workspace.ledger, AccountLedger)
    assert isinstance(workspace.directory, FamilyDirectory)
    assert isinstance(workspace.invitations, InvitationWorkflow)
    assert workspace.directory.session is session
    assert workspace.invitations._ttl.days == 3


def test_build_workspace_reads_settings_from_env(monkeypatch) -> None:
    monkeypatch.setattr(container, "get_app_logger", lambda: MagicMock())
    calls = []

    def _from_env():
        calls.append(True)
        return AppSettings()

    monkeypatch.setattr(container.AppSettings, "from_env", _from_env)

    container.build_workspace(
        UserSession(user_id="user-1", email="me@example.com"),
        db_port=MagicMock(),
    )

    assert calls == [True]


def test_repository_builders_default_to_database_adapter(monkeypatch):
    adapter = MagicMock()
    monkeypatch.setattr(container, "build_database_adapter", lambda: adapter)

    repository = container.build_accounts_repository()

    assert isinstance(repository, SqlAlchemyAccountsRepository)
    assert repository._db_port is adapter


def test_build_sign_in_use_case(monkeypatch) -> None:
    monkeypatch.setattr(container, "get_app_logger", lambda: MagicMock())

    use_case = container.build_sign_in_use_case(MagicMock())

    assert isinstance(use_case, SignInUseCase)
