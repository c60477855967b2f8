"""Repository tests against a throwaway SQLite database."""

from dataclasses import replace
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine, inspect
from sqlalchemy.exc import OperationalError

from src.domain.constants import AccountKind
from src.domain.errors import GatewayError
from src.domain.models import (
    AssetAccount,
    CategoryAmount,
    FamilyInvitation,
    FamilyMember,
    FamilyRole,
    InvitationStatus,
    LiabilityAccount,
    Snapshot,
)
from src.infrastructure.accounts_repository import (
    SqlAlchemyAccountsRepository,
)
from src.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from src.infrastructure.family_repository import (
    SqlAlchemyFamiliesRepository,
    SqlAlchemyFamilyMembersRepository,
    SqlAlchemyInvitationsRepository,
    SqlAlchemyProfilesRepository,
)
from src.infrastructure.gateway_errors import gateway_errors
from src.infrastructure.schema import TABLE_NAMES, ensure_schema
from src.infrastructure.snapshots_repository import (
    SqlAlchemySnapshotsRepository,
)


NOW = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'networth.db'}")
    ensure_schema(engine, logger=MagicMock())
    yield engine
    engine.dispose()


@pytest.fixture
def db_port(engine):
    return SqlAlchemyDatabaseEngineAdapter(engine)


def _asset(account_id, amount="100", created_at=NOW):
    return AssetAccount(
        id=account_id,
        name=f"Asset {account_id}",
        amount=Decimal(amount),
        category="cash",
        created_at=created_at,
        updated_at=created_at,
    )


def test_ensure_schema_is_idempotent(engine) -> None:
    logger = MagicMock()

    ensure_schema(engine, logger=logger)

    assert set(TABLE_NAMES) <= set(inspect(engine).get_table_names())
    logger.info.assert_called_once()


def test_accounts_are_scoped_per_user(db_port) -> None:
    repository = SqlAlchemyAccountsRepository(db_port)
    liability = LiabilityAccount(
        id="l1",
        name="Mortgage",
        amount=Decimal("2200000.00"),
        category="mortgage",
        created_at=NOW,
        updated_at=NOW,
        interest_rate=Decimal("4.2"),
        due_date=date(2045, 1, 1),
    )
    repository.insert_accounts(
        "user-1",
        [
            _asset("a2", created_at=NOW + timedelta(minutes=1)),
            _asset("a1"),
            liability,
        ],
    )
    repository.insert_account("user-2", _asset("b1"))

    assert [a.id for a in repository.fetch_assets("user-1")] == ["a1", "a2"]
    assert repository.fetch_liabilities("user-1") == [liability]
    assert [a.id for a in repository.fetch_assets("user-2")] == ["b1"]


def test_update_account_reports_changed_rows(db_port) -> None:
    repository = SqlAlchemyAccountsRepository(db_port)
    repository.insert_account("user-1", _asset("a1"))
    later = NOW + timedelta(hours=1)

    changed = repository.update_account(
        "user-1",
        AccountKind.ASSET,
        "a1",
        {"amount": Decimal("250.50"), "updated_at": later},
    )
    foreign = repository.update_account(
        "user-2",
        AccountKind.ASSET,
        "a1",
        {"name": "Stolen"},
    )

    stored = repository.fetch_assets("user-1")[0]
    assert changed == 1
    assert foreign == 0
    assert stored.amount == Decimal("250.50")
    assert stored.updated_at == later
    with pytest.raises(ValueError):
        repository.update_account(
            "user-1",
            AccountKind.ASSET,
            "a1",
            {"id": "x"},
        )


def test_delete_account_and_delete_all(db_port) -> None:
    repository = SqlAlchemyAccountsRepository(db_port)
    repository.insert_accounts("user-1", [_asset("a1"), _asset("a2")])

    repository.delete_account("user-1", AccountKind.ASSET, "a1")
    assert [a.id for a in repository.fetch_assets("user-1")] == ["a2"]

    repository.delete_all("user-1")
    assert repository.fetch_assets("user-1") == []


def test_snapshots_are_ordered_by_date(db_port) -> None:
    repository = SqlAlchemySnapshotsRepository(db_port)
    later = Snapshot(
        id="s2",
        date=date(2024, 3, 2),
        total_assets=Decimal("100"),
        total_liabilities=Decimal("40"),
        net_worth=Decimal("60"),
        breakdown=(
            CategoryAmount("cash", Decimal("100")),
            CategoryAmount("credit_card", Decimal("-40")),
        ),
    )
    earlier = replace(later, id="s1", date=date(2024, 3, 1), breakdown=())

    repository.insert_snapshot("user-1", later)
    repository.insert_snapshot("user-1", earlier)

    assert repository.fetch_snapshots("user-1") == [earlier, later]

    repository.delete_all("user-1")
    assert repository.fetch_snapshots("user-1") == []


def test_family_lifecycle(db_port) -> None:
    families = SqlAlchemyFamiliesRepository(db_port, id_factory=lambda: "f1")
    members = SqlAlchemyFamilyMembersRepository(db_port)
    invitations = SqlAlchemyInvitationsRepository(db_port)

    family = families.insert_family("Test Family", "user-1", NOW)
    owner = FamilyMember("m1", family.id, "user-1", FamilyRole.OWNER, NOW)
    members.insert_member(owner)

    with pytest.raises(GatewayError):
        members.insert_member(replace(owner, id="m-dup"))

    assert families.fetch_families_for_user("user-1") == [family]
    assert families.fetch_families_for_user("user-2") == []
    assert families.update_family_name("f1", "Renamed", NOW) == 1
    assert families.update_family_name("missing", "x", NOW) == 0
    assert members.update_member_role("m1", FamilyRole.ADMIN) == 1
    assert members.fetch_members("f1")[0].role is FamilyRole.ADMIN

    invitations.insert_invitation(
        FamilyInvitation(
            id="i1",
            family_id="f1",
            inviter_id="user-1",
            invitee_email="a@b.com",
            status=InvitationStatus.PENDING,
            role=FamilyRole.MEMBER,
            created_at=NOW,
            expires_at=NOW + timedelta(days=7),
        )
    )
    families.delete_family("f1")

    assert families.fetch_families_for_user("user-1") == []
    assert members.fetch_members("f1") == []
    assert invitations.fetch_invitation("i1") is None


def test_invitation_queries_and_response(db_port) -> None:
    families = SqlAlchemyFamiliesRepository(db_port, id_factory=lambda: "f1")
    invitations = SqlAlchemyInvitationsRepository(db_port)
    families.insert_family("Test Family", "user-1", NOW)
    invitation = FamilyInvitation(
        id="i1",
        family_id="f1",
        inviter_id="user-1",
        invitee_email="A@B.com",
        status=InvitationStatus.PENDING,
        role=FamilyRole.MEMBER,
        created_at=NOW,
        expires_at=NOW + timedelta(days=7),
    )
    invitations.insert_invitation(invitation)

    pending = invitations.fetch_invitations_for_email(
        "a@B.COM",
        InvitationStatus.PENDING,
    )
    assert [item.id for item in pending] == ["i1"]
    assert pending[0].invitee_email == "a@b.com"
    assert pending[0].family_name == "Test Family"
    assert invitations.fetch_family_invitations(
        "f1",
        InvitationStatus.ACCEPTED,
    ) == []

    responded = NOW + timedelta(hours=1)
    assert invitations.update_invitation_response(
        "i1",
        InvitationStatus.ACCEPTED,
        "user-2",
        responded,
    ) == 1
    assert invitations.update_invitation_response(
        "i1",
        InvitationStatus.REJECTED,
        "user-2",
        responded,
    ) == 0

    stored = invitations.fetch_invitation("i1")
    assert stored.status is InvitationStatus.ACCEPTED
    assert stored.invitee_id == "user-2"
    assert stored.responded_at == responded

    invitations.delete_invitation("i1")
    assert invitations.fetch_invitation("i1") is None


def test_delete_accepted_invitations_only_touches_that_user(db_port):
    families = SqlAlchemyFamiliesRepository(db_port, id_factory=lambda: "f1")
    invitations = SqlAlchemyInvitationsRepository(db_port)
    families.insert_family("Test Family", "user-1", NOW)
    for invitation_id, email in (("i1", "a@b.com"), ("i2", "c@d.com")):
        invitations.insert_invitation(
            FamilyInvitation(
                id=invitation_id,
                family_id="f1",
                inviter_id="user-1",
                invitee_email=email,
                status=InvitationStatus.PENDING,
                role=FamilyRole.ADMIN,
                created_at=NOW,
                expires_at=NOW + timedelta(days=7),
            )
        )
    invitations.update_invitation_response(
        "i1",
        InvitationStatus.ACCEPTED,
        "user-2",
        NOW,
    )
    invitations.update_invitation_response(
        "i2",
        InvitationStatus.ACCEPTED,
        "user-3",
        NOW,
    )

    invitations.delete_accepted_invitations("f1", "user-2")

    assert invitations.fetch_invitation("i1") is None
    assert invitations.fetch_invitation("i2").invitee_id == "user-3"


def test_profiles_are_created_once_and_resolved(db_port) -> None:
    ids = iter(["user-1", "user-2"])
    profiles = SqlAlchemyProfilesRepository(
        db_port,
        id_factory=lambda: next(ids),
    )

    first = profiles.ensure_profile(" Owner@Example.com ")
    again = profiles.ensure_profile("owner@example.com")
    other = profiles.ensure_profile("other@example.com")

    assert first == again
    assert first.email == "owner@example.com"
    assert profiles.fetch_emails(["user-1", "user-2", "ghost"]) == {
        "user-1": "owner@example.com",
        "user-2": other.email,
    }
    assert profiles.fetch_emails([]) == {}


def test_missing_tables_surface_as_gateway_errors(tmp_path) -> None:
    bare = create_engine(f"sqlite:///{tmp_path / 'empty.db'}")
    repository = SqlAlchemyAccountsRepository(
        SqlAlchemyDatabaseEngineAdapter(bare)
    )

    with pytest.raises(GatewayError) as excinfo:
        repository.fetch_assets("user-1")

    assert isinstance(excinfo.value.__cause__, OperationalError)
    assert excinfo.value.message.startswith("Failed to load assets")
    bare.dispose()


def test_gateway_errors_leave_other_exceptions_alone() -> None:
    with pytest.raises(KeyError):
        with gateway_errors("do nothing"):
            raise KeyError("boom")
