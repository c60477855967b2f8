"""Shared fixtures and in-memory gateway fakes for the test suite."""

from dataclasses import replace
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from src.application.use_cases import (
    AccountLedger,
    FamilyDirectory,
    InvitationWorkflow,
    SnapshotRecorder,
)
from src.domain.errors import GatewayError
from src.domain.models import (
    Family,
    FamilyInvitation,
    FamilyMember,
    FamilyRole,
    InvitationStatus,
    UserSession,
)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class IdFactory:
    def __init__(self, prefix: str = "id") -> None:
        self._prefix = prefix
        self._count = 0

    def __call__(self) -> str:
        self._count += 1
        return f"{self._prefix}-{self._count}"


class _Failing:
    """Mixin raising GatewayError for method names listed in ``fail_on``."""

    def __init__(self) -> None:
        self.fail_on: set[str] = set()
        self.calls: list[str] = []

    def _enter(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail_on:
            raise GatewayError(f"{name} unavailable")


class InMemoryAccountsRepository(_Failing):
    def __init__(self) -> None:
        super().__init__()
        self.rows: dict[str, dict[str, object]] = {}

    def _user_rows(self, user_id: str) -> dict:
        return self.rows.setdefault(user_id, {})

    def fetch_assets(self, user_id):
        self._enter("fetch_assets")
        return [
            account
            for account in self._user_rows(user_id).values()
            if account.kind.value == "asset"
        ]

    def fetch_liabilities(self, user_id):
        self._enter("fetch_liabilities")
        return [
            account
            for account in self._user_rows(user_id).values()
            if account.kind.value == "liability"
        ]

    def insert_account(self, user_id, account):
        self._enter("insert_account")
        self._user_rows(user_id)[account.id] = account

    def insert_accounts(self, user_id, accounts):
        self._enter("insert_accounts")
        for account in accounts:
            self._user_rows(user_id)[account.id] = account

    def update_account(self, user_id, kind, account_id, fields):
        self._enter("update_account")
        rows = self._user_rows(user_id)
        account = rows.get(account_id)
        if account is None or account.kind is not kind:
            return 0
        rows[account_id] = replace(account, **fields)
        return 1

    def delete_account(self, user_id, kind, account_id):
        self._enter("delete_account")
        self._user_rows(user_id).pop(account_id, None)

    def delete_all(self, user_id):
        self._enter("delete_all")
        self.rows[user_id] = {}


class InMemorySnapshotsRepository(_Failing):
    def __init__(self) -> None:
        super().__init__()
        self.rows: dict[str, list] = {}

    def fetch_snapshots(self, user_id):
        self._enter("fetch_snapshots")
        return sorted(self.rows.get(user_id, []), key=lambda item: item.date)

    def insert_snapshot(self, user_id, snapshot):
        self._enter("insert_snapshot")
        self.rows.setdefault(user_id, []).append(snapshot)

    def delete_all(self, user_id):
        self._enter("delete_all")
        self.rows[user_id] = []


class InMemoryFamilyBackend(_Failing):
    """One object serving the families, members, invitations and profiles
    ports, sharing tables the way the database does."""

    def __init__(self, id_factory=None) -> None:
        super().__init__()
        self._ids = id_factory or IdFactory("fam")
        self.families: dict[str, Family] = {}
        self.members: dict[str, FamilyMember] = {}
        self.invitations: dict[str, FamilyInvitation] = {}
        self.profiles: dict[str, str] = {}

    def insert_family(self, name, created_by, created_at):
        self._enter("insert_family")
        family = Family(
            id=self._ids(),
            name=name,
            created_by=created_by,
            created_at=created_at,
            updated_at=created_at,
        )
        self.families[family.id] = family
        return family

    def update_family_name(self, family_id, name, updated_at):
        self._enter("update_family_name")
        family = self.families.get(family_id)
        if family is None:
            return 0
        self.families[family_id] = replace(
            family,
            name=name,
            updated_at=updated_at,
        )
        return 1

    def delete_family(self, family_id):
        self._enter("delete_family")
        self.families.pop(family_id, None)
        self.members = {
            key: member
            for key, member in self.members.items()
            if member.family_id != family_id
        }
        self.invitations = {
            key: item
            for key, item in self.invitations.items()
            if item.family_id != family_id
        }

    def fetch_families_for_user(self, user_id):
        self._enter("fetch_families_for_user")
        family_ids = {
            member.family_id
            for member in self.members.values()
            if member.user_id == user_id
        }
        return [
            family
            for family in self.families.values()
            if family.id in family_ids
        ]

    def insert_member(self, member):
        self._enter("insert_member")
        for existing in self.members.values():
            if (
                existing.family_id == member.family_id
                and existing.user_id == member.user_id
            ):
                raise GatewayError("duplicate membership")
        self.members[member.id] = replace(member, email=None)

    def fetch_members(self, family_id):
        self._enter("fetch_members")
        return [
            member
            for member in self.members.values()
            if member.family_id == family_id
        ]

    def update_member_role(self, member_id, role):
        self._enter("update_member_role")
        member = self.members.get(member_id)
        if member is None:
            return 0
        self.members[member_id] = replace(member, role=FamilyRole(role))
        return 1

    def delete_member(self, member_id):
        self._enter("delete_member")
        self.members.pop(member_id, None)

    def insert_invitation(self, invitation):
        self._enter("insert_invitation")
        self.invitations[invitation.id] = replace(invitation, family_name=None)

    def _with_family_name(self, invitation):
        family = self.families.get(invitation.family_id)
        return replace(
            invitation,
            family_name=family.name if family else None,
        )

    def fetch_invitation(self, invitation_id):
        self._enter("fetch_invitation")
        invitation = self.invitations.get(invitation_id)
        if invitation is None:
            return None
        return self._with_family_name(invitation)

    def fetch_family_invitations(self, family_id, status):
        self._enter("fetch_family_invitations")
        return [
            self._with_family_name(item)
            for item in self.invitations.values()
            if item.family_id == family_id and item.status is status
        ]

    def fetch_invitations_for_email(self, email, status):
        self._enter("fetch_invitations_for_email")
        return [
            self._with_family_name(item)
            for item in self.invitations.values()
            if item.invitee_email == email.lower() and item.status is status
        ]

    def update_invitation_response(
        self,
        invitation_id,
        status,
        invitee_id,
        responded_at,
    ):
        self._enter("update_invitation_response")
        invitation = self.invitations.get(invitation_id)
        if invitation is None or invitation.status is not InvitationStatus.PENDING:
            return 0
        self.invitations[invitation_id] = replace(
            invitation,
            status=status,
            invitee_id=invitee_id,
            responded_at=responded_at,
        )
        return 1

    def delete_invitation(self, invitation_id):
        self._enter("delete_invitation")
        self.invitations.pop(invitation_id, None)

    def delete_accepted_invitations(self, family_id, invitee_id):
        self._enter("delete_accepted_invitations")
        self.invitations = {
            key: item
            for key, item in self.invitations.items()
            if not (
                item.family_id == family_id
                and item.invitee_id == invitee_id
                and item.status is InvitationStatus.ACCEPTED
            )
        }

    def fetch_emails(self, user_ids):
        self._enter("fetch_emails")
        return {
            user_id: self.profiles[user_id]
            for user_id in user_ids
            if user_id in self.profiles
        }

    def ensure_profile(self, email):
        self._enter("ensure_profile")
        normalized = email.strip().lower()
        for user_id, known in self.profiles.items():
            if known == normalized:
                return UserSession(user_id=user_id, email=known)
        user_id = f"user-{len(self.profiles) + 1}"
        self.profiles[user_id] = normalized
        return UserSession(user_id=user_id, email=normalized)


@pytest.fixture
def logger():
    return MagicMock()


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def ids():
    return IdFactory()


@pytest.fixture
def session():
    return UserSession(user_id="user-owner", email="owner@example.com")


@pytest.fixture
def accounts_repository():
    return InMemoryAccountsRepository()


@pytest.fixture
def snapshots_repository():
    return InMemorySnapshotsRepository()


@pytest.fixture
def ledger(session, accounts_repository, logger, clock, ids):
    return AccountLedger(
        session,
        accounts_repository,
        logger=logger,
        clock=clock,
        id_factory=ids,
    )


@pytest.fixture
def recorder(session, ledger, snapshots_repository, logger, clock, ids):
    return SnapshotRecorder(
        session,
        ledger,
        snapshots_repository,
        logger=logger,
        clock=clock,
        id_factory=ids,
    )


@pytest.fixture
def backend(session):
    store = InMemoryFamilyBackend()
    store.profiles[session.user_id] = session.email
    return store


@pytest.fixture
def family_context(backend, logger, clock, ids):
    """Factory returning a (directory, workflow) pair for a session."""

    def _build(user_session: UserSession, ttl_days: int = 7):
        backend.profiles.setdefault(user_session.user_id, user_session.email)
        directory = FamilyDirectory(
            user_session,
            backend,
            backend,
            backend,
            backend,
            logger=logger,
            clock=clock,
            id_factory=ids,
        )
        workflow = InvitationWorkflow(
            user_session,
            directory,
            backend,
            backend,
            logger=logger,
            clock=clock,
            id_factory=ids,
            ttl_days=ttl_days,
        )
        return directory, workflow

    return _build
