"""Composition root for wiring infrastructure adapters."""

from dataclasses import dataclass

from src.application.ports.accounts_repository import AccountsRepositoryPort
from src.application.ports.database import DatabaseEnginePort
from src.application.ports.family_repository import (
    FamiliesRepositoryPort,
    FamilyMembersRepositoryPort,
    InvitationsRepositoryPort,
    ProfilesRepositoryPort,
)
from src.application.ports.snapshots_repository import SnapshotsRepositoryPort
from src.application.use_cases import (
    AccountLedger,
    FamilyDirectory,
    InvitationWorkflow,
    SignInUseCase,
    SnapshotRecorder,
    WorkspaceResetUseCase,
)
from src.domain.models import UserSession
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
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.settings import AppSettings
from src.infrastructure.snapshots_repository import (
    SqlAlchemySnapshotsRepository,
)


@dataclass(frozen=True)
class Workspace:
    """Use cases bound to one signed-in user.

    Attributes:
        session: The signed-in user.
        ledger: Accounts and totals.
        recorder: Snapshot history.
        directory: Families and memberships.
        invitations: Invitation workflow on top of the directory.
        reset: Clear and demo-data operations.
    """

    session: UserSession
    ledger: AccountLedger
    recorder: SnapshotRecorder
    directory: FamilyDirectory
    invitations: InvitationWorkflow
    reset: WorkspaceResetUseCase


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_accounts_repository(
    db_port: DatabaseEnginePort | None = None,
) -> AccountsRepositoryPort:
    """Return the accounts repository."""
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyAccountsRepository(resolved_db)


def build_snapshots_repository(
    db_port: DatabaseEnginePort | None = None,
) -> SnapshotsRepositoryPort:
    """Return the snapshots repository."""
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemySnapshotsRepository(resolved_db)


def build_families_repository(
    db_port: DatabaseEnginePort | None = None,
) -> FamiliesRepositoryPort:
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyFamiliesRepository(resolved_db)


def build_members_repository(
    db_port: DatabaseEnginePort | None = None,
) -> FamilyMembersRepositoryPort:
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyFamilyMembersRepository(resolved_db)


def build_invitations_repository(
    db_port: DatabaseEnginePort | None = None,
) -> InvitationsRepositoryPort:
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyInvitationsRepository(resolved_db)


def build_profiles_repository(
    db_port: DatabaseEnginePort | None = None,
) -> ProfilesRepositoryPort:
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyProfilesRepository(resolved_db)


def build_sign_in_use_case(
    db_port: DatabaseEnginePort | None = None,
) -> SignInUseCase:
    """Return the sign-in use case."""
    return SignInUseCase(
        build_profiles_repository(db_port),
        logger=get_app_logger(),
    )


def build_workspace(
    session: UserSession,
    db_port: DatabaseEnginePort | None = None,
    settings: AppSettings | None = None,
) -> Workspace:
    """Wire every use case for a signed-in user.

    Args:
        session: The signed-in user.
        db_port: Optional database port; defaults to the configured engine.
        settings: Optional settings; defaults to the environment.

    Returns:
        Workspace: Use cases sharing one database port and logger.
    """
    resolved_db = db_port or build_database_adapter()
    resolved_settings = settings or AppSettings.from_env()
    logger = get_app_logger()

    ledger = AccountLedger(
        session,
        build_accounts_repository(resolved_db),
        logger=logger,
    )
    recorder = SnapshotRecorder(
        session,
        ledger,
        build_snapshots_repository(resolved_db),
        logger=logger,
    )
    invitations_repository = build_invitations_repository(resolved_db)
    members_repository = build_members_repository(resolved_db)
    directory = FamilyDirectory(
        session,
        build_families_repository(resolved_db),
        members_repository,
        invitations_repository,
        build_profiles_repository(resolved_db),
        logger=logger,
    )
    workflow = InvitationWorkflow(
        session,
        directory,
        invitations_repository,
        members_repository,
        logger=logger,
        ttl_days=resolved_settings.invitation_ttl_days,
    )
    return Workspace(
        session=session,
        ledger=ledger,
        recorder=recorder,
        directory=directory,
        invitations=workflow,
        reset=WorkspaceResetUseCase(ledger, recorder, logger=logger),
    )


__all__ = [
    "Workspace",
    "build_database_adapter",
    "build_accounts_repository",
    "build_snapshots_repository",
    "build_families_repository",
    "build_members_repository",
    "build_invitations_repository",
    "build_profiles_repository",
    "build_sign_in_use_case",
    "build_workspace",
]
