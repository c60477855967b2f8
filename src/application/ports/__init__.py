"""Application ports package."""

from .accounts_repository import AccountsRepositoryPort
from .database import DatabaseEnginePort
from .family_repository import (
    FamiliesRepositoryPort,
    FamilyMembersRepositoryPort,
    InvitationsRepositoryPort,
    ProfilesRepositoryPort,
)
from .snapshots_repository import SnapshotsRepositoryPort

__all__ = [
    "AccountsRepositoryPort",
    "DatabaseEnginePort",
    "FamiliesRepositoryPort",
    "FamilyMembersRepositoryPort",
    "InvitationsRepositoryPort",
    "ProfilesRepositoryPort",
    "SnapshotsRepositoryPort",
]
