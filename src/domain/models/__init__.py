"""Domain models package."""

from .accounts import (
    ACCOUNT_TYPES,
    MUTABLE_FIELDS,
    Account,
    AssetAccount,
    LiabilityAccount,
)
from .family import (
    Family,
    FamilyInvitation,
    FamilyMember,
    FamilyRole,
    InvitationStatus,
)
from .finance import (
    AllocationBreakdown,
    CategoryAllocation,
    CategoryAmount,
    LedgerTotals,
    Snapshot,
)
from .session import UserSession

__all__ = [
    "ACCOUNT_TYPES",
    "MUTABLE_FIELDS",
    "Account",
    "AssetAccount",
    "LiabilityAccount",
    "Family",
    "FamilyInvitation",
    "FamilyMember",
    "FamilyRole",
    "InvitationStatus",
    "AllocationBreakdown",
    "CategoryAllocation",
    "CategoryAmount",
    "LedgerTotals",
    "Snapshot",
    "UserSession",
]
