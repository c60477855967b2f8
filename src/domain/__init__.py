"""Domain package for business rules and core models."""

from .constants import (
    ALL_CATEGORIES,
    ASSET_CATEGORIES,
    LIABILITY_CATEGORIES,
    AccountKind,
    CategoryDescriptor,
    categories_for,
    get_category_descriptor,
)
from .errors import (
    AuthorizationError,
    ConflictError,
    DomainError,
    GatewayError,
    NotFoundError,
    ValidationError,
)
from .models import (
    AssetAccount,
    Family,
    FamilyInvitation,
    FamilyMember,
    FamilyRole,
    InvitationStatus,
    LedgerTotals,
    LiabilityAccount,
    Snapshot,
    UserSession,
)

__all__ = [
    "ALL_CATEGORIES",
    "ASSET_CATEGORIES",
    "LIABILITY_CATEGORIES",
    "AccountKind",
    "CategoryDescriptor",
    "categories_for",
    "get_category_descriptor",
    "AuthorizationError",
    "ConflictError",
    "DomainError",
    "GatewayError",
    "NotFoundError",
    "ValidationError",
    "AssetAccount",
    "Family",
    "FamilyInvitation",
    "FamilyMember",
    "FamilyRole",
    "InvitationStatus",
    "LedgerTotals",
    "LiabilityAccount",
    "Snapshot",
    "UserSession",
]
