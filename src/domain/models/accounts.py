"""Domain models for asset and liability accounts."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import ClassVar

from src.domain.constants import AccountKind


@dataclass(frozen=True)
class Account:
    """Named record holding a monetary magnitude.

    Attributes:
        id: Opaque identifier, immutable once assigned.
        name: Display name, never empty.
        amount: Non-negative magnitude in currency units.
        category: Category key from the catalog matching ``kind``.
        created_at: Creation timestamp.
        updated_at: Last modification timestamp.
        note: Optional free text.
        icon: Optional icon reference.
    """

    id: str
    name: str
    amount: Decimal
    category: str
    created_at: datetime
    updated_at: datetime
    note: str | None = None
    icon: str | None = None

    kind: ClassVar[AccountKind]


@dataclass(frozen=True)
class AssetAccount(Account):
    """Account counted towards total assets."""

    platform: str | None = None

    kind: ClassVar[AccountKind] = AccountKind.ASSET


@dataclass(frozen=True)
class LiabilityAccount(Account):
    """Account counted towards total liabilities."""

    interest_rate: Decimal | None = None
    due_date: date | None = None

    kind: ClassVar[AccountKind] = AccountKind.LIABILITY


COMMON_MUTABLE_FIELDS = frozenset({"name", "amount", "category", "note", "icon"})

MUTABLE_FIELDS = {
    AccountKind.ASSET: COMMON_MUTABLE_FIELDS | {"platform"},
    AccountKind.LIABILITY: COMMON_MUTABLE_FIELDS | {"interest_rate", "due_date"},
}

ACCOUNT_TYPES = {
    AccountKind.ASSET: AssetAccount,
    AccountKind.LIABILITY: LiabilityAccount,
}


__all__ = [
    "Account",
    "AssetAccount",
    "LiabilityAccount",
    "MUTABLE_FIELDS",
    "ACCOUNT_TYPES",
]
