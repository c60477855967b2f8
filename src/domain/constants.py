"""Domain constants: the category catalog and account defaults."""

from dataclasses import dataclass
from enum import Enum


class AccountKind(str, Enum):
    """Direction of an account; amounts are always stored as magnitudes."""

    ASSET = "asset"
    LIABILITY = "liability"


@dataclass(frozen=True)
class CategoryDescriptor:
    """Display descriptor for an account category.

    Attributes:
        key: Stable category key persisted with accounts.
        label: Human-readable label.
        icon: Emoji shown next to the label.
        color: Hex color used by charts.
        kind: Whether the category holds assets or liabilities.
    """

    key: str
    label: str
    icon: str
    color: str
    kind: AccountKind


ALL_CATEGORIES = "all"

ASSET_CATEGORIES = (
    CategoryDescriptor("cash", "Cash", "💵", "#10B981", AccountKind.ASSET),
    CategoryDescriptor("deposit", "Deposits", "🏦", "#3B82F6", AccountKind.ASSET),
    CategoryDescriptor("fund", "Funds", "📈", "#8B5CF6", AccountKind.ASSET),
    CategoryDescriptor("stock", "Stocks", "📊", "#F59E0B", AccountKind.ASSET),
    CategoryDescriptor("bond", "Bonds", "📄", "#6366F1", AccountKind.ASSET),
    CategoryDescriptor(
        "insurance", "Insurance", "🛡️", "#14B8A6", AccountKind.ASSET
    ),
    CategoryDescriptor(
        "realestate", "Real estate", "🏠", "#EC4899", AccountKind.ASSET
    ),
    CategoryDescriptor("vehicle", "Vehicles", "🚗", "#F97316", AccountKind.ASSET),
    CategoryDescriptor("gold", "Gold", "🪙", "#EAB308", AccountKind.ASSET),
    CategoryDescriptor("crypto", "Crypto", "₿", "#A855F7", AccountKind.ASSET),
    CategoryDescriptor(
        "other_asset", "Other assets", "📦", "#64748B", AccountKind.ASSET
    ),
)

LIABILITY_CATEGORIES = (
    CategoryDescriptor(
        "mortgage", "Mortgage", "🏠", "#EF4444", AccountKind.LIABILITY
    ),
    CategoryDescriptor(
        "car_loan", "Car loan", "🚗", "#F97316", AccountKind.LIABILITY
    ),
    CategoryDescriptor(
        "credit_card", "Credit card", "💳", "#EC4899", AccountKind.LIABILITY
    ),
    CategoryDescriptor(
        "consumer_loan", "Consumer loan", "🛒", "#8B5CF6", AccountKind.LIABILITY
    ),
    CategoryDescriptor(
        "education_loan",
        "Education loan",
        "🎓",
        "#3B82F6",
        AccountKind.LIABILITY,
    ),
    CategoryDescriptor(
        "other_liability",
        "Other liabilities",
        "📋",
        "#64748B",
        AccountKind.LIABILITY,
    ),
)

_CATEGORY_INDEX = {
    descriptor.key: descriptor
    for descriptor in (*ASSET_CATEGORIES, *LIABILITY_CATEGORIES)
}

DEFAULT_ICONS = {
    AccountKind.ASSET: "💰",
    AccountKind.LIABILITY: "💳",
}

DEFAULT_INVITATION_TTL_DAYS = 7


def get_category_descriptor(key: str) -> CategoryDescriptor | None:
    """Return the descriptor for a category key, or None when unknown."""
    return _CATEGORY_INDEX.get(key)


def categories_for(kind: AccountKind) -> tuple[CategoryDescriptor, ...]:
    """Return the catalog entries of one account kind, in display order."""
    if kind is AccountKind.ASSET:
        return ASSET_CATEGORIES
    return LIABILITY_CATEGORIES


__all__ = [
    "AccountKind",
    "CategoryDescriptor",
    "ALL_CATEGORIES",
    "ASSET_CATEGORIES",
    "LIABILITY_CATEGORIES",
    "DEFAULT_ICONS",
    "DEFAULT_INVITATION_TTL_DAYS",
    "get_category_descriptor",
    "categories_for",
]
