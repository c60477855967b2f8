"""Domain models for financial aggregates."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from src.domain.constants import AccountKind


@dataclass(frozen=True)
class LedgerTotals:
    """Summary of net worth figures.

    Attributes:
        total_assets: Sum of asset amounts.
        total_liabilities: Sum of liability amounts.
        net_worth: Assets minus liabilities.
    """

    total_assets: Decimal
    total_liabilities: Decimal
    net_worth: Decimal


@dataclass(frozen=True)
class CategoryAmount:
    """Signed amount attached to a category key; liabilities are negative."""

    category: str
    amount: Decimal


@dataclass(frozen=True)
class CategoryAllocation:
    """Amount aggregated for a given category with its share of the kind."""

    category: str
    label: str
    icon: str
    color: str
    amount: Decimal
    share: Decimal


@dataclass(frozen=True)
class AllocationBreakdown:
    """Breakdown of one account kind by category."""

    kind: AccountKind
    total: Decimal
    categories: list[CategoryAllocation]


@dataclass(frozen=True)
class Snapshot:
    """Immutable dated capture of aggregate totals.

    ``net_worth`` is persisted as a denormalized cache for charting.
    """

    id: str
    date: date
    total_assets: Decimal
    total_liabilities: Decimal
    net_worth: Decimal
    breakdown: tuple[CategoryAmount, ...] = ()


__all__ = [
    "LedgerTotals",
    "CategoryAmount",
    "CategoryAllocation",
    "AllocationBreakdown",
    "Snapshot",
]
