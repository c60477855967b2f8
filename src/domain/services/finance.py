"""Domain services for finance aggregates."""

from collections.abc import Iterable, Sequence
from decimal import Decimal

from src.domain.constants import (
    ALL_CATEGORIES,
    AccountKind,
    categories_for,
)
from src.domain.models import (
    Account,
    AllocationBreakdown,
    AssetAccount,
    CategoryAllocation,
    CategoryAmount,
    LedgerTotals,
    LiabilityAccount,
)


_HUNDRED = Decimal("100")


def compute_totals(
    assets: Iterable[AssetAccount],
    liabilities: Iterable[LiabilityAccount],
) -> LedgerTotals:
    """Compute net worth totals from the account collections.

    Args:
        assets: Asset accounts of the ledger.
        liabilities: Liability accounts of the ledger.

    Returns:
        LedgerTotals: Asset, liability and net worth totals.
    """
    total_assets = sum((account.amount for account in assets), Decimal("0"))
    total_liabilities = sum(
        (account.amount for account in liabilities),
        Decimal("0"),
    )
    return LedgerTotals(
        total_assets=total_assets,
        total_liabilities=total_liabilities,
        net_worth=total_assets - total_liabilities,
    )


def compute_snapshot_breakdown(
    assets: Iterable[AssetAccount],
    liabilities: Iterable[LiabilityAccount],
) -> tuple[CategoryAmount, ...]:
    """Return one signed entry per account; liabilities are negated."""
    return (
        *(
            CategoryAmount(category=account.category, amount=account.amount)
            for account in assets
        ),
        *(
            CategoryAmount(category=account.category, amount=-account.amount)
            for account in liabilities
        ),
    )


def compute_allocation(
    accounts: Iterable[Account],
    kind: AccountKind,
) -> AllocationBreakdown:
    """Roll accounts of one kind up by category, in catalog order.

    Categories without any amount are left out.

    Args:
        accounts: Accounts of the given kind.
        kind: Asset or liability.

    Returns:
        AllocationBreakdown: Per-category totals with percentage shares.
    """
    totals: dict[str, Decimal] = {}
    for account in accounts:
        totals[account.category] = (
            totals.get(account.category, Decimal("0")) + account.amount
        )
    grand_total = sum(totals.values(), Decimal("0"))

    categories = []
    for descriptor in categories_for(kind):
        amount = totals.get(descriptor.key, Decimal("0"))
        if amount <= 0:
            continue
        share = (amount / grand_total) * _HUNDRED if grand_total else Decimal("0")
        categories.append(
            CategoryAllocation(
                category=descriptor.key,
                label=descriptor.label,
                icon=descriptor.icon,
                color=descriptor.color,
                amount=amount,
                share=share,
            )
        )
    return AllocationBreakdown(
        kind=kind,
        total=grand_total,
        categories=categories,
    )


def compute_asset_ratio(totals: LedgerTotals) -> Decimal:
    """Return assets as a percentage of assets plus liabilities.

    With no assets the bar is drawn even, so 50 is returned.
    """
    if totals.total_assets <= 0:
        return Decimal("50")
    gross = totals.total_assets + totals.total_liabilities
    return (totals.total_assets / gross) * _HUNDRED


def filter_by_category(
    assets: Sequence[AssetAccount],
    liabilities: Sequence[LiabilityAccount],
    category: str,
) -> list[Account]:
    """Return accounts matching a category key, or all for the sentinel."""
    if category == ALL_CATEGORIES:
        return [*assets, *liabilities]
    return [
        account
        for account in (*assets, *liabilities)
        if account.category == category
    ]


__all__ = [
    "compute_totals",
    "compute_snapshot_breakdown",
    "compute_allocation",
    "compute_asset_ratio",
    "filter_by_category",
]
