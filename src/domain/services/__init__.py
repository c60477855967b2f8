"""Domain services package."""

from .finance import (
    compute_allocation,
    compute_asset_ratio,
    compute_snapshot_breakdown,
    compute_totals,
    filter_by_category,
)
from .normalization import normalize_email, normalize_text
from .validation import (
    validate_account_fields,
    validate_email,
    validate_family_name,
)

__all__ = [
    "compute_allocation",
    "compute_asset_ratio",
    "compute_snapshot_breakdown",
    "compute_totals",
    "filter_by_category",
    "normalize_email",
    "normalize_text",
    "validate_account_fields",
    "validate_email",
    "validate_family_name",
]
