"""Domain validation helpers.

Validation runs before any gateway call and raises ``ValidationError``.
"""

import re
from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from typing import Any

from src.domain.constants import AccountKind, get_category_descriptor
from src.domain.errors import ValidationError
from src.domain.models.accounts import MUTABLE_FIELDS
from src.domain.services.normalization import normalize_email, normalize_text
from src.utils.decimal_utils import parse_decimal


_REQUIRED_ACCOUNT_FIELDS = ("name", "amount", "category")
_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_MAX_INTEREST_RATE = Decimal("100")


def validate_account_fields(
    kind: AccountKind,
    fields: Mapping[str, Any],
    *,
    partial: bool = False,
) -> dict[str, Any]:
    """Validate and normalize account fields for one account kind.

    Args:
        kind: Asset or liability.
        fields: Raw field values keyed by attribute name.
        partial: True for updates, where omitted fields keep their value.

    Returns:
        dict[str, Any]: Normalized values for the provided fields.

    Raises:
        ValidationError: On unknown fields, empty names, non-positive
            amounts, foreign categories or out-of-range interest rates.
    """
    allowed = MUTABLE_FIELDS[kind]
    unknown = sorted(set(fields) - allowed)
    if unknown:
        raise ValidationError(
            f"Unknown {kind.value} field: {unknown[0]}",
            field=unknown[0],
        )
    if not partial:
        for name in _REQUIRED_ACCOUNT_FIELDS:
            if fields.get(name) is None:
                raise ValidationError(f"Missing field: {name}", field=name)

    cleaned: dict[str, Any] = {}
    for name, value in fields.items():
        if name == "name":
            cleaned[name] = _validate_name(value)
        elif name == "amount":
            cleaned[name] = _validate_amount(value)
        elif name == "category":
            cleaned[name] = _validate_category(kind, value)
        elif name == "interest_rate":
            cleaned[name] = _validate_interest_rate(value)
        elif name == "due_date":
            cleaned[name] = _validate_due_date(value)
        else:
            cleaned[name] = normalize_text(value)
    return cleaned


def validate_family_name(name: str | None) -> str:
    """Return the stripped family name or raise when empty."""
    cleaned = normalize_text(name)
    if not cleaned:
        raise ValidationError("Family name must not be empty", field="name")
    return cleaned


def validate_email(email: str | None) -> str:
    """Return the normalized email or raise when malformed."""
    normalized = normalize_email(email)
    if not _EMAIL_PATTERN.match(normalized):
        raise ValidationError(
            f"Invalid email address: {email!r}",
            field="email",
        )
    return normalized


def _validate_name(value: Any) -> str:
    cleaned = normalize_text(value)
    if not cleaned:
        raise ValidationError("Account name must not be empty", field="name")
    return cleaned


def _validate_amount(value: Any) -> Decimal:
    amount = parse_decimal(value)
    if amount is None or amount <= 0:
        raise ValidationError(
            "Amount must be a number greater than zero",
            field="amount",
        )
    return amount


def _validate_category(kind: AccountKind, value: Any) -> str:
    descriptor = get_category_descriptor(str(value))
    if descriptor is None or descriptor.kind is not kind:
        raise ValidationError(
            f"Unknown {kind.value} category: {value}",
            field="category",
        )
    return descriptor.key


def _validate_interest_rate(value: Any) -> Decimal | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    rate = parse_decimal(value)
    if rate is None or rate < 0 or rate > _MAX_INTEREST_RATE:
        raise ValidationError(
            "Interest rate must be between 0 and 100",
            field="interest_rate",
        )
    return rate


def _validate_due_date(value: Any) -> date | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as exc:
        raise ValidationError(
            f"Invalid due date: {value}",
            field="due_date",
        ) from exc


__all__ = [
    "validate_account_fields",
    "validate_family_name",
    "validate_email",
]
