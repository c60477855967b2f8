"""Row mappers between gateway tables and domain models.

Each entity has a ``*_to_row`` function producing bind parameters and a
``row_to_*`` function reading a result row. Decimals travel as text,
timestamps as ISO text, enums as their values and snapshot breakdowns
as a JSON array.
"""

import json

from src.domain.models import (
    Account,
    AssetAccount,
    CategoryAmount,
    Family,
    FamilyInvitation,
    FamilyMember,
    FamilyRole,
    InvitationStatus,
    LiabilityAccount,
    Snapshot,
)
from src.utils.datetime_utils import coerce_date, coerce_datetime, to_iso
from src.utils.decimal_utils import coerce_decimal


def _decimal_to_text(value) -> str | None:
    if value is None:
        return None
    return str(value)


def _optional_decimal(value):
    if value is None or value == "":
        return None
    return coerce_decimal(value)


def account_to_row(user_id: str, account: Account) -> dict:
    """Return bind parameters for an asset or liability row."""
    row = {
        "id": account.id,
        "user_id": user_id,
        "name": account.name,
        "amount": _decimal_to_text(account.amount),
        "category": account.category,
        "note": account.note,
        "icon": account.icon,
        "created_at": to_iso(account.created_at),
        "updated_at": to_iso(account.updated_at),
    }
    if isinstance(account, AssetAccount):
        row["platform"] = account.platform
    else:
        row["interest_rate"] = _decimal_to_text(account.interest_rate)
        row["due_date"] = to_iso(account.due_date)
    return row


def account_changes_to_row(fields: dict) -> dict:
    """Convert a partial account update into bind parameters."""
    row = {}
    for name, value in fields.items():
        if name in {"amount", "interest_rate"}:
            row[name] = _decimal_to_text(value)
        elif name in {"due_date", "updated_at"}:
            row[name] = to_iso(value)
        else:
            row[name] = value
    return row


def row_to_asset(row) -> AssetAccount:
    return AssetAccount(
        id=row.id,
        name=row.name,
        amount=coerce_decimal(row.amount),
        category=row.category,
        created_at=coerce_datetime(row.created_at),
        updated_at=coerce_datetime(row.updated_at),
        note=row.note,
        icon=row.icon,
        platform=row.platform,
    )


def row_to_liability(row) -> LiabilityAccount:
    return LiabilityAccount(
        id=row.id,
        name=row.name,
        amount=coerce_decimal(row.amount),
        category=row.category,
        created_at=coerce_datetime(row.created_at),
        updated_at=coerce_datetime(row.updated_at),
        note=row.note,
        icon=row.icon,
        interest_rate=_optional_decimal(row.interest_rate),
        due_date=coerce_date(row.due_date),
    )


def snapshot_to_row(user_id: str, snapshot: Snapshot) -> dict:
    """Return bind parameters for a snapshot row."""
    breakdown = [
        {"category": item.category, "amount": str(item.amount)}
        for item in snapshot.breakdown
    ]
    return {
        "id": snapshot.id,
        "user_id": user_id,
        "date": to_iso(snapshot.date),
        "total_assets": str(snapshot.total_assets),
        "total_liabilities": str(snapshot.total_liabilities),
        "net_worth": str(snapshot.net_worth),
        "breakdown": json.dumps(breakdown),
    }


def row_to_snapshot(row) -> Snapshot:
    raw_breakdown = row.breakdown
    if isinstance(raw_breakdown, str):
        raw_breakdown = json.loads(raw_breakdown or "[]")
    breakdown = tuple(
        CategoryAmount(
            category=item["category"],
            amount=coerce_decimal(item["amount"]),
        )
        for item in raw_breakdown or []
    )
    return Snapshot(
        id=row.id,
        date=coerce_date(row.date),
        total_assets=coerce_decimal(row.total_assets),
        total_liabilities=coerce_decimal(row.total_liabilities),
        net_worth=coerce_decimal(row.net_worth),
        breakdown=breakdown,
    )


def family_to_row(family: Family) -> dict:
    return {
        "id": family.id,
        "name": family.name,
        "created_by": family.created_by,
        "created_at": to_iso(family.created_at),
        "updated_at": to_iso(family.updated_at),
    }


def row_to_family(row) -> Family:
    return Family(
        id=row.id,
        name=row.name,
        created_by=row.created_by,
        created_at=coerce_datetime(row.created_at),
        updated_at=coerce_datetime(row.updated_at),
    )


def member_to_row(member: FamilyMember) -> dict:
    return {
        "id": member.id,
        "family_id": member.family_id,
        "user_id": member.user_id,
        "role": FamilyRole(member.role).value,
        "joined_at": to_iso(member.joined_at),
    }


def row_to_member(row) -> FamilyMember:
    return FamilyMember(
        id=row.id,
        family_id=row.family_id,
        user_id=row.user_id,
        role=FamilyRole(row.role),
        joined_at=coerce_datetime(row.joined_at),
    )


def invitation_to_row(invitation: FamilyInvitation) -> dict:
    """Return bind parameters for an invitation row.

    The family name is display-only and is not stored with the invitation.
    """
    return {
        "id": invitation.id,
        "family_id": invitation.family_id,
        "inviter_id": invitation.inviter_id,
        "invitee_email": invitation.invitee_email.lower(),
        "invitee_id": invitation.invitee_id,
        "status": InvitationStatus(invitation.status).value,
        "role": FamilyRole(invitation.role).value,
        "created_at": to_iso(invitation.created_at),
        "expires_at": to_iso(invitation.expires_at),
        "responded_at": to_iso(invitation.responded_at),
    }


def row_to_invitation(row) -> FamilyInvitation:
    return FamilyInvitation(
        id=row.id,
        family_id=row.family_id,
        inviter_id=row.inviter_id,
        invitee_email=row.invitee_email,
        status=InvitationStatus(row.status),
        role=FamilyRole(row.role),
        created_at=coerce_datetime(row.created_at),
        expires_at=coerce_datetime(row.expires_at),
        invitee_id=row.invitee_id,
        responded_at=coerce_datetime(row.responded_at),
        family_name=getattr(row, "family_name", None),
    )


__all__ = [
    "account_to_row",
    "account_changes_to_row",
    "row_to_asset",
    "row_to_liability",
    "snapshot_to_row",
    "row_to_snapshot",
    "family_to_row",
    "row_to_family",
    "member_to_row",
    "row_to_member",
    "invitation_to_row",
    "row_to_invitation",
]
