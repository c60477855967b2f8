"""Role policies for family membership management."""

from src.domain.errors import AuthorizationError
from src.domain.models import FamilyMember, FamilyRole


MANAGER_ROLES = frozenset({FamilyRole.OWNER, FamilyRole.ADMIN})


def can_manage(role: FamilyRole | None) -> bool:
    """Return True when the role may manage members and invitations."""
    return role in MANAGER_ROLES


def ensure_can_manage(role: FamilyRole | None, action: str) -> None:
    """Raise AuthorizationError unless the role is owner or admin."""
    if not can_manage(role):
        raise AuthorizationError(
            f"Only owners and admins can {action}"
        )


def ensure_can_remove(
    caller: FamilyMember | None,
    target: FamilyMember,
) -> None:
    """Check that ``caller`` may remove ``target`` from the family.

    Owners are never removed, and nobody removes themselves this way.
    """
    ensure_can_manage(caller.role if caller else None, "remove members")
    if target.role is FamilyRole.OWNER:
        raise AuthorizationError("The family owner cannot be removed")
    if caller is not None and caller.id == target.id:
        raise AuthorizationError(
            "Use leave family to remove your own membership"
        )


def ensure_can_change_role(
    caller: FamilyMember | None,
    target: FamilyMember,
    new_role: FamilyRole,
    members: list[FamilyMember],
) -> None:
    """Check a role change keeps at least one owner in the family.

    Only owners grant or revoke the owner role.
    """
    ensure_can_manage(caller.role if caller else None, "change member roles")
    touches_owner = (
        new_role is FamilyRole.OWNER or target.role is FamilyRole.OWNER
    )
    if touches_owner and caller.role is not FamilyRole.OWNER:
        raise AuthorizationError("Only owners can grant or revoke ownership")
    if target.role is FamilyRole.OWNER and new_role is not FamilyRole.OWNER:
        other_owners = [
            member
            for member in members
            if member.role is FamilyRole.OWNER and member.id != target.id
        ]
        if not other_owners:
            raise AuthorizationError(
                "A family must keep at least one owner"
            )


__all__ = [
    "MANAGER_ROLES",
    "can_manage",
    "ensure_can_manage",
    "ensure_can_remove",
    "ensure_can_change_role",
]
