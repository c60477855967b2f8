"""Domain policies package."""

from .family_roles import (
    MANAGER_ROLES,
    can_manage,
    ensure_can_change_role,
    ensure_can_manage,
    ensure_can_remove,
)

__all__ = [
    "MANAGER_ROLES",
    "can_manage",
    "ensure_can_change_role",
    "ensure_can_manage",
    "ensure_can_remove",
]
