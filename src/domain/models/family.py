"""Domain models for families, memberships and invitations."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class FamilyRole(str, Enum):
    """Role held by a member inside a family."""

    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


class InvitationStatus(str, Enum):
    """Lifecycle status of an invitation. Terminal states never reopen."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Family:
    """Sharing group of users."""

    id: str
    name: str
    created_by: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class FamilyMember:
    """Membership of one user in one family.

    Attributes:
        email: Display email resolved from the profile lookup, if any.
    """

    id: str
    family_id: str
    user_id: str
    role: FamilyRole
    joined_at: datetime
    email: str | None = None


@dataclass(frozen=True)
class FamilyInvitation:
    """Offer of membership addressed to an email.

    Attributes:
        invitee_email: Lower-cased email; the case-insensitive key.
        invitee_id: Bound when the invitee responds.
        family_name: Display name of the family, when joined in.
    """

    id: str
    family_id: str
    inviter_id: str
    invitee_email: str
    status: InvitationStatus
    role: FamilyRole
    created_at: datetime
    expires_at: datetime
    invitee_id: str | None = None
    responded_at: datetime | None = None
    family_name: str | None = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now

    def is_active(self, now: datetime) -> bool:
        """Pending and not yet expired."""
        return (
            self.status is InvitationStatus.PENDING
            and not self.is_expired(now)
        )


__all__ = [
    "FamilyRole",
    "InvitationStatus",
    "Family",
    "FamilyMember",
    "FamilyInvitation",
]
