"""Ports for families, memberships, invitations and profiles."""

from datetime import datetime
from typing import Protocol

from src.domain.models import (
    Family,
    FamilyInvitation,
    FamilyMember,
    FamilyRole,
    InvitationStatus,
    UserSession,
)


class FamiliesRepositoryPort(Protocol):
    """Port exposing the family rows."""

    def insert_family(
        self,
        name: str,
        created_by: str,
        created_at: datetime,
    ) -> Family:
        """Insert a family and return it with its generated identifier."""

    def update_family_name(
        self,
        family_id: str,
        name: str,
        updated_at: datetime,
    ) -> int:
        """Rename a family and return the number of rows changed."""

    def delete_family(self, family_id: str) -> None:
        """Delete a family row."""

    def fetch_families_for_user(self, user_id: str) -> list[Family]:
        """Return the families where the user holds a membership."""


class FamilyMembersRepositoryPort(Protocol):
    """Port exposing membership rows."""

    def insert_member(self, member: FamilyMember) -> None:
        """Insert a membership row."""

    def fetch_members(self, family_id: str) -> list[FamilyMember]:
        """Return the memberships of a family, without emails."""

    def update_member_role(self, member_id: str, role: FamilyRole) -> int:
        """Change a member's role and return the number of rows changed."""

    def delete_member(self, member_id: str) -> None:
        """Delete a membership row."""


class InvitationsRepositoryPort(Protocol):
    """Port exposing invitation rows."""

    def insert_invitation(self, invitation: FamilyInvitation) -> None:
        """Insert a new invitation."""

    def fetch_invitation(self, invitation_id: str) -> FamilyInvitation | None:
        """Return one invitation with its family name, if it exists."""

    def fetch_family_invitations(
        self,
        family_id: str,
        status: InvitationStatus,
    ) -> list[FamilyInvitation]:
        """Return a family's invitations in the given status."""

    def fetch_invitations_for_email(
        self,
        email: str,
        status: InvitationStatus,
    ) -> list[FamilyInvitation]:
        """Return invitations addressed to an email, with family names."""

    def update_invitation_response(
        self,
        invitation_id: str,
        status: InvitationStatus,
        invitee_id: str,
        responded_at: datetime,
    ) -> int:
        """Record a response on a pending invitation.

        Returns:
            int: Rows changed; zero when the invitation is no longer pending.
        """

    def delete_invitation(self, invitation_id: str) -> None:
        """Delete an invitation row."""

    def delete_accepted_invitations(
        self,
        family_id: str,
        invitee_id: str,
    ) -> None:
        """Delete the accepted invitations a user holds for a family."""


class ProfilesRepositoryPort(Protocol):
    """Port exposing the user-profile projection used for identity lookup."""

    def fetch_emails(self, user_ids: list[str]) -> dict[str, str]:
        """Map user identifiers to their emails."""

    def ensure_profile(self, email: str) -> UserSession:
        """Return the profile for an email, creating it when missing."""


__all__ = [
    "FamiliesRepositoryPort",
    "FamilyMembersRepositoryPort",
    "InvitationsRepositoryPort",
    "ProfilesRepositoryPort",
]
