"""Use case driving family invitations from creation to response.

Invitations start pending and end accepted or rejected; a pending
invitation may also be cancelled, which deletes it. Expiry is evaluated
at read time against ``expires_at`` and never rewrites the stored row.
"""

from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta

from src.application.ports.family_repository import (
    FamilyMembersRepositoryPort,
    InvitationsRepositoryPort,
)
from src.application.use_cases.family_directory import (
    FamilyDirectory,
    coerce_role,
)
from src.domain.constants import DEFAULT_INVITATION_TTL_DAYS
from src.domain.errors import (
    AuthorizationError,
    ConflictError,
    GatewayError,
    NotFoundError,
    ValidationError,
)
from src.domain.models import (
    FamilyInvitation,
    FamilyMember,
    FamilyRole,
    InvitationStatus,
    UserSession,
)
from src.domain.policies import ensure_can_manage
from src.domain.services import normalize_email, validate_email
from src.infrastructure.logging.logger import get_app_logger
from src.utils.datetime_utils import utc_now
from src.utils.ids import new_id


class InvitationWorkflow:
    """Invite, cancel, accept and reject family invitations."""

    def __init__(
        self,
        session: UserSession,
        directory: FamilyDirectory,
        invitations_repository: InvitationsRepositoryPort,
        members_repository: FamilyMembersRepositoryPort,
        logger=None,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] | None = None,
        ttl_days: int = DEFAULT_INVITATION_TTL_DAYS,
    ) -> None:
        """Initialize the workflow.

        Args:
            session: Signed-in user.
            directory: Family directory holding the selected family.
            invitations_repository: Port for invitation rows.
            members_repository: Port for membership rows.
            logger: Optional logger compatible with logging.Logger-like API.
            clock: Optional callable returning the current aware datetime.
            id_factory: Optional callable generating identifiers.
            ttl_days: Days before a pending invitation stops being active.
        """
        if ttl_days <= 0:
            raise ValueError("ttl_days must be positive")
        self._session = session
        self._directory = directory
        self._invitations_repository = invitations_repository
        self._members_repository = members_repository
        self._logger = logger or get_app_logger()
        self._clock = clock or utc_now
        self._id_factory = id_factory or new_id
        self._ttl = timedelta(days=ttl_days)

    def invite(
        self,
        email: str,
        role: FamilyRole | str = FamilyRole.MEMBER,
    ) -> FamilyInvitation:
        """Invite an email address into the selected family.

        Args:
            email: Address of the invitee; compared case-insensitively.
            role: Role granted on acceptance (member or admin).

        Returns:
            FamilyInvitation: The stored pending invitation.

        Raises:
            ValidationError: No family selected, malformed email or an
                owner role.
            AuthorizationError: The caller is not owner or admin.
            ConflictError: The email already belongs to a member or has an
                active pending invitation in this family.
        """
        family = self._directory.current_family
        if family is None:
            raise ValidationError("No family selected", field="family_id")
        invitee_email = validate_email(email)
        granted = coerce_role(role)
        if granted is FamilyRole.OWNER:
            raise ValidationError(
                "Ownership cannot be granted through an invitation",
                field="role",
            )

        members = self._directory.fetch_members(family.id)
        caller = _membership_of(members, self._session.user_id)
        ensure_can_manage(caller.role if caller else None, "invite members")
        if any(
            member.email and normalize_email(member.email) == invitee_email
            for member in members
        ):
            raise ConflictError(f"{invitee_email} is already a member")

        now = self._clock()
        pending = self._fetch_pending(family.id)
        if any(
            item.invitee_email == invitee_email and item.is_active(now)
            for item in pending
        ):
            raise ConflictError(
                f"A pending invitation for {invitee_email} already exists"
            )

        invitation = FamilyInvitation(
            id=self._id_factory(),
            family_id=family.id,
            inviter_id=self._session.user_id,
            invitee_email=invitee_email,
            status=InvitationStatus.PENDING,
            role=granted,
            created_at=now,
            expires_at=now + self._ttl,
            family_name=family.name,
        )
        try:
            self._invitations_repository.insert_invitation(invitation)
        except GatewayError as exc:
            self._logger.error(
                f"Failed to invite {invitee_email} to {family.id}: {exc}"
            )
            raise
        self._directory.track_invitation(invitation)
        self._logger.info(
            f"Invited {invitee_email} to {family.id} as {granted.value}"
        )
        return invitation

    def cancel(self, invitation_id: str) -> FamilyInvitation:
        """Delete a pending invitation.

        Only the inviter or an owner/admin of the family may cancel.
        """
        invitation = self._require_pending(invitation_id)
        if invitation.inviter_id != self._session.user_id:
            caller = self._directory.membership_for(invitation.family_id)
            ensure_can_manage(
                caller.role if caller else None,
                "cancel invitations",
            )
        try:
            self._invitations_repository.delete_invitation(invitation_id)
        except GatewayError as exc:
            self._logger.error(
                f"Failed to cancel invitation {invitation_id}: {exc}"
            )
            raise
        self._directory.untrack_invitation(invitation_id)
        self._logger.info(f"Cancelled invitation {invitation_id}")
        return invitation

    def accept(self, invitation_id: str) -> FamilyMember:
        """Accept an invitation addressed to the caller and join the family.

        The invitation is marked accepted before the membership is written.
        When the membership write fails the invitation stays accepted and
        :meth:`repair_accepted_invitations` restores the membership later.

        Returns:
            FamilyMember: The new membership.

        Raises:
            ConflictError: Not pending, expired, or already a member.
            AuthorizationError: The invitation targets another email.
            GatewayError: A write failed.
        """
        invitation = self._require_own_pending(invitation_id)
        now = self._clock()
        if invitation.is_expired(now):
            raise ConflictError(f"Invitation {invitation_id} has expired")
        members = self._directory.fetch_members(invitation.family_id)
        if _membership_of(members, self._session.user_id) is not None:
            raise ConflictError("Already a member of this family")

        self._respond(invitation, InvitationStatus.ACCEPTED, now)
        member = FamilyMember(
            id=self._id_factory(),
            family_id=invitation.family_id,
            user_id=self._session.user_id,
            role=invitation.role,
            joined_at=now,
            email=self._session.email,
        )
        try:
            self._members_repository.insert_member(member)
        except GatewayError as exc:
            self._logger.error(
                f"Invitation {invitation_id} accepted but membership "
                f"could not be stored: {exc}"
            )
            self._directory.untrack_invitation(invitation_id)
            raise GatewayError(
                f"Invitation {invitation_id} accepted but membership "
                f"was not stored: {exc.message}"
            ) from exc

        self._directory.untrack_invitation(invitation_id)
        self._directory.join_family(member)
        self._logger.info(
            f"User {self._session.user_id} joined {invitation.family_id} "
            f"as {invitation.role.value}"
        )
        return member

    def reject(self, invitation_id: str) -> FamilyInvitation:
        """Reject an invitation addressed to the caller."""
        invitation = self._require_own_pending(invitation_id)
        now = self._clock()
        rejected = self._respond(invitation, InvitationStatus.REJECTED, now)
        self._directory.untrack_invitation(invitation_id)
        self._logger.info(f"Rejected invitation {invitation_id}")
        return rejected

    def pending_for_user(self) -> list[FamilyInvitation]:
        """Return the caller's active pending invitations."""
        return self._directory.list_user_invitations()

    def repair_accepted_invitations(self) -> list[FamilyMember]:
        """Create the memberships missing behind accepted invitations.

        Returns:
            list[FamilyMember]: Memberships created by this call.
        """
        try:
            repository = self._invitations_repository
            accepted = repository.fetch_invitations_for_email(
                normalize_email(self._session.email),
                InvitationStatus.ACCEPTED,
            )
        except GatewayError as exc:
            self._logger.error(f"Failed to load accepted invitations: {exc}")
            raise

        repaired: list[FamilyMember] = []
        seen: set[str] = set()
        for invitation in accepted:
            if invitation.invitee_id != self._session.user_id:
                continue
            if invitation.family_id in seen:
                continue
            seen.add(invitation.family_id)
            try:
                members = self._members_repository.fetch_members(
                    invitation.family_id
                )
            except GatewayError as exc:
                self._logger.error(
                    f"Failed to check membership in "
                    f"{invitation.family_id}: {exc}"
                )
                raise
            if _membership_of(members, self._session.user_id) is not None:
                continue
            member = FamilyMember(
                id=self._id_factory(),
                family_id=invitation.family_id,
                user_id=self._session.user_id,
                role=invitation.role,
                joined_at=invitation.responded_at or self._clock(),
                email=self._session.email,
            )
            try:
                self._members_repository.insert_member(member)
            except GatewayError as exc:
                self._logger.error(
                    f"Failed to repair membership for invitation "
                    f"{invitation.id}: {exc}"
                )
                raise
            self._logger.warning(
                f"Restored missing membership for invitation {invitation.id}"
            )
            repaired.append(member)

        if repaired:
            self._directory.join_family(repaired[-1])
        return repaired

    def _respond(
        self,
        invitation: FamilyInvitation,
        status: InvitationStatus,
        now: datetime,
    ) -> FamilyInvitation:
        try:
            changed = self._invitations_repository.update_invitation_response(
                invitation.id,
                status,
                self._session.user_id,
                now,
            )
        except GatewayError as exc:
            self._logger.error(
                f"Failed to mark invitation {invitation.id} "
                f"{status.value}: {exc}"
            )
            raise
        if not changed:
            raise ConflictError(
                f"Invitation {invitation.id} is no longer pending"
            )
        return replace(
            invitation,
            status=status,
            invitee_id=self._session.user_id,
            responded_at=now,
        )

    def _require_pending(self, invitation_id: str) -> FamilyInvitation:
        try:
            invitation = self._invitations_repository.fetch_invitation(
                invitation_id
            )
        except GatewayError as exc:
            self._logger.error(
                f"Failed to load invitation {invitation_id}: {exc}"
            )
            raise
        if invitation is None:
            raise NotFoundError("invitation", invitation_id)
        if invitation.status is not InvitationStatus.PENDING:
            raise ConflictError(
                f"Invitation {invitation_id} is already "
                f"{invitation.status.value}"
            )
        return invitation

    def _require_own_pending(self, invitation_id: str) -> FamilyInvitation:
        invitation = self._require_pending(invitation_id)
        if invitation.invitee_email != normalize_email(self._session.email):
            raise AuthorizationError(
                "This invitation is addressed to another email"
            )
        return invitation

    def _fetch_pending(self, family_id: str) -> list[FamilyInvitation]:
        try:
            return self._invitations_repository.fetch_family_invitations(
                family_id,
                InvitationStatus.PENDING,
            )
        except GatewayError as exc:
            self._logger.error(
                f"Failed to load invitations of family {family_id}: {exc}"
            )
            raise


def _membership_of(
    members: list[FamilyMember],
    user_id: str,
) -> FamilyMember | None:
    for member in members:
        if member.user_id == user_id:
            return member
    return None


__all__ = ["InvitationWorkflow"]
