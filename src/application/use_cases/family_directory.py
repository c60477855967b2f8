"""Use case holding the families of a user and the selected family.

The directory tracks the families the signed-in user belongs to, the
currently selected family, its members and its outstanding invitations.
Membership checks read the members from the gateway before any write so
that role decisions never rely on a stale cache.
"""

from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

from src.application.ports.family_repository import (
    FamiliesRepositoryPort,
    FamilyMembersRepositoryPort,
    InvitationsRepositoryPort,
    ProfilesRepositoryPort,
)
from src.domain.errors import (
    AuthorizationError,
    GatewayError,
    NotFoundError,
    ValidationError,
)
from src.domain.models import (
    Family,
    FamilyInvitation,
    FamilyMember,
    FamilyRole,
    InvitationStatus,
    UserSession,
)
from src.domain.policies import (
    ensure_can_change_role,
    ensure_can_manage,
    ensure_can_remove,
)
from src.domain.services import validate_family_name
from src.infrastructure.logging.logger import get_app_logger
from src.utils.datetime_utils import utc_now
from src.utils.ids import new_id


class FamilyDirectory:
    """Manage families, memberships and roles for the signed-in user."""

    def __init__(
        self,
        session: UserSession,
        families_repository: FamiliesRepositoryPort,
        members_repository: FamilyMembersRepositoryPort,
        invitations_repository: InvitationsRepositoryPort,
        profiles_repository: ProfilesRepositoryPort,
        logger=None,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        """Initialize the directory.

        Args:
            session: Signed-in user.
            families_repository: Port for family rows.
            members_repository: Port for membership rows.
            invitations_repository: Port for invitation rows.
            profiles_repository: Port resolving user emails.
            logger: Optional logger compatible with logging.Logger-like API.
            clock: Optional callable returning the current aware datetime.
            id_factory: Optional callable generating membership identifiers.
        """
        self._session = session
        self._families_repository = families_repository
        self._members_repository = members_repository
        self._invitations_repository = invitations_repository
        self._profiles_repository = profiles_repository
        self._logger = logger or get_app_logger()
        self._clock = clock or utc_now
        self._id_factory = id_factory or new_id
        self._families: list[Family] = []
        self._current_family: Family | None = None
        self._members: list[FamilyMember] = []
        self._invitations: list[FamilyInvitation] = []
        self._user_invitations: list[FamilyInvitation] = []

    @property
    def session(self) -> UserSession:
        return self._session

    @property
    def families(self) -> tuple[Family, ...]:
        return tuple(self._families)

    @property
    def current_family(self) -> Family | None:
        return self._current_family

    @property
    def members(self) -> tuple[FamilyMember, ...]:
        return tuple(self._members)

    @property
    def invitations(self) -> tuple[FamilyInvitation, ...]:
        return tuple(self._invitations)

    @property
    def user_invitations(self) -> tuple[FamilyInvitation, ...]:
        """Active invitations addressed to the signed-in user."""
        return tuple(self._user_invitations)

    @property
    def caller_role(self) -> FamilyRole | None:
        """Role of the signed-in user in the selected family."""
        membership = self._membership_of_caller(self._members)
        return membership.role if membership else None

    def refresh(self) -> None:
        """Reload the families, the user's invitations and the selection.

        The selection is dropped when the user no longer belongs to it.
        """
        families = self._fetch_families()
        self._families = families
        self.list_user_invitations()
        if self._current_family is None:
            return
        match = _find_family(families, self._current_family.id)
        if match is None:
            self._clear_selection()
            return
        self._current_family = match
        self._members = self._fetch_members(match.id)
        self._invitations = self._fetch_active_invitations(match.id)

    def list_families(self) -> list[Family]:
        """Return the families where the user holds a membership."""
        self._families = self._fetch_families()
        return list(self._families)

    def select_family(self, family_id: str | None) -> Family | None:
        """Set the current family; ``None`` clears the selection.

        Raises:
            NotFoundError: When the user does not belong to the family.
        """
        if family_id is None:
            self._clear_selection()
            return None
        family = self._require_family(family_id)
        members = self._fetch_members(family.id)
        invitations = self._fetch_active_invitations(family.id)
        self._current_family = family
        self._members = members
        self._invitations = invitations
        self._logger.info(f"Selected family {family.id}")
        return family

    def create_family(self, name: str) -> Family:
        """Create a family with the caller as owner and select it.

        The owner membership is written after the family row; when it
        fails, the family row is deleted again before the error is raised.

        Raises:
            ValidationError: When the name is empty.
            GatewayError: When either write fails.
        """
        cleaned = validate_family_name(name)
        now = self._clock()
        try:
            family = self._families_repository.insert_family(
                cleaned,
                self._session.user_id,
                now,
            )
        except GatewayError as exc:
            self._logger.error(f"Failed to create family '{cleaned}': {exc}")
            raise

        owner = FamilyMember(
            id=self._id_factory(),
            family_id=family.id,
            user_id=self._session.user_id,
            role=FamilyRole.OWNER,
            joined_at=now,
            email=self._session.email,
        )
        try:
            self._members_repository.insert_member(owner)
        except GatewayError as exc:
            self._logger.error(
                f"Failed to add owner to family {family.id}, "
                f"rolling back: {exc}"
            )
            self._rollback_family(family.id)
            raise

        self._families.append(family)
        self._current_family = family
        self._members = [owner]
        self._invitations = []
        self._logger.info(f"Created family {family.id} '{family.name}'")
        return family

    def rename_family(self, family_id: str, name: str) -> Family:
        """Rename a family; owners and admins only."""
        cleaned = validate_family_name(name)
        family = self._require_family(family_id)
        caller = self._membership_of_caller(self._fetch_members(family_id))
        ensure_can_manage(caller.role if caller else None, "rename the family")
        now = self._clock()
        try:
            changed = self._families_repository.update_family_name(
                family_id,
                cleaned,
                now,
            )
        except GatewayError as exc:
            self._logger.error(f"Failed to rename family {family_id}: {exc}")
            raise
        if not changed:
            raise NotFoundError("family", family_id)

        renamed = replace(family, name=cleaned, updated_at=now)
        self._families = [
            renamed if item.id == family_id else item
            for item in self._families
        ]
        if self._current_family and self._current_family.id == family_id:
            self._current_family = renamed
        return renamed

    def delete_family(self, family_id: str) -> None:
        """Delete a family with its memberships; owners only."""
        self._require_family(family_id)
        caller = self._membership_of_caller(self._fetch_members(family_id))
        if caller is None or caller.role is not FamilyRole.OWNER:
            raise AuthorizationError("Only owners can delete a family")
        try:
            self._families_repository.delete_family(family_id)
        except GatewayError as exc:
            self._logger.error(f"Failed to delete family {family_id}: {exc}")
            raise
        self._families = [f for f in self._families if f.id != family_id]
        if self._current_family and self._current_family.id == family_id:
            self._clear_selection()
        self._logger.info(f"Deleted family {family_id}")

    def list_members(self, family_id: str | None = None) -> list[FamilyMember]:
        """Return the members of a family (default: the selected one)."""
        resolved = self._resolve_family_id(family_id)
        members = self._fetch_members(resolved)
        if self._is_current(resolved):
            self._members = members
        return list(members)

    def list_invitations(
        self,
        family_id: str | None = None,
    ) -> list[FamilyInvitation]:
        """Return the pending, unexpired invitations of a family."""
        resolved = self._resolve_family_id(family_id)
        invitations = self._fetch_active_invitations(resolved)
        if self._is_current(resolved):
            self._invitations = invitations
        return list(invitations)

    def remove_member(self, member_id: str) -> FamilyMember:
        """Remove another member from the selected family.

        Accepted invitations the member held for the family are deleted
        first so they cannot be used to restore the membership.

        Raises:
            AuthorizationError: When the caller is not owner/admin, the
                target is an owner, or the target is the caller.
        """
        family = self._require_selection()
        members = self._fetch_members(family.id)
        target = _find_member(members, member_id)
        ensure_can_remove(self._membership_of_caller(members), target)
        try:
            self._invitations_repository.delete_accepted_invitations(
                family.id,
                target.user_id,
            )
            self._members_repository.delete_member(member_id)
        except GatewayError as exc:
            self._logger.error(f"Failed to remove member {member_id}: {exc}")
            raise
        self._members = [m for m in members if m.id != member_id]
        self._logger.info(f"Removed member {member_id} from {family.id}")
        return target

    def update_member_role(
        self,
        member_id: str,
        role: FamilyRole | str,
    ) -> FamilyMember:
        """Change a member's role in the selected family.

        Raises:
            AuthorizationError: When the caller is not owner/admin, a
                non-owner touches ownership, or no owner would remain.
        """
        new_role = coerce_role(role)
        family = self._require_selection()
        members = self._fetch_members(family.id)
        target = _find_member(members, member_id)
        ensure_can_change_role(
            self._membership_of_caller(members),
            target,
            new_role,
            members,
        )
        try:
            changed = self._members_repository.update_member_role(
                member_id,
                new_role,
            )
        except GatewayError as exc:
            self._logger.error(
                f"Failed to change role of member {member_id}: {exc}"
            )
            raise
        if not changed:
            raise NotFoundError("family member", member_id)

        updated = replace(target, role=new_role)
        self._members = [
            updated if member.id == member_id else member
            for member in members
        ]
        self._logger.info(
            f"Member {member_id} of {family.id} is now {new_role.value}"
        )
        return updated

    def leave_family(self) -> Family:
        """Remove the caller's own membership from the selected family.

        The last member leaving also deletes the family.
        Accepted invitations the caller held for the family are deleted too.

        Raises:
            AuthorizationError: When the caller owns a family that still
                has other members; ownership must be handed over first.
        """
        family = self._require_selection()
        members = self._fetch_members(family.id)
        mine = self._membership_of_caller(members)
        if mine is None:
            raise NotFoundError("family membership", family.id)
        if mine.role is FamilyRole.OWNER and len(members) > 1:
            raise AuthorizationError(
                "Owner must transfer ownership before leaving the family"
            )
        try:
            self._invitations_repository.delete_accepted_invitations(
                family.id,
                mine.user_id,
            )
            self._members_repository.delete_member(mine.id)
            if len(members) == 1:
                self._families_repository.delete_family(family.id)
        except GatewayError as exc:
            self._logger.error(f"Failed to leave family {family.id}: {exc}")
            raise
        self._families = [f for f in self._families if f.id != family.id]
        self._clear_selection()
        self._logger.info(f"User {self._session.user_id} left {family.id}")
        return family

    def list_user_invitations(self) -> list[FamilyInvitation]:
        """Return the pending, unexpired invitations sent to the user."""
        try:
            repository = self._invitations_repository
            invitations = repository.fetch_invitations_for_email(
                self._session.email,
                InvitationStatus.PENDING,
            )
        except GatewayError as exc:
            self._logger.error(
                f"Failed to load invitations for {self._session.email}: {exc}"
            )
            raise
        now = self._clock()
        self._user_invitations = [
            item for item in invitations if item.is_active(now)
        ]
        return list(self._user_invitations)

    def membership_for(self, family_id: str) -> FamilyMember | None:
        """Return the user's membership in a family, read from the store."""
        return self._membership_of_caller(self._fetch_members(family_id))

    def fetch_members(self, family_id: str) -> list[FamilyMember]:
        """Return a family's members read from the store, with emails."""
        return self._fetch_members(family_id)

    def track_invitation(self, invitation: FamilyInvitation) -> None:
        """Add a newly stored invitation to the selected family's list."""
        if self._is_current(invitation.family_id):
            self._invitations.append(invitation)

    def untrack_invitation(self, invitation_id: str) -> None:
        """Drop an invitation from the cached invitation lists."""
        self._invitations = [
            item for item in self._invitations if item.id != invitation_id
        ]
        self._user_invitations = [
            item for item in self._user_invitations if item.id != invitation_id
        ]

    def join_family(self, member: FamilyMember) -> None:
        """Reload families after the user joined one through an invitation."""
        self._families = self._fetch_families()
        if self._is_current(member.family_id):
            self._members = self._fetch_members(member.family_id)

    def _rollback_family(self, family_id: str) -> None:
        try:
            self._families_repository.delete_family(family_id)
        except GatewayError as exc:
            self._logger.error(
                f"Rollback of family {family_id} failed: {exc}"
            )

    def _fetch_families(self) -> list[Family]:
        try:
            return self._families_repository.fetch_families_for_user(
                self._session.user_id
            )
        except GatewayError as exc:
            self._logger.error(f"Failed to load families: {exc}")
            raise

    def _fetch_members(self, family_id: str) -> list[FamilyMember]:
        try:
            members = self._members_repository.fetch_members(family_id)
            emails = self._profiles_repository.fetch_emails(
                [member.user_id for member in members]
            )
        except GatewayError as exc:
            self._logger.error(
                f"Failed to load members of family {family_id}: {exc}"
            )
            raise
        return [
            replace(member, email=emails.get(member.user_id, member.email))
            for member in members
        ]

    def _fetch_active_invitations(
        self,
        family_id: str,
    ) -> list[FamilyInvitation]:
        try:
            repository = self._invitations_repository
            invitations = repository.fetch_family_invitations(
                family_id,
                InvitationStatus.PENDING,
            )
        except GatewayError as exc:
            self._logger.error(
                f"Failed to load invitations of family {family_id}: {exc}"
            )
            raise
        now = self._clock()
        return [item for item in invitations if item.is_active(now)]

    def _membership_of_caller(
        self,
        members: list[FamilyMember],
    ) -> FamilyMember | None:
        for member in members:
            if member.user_id == self._session.user_id:
                return member
        return None

    def _require_family(self, family_id: str) -> Family:
        family = _find_family(self._families, family_id)
        if family is None:
            self._families = self._fetch_families()
            family = _find_family(self._families, family_id)
        if family is None:
            raise NotFoundError("family", family_id)
        return family

    def _require_selection(self) -> Family:
        if self._current_family is None:
            raise ValidationError("No family selected", field="family_id")
        return self._current_family

    def _resolve_family_id(self, family_id: str | None) -> str:
        if family_id is None:
            return self._require_selection().id
        return self._require_family(family_id).id

    def _is_current(self, family_id: str) -> bool:
        return (
            self._current_family is not None
            and self._current_family.id == family_id
        )

    def _clear_selection(self) -> None:
        self._current_family = None
        self._members = []
        self._invitations = []


def coerce_role(role: FamilyRole | str) -> FamilyRole:
    """Convert a role value into a FamilyRole or raise ValidationError."""
    try:
        return FamilyRole(role)
    except ValueError as exc:
        raise ValidationError(f"Unknown role: {role}", field="role") from exc


def _find_family(families: list[Family], family_id: str) -> Family | None:
    for family in families:
        if family.id == family_id:
            return family
    return None


def _find_member(members: list[FamilyMember], member_id: str) -> FamilyMember:
    for member in members:
        if member.id == member_id:
            return member
    raise NotFoundError("family member", member_id)


__all__ = ["FamilyDirectory", "coerce_role"]
