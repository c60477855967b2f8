"""SQLAlchemy-backed repositories for families, members and invitations."""

from datetime import datetime

from sqlalchemy import bindparam, text

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.family_repository import (
    FamiliesRepositoryPort,
    FamilyMembersRepositoryPort,
    InvitationsRepositoryPort,
    ProfilesRepositoryPort,
)
from src.domain.models import (
    Family,
    FamilyInvitation,
    FamilyMember,
    FamilyRole,
    InvitationStatus,
    UserSession,
)
from src.infrastructure.gateway_errors import gateway_errors
from src.infrastructure.mappers import (
    family_to_row,
    invitation_to_row,
    member_to_row,
    row_to_family,
    row_to_invitation,
    row_to_member,
)
from src.utils.datetime_utils import to_iso, utc_now
from src.utils.ids import new_id


INSERT_FAMILY_SQL = text(
    """
    INSERT INTO families (id, name, created_by, created_at, updated_at)
    VALUES (:id, :name, :created_by, :created_at, :updated_at)
    """
)

UPDATE_FAMILY_NAME_SQL = text(
    """
    UPDATE families SET name = :name, updated_at = :updated_at
    WHERE id = :family_id
    """
)

SELECT_FAMILIES_FOR_USER_SQL = text(
    """
    SELECT f.id, f.name, f.created_by, f.created_at, f.updated_at
    FROM families AS f
    JOIN family_members AS m ON m.family_id = f.id
    WHERE m.user_id = :user_id
    ORDER BY f.created_at, f.id
    """
)

INSERT_MEMBER_SQL = text(
    """
    INSERT INTO family_members (id, family_id, user_id, role, joined_at)
    VALUES (:id, :family_id, :user_id, :role, :joined_at)
    """
)

SELECT_MEMBERS_SQL = text(
    """
    SELECT id, family_id, user_id, role, joined_at
    FROM family_members
    WHERE family_id = :family_id
    ORDER BY joined_at, id
    """
)

UPDATE_MEMBER_ROLE_SQL = text(
    "UPDATE family_members SET role = :role WHERE id = :member_id"
)

DELETE_MEMBER_SQL = text("DELETE FROM family_members WHERE id = :member_id")

INSERT_INVITATION_SQL = text(
    """
    INSERT INTO family_invitations (
        id, family_id, inviter_id, invitee_email, invitee_id, status, role,
        created_at, expires_at, responded_at
    )
    VALUES (
        :id, :family_id, :inviter_id, :invitee_email, :invitee_id, :status,
        :role, :created_at, :expires_at, :responded_at
    )
    """
)

_INVITATION_COLUMNS = """
    i.id, i.family_id, i.inviter_id, i.invitee_email, i.invitee_id,
    i.status, i.role, i.created_at, i.expires_at, i.responded_at,
    f.name AS family_name
"""

SELECT_INVITATION_SQL = text(
    f"""
    SELECT {_INVITATION_COLUMNS}
    FROM family_invitations AS i
    LEFT JOIN families AS f ON f.id = i.family_id
    WHERE i.id = :invitation_id
    """
)

SELECT_FAMILY_INVITATIONS_SQL = text(
    f"""
    SELECT {_INVITATION_COLUMNS}
    FROM family_invitations AS i
    LEFT JOIN families AS f ON f.id = i.family_id
    WHERE i.family_id = :family_id AND i.status = :status
    ORDER BY i.created_at, i.id
    """
)

SELECT_EMAIL_INVITATIONS_SQL = text(
    f"""
    SELECT {_INVITATION_COLUMNS}
    FROM family_invitations AS i
    LEFT JOIN families AS f ON f.id = i.family_id
    WHERE i.invitee_email = :email AND i.status = :status
    ORDER BY i.created_at, i.id
    """
)

UPDATE_INVITATION_RESPONSE_SQL = text(
    """
    UPDATE family_invitations
    SET status = :status, invitee_id = :invitee_id,
        responded_at = :responded_at
    WHERE id = :invitation_id AND status = :pending
    """
)

DELETE_INVITATION_SQL = text(
    "DELETE FROM family_invitations WHERE id = :invitation_id"
)

DELETE_ACCEPTED_INVITATIONS_SQL = text(
    """
    DELETE FROM family_invitations
    WHERE family_id = :family_id AND invitee_id = :invitee_id
      AND status = :accepted
    """
)

SELECT_PROFILE_EMAILS_SQL = text(
    "SELECT id, email FROM profiles WHERE id IN :user_ids"
).bindparams(bindparam("user_ids", expanding=True))

SELECT_PROFILE_BY_EMAIL_SQL = text(
    "SELECT id, email FROM profiles WHERE email = :email"
)

INSERT_PROFILE_SQL = text(
    """
    INSERT INTO profiles (id, email, created_at)
    VALUES (:id, :email, :created_at)
    """
)


class SqlAlchemyFamiliesRepository(FamiliesRepositoryPort):
    """Repository backed by SQLAlchemy for families."""

    def __init__(self, db_port: DatabaseEnginePort, id_factory=None) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the application engine.
            id_factory: Optional callable generating family identifiers.
        """
        self._db_port = db_port
        self._id_factory = id_factory or new_id

    def insert_family(
        self,
        name: str,
        created_by: str,
        created_at: datetime,
    ) -> Family:
        family = Family(
            id=self._id_factory(),
            name=name,
            created_by=created_by,
            created_at=created_at,
            updated_at=created_at,
        )
        engine = self._db_port.get_engine()
        with gateway_errors("create family"):
            with engine.begin() as conn:
                conn.execute(INSERT_FAMILY_SQL, family_to_row(family))
        return family

    def update_family_name(
        self,
        family_id: str,
        name: str,
        updated_at: datetime,
    ) -> int:
        engine = self._db_port.get_engine()
        with gateway_errors("rename family"):
            with engine.begin() as conn:
                result = conn.execute(
                    UPDATE_FAMILY_NAME_SQL,
                    {
                        "family_id": family_id,
                        "name": name,
                        "updated_at": to_iso(updated_at),
                    },
                )
                changed = result.rowcount
        return changed

    def delete_family(self, family_id: str) -> None:
        """Delete a family together with its memberships and invitations.

        Dependent rows are deleted explicitly so backends without
        foreign-key enforcement end up in the same state.
        """
        params = {"family_id": family_id}
        engine = self._db_port.get_engine()
        with gateway_errors("delete family"):
            with engine.begin() as conn:
                conn.execute(
                    text(
                        "DELETE FROM family_invitations "
                        "WHERE family_id = :family_id"
                    ),
                    params,
                )
                conn.execute(
                    text(
                        "DELETE FROM family_members "
                        "WHERE family_id = :family_id"
                    ),
                    params,
                )
                conn.execute(
                    text("DELETE FROM families WHERE id = :family_id"),
                    params,
                )

    def fetch_families_for_user(self, user_id: str) -> list[Family]:
        engine = self._db_port.get_engine()
        with gateway_errors("load families"):
            with engine.connect() as conn:
                rows = conn.execute(
                    SELECT_FAMILIES_FOR_USER_SQL,
                    {"user_id": user_id},
                ).all()
        return [row_to_family(row) for row in rows]


class SqlAlchemyFamilyMembersRepository(FamilyMembersRepositoryPort):
    """Repository backed by SQLAlchemy for family memberships."""

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        self._db_port = db_port

    def insert_member(self, member: FamilyMember) -> None:
        engine = self._db_port.get_engine()
        with gateway_errors("add family member"):
            with engine.begin() as conn:
                conn.execute(INSERT_MEMBER_SQL, member_to_row(member))

    def fetch_members(self, family_id: str) -> list[FamilyMember]:
        engine = self._db_port.get_engine()
        with gateway_errors("load family members"):
            with engine.connect() as conn:
                rows = conn.execute(
                    SELECT_MEMBERS_SQL,
                    {"family_id": family_id},
                ).all()
        return [row_to_member(row) for row in rows]

    def update_member_role(self, member_id: str, role: FamilyRole) -> int:
        engine = self._db_port.get_engine()
        with gateway_errors("change member role"):
            with engine.begin() as conn:
                result = conn.execute(
                    UPDATE_MEMBER_ROLE_SQL,
                    {"member_id": member_id, "role": FamilyRole(role).value},
                )
                changed = result.rowcount
        return changed

    def delete_member(self, member_id: str) -> None:
        engine = self._db_port.get_engine()
        with gateway_errors("remove family member"):
            with engine.begin() as conn:
                conn.execute(DELETE_MEMBER_SQL, {"member_id": member_id})


class SqlAlchemyInvitationsRepository(InvitationsRepositoryPort):
    """Repository backed by SQLAlchemy for family invitations."""

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        self._db_port = db_port

    def insert_invitation(self, invitation: FamilyInvitation) -> None:
        engine = self._db_port.get_engine()
        with gateway_errors("store invitation"):
            with engine.begin() as conn:
                conn.execute(
                    INSERT_INVITATION_SQL,
                    invitation_to_row(invitation),
                )

    def fetch_invitation(self, invitation_id: str) -> FamilyInvitation | None:
        engine = self._db_port.get_engine()
        with gateway_errors("load invitation"):
            with engine.connect() as conn:
                row = conn.execute(
                    SELECT_INVITATION_SQL,
                    {"invitation_id": invitation_id},
                ).first()
        if row is None:
            return None
        return row_to_invitation(row)

    def fetch_family_invitations(
        self,
        family_id: str,
        status: InvitationStatus,
    ) -> list[FamilyInvitation]:
        engine = self._db_port.get_engine()
        with gateway_errors("load family invitations"):
            with engine.connect() as conn:
                rows = conn.execute(
                    SELECT_FAMILY_INVITATIONS_SQL,
                    {
                        "family_id": family_id,
                        "status": InvitationStatus(status).value,
                    },
                ).all()
        return [row_to_invitation(row) for row in rows]

    def fetch_invitations_for_email(
        self,
        email: str,
        status: InvitationStatus,
    ) -> list[FamilyInvitation]:
        """Return invitations addressed to an email, compared lower-cased."""
        engine = self._db_port.get_engine()
        with gateway_errors("load invitations"):
            with engine.connect() as conn:
                rows = conn.execute(
                    SELECT_EMAIL_INVITATIONS_SQL,
                    {
                        "email": email.strip().lower(),
                        "status": InvitationStatus(status).value,
                    },
                ).all()
        return [row_to_invitation(row) for row in rows]

    def update_invitation_response(
        self,
        invitation_id: str,
        status: InvitationStatus,
        invitee_id: str,
        responded_at: datetime,
    ) -> int:
        """Record a response; only pending rows are changed."""
        engine = self._db_port.get_engine()
        with gateway_errors("respond to invitation"):
            with engine.begin() as conn:
                result = conn.execute(
                    UPDATE_INVITATION_RESPONSE_SQL,
                    {
                        "invitation_id": invitation_id,
                        "status": InvitationStatus(status).value,
                        "invitee_id": invitee_id,
                        "responded_at": to_iso(responded_at),
                        "pending": InvitationStatus.PENDING.value,
                    },
                )
                changed = result.rowcount
        return changed

    def delete_invitation(self, invitation_id: str) -> None:
        engine = self._db_port.get_engine()
        with gateway_errors("delete invitation"):
            with engine.begin() as conn:
                conn.execute(
                    DELETE_INVITATION_SQL,
                    {"invitation_id": invitation_id},
                )

    def delete_accepted_invitations(
        self,
        family_id: str,
        invitee_id: str,
    ) -> None:
        engine = self._db_port.get_engine()
        with gateway_errors("retire accepted invitations"):
            with engine.begin() as conn:
                conn.execute(
                    DELETE_ACCEPTED_INVITATIONS_SQL,
                    {
                        "family_id": family_id,
                        "invitee_id": invitee_id,
                        "accepted": InvitationStatus.ACCEPTED.value,
                    },
                )


class SqlAlchemyProfilesRepository(ProfilesRepositoryPort):
    """Repository backed by SQLAlchemy for user profiles."""

    def __init__(self, db_port: DatabaseEnginePort, id_factory=None) -> None:
        self._db_port = db_port
        self._id_factory = id_factory or new_id

    def fetch_emails(self, user_ids: list[str]) -> dict[str, str]:
        """Map user identifiers to emails; unknown ids are left out."""
        if not user_ids:
            return {}
        engine = self._db_port.get_engine()
        with gateway_errors("load profiles"):
            with engine.connect() as conn:
                rows = conn.execute(
                    SELECT_PROFILE_EMAILS_SQL,
                    {"user_ids": sorted(set(user_ids))},
                ).all()
        return {row.id: row.email for row in rows}

    def ensure_profile(self, email: str) -> UserSession:
        """Return the profile for ``email``, creating it when missing."""
        normalized = email.strip().lower()
        engine = self._db_port.get_engine()
        with gateway_errors("resolve profile"):
            with engine.begin() as conn:
                row = conn.execute(
                    SELECT_PROFILE_BY_EMAIL_SQL,
                    {"email": normalized},
                ).first()
                if row is not None:
                    return UserSession(user_id=row.id, email=row.email)
                user_id = self._id_factory()
                conn.execute(
                    INSERT_PROFILE_SQL,
                    {
                        "id": user_id,
                        "email": normalized,
                        "created_at": to_iso(utc_now()),
                    },
                )
        return UserSession(user_id=user_id, email=normalized)


__all__ = [
    "SqlAlchemyFamiliesRepository",
    "SqlAlchemyFamilyMembersRepository",
    "SqlAlchemyInvitationsRepository",
    "SqlAlchemyProfilesRepository",
]
