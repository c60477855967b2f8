"""Tests for the InvitationWorkflow use case."""

from datetime import timedelta

import pytest

from src.domain.errors import (
    AuthorizationError,
    ConflictError,
    GatewayError,
    NotFoundError,
    ValidationError,
)
from src.domain.models import (
    FamilyMember,
    FamilyRole,
    InvitationStatus,
    UserSession,
)


INVITEE = UserSession(user_id="user-ab", email="a@b.com")
OTHER = UserSession(user_id="user-other", email="other@example.com")


@pytest.fixture
def owner(family_context, session):
    directory, workflow = family_context(session)
    family = directory.create_family("Test Family")
    return directory, workflow, family


@pytest.fixture
def invitee(family_context):
    return family_context(INVITEE)


def test_invite_accept_worked_example(owner, invitee, backend) -> None:
    """Create, invite, accept: members grow and nothing stays pending."""
    directory, workflow, family = owner

    invitation = workflow.invite("a@b.com")
    assert len(directory.invitations) == 1
    assert len(directory.members) == 1
    assert invitation.status is InvitationStatus.PENDING
    assert invitation.family_name == "Test Family"

    invitee_directory, invitee_workflow = invitee
    pending = invitee_workflow.pending_for_user()
    assert [item.id for item in pending] == [invitation.id]
    assert pending[0].family_name == "Test Family"

    member = invitee_workflow.accept(invitation.id)

    assert member.role is FamilyRole.MEMBER
    assert member.family_id == family.id
    stored = backend.invitations[invitation.id]
    assert stored.status is InvitationStatus.ACCEPTED
    assert stored.invitee_id == INVITEE.user_id
    assert stored.responded_at is not None
    assert invitee_directory.families[0].id == family.id
    assert invitee_workflow.pending_for_user() == []

    directory.refresh()
    assert len(directory.members) == 2
    assert INVITEE.email in {m.email for m in directory.list_members()}
    assert directory.list_invitations() == []


def test_accept_creates_exactly_one_membership_with_invited_role(
    owner,
    invitee,
    backend,
) -> None:
    _, workflow, family = owner
    invitation = workflow.invite("A@B.com", role="admin")

    invitee[1].accept(invitation.id)

    memberships = [
        m
        for m in backend.members.values()
        if m.family_id == family.id and m.user_id == INVITEE.user_id
    ]
    assert len(memberships) == 1
    assert memberships[0].role is FamilyRole.ADMIN


def test_duplicate_pending_invitation_conflicts_until_cancelled(owner):
    directory, workflow, _ = owner
    first = workflow.invite("a@b.com")

    with pytest.raises(ConflictError):
        workflow.invite("A@B.COM")

    workflow.cancel(first.id)
    assert directory.invitations == ()

    second = workflow.invite("a@b.com")
    assert second.id != first.id


def test_invite_validation(family_context, owner) -> None:
    _, workflow = family_context(
        UserSession(user_id="user-lonely", email="lonely@example.com")
    )
    with pytest.raises(ValidationError) as excinfo:
        workflow.invite("a@b.com")
    assert excinfo.value.field == "family_id"

    _, owner_workflow, _ = owner
    with pytest.raises(ValidationError):
        owner_workflow.invite("not-an-email")
    with pytest.raises(ValidationError):
        owner_workflow.invite("a@b.com", role=FamilyRole.OWNER)


def test_invite_requires_manager_role(owner, invitee) -> None:
    _, workflow, family = owner
    invitation = workflow.invite("a@b.com")
    invitee_directory, invitee_workflow = invitee
    invitee_workflow.accept(invitation.id)
    invitee_directory.select_family(family.id)

    with pytest.raises(AuthorizationError):
        invitee_workflow.invite("other@example.com")


def test_invite_existing_member_conflicts(owner, session) -> None:
    _, workflow, _ = owner

    with pytest.raises(ConflictError):
        workflow.invite(session.email.upper())


def test_expired_invitation_is_inactive(owner, invitee, clock) -> None:
    directory, workflow, _ = owner
    invitation = workflow.invite("a@b.com")

    clock.advance(days=7)

    assert directory.list_invitations() == []
    assert invitee[1].pending_for_user() == []
    with pytest.raises(ConflictError):
        invitee[1].accept(invitation.id)

    replacement = workflow.invite("a@b.com")
    assert replacement.expires_at == clock.now + timedelta(days=7)


def test_ttl_is_configurable(family_context, session, clock) -> None:
    directory, workflow = family_context(session, ttl_days=2)
    directory.create_family("Short")

    invitation = workflow.invite("a@b.com")

    assert invitation.expires_at - invitation.created_at == timedelta(days=2)
    with pytest.raises(ValueError):
        family_context(session, ttl_days=0)


def test_accept_requires_matching_email(owner, family_context) -> None:
    _, workflow, _ = owner
    invitation = workflow.invite("a@b.com")
    _, other_workflow = family_context(OTHER)

    with pytest.raises(AuthorizationError):
        other_workflow.accept(invitation.id)


def test_accept_twice_conflicts(owner, invitee) -> None:
    _, workflow, _ = owner
    invitation = workflow.invite("a@b.com")
    invitee[1].accept(invitation.id)

    with pytest.raises(ConflictError):
        invitee[1].accept(invitation.id)


def test_accept_unknown_invitation(invitee) -> None:
    with pytest.raises(NotFoundError):
        invitee[1].accept("missing")


def test_reject_creates_no_membership(owner, invitee, backend) -> None:
    _, workflow, family = owner
    invitation = workflow.invite("a@b.com")

    rejected = invitee[1].reject(invitation.id)

    assert rejected.status is InvitationStatus.REJECTED
    assert rejected.invitee_id == INVITEE.user_id
    stored = backend.invitations[invitation.id]
    assert stored.status is InvitationStatus.REJECTED
    assert all(m.user_id != INVITEE.user_id for m in backend.members.values())
    with pytest.raises(ConflictError):
        invitee[1].accept(invitation.id)


def test_cancel_permissions(owner, family_context, backend, clock) -> None:
    _, workflow, family = owner
    invitation = workflow.invite("a@b.com")
    backend.profiles[OTHER.user_id] = OTHER.email
    backend.members["m-other"] = FamilyMember(
        id="m-other",
        family_id=family.id,
        user_id=OTHER.user_id,
        role=FamilyRole.MEMBER,
        joined_at=clock.now,
    )
    _, member_workflow = family_context(OTHER)

    with pytest.raises(AuthorizationError):
        member_workflow.cancel(invitation.id)

    backend.members["m-other"] = FamilyMember(
        id="m-other",
        family_id=family.id,
        user_id=OTHER.user_id,
        role=FamilyRole.ADMIN,
        joined_at=clock.now,
    )
    member_workflow.cancel(invitation.id)

    assert invitation.id not in backend.invitations
    with pytest.raises(NotFoundError):
        workflow.cancel(invitation.id)


def test_membership_failure_after_accept_is_repairable(
    owner,
    invitee,
    backend,
    logger,
) -> None:
    _, workflow, family = owner
    invitation = workflow.invite("a@b.com")
    invitee_directory, invitee_workflow = invitee
    backend.fail_on.add("insert_member")

    with pytest.raises(GatewayError):
        invitee_workflow.accept(invitation.id)

    stored = backend.invitations[invitation.id]
    assert stored.status is InvitationStatus.ACCEPTED
    assert all(m.user_id != INVITEE.user_id for m in backend.members.values())
    logger.error.assert_called()

    backend.fail_on.clear()
    repaired = invitee_workflow.repair_accepted_invitations()

    assert [m.family_id for m in repaired] == [family.id]
    assert [f.id for f in invitee_directory.families] == [family.id]
    assert invitee_workflow.repair_accepted_invitations() == []


def test_removed_member_cannot_restore_membership(owner, invitee, backend):
    directory, workflow, _ = owner
    invitation = workflow.invite("a@b.com", role="admin")
    _, invitee_workflow = invitee
    member = invitee_workflow.accept(invitation.id)

    directory.remove_member(member.id)

    assert invitation.id not in backend.invitations
    assert invitee_workflow.repair_accepted_invitations() == []
    assert [m.user_id for m in directory.list_members()] == [
        directory.session.user_id
    ]


def test_member_who_left_cannot_restore_membership(owner, invitee, backend):
    _, workflow, family = owner
    invitation = workflow.invite("a@b.com")
    invitee_directory, invitee_workflow = invitee
    invitee_workflow.accept(invitation.id)
    invitee_directory.select_family(family.id)

    invitee_directory.leave_family()

    assert invitee_workflow.repair_accepted_invitations() == []
    assert family.id in backend.families
    assert all(m.user_id != INVITEE.user_id for m in backend.members.values())


def test_failed_invitation_cleanup_keeps_membership(owner, invitee, backend):
    directory, workflow, _ = owner
    invitation = workflow.invite("a@b.com")
    _, invitee_workflow = invitee
    member = invitee_workflow.accept(invitation.id)
    backend.fail_on.add("delete_accepted_invitations")

    with pytest.raises(GatewayError):
        directory.remove_member(member.id)

    assert member.id in backend.members
    assert backend.invitations[invitation.id].status is (
        InvitationStatus.ACCEPTED
    )
