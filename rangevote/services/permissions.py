"""Ballot access resolution and explicit grants.

Access is recomputed from the database on every call. There is deliberately
no cache here: a revoked grant or a deactivated link stops working on the very
next request.
"""
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from rangevote.core.errors import InvalidStateError, NotFoundError
from rangevote.core.logging_config import get_logger
from rangevote.core.utils import utcnow
from rangevote.db.models import (
    Ballot,
    BallotPermission,
    OrganizationMember,
    ShareLinkPermission,
    User,
    UserPermission,
)
from rangevote.services.share_links import increment_use_count, validate_share_link

logger = get_logger(__name__)


@dataclass(frozen=True)
class AccessDecision:
    """Resolved capability set for one access attempt."""

    can_view: bool = False
    can_vote: bool = False
    can_edit: bool = False
    is_owner: bool = False
    via_share_link: bool = False


NO_ACCESS = AccessDecision()

SHARE_LINK_ACCESS = {
    ShareLinkPermission.VIEW: AccessDecision(can_view=True, via_share_link=True),
    ShareLinkPermission.VOTE: AccessDecision(can_view=True, can_vote=True, via_share_link=True),
    ShareLinkPermission.ADMIN: AccessDecision(can_view=True, can_vote=True, can_edit=True, via_share_link=True),
}

GRANT_ACCESS = {
    UserPermission.VIEWER: AccessDecision(can_view=True),
    UserPermission.VOTER: AccessDecision(can_view=True, can_vote=True),
    UserPermission.EDITOR: AccessDecision(can_view=True, can_vote=True, can_edit=True),
    UserPermission.ADMIN: AccessDecision(can_view=True, can_vote=True, can_edit=True),
}

OWNER_ACCESS = AccessDecision(can_view=True, can_vote=True, can_edit=True, is_owner=True)
ORGANIZATION_ACCESS = GRANT_ACCESS[UserPermission.VOTER]


def get_explicit_grant(db: Session, ballot_id: str, user_id: str) -> Optional[BallotPermission]:
    return db.query(BallotPermission).filter(
        BallotPermission.ballot_id == ballot_id,
        BallotPermission.user_id == user_id,
    ).first()


def is_organization_member(db: Session, organization_id: str, user_id: str) -> bool:
    return db.query(OrganizationMember.id).filter(
        OrganizationMember.organization_id == organization_id,
        OrganizationMember.user_id == user_id,
    ).first() is not None


def _redeem_share_link(db: Session, ballot_id: str, share_token: str) -> Optional[AccessDecision]:
    link = validate_share_link(db, share_token)
    if link is None or link.ballot_id != ballot_id:
        return None

    # A rollback expires the link, so read what is needed up front
    link_id, permission = link.id, link.permission

    # Use counting is best-effort; a failed increment never blocks access
    try:
        increment_use_count(db, link_id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("share_link_use_count_failed", share_link_id=link_id, error=str(e))

    logger.info(
        "share_link_redeemed",
        ballot_id=ballot_id,
        share_link_id=link_id,
        permission=permission.value,
    )
    return SHARE_LINK_ACCESS[permission]


def resolve_access(
    db: Session,
    ballot_id: str,
    user_id: Optional[str] = None,
    share_token: Optional[str] = None,
) -> AccessDecision:
    """
    Compute what the caller may do on a ballot.

    Paths are tried in order and the first match wins:
        1. share link token (counts one use of the link)
        2. ballot owner
        3. explicit grant row
        4. membership of the ballot's organization (Voter level)

    Returns NO_ACCESS when nothing matches, including for unknown ballots.
    """
    if share_token:
        decision = _redeem_share_link(db, ballot_id, share_token)
        if decision is not None:
            return decision

    if not user_id:
        return NO_ACCESS

    ballot = db.query(Ballot).filter(Ballot.id == ballot_id).first()
    if not ballot:
        return NO_ACCESS

    if ballot.owner_id == user_id:
        return OWNER_ACCESS

    grant = get_explicit_grant(db, ballot_id, user_id)
    if grant is not None:
        return GRANT_ACCESS[grant.permission]

    if ballot.organization_id and is_organization_member(db, ballot.organization_id, user_id):
        return ORGANIZATION_ACCESS

    return NO_ACCESS


def get_user_permission(db: Session, ballot_id: str, user_id: str) -> Optional[UserPermission]:
    """Effective permission level of a signed-in user, ignoring share links."""
    ballot = db.query(Ballot).filter(Ballot.id == ballot_id).first()
    if not ballot:
        return None

    if ballot.owner_id == user_id:
        return UserPermission.ADMIN

    grant = get_explicit_grant(db, ballot_id, user_id)
    if grant is not None:
        return grant.permission

    if ballot.organization_id and is_organization_member(db, ballot.organization_id, user_id):
        return UserPermission.VOTER

    return None


def can_user_vote(db: Session, ballot_id: str, user_id: str) -> bool:
    return resolve_access(db, ballot_id, user_id).can_vote


def invite_user(
    db: Session,
    ballot_id: str,
    email: str,
    permission: UserPermission,
    invited_by: str,
) -> BallotPermission:
    """
    Grant ``permission`` on a ballot to the person behind ``email``.

    Known users get an accepted grant right away. Unknown addresses get a
    pending grant that ``claim_pending_invitations`` binds later.
    """
    ballot = db.query(Ballot).filter(Ballot.id == ballot_id).first()
    if not ballot:
        raise NotFoundError("Ballot not found")

    email = email.strip().lower()
    invitee = db.query(User).filter(User.email == email).first()

    if invitee is not None:
        if invitee.id == ballot.owner_id:
            raise InvalidStateError("The ballot owner already has full access")
        if get_explicit_grant(db, ballot_id, invitee.id) is not None:
            raise InvalidStateError("User already has access to this ballot")
    else:
        pending = db.query(BallotPermission).filter(
            BallotPermission.ballot_id == ballot_id,
            BallotPermission.user_id.is_(None),
            BallotPermission.invited_email == email,
        ).first()
        if pending is not None:
            raise InvalidStateError("This email has already been invited")

    now = utcnow()
    grant = BallotPermission(
        ballot_id=ballot_id,
        user_id=invitee.id if invitee else None,
        invited_email=email,
        permission=permission,
        created_by=invited_by,
        created_at=now,
        accepted_at=now if invitee else None,
    )

    try:
        db.add(grant)
        db.commit()
        db.refresh(grant)
    except IntegrityError:
        db.rollback()
        raise InvalidStateError("User already has access to this ballot")

    logger.info(
        "ballot_invitation_created",
        ballot_id=ballot_id,
        permission=permission.value,
        pending=invitee is None,
    )
    return grant


def claim_pending_invitations(db: Session, user_id: str, email: str) -> int:
    """Bind pending email invitations to ``user_id``. Returns how many were claimed."""
    email = email.strip().lower()
    pending = db.query(BallotPermission).filter(
        BallotPermission.user_id.is_(None),
        BallotPermission.invited_email == email,
    ).all()

    claimed = 0
    now = utcnow()
    for grant in pending:
        # A direct grant may already exist for this user on the same ballot
        if get_explicit_grant(db, grant.ballot_id, user_id) is not None:
            db.delete(grant)
            continue
        grant.user_id = user_id
        grant.accepted_at = now
        claimed += 1

    db.commit()

    if pending:
        logger.info("ballot_invitations_claimed", user_id=user_id, claimed=claimed)
    return claimed
