"""Ballot business logic."""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Mapping, Optional, Sequence

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from rangevote.core.errors import InvalidError, NotFoundError, UnauthorizedError
from rangevote.core.logging_config import get_logger
from rangevote.core.utils import optional_utc, utcnow
from rangevote.db.models import (
    Ballot,
    BallotPermission,
    BallotStatus,
    Candidate,
    OrganizationMember,
    UserPermission,
)
from rangevote.services.lifecycle import set_status
from rangevote.services.organizations import get_organization, is_user_member_of_organization
from rangevote.services.permissions import get_user_permission

logger = get_logger(__name__)

CREATABLE_STATUSES = (BallotStatus.OPEN, BallotStatus.DRAFT)


@dataclass
class BallotSummary:
    ballot: Ballot
    is_owner: bool
    permission: Optional[UserPermission]


def create_ballot(
    db: Session,
    owner_id: str,
    name: str,
    candidates: Sequence[Mapping[str, Any]],
    description: Optional[str] = None,
    organization_id: Optional[str] = None,
    is_public: bool = False,
    close_date: Optional[datetime] = None,
    status: BallotStatus = BallotStatus.OPEN,
) -> Ballot:
    """Create a ballot together with its candidates.

    Args:
        db: SQLAlchemy session
        owner_id: ID of the creating user, who becomes the owner
        name: Ballot name
        candidates: Mappings with ``name`` and optional ``description`` and
            ``image_link``, kept in the given order
        organization_id: Organization the ballot belongs to; the owner must
            be one of its members
        status: Open (the default) or Draft

    Returns:
        Ballot: the created ballot

    Raises:
        InvalidError: no candidates, or an unsupported initial status
        NotFoundError: the organization does not exist
        UnauthorizedError: the owner is not a member of the organization
    """
    if not candidates:
        raise InvalidError("A ballot needs at least one candidate")

    if status not in CREATABLE_STATUSES:
        raise InvalidError("A new ballot must be Open or Draft")

    if organization_id:
        if get_organization(db, organization_id) is None:
            raise NotFoundError("Organization not found")
        if not is_user_member_of_organization(db, organization_id, owner_id):
            raise UnauthorizedError("You must be a member of the organization")

    now = utcnow()
    ballot = Ballot(
        name=name,
        description=description,
        owner_id=owner_id,
        organization_id=organization_id or None,
        is_public=is_public,
        created_at=now,
        close_date=optional_utc(close_date),
        candidate_count=len(candidates),
        vote_count=0,
    )
    set_status(ballot, status)
    if status == BallotStatus.OPEN:
        ballot.open_date = now

    for position, candidate in enumerate(candidates):
        ballot.candidates.append(Candidate(
            name=candidate["name"],
            description=candidate.get("description"),
            image_link=candidate.get("image_link"),
            position=position,
            created_at=now,
        ))

    try:
        db.add(ballot)
        db.commit()
        db.refresh(ballot)
    except Exception:
        db.rollback()
        raise

    logger.info(
        "ballot_created",
        ballot_id=ballot.id,
        owner_id=owner_id,
        organization_id=organization_id,
        status=status.value,
        candidate_count=ballot.candidate_count,
    )
    return ballot


def get_ballot(db: Session, ballot_id: str) -> Optional[Ballot]:
    return db.query(Ballot).filter(Ballot.id == ballot_id).first()


def get_candidates(db: Session, ballot_id: str) -> List[Candidate]:
    return db.query(Candidate).filter(
        Candidate.ballot_id == ballot_id
    ).order_by(Candidate.position).all()


def update_ballot(
    db: Session,
    ballot_id: str,
    name: Optional[str] = None,
    description: Optional[str] = None,
    is_public: Optional[bool] = None,
    close_date: Optional[datetime] = None,
) -> Ballot:
    """Update editable ballot fields. Status only changes through open/close."""
    ballot = get_ballot(db, ballot_id)
    if not ballot:
        raise NotFoundError("Ballot not found")

    if name is not None:
        ballot.name = name
    if description is not None:
        ballot.description = description
    if is_public is not None:
        ballot.is_public = is_public
    if close_date is not None:
        ballot.close_date = optional_utc(close_date)

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(ballot)
    logger.info("ballot_updated", ballot_id=ballot_id)
    return ballot


def delete_ballot(db: Session, ballot_id: str, user_id: str) -> None:
    """Delete a ballot with its candidates, votes, grants and share links."""
    ballot = get_ballot(db, ballot_id)
    if not ballot:
        raise NotFoundError("Ballot not found")

    if ballot.owner_id != user_id:
        raise UnauthorizedError("Only the ballot owner can delete it")

    # Cascade delete handles candidates, votes, permissions and share links
    # through cascade="all, delete-orphan" on the relationships
    db.delete(ballot)
    db.commit()
    logger.info("ballot_deleted", ballot_id=ballot_id, user_id=user_id)


def get_ballots_for_user(db: Session, user_id: str) -> List[BallotSummary]:
    """Ballots the user owns, holds a grant on, or reaches through an organization."""
    granted = select(BallotPermission.ballot_id).where(BallotPermission.user_id == user_id)
    member_of = select(OrganizationMember.organization_id).where(
        OrganizationMember.user_id == user_id
    )

    ballots = db.query(Ballot).filter(or_(
        Ballot.owner_id == user_id,
        Ballot.id.in_(granted),
        Ballot.organization_id.in_(member_of),
    )).order_by(Ballot.created_at.desc()).all()

    return [
        BallotSummary(
            ballot=ballot,
            is_owner=ballot.owner_id == user_id,
            permission=get_user_permission(db, ballot.id, user_id),
        )
        for ballot in ballots
    ]
