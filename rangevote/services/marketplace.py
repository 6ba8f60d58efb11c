"""Public ballot marketplace."""
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import exists, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rangevote.core.config import settings
from rangevote.core.errors import InvalidStateError, NotFoundError, UnauthorizedError
from rangevote.core.logging_config import get_logger
from rangevote.core.utils import to_utc, utcnow
from rangevote.db.models import (
    Ballot,
    BallotPermission,
    BallotStatus,
    Organization,
    UserPermission,
)
from rangevote.services.permissions import get_explicit_grant

logger = get_logger(__name__)


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def closing_soon_window(now: Optional[datetime] = None):
    """The ``(start, end]`` range a close date must fall in to count as closing soon."""
    now = now or utcnow()
    return now, now + timedelta(days=settings.CLOSING_SOON_DAYS)


def is_closing_soon(ballot: Ballot, now: Optional[datetime] = None) -> bool:
    if ballot.close_date is None:
        return False
    start, end = closing_soon_window(now)
    return start < to_utc(ballot.close_date) <= end


def list_public_ballots(
    db: Session,
    exclude_user_id: str,
    search_term: Optional[str] = None,
    organization_id: Optional[str] = None,
    closing_soon: Optional[bool] = None,
    now: Optional[datetime] = None,
) -> List[Ballot]:
    """
    Public, open ballots the user could still join.

    A ballot is hidden from its owner and from anyone who already holds a grant
    on it. Optional filters narrow by a case-insensitive substring of the name
    or description, by organization, and by a close date in the coming week.
    """
    already_granted = exists().where(
        BallotPermission.ballot_id == Ballot.id,
        BallotPermission.user_id == exclude_user_id,
    )

    query = db.query(Ballot).filter(
        Ballot.is_public.is_(True),
        Ballot.status == BallotStatus.OPEN,
        Ballot.is_open.is_(True),
        Ballot.owner_id != exclude_user_id,
        ~already_granted,
    )

    if search_term:
        pattern = _like_pattern(search_term)
        query = query.filter(or_(
            Ballot.name.ilike(pattern, escape="\\"),
            Ballot.description.ilike(pattern, escape="\\"),
        ))

    if organization_id:
        query = query.filter(Ballot.organization_id == organization_id)

    if closing_soon:
        start, end = closing_soon_window(now)
        query = query.filter(
            Ballot.close_date.isnot(None),
            Ballot.close_date > start,
            Ballot.close_date <= end,
        )

    return query.order_by(Ballot.created_at.desc()).all()


def join_ballot(db: Session, ballot_id: str, user_id: str) -> BallotPermission:
    """Give the user a Voter grant on a public, open ballot."""
    ballot = db.query(Ballot).filter(Ballot.id == ballot_id).first()
    if not ballot:
        raise NotFoundError("Ballot not found")

    if not ballot.is_public:
        raise UnauthorizedError("This ballot is not public")

    if ballot.status != BallotStatus.OPEN:
        raise InvalidStateError("This ballot is not open")

    if get_explicit_grant(db, ballot_id, user_id) is not None:
        raise InvalidStateError("You already have access to this ballot")

    now = utcnow()
    grant = BallotPermission(
        ballot_id=ballot_id,
        user_id=user_id,
        permission=UserPermission.VOTER,
        created_by=user_id,
        created_at=now,
        accepted_at=now,
    )

    try:
        db.add(grant)
        db.commit()
        db.refresh(grant)
    except IntegrityError:
        # Concurrent join by the same user
        db.rollback()
        raise InvalidStateError("You already have access to this ballot")

    logger.info("ballot_joined", ballot_id=ballot_id, user_id=user_id)
    return grant


def get_organizations_with_public_ballots(db: Session) -> List[Organization]:
    """Organizations that currently have at least one public, open ballot."""
    has_public_ballot = exists().where(
        Ballot.organization_id == Organization.id,
        Ballot.is_public.is_(True),
        Ballot.status == BallotStatus.OPEN,
    )
    return db.query(Organization).filter(has_public_ballot).order_by(Organization.name).all()
