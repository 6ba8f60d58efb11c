"""Ballot lifecycle transitions.

``status`` and ``is_open`` are only ever written here, together, in the same
commit. Archived is part of the status set; nothing moves a ballot into or out of it.
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from rangevote.core.errors import InvalidStateError, NotFoundError
from rangevote.core.logging_config import get_logger
from rangevote.core.utils import utcnow
from rangevote.db.models import Ballot, BallotStatus

logger = get_logger(__name__)


def set_status(ballot: Ballot, status: BallotStatus) -> None:
    """Apply ``status`` and the matching ``is_open`` flag to an in-session ballot."""
    ballot.status = status
    ballot.is_open = status == BallotStatus.OPEN


def _transition(db: Session, ballot_id: str, status: BallotStatus) -> Ballot:
    ballot = db.query(Ballot).filter(Ballot.id == ballot_id).first()
    if not ballot:
        raise NotFoundError("Ballot not found")
    if ballot.status == BallotStatus.ARCHIVED:
        raise InvalidStateError("Archived ballots cannot be opened or closed")

    previous = ballot.status
    set_status(ballot, status)
    if status == BallotStatus.OPEN and ballot.open_date is None:
        ballot.open_date = utcnow()

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(ballot)
    logger.info(
        "ballot_status_changed",
        ballot_id=ballot_id,
        previous_status=previous.value,
        status=status.value,
    )
    return ballot


def open_ballot(db: Session, ballot_id: str) -> Ballot:
    """Move a ballot to Open."""
    return _transition(db, ballot_id, BallotStatus.OPEN)


def close_ballot(db: Session, ballot_id: str) -> Ballot:
    """Move a ballot to Closed."""
    return _transition(db, ballot_id, BallotStatus.CLOSED)


def get_ballots_to_auto_close(db: Session, now: Optional[datetime] = None) -> List[Ballot]:
    """Open ballots whose close date has passed."""
    now = now or utcnow()
    return db.query(Ballot).filter(
        Ballot.status == BallotStatus.OPEN,
        Ballot.is_open.is_(True),
        Ballot.close_date.isnot(None),
        Ballot.close_date <= now,
    ).order_by(Ballot.close_date).all()
