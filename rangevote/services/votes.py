"""Vote business logic."""
from typing import Dict, List

from sqlalchemy import distinct, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rangevote.core.constants import MAX_SCORE, MIN_SCORE
from rangevote.core.errors import InvalidError, InvalidStateError, NotFoundError
from rangevote.core.logging_config import get_logger
from rangevote.core.utils import utcnow
from rangevote.db.models import Ballot, BallotStatus, Candidate, Vote

logger = get_logger(__name__)


def _check_scores(db: Session, ballot_id: str, scores: Dict[str, int]) -> None:
    for candidate_id, score in scores.items():
        if isinstance(score, bool) or not isinstance(score, int) or not MIN_SCORE <= score <= MAX_SCORE:
            raise InvalidError(f"Scores must be whole numbers between {MIN_SCORE} and {MAX_SCORE}")

    ballot_candidates = {
        row.id for row in db.query(Candidate.id).filter(Candidate.ballot_id == ballot_id)
    }
    unknown = set(scores) - ballot_candidates
    if unknown:
        raise NotFoundError("Candidate not found on this ballot")


def save_votes(db: Session, ballot_id: str, user_id: str, scores: Dict[str, int]) -> Ballot:
    """
    Record a user's scores on a ballot.

    Each score replaces the user's previous score for that candidate or is
    inserted fresh. Afterwards the ballot's ``vote_count`` is recomputed as the
    number of distinct voters. Everything is committed together.
    """
    ballot = db.query(Ballot).filter(Ballot.id == ballot_id).first()
    if not ballot:
        raise NotFoundError("Ballot not found")

    if ballot.status != BallotStatus.OPEN or not ballot.is_open:
        raise InvalidStateError("Ballot is not open for voting")

    _check_scores(db, ballot_id, scores)

    now = utcnow()
    existing = {
        vote.candidate_id: vote
        for vote in db.query(Vote).filter(
            Vote.ballot_id == ballot_id,
            Vote.user_id == user_id,
            Vote.candidate_id.in_(list(scores)),
        )
    }

    try:
        for candidate_id, score in scores.items():
            vote = existing.get(candidate_id)
            if vote is not None:
                vote.score = score
                vote.updated_at = now
            else:
                db.add(Vote(
                    ballot_id=ballot_id,
                    candidate_id=candidate_id,
                    user_id=user_id,
                    score=score,
                    created_at=now,
                    updated_at=now,
                ))

        db.flush()
        ballot.vote_count = db.query(func.count(distinct(Vote.user_id))).filter(
            Vote.ballot_id == ballot_id
        ).scalar()
        db.commit()
    except IntegrityError:
        # Concurrent first save by the same user
        db.rollback()
        raise InvalidStateError("Your votes were saved by another request; please retry")
    except Exception:
        db.rollback()
        raise

    db.refresh(ballot)
    logger.info(
        "votes_saved",
        ballot_id=ballot_id,
        user_id=user_id,
        scores_saved=len(scores),
        vote_count=ballot.vote_count,
    )
    return ballot


def get_results(db: Session, ballot_id: str) -> Dict[str, float]:
    """Average score per candidate. Candidates nobody has scored are absent."""
    rows = db.query(Vote.candidate_id, func.avg(Vote.score)).filter(
        Vote.ballot_id == ballot_id
    ).group_by(Vote.candidate_id).all()
    return {candidate_id: float(average) for candidate_id, average in rows}


def get_user_votes(db: Session, ballot_id: str, user_id: str) -> List[Vote]:
    return db.query(Vote).filter(
        Vote.ballot_id == ballot_id,
        Vote.user_id == user_id,
    ).all()
