"""Vote model."""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from rangevote.db.base import Base
from rangevote.core.constants import MIN_SCORE, MAX_SCORE
from rangevote.core.utils import new_id, utcnow


class Vote(Base):
    __tablename__ = "votes"

    id = Column(String(36), primary_key=True, default=new_id)
    ballot_id = Column(String(36), ForeignKey("ballots.id", ondelete="CASCADE"), nullable=False)
    candidate_id = Column(String(36), ForeignKey("ballot_candidates.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    score = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    ballot = relationship("Ballot", back_populates="votes")
    candidate = relationship("Candidate", back_populates="votes")

    __table_args__ = (
        Index("idx_votes_ballot", "ballot_id"),
        Index("idx_votes_user", "user_id"),
        Index("idx_votes_candidate", "candidate_id"),
        UniqueConstraint("ballot_id", "candidate_id", "user_id", name="uq_vote_ballot_candidate_user"),
        CheckConstraint(f"score >= {MIN_SCORE} AND score <= {MAX_SCORE}", name="ck_vote_score_range"),
    )
