"""Candidate model."""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship

from rangevote.db.base import Base
from rangevote.core.utils import new_id, utcnow


class Candidate(Base):
    __tablename__ = "ballot_candidates"

    id = Column(String(36), primary_key=True, default=new_id)
    ballot_id = Column(String(36), ForeignKey("ballots.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    image_link = Column(String(500), nullable=True)
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    ballot = relationship("Ballot", back_populates="candidates")
    votes = relationship("Vote", back_populates="candidate", cascade="all, delete-orphan")

    __table_args__ = (Index("idx_ballot_candidates_ballot", "ballot_id"),)
