"""Ballot model."""
import enum

from sqlalchemy import Boolean, Column, Enum, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship

from rangevote.db.base import Base
from rangevote.core.utils import new_id, utcnow


class BallotStatus(str, enum.Enum):
    DRAFT = "Draft"
    OPEN = "Open"
    CLOSED = "Closed"
    # No operation moves a ballot into or out of Archived yet
    ARCHIVED = "Archived"


class Ballot(Base):
    __tablename__ = "ballots"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    organization_id = Column(String(36), ForeignKey("organizations.id", ondelete="SET NULL"), nullable=True)
    status = Column(
        Enum(BallotStatus, name="ballot_status", native_enum=False, length=20,
             values_callable=lambda statuses: [s.value for s in statuses]),
        nullable=False,
        default=BallotStatus.DRAFT,
    )
    # Always written together with status: is_open == (status == Open)
    is_open = Column(Boolean, nullable=False, default=False)
    is_public = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    open_date = Column(DateTime(timezone=True), nullable=True)
    close_date = Column(DateTime(timezone=True), nullable=True)
    candidate_count = Column(Integer, nullable=False, default=0)
    vote_count = Column(Integer, nullable=False, default=0)

    # Relationships
    organization = relationship("Organization", back_populates="ballots")
    candidates = relationship(
        "Candidate", back_populates="ballot", cascade="all, delete-orphan",
        order_by="Candidate.position",
    )
    votes = relationship("Vote", back_populates="ballot", cascade="all, delete-orphan")
    permissions = relationship("BallotPermission", back_populates="ballot", cascade="all, delete-orphan")
    share_links = relationship("ShareLink", back_populates="ballot", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_ballots_owner", "owner_id"),
        Index("idx_ballots_org", "organization_id"),
        Index("idx_ballots_status", "status"),
        Index("idx_ballots_public", "is_public"),
    )
