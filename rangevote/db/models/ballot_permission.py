"""Explicit per-user ballot grant model."""
import enum

from sqlalchemy import Column, Enum, String, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship

from rangevote.db.base import Base
from rangevote.core.utils import new_id, utcnow


class UserPermission(str, enum.Enum):
    """Grant levels, ordered Viewer < Voter < Editor < Admin."""

    VIEWER = "Viewer"
    VOTER = "Voter"
    EDITOR = "Editor"
    ADMIN = "Admin"

    @property
    def rank(self) -> int:
        return list(UserPermission).index(self)

    def at_least(self, other: "UserPermission") -> bool:
        return self.rank >= other.rank


class BallotPermission(Base):
    __tablename__ = "ballot_permissions"

    id = Column(String(36), primary_key=True, default=new_id)
    ballot_id = Column(String(36), ForeignKey("ballots.id", ondelete="CASCADE"), nullable=False)
    # NULL while an email invitation has not been claimed by a user
    user_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    invited_email = Column(String(255), nullable=True)
    permission = Column(
        Enum(UserPermission, name="user_permission", native_enum=False, length=20,
             values_callable=lambda levels: [p.value for p in levels]),
        nullable=False,
    )
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=False)
    accepted_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    ballot = relationship("Ballot", back_populates="permissions")

    __table_args__ = (
        Index("idx_ballot_permissions_ballot", "ballot_id"),
        Index("idx_ballot_permissions_user", "user_id"),
        Index("idx_ballot_permissions_email", "invited_email"),
        UniqueConstraint("ballot_id", "user_id", name="uq_ballot_permission_user"),
    )
