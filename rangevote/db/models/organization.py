"""Organization and membership models."""
from sqlalchemy import Boolean, Column, String, Text, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship

from rangevote.db.base import Base
from rangevote.core.constants import ROLE_MEMBER
from rangevote.core.utils import new_id, utcnow


class Organization(Base):
    __tablename__ = "organizations"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    is_public = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    members = relationship("OrganizationMember", back_populates="organization", cascade="all, delete-orphan")
    ballots = relationship("Ballot", back_populates="organization")


class OrganizationMember(Base):
    __tablename__ = "organization_members"

    id = Column(String(36), primary_key=True, default=new_id)
    organization_id = Column(String(36), ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    role = Column(String(50), nullable=False, default=ROLE_MEMBER)
    joined_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    organization = relationship("Organization", back_populates="members")
    user = relationship("User")

    __table_args__ = (
        Index("idx_org_members_user", "user_id"),
        UniqueConstraint("organization_id", "user_id", name="uq_org_member"),
    )
