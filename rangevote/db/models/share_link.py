"""Share link model."""
import enum

from sqlalchemy import Boolean, Column, Enum, Integer, String, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship

from rangevote.db.base import Base
from rangevote.core.utils import new_id, utcnow


class ShareLinkPermission(str, enum.Enum):
    VIEW = "View"
    VOTE = "Vote"
    ADMIN = "Admin"


class ShareLink(Base):
    __tablename__ = "ballot_share_links"

    id = Column(String(36), primary_key=True, default=new_id)
    ballot_id = Column(String(36), ForeignKey("ballots.id", ondelete="CASCADE"), nullable=False)
    share_token = Column(String(100), unique=True, nullable=False)
    permission = Column(
        Enum(ShareLinkPermission, name="share_link_permission", native_enum=False, length=20,
             values_callable=lambda levels: [p.value for p in levels]),
        nullable=False,
    )
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    use_count = Column(Integer, nullable=False, default=0)

    # Relationships
    ballot = relationship("Ballot", back_populates="share_links")

    __table_args__ = (Index("idx_share_links_ballot", "ballot_id"),)
