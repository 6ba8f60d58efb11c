"""User model."""
from sqlalchemy import Column, String, DateTime

from rangevote.db.base import Base
from rangevote.core.utils import new_id, utcnow


class User(Base):
    """A person known to the platform.

    Credentials live with the authentication service; this table only carries
    what grants and invitations need to reference.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, nullable=False, index=True)
    display_name = Column(String(100), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
