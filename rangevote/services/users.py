"""User records."""
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rangevote.core.errors import InvalidStateError
from rangevote.core.logging_config import get_logger
from rangevote.db.models import User
from rangevote.services.permissions import claim_pending_invitations

logger = get_logger(__name__)


def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def create_user(db: Session, email: str, display_name: Optional[str] = None) -> User:
    """Register a user and hand them any invitations sent to their address."""
    email = email.strip().lower()
    user = User(email=email, display_name=display_name)

    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError:
        db.rollback()
        raise InvalidStateError("A user with this email already exists")

    claimed = claim_pending_invitations(db, user.id, email)
    logger.info("user_created", user_id=user.id, invitations_claimed=claimed)
    return user
