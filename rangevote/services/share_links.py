"""Share link business logic.

A share link is an anonymous capability: whoever holds the token gets the
link's permission on its ballot until the link is deactivated or expires.
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rangevote.core.errors import InvalidError, InvalidStateError, NotFoundError
from rangevote.core.logging_config import get_logger
from rangevote.core.security import generate_share_token
from rangevote.core.utils import optional_utc, to_utc, utcnow
from rangevote.db.models import Ballot, ShareLink, ShareLinkPermission

logger = get_logger(__name__)

MAX_TOKEN_ATTEMPTS = 3


def create_share_link(
    db: Session,
    ballot_id: str,
    permission: ShareLinkPermission,
    creator_id: str,
    expires_at: Optional[datetime] = None,
) -> ShareLink:
    """Mint a new active link with a fresh token."""
    ballot = db.query(Ballot).filter(Ballot.id == ballot_id).first()
    if not ballot:
        raise NotFoundError("Ballot not found")

    expires_at = optional_utc(expires_at)
    if expires_at is not None and expires_at <= utcnow():
        raise InvalidError("Expiry must be in the future")

    # Retry on the (astronomically unlikely) token collision
    for _ in range(MAX_TOKEN_ATTEMPTS):
        link = ShareLink(
            ballot_id=ballot_id,
            share_token=generate_share_token(),
            permission=permission,
            created_by=creator_id,
            created_at=utcnow(),
            expires_at=expires_at,
            is_active=True,
            use_count=0,
        )
        try:
            db.add(link)
            db.commit()
            db.refresh(link)
        except IntegrityError:
            db.rollback()
            continue

        logger.info(
            "share_link_created",
            ballot_id=ballot_id,
            share_link_id=link.id,
            permission=permission.value,
            expires_at=expires_at.isoformat() if expires_at else None,
        )
        return link

    raise InvalidStateError("Failed to generate unique share token")


def get_share_link_by_token(db: Session, token: str) -> Optional[ShareLink]:
    return db.query(ShareLink).filter(ShareLink.share_token == token).first()


def is_share_link_usable(link: ShareLink, now: Optional[datetime] = None) -> bool:
    """Active and not past its expiry."""
    if not link.is_active:
        return False
    if link.expires_at is not None and to_utc(link.expires_at) <= (now or utcnow()):
        return False
    return True


def validate_share_link(db: Session, token: str) -> Optional[ShareLink]:
    """
    Look up a usable share link by token.

    Returns None for unknown, deactivated or expired tokens. This never changes
    the link; counting a redemption is done with ``increment_use_count``.
    """
    link = get_share_link_by_token(db, token)
    if link is None or not is_share_link_usable(link):
        return None
    return link


def increment_use_count(db: Session, share_link_id: str) -> None:
    """Count one redemption with a single UPDATE ... SET use_count = use_count + 1."""
    db.execute(
        update(ShareLink)
        .where(ShareLink.id == share_link_id)
        .values(use_count=ShareLink.use_count + 1)
    )
    db.commit()


def deactivate_share_link(db: Session, share_link_id: str) -> ShareLink:
    """Deactivate a link. Deactivating an inactive link is a no-op."""
    link = db.query(ShareLink).filter(ShareLink.id == share_link_id).first()
    if not link:
        raise NotFoundError("Share link not found")

    if link.is_active:
        link.is_active = False
        db.commit()
        db.refresh(link)
        logger.info("share_link_deactivated", ballot_id=link.ballot_id, share_link_id=link.id)

    return link


def list_share_links(db: Session, ballot_id: str) -> List[ShareLink]:
    return (
        db.query(ShareLink)
        .filter(ShareLink.ballot_id == ballot_id)
        .order_by(ShareLink.created_at.desc())
        .all()
    )
