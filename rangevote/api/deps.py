"""Shared API dependencies."""
from typing import Optional

from fastapi import Query, Request
from sqlalchemy.orm import Session

from rangevote.core.errors import NotFoundError, UnauthorizedError
from rangevote.core.security import optional_user_token, verify_user_token
from rangevote.db import get_db, get_db_context
from rangevote.db.models import Ballot
from rangevote.services.permissions import AccessDecision, resolve_access

CAPABILITIES = ("can_view", "can_vote", "can_edit")


def get_current_user_id(request: Request) -> str:
    return verify_user_token(request)


def get_optional_user_id(request: Request) -> Optional[str]:
    return optional_user_token(request)


def get_share_token(
    t: Optional[str] = Query(None, min_length=1, max_length=100, pattern=r"^[A-Za-z0-9_-]+$"),
) -> Optional[str]:
    """Share token from the ``t`` query parameter."""
    return t


def require_ballot_access(
    db: Session,
    ballot_id: str,
    user_id: Optional[str],
    share_token: Optional[str],
    capability: str = "can_view",
) -> AccessDecision:
    """
    Resolve access and insist on ``capability``.

    Unknown ballots are reported as not found before any access check, so a
    share link is never counted for a ballot that does not exist.
    """
    if capability not in CAPABILITIES:
        raise ValueError(f"Unknown capability: {capability}")

    if db.query(Ballot.id).filter(Ballot.id == ballot_id).first() is None:
        raise NotFoundError("Ballot not found")

    access = resolve_access(db, ballot_id, user_id=user_id, share_token=share_token)
    if not getattr(access, capability):
        raise UnauthorizedError("You do not have permission to perform this action on this ballot")
    return access


__all__ = [
    "get_db",
    "get_db_context",
    "get_current_user_id",
    "get_optional_user_id",
    "get_share_token",
    "require_ballot_access",
]
