"""Share link endpoints."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from rangevote.api.deps import (
    get_current_user_id,
    get_db,
    get_optional_user_id,
    get_share_token,
    require_ballot_access,
)
from rangevote.core.errors import NotFoundError
from rangevote.core.rate_limit import limiter, RATE_LIMITS
from rangevote.core.sanitization import validate_token_format
from rangevote.db.models import ShareLink
from rangevote.schemas import (
    ShareLinkCreate,
    ShareLinkLookup,
    ShareLinkResponse,
)
from rangevote.services.share_links import (
    create_share_link,
    deactivate_share_link,
    list_share_links,
    validate_share_link,
)

router = APIRouter()


@router.post("/ballots/{ballot_id}/share-links", response_model=ShareLinkResponse, status_code=201)
@limiter.limit(RATE_LIMITS["share_link_write"])
async def create_share_link_endpoint(
    request: Request,
    ballot_id: str,
    link: ShareLinkCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Mint a share link for a ballot (editors and owners).

    The token in the response is the only copy handed out; anyone holding it
    gets the link's permission until it is deactivated or expires.
    """
    require_ballot_access(db, ballot_id, user_id, None, "can_edit")
    created = create_share_link(db, ballot_id, link.permission, user_id, link.expires_at)
    return ShareLinkResponse.model_validate(created)


@router.get("/ballots/{ballot_id}/share-links", response_model=List[ShareLinkResponse])
async def list_share_links_endpoint(
    ballot_id: str,
    user_id: Optional[str] = Depends(get_optional_user_id),
    share_token: Optional[str] = Depends(get_share_token),
    db: Session = Depends(get_db),
):
    require_ballot_access(db, ballot_id, user_id, share_token, "can_edit")
    return [ShareLinkResponse.model_validate(link) for link in list_share_links(db, ballot_id)]


@router.delete("/ballots/{ballot_id}/share-links/{share_link_id}", response_model=ShareLinkResponse)
@limiter.limit(RATE_LIMITS["share_link_write"])
async def deactivate_share_link_endpoint(
    request: Request,
    ballot_id: str,
    share_link_id: str,
    user_id: Optional[str] = Depends(get_optional_user_id),
    share_token: Optional[str] = Depends(get_share_token),
    db: Session = Depends(get_db),
):
    """Deactivate a link. Deactivating twice is harmless."""
    require_ballot_access(db, ballot_id, user_id, share_token, "can_edit")

    link = db.query(ShareLink).filter(
        ShareLink.id == share_link_id,
        ShareLink.ballot_id == ballot_id,
    ).first()
    if link is None:
        raise NotFoundError("Share link not found")

    return ShareLinkResponse.model_validate(deactivate_share_link(db, share_link_id))


@router.get("/share-links/{token}", response_model=ShareLinkLookup)
@limiter.limit(RATE_LIMITS["share_link_lookup"])
async def lookup_share_link_endpoint(request: Request, token: str, db: Session = Depends(get_db)):
    """
    Tell an anonymous token holder which ballot the token opens.

    Looking a token up does not count as a use; opening the ballot with
    ``?t=`` does.
    """
    try:
        token = validate_token_format(token)
    except ValueError:
        raise NotFoundError("Share link not found or expired")

    link = validate_share_link(db, token)
    if link is None:
        raise NotFoundError("Share link not found or expired")

    return ShareLinkLookup(ballot_id=link.ballot_id, permission=link.permission)
