"""Marketplace endpoints."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from rangevote.api.deps import get_current_user_id, get_db
from rangevote.core.errors import InvalidError
from rangevote.core.rate_limit import limiter, RATE_LIMITS
from rangevote.core.sanitization import MAX_SEARCH_TERM_LENGTH, sanitize_search_term
from rangevote.core.utils import utcnow
from rangevote.schemas import OrganizationResponse, PublicBallot, SuccessResponse
from rangevote.services.marketplace import (
    get_organizations_with_public_ballots,
    is_closing_soon,
    join_ballot,
    list_public_ballots,
)

router = APIRouter()


@router.get("/ballots", response_model=List[PublicBallot])
@limiter.limit(RATE_LIMITS["marketplace"])
async def browse_public_ballots(
    request: Request,
    search: Optional[str] = Query(None, max_length=MAX_SEARCH_TERM_LENGTH),
    organization_id: Optional[str] = Query(None, max_length=36),
    closing_soon: bool = False,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Public, open ballots the caller has not joined yet.

    Query Parameters:
        search: case-insensitive match on name or description
        organization_id: only ballots of this organization
        closing_soon: only ballots closing within the next week
    """
    try:
        search = sanitize_search_term(search)
    except ValueError as e:
        raise InvalidError(str(e))

    now = utcnow()
    ballots = list_public_ballots(
        db,
        exclude_user_id=user_id,
        search_term=search,
        organization_id=organization_id,
        closing_soon=closing_soon,
        now=now,
    )
    return [
        PublicBallot(
            id=ballot.id,
            name=ballot.name,
            description=ballot.description,
            organization_id=ballot.organization_id,
            organization_name=ballot.organization.name if ballot.organization else None,
            close_date=ballot.close_date,
            candidate_count=ballot.candidate_count,
            vote_count=ballot.vote_count,
            is_closing_soon=is_closing_soon(ballot, now),
        )
        for ballot in ballots
    ]


@router.post("/ballots/{ballot_id}/join", response_model=SuccessResponse)
@limiter.limit(RATE_LIMITS["join"])
async def join_ballot_endpoint(
    request: Request,
    ballot_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Join a public ballot as a Voter.

    Raises:
        HTTPException: 403 if the ballot is not public
        HTTPException: 404 if the ballot does not exist
        HTTPException: 409 if the ballot is not open or already joined
    """
    join_ballot(db, ballot_id, user_id)
    return SuccessResponse(message="Joined ballot")


@router.get("/organizations", response_model=List[OrganizationResponse])
async def organizations_with_public_ballots(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Organizations offering at least one public ballot, for the filter list."""
    return [OrganizationResponse.model_validate(org) for org in get_organizations_with_public_ballots(db)]
