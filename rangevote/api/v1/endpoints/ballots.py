"""Ballot endpoints."""
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
from rangevote.schemas import (
    AccessResponse,
    BallotCreate,
    BallotDetail,
    BallotListItem,
    BallotResponse,
    BallotUpdate,
    CandidateResponse,
    InvitationCreate,
    InvitationResponse,
    ResultsResponse,
    SuccessResponse,
    UserVote,
    UserVotesResponse,
    VoteRequest,
    VoteResponse,
)
from rangevote.services import ballots as ballot_service
from rangevote.services.lifecycle import close_ballot, open_ballot
from rangevote.services.permissions import AccessDecision, invite_user, resolve_access
from rangevote.services.votes import get_results, get_user_votes, save_votes

router = APIRouter()


def _access_response(access: AccessDecision) -> AccessResponse:
    return AccessResponse(
        can_view=access.can_view,
        can_vote=access.can_vote,
        can_edit=access.can_edit,
        is_owner=access.is_owner,
        via_share_link=access.via_share_link,
    )


@router.post("", response_model=BallotResponse, status_code=201)
async def create_ballot_endpoint(
    ballot: BallotCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Create a ballot with its candidates.

    The caller becomes the owner. When ``organization_id`` is given the caller
    must be a member of that organization.

    Raises:
        HTTPException: 400 without candidates
        HTTPException: 403 if not a member of the organization
        HTTPException: 404 if the organization does not exist
    """
    created = ballot_service.create_ballot(
        db,
        owner_id=user_id,
        name=ballot.name,
        description=ballot.description,
        candidates=[candidate.model_dump() for candidate in ballot.candidates],
        organization_id=ballot.organization_id,
        is_public=ballot.is_public,
        close_date=ballot.close_date,
        status=ballot.status,
    )
    return BallotResponse.model_validate(created)


@router.get("", response_model=List[BallotListItem])
async def list_my_ballots(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Ballots the caller owns, was granted, or reaches through an organization."""
    return [
        BallotListItem(
            **BallotResponse.model_validate(summary.ballot).model_dump(),
            is_owner=summary.is_owner,
            permission=summary.permission,
        )
        for summary in ballot_service.get_ballots_for_user(db, user_id)
    ]


@router.get("/{ballot_id}", response_model=BallotDetail)
async def get_ballot_endpoint(
    ballot_id: str,
    user_id: Optional[str] = Depends(get_optional_user_id),
    share_token: Optional[str] = Depends(get_share_token),
    db: Session = Depends(get_db),
):
    """
    Ballot with candidates and the caller's capabilities.

    Anonymous callers get in with a share link token passed as ``?t=``.
    """
    access = require_ballot_access(db, ballot_id, user_id, share_token)
    ballot = ballot_service.get_ballot(db, ballot_id)
    return BallotDetail(
        **BallotResponse.model_validate(ballot).model_dump(),
        candidates=[CandidateResponse.model_validate(c) for c in ballot_service.get_candidates(db, ballot_id)],
        access=_access_response(access),
    )


@router.patch("/{ballot_id}", response_model=BallotResponse)
async def update_ballot_endpoint(
    ballot_id: str,
    update: BallotUpdate,
    user_id: Optional[str] = Depends(get_optional_user_id),
    share_token: Optional[str] = Depends(get_share_token),
    db: Session = Depends(get_db),
):
    require_ballot_access(db, ballot_id, user_id, share_token, "can_edit")
    updated = ballot_service.update_ballot(db, ballot_id, **update.model_dump(exclude_unset=True))
    return BallotResponse.model_validate(updated)


@router.delete("/{ballot_id}", response_model=SuccessResponse)
async def delete_ballot_endpoint(
    ballot_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Delete a ballot and everything attached to it (owner only)."""
    ballot_service.delete_ballot(db, ballot_id, user_id)
    return SuccessResponse(message="Ballot deleted")


@router.post("/{ballot_id}/open", response_model=BallotResponse)
async def open_ballot_endpoint(
    ballot_id: str,
    user_id: Optional[str] = Depends(get_optional_user_id),
    share_token: Optional[str] = Depends(get_share_token),
    db: Session = Depends(get_db),
):
    require_ballot_access(db, ballot_id, user_id, share_token, "can_edit")
    return BallotResponse.model_validate(open_ballot(db, ballot_id))


@router.post("/{ballot_id}/close", response_model=BallotResponse)
async def close_ballot_endpoint(
    ballot_id: str,
    user_id: Optional[str] = Depends(get_optional_user_id),
    share_token: Optional[str] = Depends(get_share_token),
    db: Session = Depends(get_db),
):
    require_ballot_access(db, ballot_id, user_id, share_token, "can_edit")
    return BallotResponse.model_validate(close_ballot(db, ballot_id))


@router.get("/{ballot_id}/access", response_model=AccessResponse)
async def get_access_endpoint(
    ballot_id: str,
    user_id: Optional[str] = Depends(get_optional_user_id),
    share_token: Optional[str] = Depends(get_share_token),
    db: Session = Depends(get_db),
):
    """The caller's capabilities on a ballot; all false when there are none."""
    if ballot_service.get_ballot(db, ballot_id) is None:
        raise NotFoundError("Ballot not found")
    return _access_response(resolve_access(db, ballot_id, user_id=user_id, share_token=share_token))


@router.post("/{ballot_id}/votes", response_model=VoteResponse)
@limiter.limit(RATE_LIMITS["vote"])
async def vote_endpoint(
    request: Request,
    ballot_id: str,
    vote_request: VoteRequest,
    user_id: str = Depends(get_current_user_id),
    share_token: Optional[str] = Depends(get_share_token),
    db: Session = Depends(get_db),
) -> VoteResponse:
    """
    Save the caller's scores on a ballot.

    Scores are whole numbers from 0 to 99 keyed by candidate id. Sending a
    score again replaces the previous one. Voting needs a signed-in user;
    a Vote share link supplies the right to vote, not the identity.

    Raises:
        HTTPException: 403 without vote access
        HTTPException: 404 for an unknown ballot or candidate
        HTTPException: 409 if the ballot is not open
    """
    require_ballot_access(db, ballot_id, user_id, share_token, "can_vote")
    ballot = save_votes(db, ballot_id, user_id, vote_request.scores)
    return VoteResponse(ballot_id=ballot.id, vote_count=ballot.vote_count)


@router.get("/{ballot_id}/votes/me", response_model=UserVotesResponse)
async def my_votes_endpoint(
    ballot_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    require_ballot_access(db, ballot_id, user_id, None)
    votes = get_user_votes(db, ballot_id, user_id)
    return UserVotesResponse(
        ballot_id=ballot_id,
        votes=[UserVote(candidate_id=v.candidate_id, score=v.score) for v in votes],
    )


@router.get("/{ballot_id}/results", response_model=ResultsResponse)
async def results_endpoint(
    ballot_id: str,
    user_id: Optional[str] = Depends(get_optional_user_id),
    share_token: Optional[str] = Depends(get_share_token),
    db: Session = Depends(get_db),
):
    """Average score per candidate. Candidates without votes are left out."""
    require_ballot_access(db, ballot_id, user_id, share_token)
    ballot = ballot_service.get_ballot(db, ballot_id)
    return ResultsResponse(
        ballot_id=ballot_id,
        vote_count=ballot.vote_count,
        results=get_results(db, ballot_id),
    )


@router.post("/{ballot_id}/invitations", response_model=InvitationResponse, status_code=201)
async def invite_endpoint(
    ballot_id: str,
    invitation: InvitationCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Grant a permission level to someone by email (editors and owners)."""
    require_ballot_access(db, ballot_id, user_id, None, "can_edit")
    grant = invite_user(db, ballot_id, invitation.email, invitation.permission, invited_by=user_id)
    return InvitationResponse.model_validate(grant)
