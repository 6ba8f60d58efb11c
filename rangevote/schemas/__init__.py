"""Pydantic schemas for request/response validation."""
from rangevote.schemas.ballot import (
    AccessResponse,
    BallotCreate,
    BallotDetail,
    BallotListItem,
    BallotResponse,
    BallotUpdate,
    CandidateCreate,
    CandidateResponse,
    InvitationCreate,
    InvitationResponse,
)
from rangevote.schemas.vote import (
    ResultsResponse,
    UserVote,
    UserVotesResponse,
    VoteRequest,
    VoteResponse,
)
from rangevote.schemas.share_link import ShareLinkCreate, ShareLinkLookup, ShareLinkResponse
from rangevote.schemas.marketplace import PublicBallot
from rangevote.schemas.organization import (
    MemberResponse,
    MyOrganization,
    OrganizationCreate,
    OrganizationResponse,
    OrganizationUpdate,
)
from rangevote.schemas.common import SuccessResponse, ErrorResponse

__all__ = [
    "AccessResponse",
    "BallotCreate",
    "BallotDetail",
    "BallotListItem",
    "BallotResponse",
    "BallotUpdate",
    "CandidateCreate",
    "CandidateResponse",
    "InvitationCreate",
    "InvitationResponse",
    "ResultsResponse",
    "UserVote",
    "UserVotesResponse",
    "VoteRequest",
    "VoteResponse",
    "ShareLinkCreate",
    "ShareLinkLookup",
    "ShareLinkResponse",
    "PublicBallot",
    "MemberResponse",
    "MyOrganization",
    "OrganizationCreate",
    "OrganizationResponse",
    "OrganizationUpdate",
    "SuccessResponse",
    "ErrorResponse",
]
